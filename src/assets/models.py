# src/assets/models.py — v2
"""Asset pipeline models: AssetSource, PlannedOutputs, VariantResult, AssetPassReport."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from lingosite.cache.models import AssetKind, AssetOutputs


class AssetSource(BaseModel):
    """One discovered source file and where its output belongs."""

    kind: AssetKind
    path: Path
    key: str  # cache key, posix path relative to project root
    output_dir: str  # relative to the output root, "" for the root itself
    name: str  # logical file name as authored
    webp_sibling: bool = True  # False when another image source owns '<stem>.webp'

    @property
    def stem(self) -> str:
        return Path(self.name).stem

    @property
    def suffix(self) -> str:
        return Path(self.name).suffix.lower()

    @property
    def logical_path(self) -> str:
        """Output path under the unhashed logical name."""
        return f"{self.output_dir}/{self.name}" if self.output_dir else self.name

    @property
    def logical_url(self) -> str:
        return "/" + self.logical_path


class PlannedOutputs(BaseModel):
    """Outputs the current configuration would produce for one source."""

    outputs: AssetOutputs
    urls: dict[str, str] = Field(default_factory=dict)


class VariantResult(BaseModel):
    """What the Variant Generator actually wrote."""

    outputs: AssetOutputs
    urls: dict[str, str] = Field(default_factory=dict)
    degraded: bool = False
    written: list[str] = Field(default_factory=list)
    pruned: list[str] = Field(default_factory=list)


class AssetPassReport(BaseModel):
    """Outcome of one asset pass, full or focused."""

    processed: list[str] = Field(default_factory=list)
    cached: list[str] = Field(default_factory=list)
    degraded: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
    pruned: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)
    manifest_entries: int = 0

    @property
    def processed_count(self) -> int:
        return len(self.processed)

    def summary(self) -> str:
        return (
            f"{len(self.processed)} processed, {len(self.cached)} cached, "
            f"{len(self.degraded)} degraded, {len(self.failed)} failed, "
            f"{len(self.pruned)} pruned, {len(self.removed)} removed"
        )
