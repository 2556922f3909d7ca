# src/cache/models.py — v2
"""Cache domain models: AssetOutputs, CacheEntry, CacheDocument."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

AssetKind = Literal["styles", "scripts", "images", "public"]


class AssetOutputs(BaseModel):
    """Files produced for one source, relative to the output root (posix)."""

    primary: str
    secondary: str | None = None

    def paths(self) -> list[str]:
        """All produced paths, primary first."""
        return [p for p in (self.primary, self.secondary) if p]


class CacheEntry(BaseModel):
    """Last successful processing of one source asset."""

    kind: AssetKind
    source_path: str
    fingerprint: str
    outputs: AssetOutputs
    urls: dict[str, str] = Field(default_factory=dict)
    source_modified_at: float = 0.0
    production: bool = False
    dependencies: list[str] = Field(default_factory=list)


class CacheDocument(BaseModel):
    """Persisted cache artifact, grouped by asset class. Private format."""

    version: int = 1
    styles: dict[str, CacheEntry] = Field(default_factory=dict)
    scripts: dict[str, CacheEntry] = Field(default_factory=dict)
    images: dict[str, CacheEntry] = Field(default_factory=dict)
    public: dict[str, CacheEntry] = Field(default_factory=dict)

    def all_entries(self) -> dict[str, CacheEntry]:
        """Flatten the per-class sections into one source_path map."""
        merged: dict[str, CacheEntry] = {}
        for section in (self.styles, self.scripts, self.images, self.public):
            merged.update(section)
        return merged

    @classmethod
    def from_entries(cls, entries: dict[str, CacheEntry]) -> CacheDocument:
        """Group a source_path map back into per-class sections."""
        doc = cls()
        for source_path in sorted(entries):
            entry = entries[source_path]
            getattr(doc, entry.kind)[source_path] = entry
        return doc
