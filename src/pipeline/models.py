# src/pipeline/models.py — v2
"""Build pass reports."""

from __future__ import annotations

from pydantic import BaseModel, Field

from lingosite.assets.models import AssetPassReport
from lingosite.tracking.models import IssueSummary


class BuildReport(BaseModel):
    """Outcome of one build pass (full build, full regeneration or scoped rebuild)."""

    build_id: str
    scope: str
    pages_rendered: list[str] = Field(default_factory=list)  # "<base>:<locale>"
    pages_skipped: list[str] = Field(default_factory=list)
    pages_failed: list[str] = Field(default_factory=list)
    files_written: list[str] = Field(default_factory=list)
    files_unchanged: list[str] = Field(default_factory=list)
    generated: list[str] = Field(default_factory=list)
    assets: AssetPassReport | None = None
    issues: IssueSummary = Field(default_factory=IssueSummary)
    committed: bool = True
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        """True when nothing was skipped because of an error."""
        return not self.pages_failed and self.issues.errors == 0

    def summary(self) -> str:
        parts = [
            f"{len(self.pages_rendered)} pages rendered",
            f"{len(self.files_written)} written",
            f"{len(self.files_unchanged)} unchanged",
        ]
        if self.pages_skipped:
            parts.append(f"{len(self.pages_skipped)} skipped")
        if self.pages_failed:
            parts.append(f"{len(self.pages_failed)} failed")
        if self.assets is not None:
            parts.append(f"assets: {self.assets.summary()}")
        parts.append(f"{self.issues.warnings} warnings, {self.issues.errors} errors")
        return ", ".join(parts)
