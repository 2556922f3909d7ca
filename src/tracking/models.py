# src/tracking/models.py — v2
"""Tracking domain models: BuildIssue, IssueSummary."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

IssueCategory = Literal["asset", "render", "persistence", "watch", "config"]
IssueSeverity = Literal["warning", "error"]


class BuildIssue(BaseModel):
    """A recovered (or surfaced) error, collected instead of aborting the build."""

    category: IssueCategory
    severity: IssueSeverity
    source: str
    message: str
    timestamp: datetime


class IssueSummary(BaseModel):
    """Counts over an issue log, attached to build reports."""

    warnings: int = 0
    errors: int = 0
    by_category: dict[str, int] = {}
