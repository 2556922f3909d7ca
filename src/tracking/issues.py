# src/tracking/issues.py — v1
"""Issue log: structured, countable records of recovered build errors.

Every recovery seam (variant generation, page render, cache/manifest
persistence, watch transport) records a BuildIssue here in addition to
logging it, so callers can assert on counts rather than scrape log output.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone

from lingosite.tracking.models import (
    BuildIssue,
    IssueCategory,
    IssueSeverity,
    IssueSummary,
)


class IssueLog:
    """Accumulates BuildIssue records for the lifetime of a builder."""

    def __init__(self) -> None:
        self._issues: list[BuildIssue] = []

    def record(
        self,
        category: IssueCategory,
        source: str,
        message: str,
        severity: IssueSeverity = "warning",
    ) -> BuildIssue:
        """Record an issue.

        Args:
            category: Issue category (asset, render, persistence, watch, config).
            source: File path, page id or component the issue relates to.
            message: Human-readable description (usually the exception text).
            severity: "warning" for degraded output, "error" for skipped output.

        Returns:
            The recorded BuildIssue.
        """
        issue = BuildIssue(
            category=category,
            severity=severity,
            source=source,
            message=message,
            timestamp=datetime.now(timezone.utc),
        )
        self._issues.append(issue)
        return issue

    @property
    def issues(self) -> list[BuildIssue]:
        """All recorded issues."""
        return list(self._issues)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self._issues if i.severity == "warning")

    @property
    def error_count(self) -> int:
        return sum(1 for i in self._issues if i.severity == "error")

    def count(self, category: IssueCategory) -> int:
        """Number of issues in one category."""
        return sum(1 for i in self._issues if i.category == category)

    def since(self, mark: int) -> list[BuildIssue]:
        """Issues recorded after a mark obtained from len(log)."""
        return self._issues[mark:]

    def summary(self, mark: int = 0) -> IssueSummary:
        """Summarise issues recorded after mark."""
        issues = self._issues[mark:]
        return IssueSummary(
            warnings=sum(1 for i in issues if i.severity == "warning"),
            errors=sum(1 for i in issues if i.severity == "error"),
            by_category=dict(Counter(i.category for i in issues)),
        )

    def clear(self) -> None:
        self._issues.clear()

    def __len__(self) -> int:
        return len(self._issues)
