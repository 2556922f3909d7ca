# src/assets/css_resolver.py — v1
"""Stylesheet import resolution and concatenation.

resolve() walks @import directives depth-first and returns every local file
an entry depends on, dependencies before the file that imports them, each
path once. A path already visited is skipped, so cyclic imports collapse to
"import once". External and absolute references stay in the output as-is.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from lingosite.tracking.issues import IssueLog

logger = logging.getLogger(__name__)

IMPORT_RE = re.compile(
    r"""@import\s+
        (?:url\(\s*(?P<q1>['"]?)(?P<url>[^'")\s]+)(?P=q1)\s*\)
          |(?P<q2>['"])(?P<str>[^'"]+)(?P=q2))
        (?P<media>[^;]*);?[ \t]*\n?""",
    re.IGNORECASE | re.VERBOSE,
)
COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
EXTERNAL_PREFIXES = ("http://", "https://", "//", "/", "data:")


def is_external(ref: str) -> bool:
    """True for references left for the browser to fetch."""
    return ref.lower().startswith(EXTERNAL_PREFIXES)


def _import_ref(match: re.Match[str]) -> str:
    return match.group("url") or match.group("str")


class CssResolver:
    """Resolve and inline local stylesheet imports."""

    def __init__(self, issues: IssueLog | None = None) -> None:
        self._issues = issues

    def imports_of(self, path: Path) -> list[str]:
        """Raw import references of one file, in source order."""
        text = COMMENT_RE.sub("", path.read_text(encoding="utf-8"))
        return [_import_ref(m) for m in IMPORT_RE.finditer(text)]

    def resolve(self, entry: Path, visited: set[Path] | None = None) -> list[Path]:
        """Ordered, de-duplicated dependency list for a stylesheet entry.

        Args:
            entry: Stylesheet to resolve.
            visited: Paths already on the walk; shared across recursion.

        Returns:
            Local files in concatenation order, the entry itself last.
        """
        visited = set() if visited is None else visited
        entry = Path(entry).resolve()
        if entry in visited:
            return []
        visited.add(entry)

        ordered: list[Path] = []
        for ref in self.imports_of(entry):
            if is_external(ref):
                continue
            target = (entry.parent / ref).resolve()
            if not target.is_file():
                logger.warning("Unresolved import %r in %s", ref, entry)
                if self._issues is not None:
                    self._issues.record("asset", str(entry), f"unresolved import {ref!r}")
                continue
            ordered.extend(self.resolve(target, visited))
        ordered.append(entry)
        return ordered

    def concatenate(self, paths: list[Path]) -> str:
        """Join resolved files, dropping local imports and hoisting external ones.

        External @import rules must precede every other rule, so they are
        collected from all files and emitted first, each once.
        """
        externals: list[str] = []
        bodies: list[str] = []

        def strip(match: re.Match[str]) -> str:
            if is_external(_import_ref(match)):
                rule = match.group(0).strip()
                if not rule.endswith(";"):
                    rule += ";"
                if rule not in externals:
                    externals.append(rule)
            return ""

        for path in paths:
            bodies.append(IMPORT_RE.sub(strip, path.read_text(encoding="utf-8")).strip("\n"))

        return "\n".join(externals + bodies) + "\n"
