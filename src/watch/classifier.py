# src/watch/classifier.py — v2
"""Change classification: a pure path → category function plus mtime debouncing."""

from __future__ import annotations

import logging
from pathlib import Path

from lingosite.storage.layout import SiteLayout
from lingosite.watch.models import ChangeCategory

logger = logging.getLogger(__name__)

IGNORED_SUFFIXES = ("~", ".swp", ".swx", ".tmp")


def _inside(root: Path, path: Path) -> bool:
    try:
        path.relative_to(root)
    except ValueError:
        return False
    return True


class ChangeClassifier:
    """Map a source path to exactly one change category."""

    def __init__(self, layout: SiteLayout, image_extensions: list[str]) -> None:
        self._layout = layout
        self._image_extensions = {e.lower() for e in image_extensions}
        self._roots = {
            name: Path(getattr(layout, name)).resolve()
            for name in (
                "pages", "layouts", "partials", "data", "public",
                "css_src", "js_src", "images_src",
            )
        }
        self._routes_file = Path(layout.routes_file).resolve()

    def classify(self, path: Path) -> ChangeCategory:
        path = Path(path).resolve()
        r = self._roots

        if path.name.startswith(".") or path.name.endswith(IGNORED_SUFFIXES):
            return ChangeCategory.OTHER
        if path == self._routes_file:
            return ChangeCategory.DATA
        if _inside(r["pages"], path):
            if path.name.endswith(self._layout.template_extension):
                return ChangeCategory.TEMPLATE
            return ChangeCategory.OTHER
        if _inside(r["layouts"], path) or _inside(r["partials"], path):
            return ChangeCategory.TEMPLATE
        if _inside(r["data"], path):
            return ChangeCategory.DATA
        # Stylesheets import across subdirectories; scripts are emitted top-level only.
        if _inside(r["css_src"], path) and path.suffix == ".css":
            return ChangeCategory.ASSET
        if path.parent == r["js_src"] and path.suffix == ".js":
            return ChangeCategory.ASSET
        if path.parent == r["images_src"] and path.suffix.lower() in self._image_extensions:
            return ChangeCategory.ASSET
        if _inside(r["public"], path):
            return ChangeCategory.ASSET
        return ChangeCategory.OTHER

    def is_page_template(self, path: Path) -> bool:
        return _inside(self._roots["pages"], Path(path).resolve())


class ModTimeTracker:
    """Last observed modification time per path; drops duplicate notifications."""

    def __init__(self) -> None:
        self._seen: dict[Path, float] = {}

    def observe(self, path: Path, modified_at: float) -> tuple[bool, float | None]:
        """Record an observation.

        Returns:
            (is_new, previous): is_new is False when modified_at equals the
            last recorded time for this path.
        """
        key = Path(path).resolve()
        previous = self._seen.get(key)
        if previous is not None and previous == modified_at:
            return False, previous
        self._seen[key] = modified_at
        return True, previous

    def forget(self, path: Path) -> float | None:
        return self._seen.pop(Path(path).resolve(), None)

    def __len__(self) -> int:
        return len(self._seen)
