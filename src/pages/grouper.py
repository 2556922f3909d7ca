# src/pages/grouper.py — v1
"""Route/locale grouping of co-located page template variants.

'about.html' is the default variant of base route 'about'; 'about.fr.html'
is its French variant. Nested templates keep their directory:
'blog/post.en.html' belongs to base route 'blog/post'.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from lingosite.pages.models import BaseRouteGroup

logger = logging.getLogger(__name__)

LOCALE_SUFFIX_RE = re.compile(r"\.([a-z]{2})$")

# Base route id reserved for the per-locale not-found pages
NOT_FOUND_ID = "404"


def discover_templates(pages_dir: Path, extension: str) -> list[Path]:
    """All page templates under pages_dir, sorted for deterministic grouping."""
    root = Path(pages_dir)
    if not root.is_dir():
        return []
    return sorted(p for p in root.rglob(f"*{extension}") if p.is_file())


def split_template_name(rel_path: str, extension: str) -> tuple[str, str | None]:
    """Split a template path into (base route id, locale suffix or None)."""
    if not rel_path.endswith(extension):
        raise ValueError(f"{rel_path!r} does not end with {extension!r}")
    stem = rel_path[: -len(extension)]
    match = LOCALE_SUFFIX_RE.search(stem)
    if match is None:
        return stem, None
    return stem[: match.start()], match.group(1)


def base_route_id(template: Path, pages_dir: Path, extension: str) -> str:
    """Base route id of one template file."""
    rel = Path(template).resolve().relative_to(Path(pages_dir).resolve()).as_posix()
    return split_template_name(rel, extension)[0]


def group_by_base_route(
    template_files: list[Path], pages_dir: Path, extension: str
) -> dict[str, BaseRouteGroup]:
    """Group template files by base route id.

    Args:
        template_files: Page templates (absolute or relative to cwd).
        pages_dir: Page template root.
        extension: Template extension, with its leading dot.

    Returns:
        Groups keyed by base route id, in first-seen order.
    """
    root = Path(pages_dir).resolve()
    groups: dict[str, BaseRouteGroup] = {}

    for f in template_files:
        try:
            rel = Path(f).resolve().relative_to(root).as_posix()
        except ValueError:
            logger.warning("Ignoring template outside %s: %s", root, f)
            continue
        base, locale = split_template_name(rel, extension)
        group = groups.setdefault(base, BaseRouteGroup(base_template_id=base))
        if locale is None:
            group.default_variant = rel
        else:
            group.locale_variants[locale] = rel

    return groups


def resolve_variant(group: BaseRouteGroup, locale: str) -> str | None:
    """Template for a locale: explicit variant, else default, else None (warned)."""
    template = group.locale_variants.get(locale) or group.default_variant
    if template is None:
        logger.warning(
            "Base route %r has no %s variant and no default; skipping",
            group.base_template_id,
            locale,
        )
    return template
