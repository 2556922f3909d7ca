# src/watch/dispatcher.py — v1
"""Map a classified change to the rebuild it requires.

Asset changes reprocess that asset and regenerate every page, since asset
URLs are embedded in every page. A page template change rebuilds only its
base route, in every locale. Layout, partial and data changes, and any add
or delete, regenerate everything.
"""

from __future__ import annotations

from lingosite.pages.grouper import NOT_FOUND_ID, base_route_id
from lingosite.storage.layout import SiteLayout
from lingosite.watch.models import ChangeCategory, EventKind, PendingChange, RebuildPlan


def plan_rebuild(change: PendingChange, layout: SiteLayout) -> RebuildPlan:
    """Rebuild plan for one change."""
    if change.category == ChangeCategory.OTHER:
        return RebuildPlan()

    if change.kind in (EventKind.ADDED, EventKind.DELETED):
        # The set of sources or base routes itself may have changed.
        assets = "all" if change.category == ChangeCategory.ASSET else "none"
        return RebuildPlan(assets=assets, pages="full")

    if change.category == ChangeCategory.ASSET:
        return RebuildPlan(assets="one", asset_path=change.file_path, pages="full")

    if change.category == ChangeCategory.TEMPLATE:
        try:
            base = base_route_id(change.file_path, layout.pages, layout.template_extension)
        except ValueError:
            return RebuildPlan(pages="full")
        # 404 pages are produced by the full-regeneration generators.
        if base == NOT_FOUND_ID:
            return RebuildPlan(pages="full")
        return RebuildPlan(pages="scoped", base_id=base)

    return RebuildPlan(pages="full")
