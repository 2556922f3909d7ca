# src/pages/models.py — v1
"""Page models: BaseRouteGroup, RenderedPage."""

from __future__ import annotations

from pydantic import BaseModel, Field


class BaseRouteGroup(BaseModel):
    """Every template variant of one locale-independent page.

    Template references are posix paths relative to the pages directory.
    """

    base_template_id: str
    default_variant: str | None = None
    locale_variants: dict[str, str] = Field(default_factory=dict)


class RenderedPage(BaseModel):
    """One rendered (route × locale) output, held in memory until committed."""

    page_id: str  # "<base>:<locale>"
    base_template_id: str
    locale: str
    template: str
    route_path: str
    output_file: str  # relative to the output root
    html: str
