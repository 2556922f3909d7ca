# src/pages/renderer.py — v1
"""Jinja2 page renderer.

Page templates are addressed as 'pages/<relative path>'; layouts, partials
and the source root are on the search path, so '{% extends "base.html" %}'
and '{% include "nav.html" %}' resolve the way authors expect. The asset()
global reads the published manifest at call time.
"""

from __future__ import annotations

import logging
from typing import Any

from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PrefixLoader,
    select_autoescape,
)

from lingosite.assets.manifest import ManifestBuilder
from lingosite.config.routes import RoutesConfig, output_file_for
from lingosite.config.settings import Settings
from lingosite.core.errors import RenderError
from lingosite.pages.grouper import resolve_variant
from lingosite.pages.links import rewrite_links
from lingosite.pages.locale_data import is_rtl, make_translator
from lingosite.pages.models import BaseRouteGroup, RenderedPage
from lingosite.storage.layout import SiteLayout

logger = logging.getLogger(__name__)


def locale_url(path: str, locale: str) -> str:
    return f"/{locale}{'' if path.startswith('/') else '/'}{path}"


def url_filter(path: str | None) -> str:
    if not path:
        return "/"
    if path.startswith(("http", "/")):
        return path
    return "/" + path


def absolute_url(path: str | None, base_url: str | None) -> str:
    if not path:
        return base_url or ""
    if not base_url or path.startswith("http"):
        return path
    return base_url.rstrip("/") + (path if path.startswith("/") else "/" + path)


class PageRenderer:
    """Render (base route × locale) pages into markup strings."""

    def __init__(self, settings: Settings, layout: SiteLayout, manifest: ManifestBuilder) -> None:
        self._settings = settings
        self._layout = layout
        self._manifest = manifest
        self.env = Environment(
            loader=ChoiceLoader(
                [
                    PrefixLoader({"pages": FileSystemLoader(str(layout.pages))}),
                    FileSystemLoader(
                        [str(layout.src), str(layout.layouts), str(layout.partials)]
                    ),
                ]
            ),
            autoescape=select_autoescape(["html", "htm", "xml"]),
            auto_reload=True,
        )
        self.env.filters["locale_url"] = locale_url
        self.env.filters["url"] = url_filter
        self.env.filters["absolute_url"] = absolute_url
        self.env.globals["asset"] = self._manifest.resolve
        self.env.globals["site_url"] = settings.site_url

    def build_context(
        self,
        *,
        page_key: str,
        locale: str,
        route_path: str,
        routes: RoutesConfig,
        locale_data: dict[str, dict[str, Any]],
        meta: dict[str, Any],
    ) -> dict[str, Any]:
        """Template context for one page in one locale."""
        s = self._settings
        locales = s.locales_list
        route = routes.get(page_key)

        nav_items: list[dict[str, Any]] = []
        for r in routes.visible_routes(locale):
            nav_items.append(
                {
                    "key": r.key,
                    "path": r.path_for(locale),
                    "title": r.property_for("title", locale),
                    "themeColor": r.property_for("themeColor", locale),
                    "anchors": r.property_for("anchors", locale),
                }
            )

        def get_localized_url(key_or_path: str, target_locale: str | None = None) -> str:
            target = target_locale or locale
            found = routes.path_for(key_or_path, target)
            if found:
                return found
            clean = key_or_path
            for loc in locales:
                if clean.startswith(f"/{loc}/"):
                    clean = clean[len(loc) + 2 :]
                    break
            return f"/{target}/{clean.lstrip('/')}"

        def get_route_url(key: str, target_locale: str | None = None) -> str:
            return routes.path_for(key, target_locale or locale) or "#"

        data = locale_data.get(locale) or locale_data.get(s.default_locale) or {}
        context: dict[str, Any] = dict(data)
        context.update(
            locale=locale,
            locales=locales,
            alternates=list(locales),
            default_locale=s.default_locale,
            rtl=is_rtl(locale, (meta.get("locales") or {}).get(locale)),
            is_production=s.production,
            t=make_translator(locale_data, locale, s.default_locale),
            nav_items=nav_items,
            nav_items_map={item["key"]: item for item in nav_items},
            meta=meta,
            current_page=route_path,
            theme_color=route.property_for("themeColor", locale) if route else None,
            page={
                "key": page_key,
                "path": route_path,
                "url": route_path,
                "routes": routes.all_paths(page_key),
            },
            is_current_locale=lambda other: other == locale,
            get_localized_url=get_localized_url,
            get_route_url=get_route_url,
        )
        return context

    def render(self, template: str, context: dict[str, Any], page_id: str) -> str:
        """Render one template; every template failure becomes RenderError."""
        try:
            return self.env.get_template(template).render(context)
        except Exception as e:
            raise RenderError(page_id, f"{type(e).__name__}: {e}") from e

    def render_page(
        self,
        group: BaseRouteGroup,
        locale: str,
        routes: RoutesConfig,
        locale_data: dict[str, dict[str, Any]],
        meta: dict[str, Any],
    ) -> RenderedPage | None:
        """Render one (base route × locale) pair.

        Returns:
            The rendered page, or None when the pair is skipped (no variant,
            no route for the locale).

        Raises:
            RenderError: If the template fails to render.
        """
        base = group.base_template_id
        page_id = f"{base}:{locale}"
        template = resolve_variant(group, locale)
        if template is None:
            return None
        route_path = routes.path_for(base, locale)
        if not route_path:
            logger.warning("No route for page %r in locale %r; skipping", base, locale)
            return None

        context = self.build_context(
            page_key=base,
            locale=locale,
            route_path=route_path,
            routes=routes,
            locale_data=locale_data,
            meta=meta,
        )
        html = self.render(f"pages/{template}", context, page_id)
        if self._settings.link_rewrite == "safety-net":
            html = rewrite_links(html, locale, routes, self._settings.locales_list)

        return RenderedPage(
            page_id=page_id,
            base_template_id=base,
            locale=locale,
            template=template,
            route_path=route_path,
            output_file=output_file_for(route_path, self._settings.locales_list),
            html=html,
        )
