# src/pages/generators.py — v1
"""Site-level outputs produced after every full page regeneration.

Each generator returns {output file relative to the output root: content};
the builder commits them with the same change-detecting writer as pages.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any

from jinja2 import DictLoader, Environment

from lingosite.config.routes import RoutesConfig
from lingosite.config.settings import Settings
from lingosite.core.errors import RenderError
from lingosite.pages.grouper import NOT_FOUND_ID, resolve_variant
from lingosite.pages.locale_data import is_rtl, make_translator
from lingosite.pages.models import BaseRouteGroup
from lingosite.pages.renderer import PageRenderer

logger = logging.getLogger(__name__)

HOME_ROUTE_KEYS = ("index", "home", "landing_page")

ROOT_REDIRECT_TEMPLATE = """<!DOCTYPE html>
<html lang="{{ default_locale }}">
<head>
<meta charset="utf-8">
<title>{{ title }}</title>
<meta name="robots" content="noindex">
<noscript><meta http-equiv="refresh" content="0; url={{ homes[default_locale] }}"></noscript>
<script>
(function () {
  var locales = {{ locales | tojson }};
  var homes = {{ homes | tojson }};
  var routes = {{ routes | tojson }};
  var match = document.cookie.match(/(?:^|; )locale=([^;]+)/);
  var chosen = match && locales.indexOf(match[1]) !== -1 ? match[1] : null;
  if (!chosen) {
    var langs = navigator.languages || [navigator.language || ""];
    for (var i = 0; i < langs.length && !chosen; i++) {
      var code = (langs[i] || "").slice(0, 2).toLowerCase();
      if (locales.indexOf(code) !== -1) chosen = code;
    }
  }
  window.location.replace(homes[chosen || {{ default_locale | tojson }}]);
})();
</script>
</head>
<body>
<ul>
{% for loc in locales %}<li><a href="{{ homes[loc] }}" hreflang="{{ loc }}">{{ loc }}</a></li>
{% endfor %}</ul>
</body>
</html>
"""

SITEMAP_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9" xmlns:xhtml="http://www.w3.org/1999/xhtml">
{% for entry in entries %}  <url>
    <loc>{{ site_url }}{{ entry.path }}</loc>
    <lastmod>{{ lastmod }}</lastmod>
{% for loc, alt in entry.alternates.items() %}    <xhtml:link rel="alternate" hreflang="{{ loc }}" href="{{ site_url }}{{ alt }}"/>
{% endfor %}  </url>
{% endfor %}</urlset>
"""

SITEMAP_INDEX_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<sitemapindex xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
{% for loc in locales %}  <sitemap>
    <loc>{{ site_url }}/sitemap-{{ loc }}.xml</loc>
    <lastmod>{{ lastmod }}</lastmod>
  </sitemap>
{% endfor %}</sitemapindex>
"""

NOT_FOUND_TEMPLATE = """<!DOCTYPE html>
<html lang="{{ locale }}" dir="{{ 'rtl' if rtl else 'ltr' }}">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<meta name="robots" content="noindex">
<title>{{ text('errors.not_found.title', 'Page not found') }}</title>
</head>
<body>
<main>
<h1>404</h1>
<p>{{ text('errors.not_found.message', 'The page you are looking for does not exist.') }}</p>
<p><a href="{{ home }}">{{ text('errors.not_found.back', 'Back to home') }}</a></p>
</main>
</body>
</html>
"""


def home_path(routes: RoutesConfig, locale: str) -> str:
    """Home route of a locale, or '/<locale>/' when none is declared."""
    for key in HOME_ROUTE_KEYS:
        path = routes.path_for(key, locale)
        if path:
            return path
    return f"/{locale}/"


def locale_dir(routes: RoutesConfig, locale: str) -> str:
    """Output directory holding a locale's pages."""
    prefix = routes.base_paths.get(locale, "").strip("/")
    if prefix:
        return prefix.split("/")[0]
    first = home_path(routes, locale).strip("/").split("/")[0]
    return first or locale


class SiteGenerators:
    """Root redirect, sitemaps, 404 pages and localized web manifests."""

    def __init__(self, settings: Settings, renderer: PageRenderer, public_dir: Path) -> None:
        self._settings = settings
        self._renderer = renderer
        self._public_dir = Path(public_dir)
        self._env = Environment(
            loader=DictLoader(
                {
                    "root-redirect.html": ROOT_REDIRECT_TEMPLATE,
                    "404.html": NOT_FOUND_TEMPLATE,
                    "sitemap.xml": SITEMAP_TEMPLATE,
                    "sitemap-index.xml": SITEMAP_INDEX_TEMPLATE,
                }
            ),
            autoescape=True,
            keep_trailing_newline=True,
        )

    @property
    def locales(self) -> list[str]:
        return self._settings.locales_list

    def root_redirect(self, routes: RoutesConfig) -> dict[str, str]:
        homes = {loc: home_path(routes, loc) for loc in self.locales}
        route_lists = {
            loc: [
                {"key": r.key, "path": r.path_for(loc)}
                for r in routes.routes
                if r.path_for(loc) is not None
            ]
            for loc in self.locales
        }
        html = self._env.get_template("root-redirect.html").render(
            title="Language selection",
            locales=self.locales,
            default_locale=self._settings.default_locale,
            homes=homes,
            routes=route_lists,
        )
        return {"index.html": html}

    def sitemaps(self, routes: RoutesConfig) -> dict[str, str]:
        site_url = self._settings.site_url.rstrip("/")
        lastmod = date.today().isoformat()
        out: dict[str, str] = {}
        template = self._env.get_template("sitemap.xml")

        for loc in self.locales:
            entries = [
                {"path": r.path_for(loc), "alternates": dict(r.paths)}
                for r in routes.routes
                if r.path_for(loc) is not None and not r.property_for("hidden", loc)
            ]
            out[f"sitemap-{loc}.xml"] = template.render(
                entries=entries, site_url=site_url, lastmod=lastmod
            )

        out["sitemap-index.xml"] = self._env.get_template("sitemap-index.xml").render(
            locales=self.locales, site_url=site_url, lastmod=lastmod
        )
        return out

    def not_found_pages(
        self,
        routes: RoutesConfig,
        locale_data: dict[str, dict[str, Any]],
        meta: dict[str, Any],
        group: BaseRouteGroup | None,
    ) -> dict[str, str]:
        """One 404.html per locale directory.

        A custom 'pages/404[.<locale>]' template is used when present; a
        render failure falls back to the built-in page.
        """
        out: dict[str, str] = {}
        for loc in self.locales:
            html = None
            template = resolve_variant(group, loc) if group else None
            if template:
                context = self._renderer.build_context(
                    page_key=NOT_FOUND_ID,
                    locale=loc,
                    route_path=f"/{locale_dir(routes, loc)}/404.html",
                    routes=routes,
                    locale_data=locale_data,
                    meta=meta,
                )
                context["alternates"] = [loc]
                try:
                    html = self._renderer.render(f"pages/{template}", context, f"{NOT_FOUND_ID}:{loc}")
                except RenderError as e:
                    logger.warning("Custom 404 failed for %s, using built-in page: %s", loc, e)
            if html is None:
                t = make_translator(locale_data, loc, self._settings.default_locale)

                def text(key: str, default: str, t=t) -> str:
                    value = t(key)
                    return default if value == key else value

                html = self._env.get_template("404.html").render(
                    locale=loc, rtl=is_rtl(loc), home=home_path(routes, loc), text=text
                )
            out[f"{locale_dir(routes, loc)}/404.html"] = html
        return out

    def webmanifests(
        self, routes: RoutesConfig, locale_data: dict[str, dict[str, Any]]
    ) -> dict[str, str]:
        """Per-locale site.webmanifest seeded from public/site.webmanifest."""
        base: dict[str, Any] = {}
        source = self._public_dir / "site.webmanifest"
        if source.is_file():
            try:
                base = json.loads(source.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                logger.warning("Could not parse %s, using defaults: %s", source, e)

        out: dict[str, str] = {}
        for loc in self.locales:
            t = make_translator(locale_data, loc, self._settings.default_locale)

            def pick(*keys: str, fallback: str) -> str:
                for key in keys:
                    value = t(key)
                    if value != key:
                        return value
                return base.get(fallback) or ""

            home = home_path(routes, loc)
            manifest = dict(base)
            manifest.update(
                name=pick("site.name", "meta.title", fallback="name"),
                short_name=pick("site.short_name", "meta.short_title", fallback="short_name"),
                description=pick("site.description", "meta.description", fallback="description"),
                start_url=home,
                scope=home,
                lang=loc,
                dir="rtl" if is_rtl(loc) else "ltr",
            )
            out[f"{locale_dir(routes, loc)}/site.webmanifest"] = (
                json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"
            )
        return out
