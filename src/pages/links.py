# src/pages/links.py — v1
"""Locale-aware rewriting of root-relative links in rendered markup."""

from __future__ import annotations

import re

from lingosite.config.routes import RoutesConfig

HREF_RE = re.compile(r'href="([^"]*?)"')
SRC_RE = re.compile(r'src="([^"]*?)"')

HREF_KEEP_PREFIXES = ("http", "#", "mailto:", "tel:", "/assets/")
SRC_KEEP_PREFIXES = ("http", "/assets/", "data:")


def _is_locale_prefixed(href: str, locales: list[str]) -> bool:
    return any(href == f"/{loc}" or href.startswith(f"/{loc}/") for loc in locales)


def rewrite_links(html: str, locale: str, routes: RoutesConfig, locales: list[str]) -> str:
    """Point page-key hrefs at their localized route and prefix unknown links.

    href="about" or href="/about.html" becomes the locale's route for key
    'about'; other relative links get a '/<locale>/' prefix. External,
    anchor, mailto/tel, asset and already-localized links are kept.
    """

    def href(match: re.Match[str]) -> str:
        value = match.group(1)
        if value.startswith(HREF_KEEP_PREFIXES) or _is_locale_prefixed(value, locales):
            return match.group(0)
        key = value.lstrip("/")
        if key.endswith(".html"):
            key = key[: -len(".html")]
        route_path = routes.path_for(key, locale)
        if route_path:
            return f'href="{route_path}"'
        return f'href="/{locale}/{value.lstrip("/")}"'

    def src(match: re.Match[str]) -> str:
        value = match.group(1)
        if value.startswith(SRC_KEEP_PREFIXES) or _is_locale_prefixed(value, locales):
            return match.group(0)
        return f'src="/{locale}/{value.lstrip("/")}"'

    return SRC_RE.sub(src, HREF_RE.sub(href, html))
