# tests/unit/pages/test_links.py — v1
"""Tests for pages/links.py — locale-aware link rewriting."""

from __future__ import annotations

from lingosite.config.routes import parse_routes_config
from lingosite.pages.links import rewrite_links

ROUTES = parse_routes_config(
    {
        "basePath": {"en": "/en", "fr": "/fr"},
        "routes": [{"key": "about", "path": {"en": "/about", "fr": "/a-propos"}}],
    },
    ["en", "fr"],
)


def _rewrite(html: str, locale: str = "fr") -> str:
    return rewrite_links(html, locale, ROUTES, ["en", "fr"])


class TestRewriteLinks:
    def test_page_key(self):
        assert _rewrite('<a href="about">x</a>') == '<a href="/fr/a-propos">x</a>'
        assert _rewrite('<a href="/about.html">x</a>') == '<a href="/fr/a-propos">x</a>'

    def test_unknown_relative_link_prefixed(self):
        assert _rewrite('<a href="faq">x</a>') == '<a href="/fr/faq">x</a>'

    def test_kept_links(self):
        for href in ("https://x.org", "#top", "mailto:a@b.c", "tel:123", "/assets/a.css", "/en/about"):
            html = f'<a href="{href}">x</a>'
            assert _rewrite(html) == html

    def test_src(self):
        assert _rewrite('<img src="img/a.png">') == '<img src="/fr/img/a.png">'
        assert _rewrite('<img src="/assets/images/a.png">') == '<img src="/assets/images/a.png">'
        assert _rewrite('<img src="data:image/png;base64,AA">') == '<img src="data:image/png;base64,AA">'
