# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides a small two-locale sample site built in tmp_path: three base routes
(home, about, contact) with en/fr variants, a layout and partial, locale
data, a stylesheet entry importing a partial, a script, a Pillow-generated
PNG, public files and the route document.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

import pytest
from PIL import Image

from lingosite.config.settings import Settings

BASE_LAYOUT = """<!DOCTYPE html>
<html lang="{{ locale }}">
<head>
<title>{% block title %}{{ t('site.name') }}{% endblock %}</title>
<link rel="stylesheet" href="{{ asset('/assets/styles/main.css') }}">
</head>
<body>
{% include "nav.html" %}
{% block content %}{% endblock %}
<img src="{{ asset('/assets/images/logo.png') }}" alt="logo">
<script src="{{ asset('/assets/js/app.js') }}"></script>
</body>
</html>
"""

NAV_PARTIAL = """<nav>{% for item in nav_items %}<a href="{{ item.path }}">{{ item.title }}</a>{% endfor %}</nav>"""

PAGE_TEMPLATE = """{% extends "base.html" %}
{% block content %}<h1>{{ t('pages.KEY.title') }}</h1><p>LOCALE</p>{% endblock %}
"""

ROUTES = {
    "basePath": {"en": "/en", "fr": "/fr"},
    "routes": [
        {"key": "home", "path": "/", "title": {"en": "Home", "fr": "Accueil"}},
        {
            "key": "about",
            "path": {"en": "/about", "fr": "/a-propos"},
            "title": {"en": "About", "fr": "A propos"},
        },
        {"key": "contact", "path": "/contact", "title": "Contact"},
    ],
}

LOCALE_DATA = {
    "en": {
        "site": {"name": "Demo"},
        "pages": {
            "home": {"title": "Welcome"},
            "about": {"title": "About us"},
            "contact": {"title": "Contact us"},
        },
    },
    "fr": {
        "site": {"name": "Démo"},
        "pages": {
            "home": {"title": "Bienvenue"},
            "about": {"title": "A propos de nous"},
        },
    },
}


def write_png(path: Path, color: tuple[int, int, int] = (255, 0, 0), size: int = 16) -> Path:
    """Write a small solid-color PNG."""
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", (size, size), color).save(path, format="PNG")
    return path


def write_page(pages_dir: Path, key: str, locale: str, extra: str = "") -> Path:
    path = pages_dir / f"{key}.{locale}.html"
    body = PAGE_TEMPLATE.replace("KEY", key).replace("LOCALE", f"{locale}{extra}")
    path.write_text(body, encoding="utf-8")
    return path


def write_site(root: Path) -> Path:
    """Create the sample site tree under root."""
    src = root / "src"
    pages = src / "pages"
    for d in (pages, src / "layouts", src / "partials", src / "data", src / "styles",
              src / "assets" / "js", root / "public"):
        d.mkdir(parents=True, exist_ok=True)

    (src / "layouts" / "base.html").write_text(BASE_LAYOUT, encoding="utf-8")
    (src / "partials" / "nav.html").write_text(NAV_PARTIAL, encoding="utf-8")
    for key in ("home", "about", "contact"):
        for locale in ("en", "fr"):
            write_page(pages, key, locale)

    for locale, data in LOCALE_DATA.items():
        (src / "data" / f"{locale}.json").write_text(json.dumps(data), encoding="utf-8")
    (src / "data" / "meta.json").write_text(json.dumps({"author": "Demo"}), encoding="utf-8")

    (src / "styles" / "main.css").write_text(
        '@import "_base.css";\nbody {\n  color: red;\n}\n', encoding="utf-8"
    )
    (src / "styles" / "_base.css").write_text("html {\n  margin: 0;\n}\n", encoding="utf-8")
    (src / "assets" / "js" / "app.js").write_text(
        "function hello() {\n  // greet\n  return 1;\n}\n", encoding="utf-8"
    )
    write_png(src / "assets" / "logo.png")

    (root / "public" / "robots.txt").write_text("User-agent: *\n", encoding="utf-8")
    (root / "public" / "site.webmanifest").write_text(
        json.dumps({"name": "Demo", "icons": []}), encoding="utf-8"
    )
    (root / "routes.config.json").write_text(json.dumps(ROUTES), encoding="utf-8")
    return root


# === FIXTURES ===


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Sample site tree."""
    return write_site(tmp_path / "site")


@pytest.fixture
def make_settings(site_root: Path) -> Callable[..., Settings]:
    """Factory for Settings bound to the sample site, ignoring any .env file."""

    def _make(**overrides: object) -> Settings:
        values: dict[str, object] = {
            "project_root": site_root,
            "locales": "en,fr",
            "default_locale": "en",
            "site_url": "https://example.com",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)  # type: ignore[call-arg]

    return _make


@pytest.fixture
def settings(make_settings: Callable[..., Settings]) -> Settings:
    """Development-mode settings."""
    return make_settings()


@pytest.fixture
def prod_settings(make_settings: Callable[..., Settings]) -> Settings:
    """Production-mode settings."""
    return make_settings(production=True)


@pytest.fixture
def make_png() -> Callable[..., Path]:
    """Factory writing small PNG files."""
    return write_png
