# tests/unit/config/test_routes.py — v1
"""Tests for config/routes.py — route document shapes and output mapping."""

from __future__ import annotations

import json
from pathlib import Path

from lingosite.config.routes import load_routes_config, output_file_for, parse_routes_config

KEYED = {
    "basePath": {"en": "/en", "fr": "/fr"},
    "routes": [
        {"key": "home", "path": "/", "title": {"en": "Home", "default": "Start"}},
        {"key": "about", "path": {"en": "/about", "fr": "/a-propos"}},
        {"key": "legal", "path": {"en": "/legal"}, "hidden": True},
    ],
}

PER_LOCALE = {
    "locales": ["en", "fr"],
    "routes": {
        "en": [{"key": "about", "path": "/en/about", "title": "About"}],
        "fr": [{"key": "about", "path": "/fr/a-propos", "title": "A propos"}],
    },
}


class TestParseKeyed:
    def test_paths_prefixed_by_base_path(self):
        cfg = parse_routes_config(KEYED, ["en", "fr"])
        assert cfg.path_for("home", "en") == "/en/"
        assert cfg.path_for("about", "fr") == "/fr/a-propos"

    def test_route_absent_in_locale(self):
        cfg = parse_routes_config(KEYED, ["en", "fr"])
        assert cfg.path_for("legal", "fr") is None
        assert cfg.all_paths("legal") == {"en": "/en/legal"}

    def test_metadata_fallback(self):
        cfg = parse_routes_config(KEYED, ["en", "fr"])
        home = cfg.get("home")
        assert home.property_for("title", "en") == "Home"
        assert home.property_for("title", "fr") == "Start"

    def test_visible_routes_excludes_hidden(self):
        cfg = parse_routes_config(KEYED, ["en", "fr"])
        assert [r.key for r in cfg.visible_routes("en")] == ["home", "about"]

    def test_unknown_key(self):
        cfg = parse_routes_config(KEYED, ["en", "fr"])
        assert cfg.get("missing") is None
        assert cfg.path_for("missing", "en") is None
        assert cfg.all_paths("missing") == {}

    def test_route_without_key_skipped(self):
        cfg = parse_routes_config({"routes": [{"path": "/x"}]}, ["en"])
        assert cfg.routes == []


class TestParsePerLocale:
    def test_merges_locales(self):
        cfg = parse_routes_config(PER_LOCALE, ["en"])
        assert cfg.locales == ["en", "fr"]
        assert cfg.all_paths("about") == {"en": "/en/about", "fr": "/fr/a-propos"}
        assert cfg.get("about").property_for("title", "fr") == "A propos"


class TestLoadRoutesConfig:
    def test_load(self, tmp_path: Path):
        path = tmp_path / "routes.json"
        path.write_text(json.dumps(KEYED), encoding="utf-8")
        assert load_routes_config(path, ["en", "fr"]).get("about") is not None

    def test_missing_file_is_empty(self, tmp_path: Path):
        cfg = load_routes_config(tmp_path / "nope.json", ["en"])
        assert cfg.routes == []
        assert cfg.locales == ["en"]


class TestOutputFileFor:
    def test_root(self):
        assert output_file_for("/", ["en"]) == "index.html"

    def test_locale_root(self):
        assert output_file_for("/en", ["en"]) == "en/index.html"
        assert output_file_for("/en/", ["en"]) == "en/index.html"

    def test_page(self):
        assert output_file_for("/en/about", ["en"]) == "en/about.html"

    def test_trailing_slash_directory(self):
        assert output_file_for("/en/blog/", ["en"]) == "en/blog/index.html"

    def test_explicit_html(self):
        assert output_file_for("/en/x.html", ["en"]) == "en/x.html"
