# tests/unit/pages/test_grouper.py — v1
"""Tests for pages/grouper.py — grouping template variants by base route."""

from __future__ import annotations

from pathlib import Path

import pytest

from lingosite.pages.grouper import (
    base_route_id,
    discover_templates,
    group_by_base_route,
    resolve_variant,
    split_template_name,
)
from lingosite.pages.models import BaseRouteGroup


def _touch(root: Path, *names: str) -> list[Path]:
    paths = []
    for name in names:
        p = root / name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text("", encoding="utf-8")
        paths.append(p)
    return paths


class TestSplitTemplateName:
    def test_locale_variant(self):
        assert split_template_name("about.fr.html", ".html") == ("about", "fr")

    def test_default_variant(self):
        assert split_template_name("about.html", ".html") == ("about", None)

    def test_nested(self):
        assert split_template_name("blog/post.en.html", ".html") == ("blog/post", "en")

    def test_not_a_locale_suffix(self):
        assert split_template_name("page.v2.html", ".html") == ("page.v2", None)

    def test_wrong_extension(self):
        with pytest.raises(ValueError):
            split_template_name("about.txt", ".html")


class TestGroupByBaseRoute:
    def test_groups(self, tmp_path: Path):
        files = _touch(tmp_path, "about.html", "about.fr.html", "home.en.html", "blog/post.en.html")
        groups = group_by_base_route(files, tmp_path, ".html")
        assert set(groups) == {"about", "home", "blog/post"}
        assert groups["about"].default_variant == "about.html"
        assert groups["about"].locale_variants == {"fr": "about.fr.html"}
        assert groups["blog/post"].locale_variants == {"en": "blog/post.en.html"}

    def test_outside_pages_ignored(self, tmp_path: Path):
        pages = tmp_path / "pages"
        pages.mkdir()
        outside = _touch(tmp_path, "stray.html")
        assert group_by_base_route(outside, pages, ".html") == {}

    def test_discover_sorted(self, tmp_path: Path):
        _touch(tmp_path, "b.html", "a.html", "notes.txt")
        assert [p.name for p in discover_templates(tmp_path, ".html")] == ["a.html", "b.html"]

    def test_discover_missing_dir(self, tmp_path: Path):
        assert discover_templates(tmp_path / "nope", ".html") == []

    def test_base_route_id(self, tmp_path: Path):
        (path,) = _touch(tmp_path, "docs/guide.fr.html")
        assert base_route_id(path, tmp_path, ".html") == "docs/guide"


class TestResolveVariant:
    def test_prefers_locale_variant(self):
        group = BaseRouteGroup(base_template_id="about", default_variant="about.html",
                               locale_variants={"fr": "about.fr.html"})
        assert resolve_variant(group, "fr") == "about.fr.html"
        assert resolve_variant(group, "en") == "about.html"

    def test_no_variant(self, caplog):
        group = BaseRouteGroup(base_template_id="about", locale_variants={"fr": "about.fr.html"})
        assert resolve_variant(group, "en") is None
        assert "no en variant" in caplog.text
