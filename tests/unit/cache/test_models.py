# tests/unit/cache/test_models.py — v1
"""Tests for cache/models.py — entries and the grouped cache document."""

from __future__ import annotations

from lingosite.cache.models import AssetOutputs, CacheDocument, CacheEntry


def _entry(kind: str, source: str) -> CacheEntry:
    return CacheEntry(
        kind=kind,  # type: ignore[arg-type]
        source_path=source,
        fingerprint="f" * 64,
        outputs=AssetOutputs(primary=f"out/{source}"),
    )


class TestAssetOutputs:
    def test_paths_primary_only(self):
        assert AssetOutputs(primary="a.css").paths() == ["a.css"]

    def test_paths_with_secondary(self):
        outputs = AssetOutputs(primary="a.png", secondary="a.webp")
        assert outputs.paths() == ["a.png", "a.webp"]


class TestCacheDocument:
    def test_groups_by_kind(self):
        entries = {
            "src/styles/main.css": _entry("styles", "src/styles/main.css"),
            "src/assets/logo.png": _entry("images", "src/assets/logo.png"),
            "public/robots.txt": _entry("public", "public/robots.txt"),
        }
        doc = CacheDocument.from_entries(entries)
        assert list(doc.styles) == ["src/styles/main.css"]
        assert list(doc.images) == ["src/assets/logo.png"]
        assert list(doc.public) == ["public/robots.txt"]
        assert doc.scripts == {}

    def test_round_trip_through_json(self):
        entries = {"src/assets/js/app.js": _entry("scripts", "src/assets/js/app.js")}
        doc = CacheDocument.from_entries(entries)
        restored = CacheDocument.model_validate_json(doc.model_dump_json())
        assert restored.all_entries() == entries
