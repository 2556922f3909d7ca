# tests/unit/assets/test_variants.py — v2
"""Tests for assets/variants.py — output planning, transforms, pruning."""

from __future__ import annotations

from pathlib import Path

import pytest

from lingosite.assets.models import AssetSource
from lingosite.assets.variants import VariantGenerator
from lingosite.cache.fingerprint import compute_fingerprint
from lingosite.storage.local_writer import LocalWriter
from lingosite.tracking.issues import IssueLog


def _source(kind: str, path: Path, output_dir: str) -> AssetSource:
    return AssetSource(kind=kind, path=path, key=f"src/{path.name}", output_dir=output_dir, name=path.name)


def _generator(settings, out: Path) -> tuple[VariantGenerator, IssueLog]:
    issues = IssueLog()
    return VariantGenerator(LocalWriter(out), settings, issues), issues


class TestPlan:
    def test_dev_keeps_logical_name(self, settings, tmp_path: Path):
        gen, _ = _generator(settings, tmp_path)
        planned = gen.plan(_source("styles", tmp_path / "main.css", "assets/styles"), "a" * 64)
        assert planned.outputs.primary == "assets/styles/main.css"
        assert planned.outputs.secondary is None
        assert planned.urls == {"/assets/styles/main.css": "/assets/styles/main.css"}

    def test_production_hashes(self, prod_settings, tmp_path: Path):
        gen, _ = _generator(prod_settings, tmp_path)
        planned = gen.plan(_source("images", tmp_path / "logo.png", "assets/images"), "0123456789" + "a" * 54)
        assert planned.outputs.primary == "assets/images/logo.01234567.png"
        assert planned.outputs.secondary == "assets/images/logo.01234567.webp"
        assert planned.urls == {
            "/assets/images/logo.png": "/assets/images/logo.01234567.png",
            "/assets/images/logo.webp": "/assets/images/logo.01234567.webp",
        }

    def test_svg_has_no_secondary(self, prod_settings, tmp_path: Path):
        gen, _ = _generator(prod_settings, tmp_path)
        planned = gen.plan(_source("images", tmp_path / "icon.svg", "assets/images"), "f" * 64)
        assert planned.outputs.secondary is None

    def test_public_not_hashed_nor_mapped(self, prod_settings, tmp_path: Path):
        gen, _ = _generator(prod_settings, tmp_path)
        planned = gen.plan(_source("public", tmp_path / "robots.txt", ""), "f" * 64)
        assert planned.outputs.primary == "robots.txt"
        assert planned.urls == {}

    def test_dev_webp_opt_in(self, make_settings, tmp_path: Path):
        gen, _ = _generator(make_settings(dev_webp=True), tmp_path)
        planned = gen.plan(_source("images", tmp_path / "logo.png", "assets/images"), "f" * 64)
        assert planned.outputs.secondary == "assets/images/logo.webp"

    def test_sibling_disabled_on_source(self, prod_settings, tmp_path: Path):
        gen, _ = _generator(prod_settings, tmp_path)
        source = _source("images", tmp_path / "logo.png", "assets/images")
        planned = gen.plan(source.model_copy(update={"webp_sibling": False}), "f" * 64)
        assert planned.outputs.secondary is None
        assert list(planned.urls) == ["/assets/images/logo.png"]


class TestGenerate:
    @pytest.mark.asyncio
    async def test_dev_styles_passthrough(self, settings, tmp_path: Path):
        out = tmp_path / "out"
        gen, _ = _generator(settings, out)
        content = b"body {\n  color: red;\n}\n"
        result = await gen.generate(
            _source("styles", tmp_path / "main.css", "assets/styles"), content, compute_fingerprint(content)
        )
        assert (out / "assets/styles/main.css").read_bytes() == content
        assert result.written == ["assets/styles/main.css"]
        assert not result.degraded

    @pytest.mark.asyncio
    async def test_production_scripts_minified(self, prod_settings, tmp_path: Path):
        out = tmp_path / "out"
        gen, _ = _generator(prod_settings, out)
        content = b"function a() {\n  // note\n  return 1;\n}\n"
        fp = compute_fingerprint(content)
        result = await gen.generate(_source("scripts", tmp_path / "app.js", "assets/js"), content, fp)
        written = (out / result.outputs.primary).read_text(encoding="utf-8")
        assert result.outputs.primary == f"assets/js/app.{fp[:8]}.js"
        assert "note" not in written

    @pytest.mark.asyncio
    async def test_production_image_gets_webp(self, prod_settings, make_png, tmp_path: Path):
        out = tmp_path / "out"
        png = make_png(tmp_path / "logo.png")
        content = png.read_bytes()
        gen, _ = _generator(prod_settings, out)
        result = await gen.generate(
            _source("images", png, "assets/images"), content, compute_fingerprint(content)
        )
        assert not result.degraded
        assert len(result.outputs.paths()) == 2
        for rel in result.outputs.paths():
            assert (out / rel).is_file()

    @pytest.mark.asyncio
    async def test_corrupt_image_degrades_to_copy(self, prod_settings, tmp_path: Path):
        out = tmp_path / "out"
        bad = tmp_path / "bad.png"
        bad.write_bytes(b"not really a png")
        gen, issues = _generator(prod_settings, out)
        fp = compute_fingerprint(bad.read_bytes())
        result = await gen.generate(_source("images", bad, "assets/images"), bad.read_bytes(), fp)
        assert result.degraded
        assert result.outputs.secondary is None
        assert (out / result.outputs.primary).read_bytes() == b"not really a png"
        assert list(result.urls) == ["/assets/images/bad.png"]
        assert issues.count("asset") == 1

    @pytest.mark.asyncio
    async def test_prunes_previous_hash(self, prod_settings, tmp_path: Path):
        out = tmp_path / "out"
        gen, _ = _generator(prod_settings, out)
        source = _source("scripts", tmp_path / "app.js", "assets/js")

        first = b"var a = 1;\n"
        r1 = await gen.generate(source, first, compute_fingerprint(first))
        second = b"var a = 2;\n"
        r2 = await gen.generate(source, second, compute_fingerprint(second))

        assert r2.pruned == [r1.outputs.primary]
        assert sorted(p.name for p in (out / "assets/js").iterdir()) == [Path(r2.outputs.primary).name]

    @pytest.mark.asyncio
    async def test_prune_leaves_unrelated_files(self, prod_settings, tmp_path: Path):
        out = tmp_path / "out"
        (out / "assets/js").mkdir(parents=True)
        (out / "assets/js/app.js").write_text("logical", encoding="utf-8")
        (out / "assets/js/other.12345678.js").write_text("other", encoding="utf-8")
        gen, _ = _generator(prod_settings, out)
        removed = await gen.prune_siblings("assets/js", "assets/js/app.abcdef01.js")
        assert removed == []
