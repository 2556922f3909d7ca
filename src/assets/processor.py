# src/assets/processor.py — v2
"""Asset pipeline: discovery, staleness, variant generation, manifest + cache flush.

One pass walks every source class (public, styles, scripts, images),
reprocesses only what is stale and registers every source's URLs into a
fresh manifest. Every pass ends with a manifest flush and a cache save.
Passes are serialised by a lock so two flushes never interleave.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from lingosite.assets.css_resolver import CssResolver
from lingosite.assets.images import CONVERTIBLE_SUFFIXES
from lingosite.assets.manifest import ManifestBuilder
from lingosite.assets.models import AssetPassReport, AssetSource
from lingosite.assets.variants import SECONDARY_SUFFIX, VariantGenerator
from lingosite.cache.base_cache_store import BaseCacheStore
from lingosite.cache.fingerprint import compute_fingerprint
from lingosite.cache.models import CacheEntry
from lingosite.cache.staleness import StalenessDetector
from lingosite.config.settings import Settings
from lingosite.storage.layout import (
    IMAGES_DIR,
    PUBLIC_EXCLUDES,
    SCRIPTS_DIR,
    STYLES_DIR,
    SiteLayout,
)
from lingosite.storage.local_writer import LocalWriter
from lingosite.tracking.issues import IssueLog

logger = logging.getLogger(__name__)


class AssetPipeline:
    """Content-addressable processing of styles, scripts, images and public files."""

    def __init__(
        self,
        settings: Settings,
        layout: SiteLayout,
        store: BaseCacheStore,
        manifest: ManifestBuilder,
        issues: IssueLog,
        writer: LocalWriter | None = None,
    ) -> None:
        self._settings = settings
        self._layout = layout
        self._store = store
        self._manifest = manifest
        self._issues = issues
        self._writer = writer or LocalWriter(layout.output)
        self._detector = StalenessDetector(store, layout.output)
        self._generator = VariantGenerator(self._writer, settings, issues)
        self._resolver = CssResolver(issues)
        self._lock = asyncio.Lock()
        self._loaded = False

    @property
    def manifest(self) -> ManifestBuilder:
        return self._manifest

    @property
    def generator(self) -> VariantGenerator:
        return self._generator

    async def load(self) -> None:
        """Load the cache once per process."""
        if not self._loaded:
            await self._store.load()
            self._loaded = True

    # --- Discovery ---

    def discover(self) -> list[AssetSource]:
        """All current sources, public files first so hashed assets win collisions."""
        sources: list[AssetSource] = []
        lay = self._layout

        if self._settings.copy_public:
            sources.extend(self._discover_public())
        if lay.css_src.is_dir():
            for p in sorted(lay.css_src.glob("*.css")):
                # "_name.css" files are import-only partials.
                if p.is_file() and not p.name.startswith("_"):
                    sources.append(self._source("styles", p, STYLES_DIR))
        if lay.js_src.is_dir():
            for p in sorted(lay.js_src.glob("*.js")):
                if p.is_file():
                    sources.append(self._source("scripts", p, SCRIPTS_DIR))
        if lay.images_src.is_dir():
            exts = set(self._settings.image_extensions_list)
            images = [
                p for p in sorted(lay.images_src.iterdir())
                if p.is_file() and p.suffix.lower() in exts
            ]
            sources.extend(self._discover_images(images))
        return sources

    def _discover_images(self, paths: list[Path]) -> list[AssetSource]:
        """Image sources; each '<stem>.webp' name is claimed by one source only.

        An authored '<stem>.webp' owns its name. Otherwise the first convertible
        image with that stem gets the WebP sibling and later ones go without.
        """
        claimed = {p.stem for p in paths if p.suffix.lower() == SECONDARY_SUFFIX}
        found: list[AssetSource] = []
        for p in paths:
            source = self._source("images", p, IMAGES_DIR)
            if source.suffix in CONVERTIBLE_SUFFIXES:
                if source.stem in claimed:
                    logger.warning(
                        "Skipping WebP sibling of %s: %s.webp is already taken",
                        source.key, source.stem,
                    )
                    self._issues.record(
                        "asset", source.key,
                        f"WebP sibling skipped, {source.stem}.webp is already taken",
                    )
                    source = source.model_copy(update={"webp_sibling": False})
                else:
                    claimed.add(source.stem)
            found.append(source)
        return found

    def _discover_public(self) -> list[AssetSource]:
        root = self._layout.public
        if not root.is_dir():
            logger.info("Public directory %s not found, skipping copy", root)
            return []
        found = []
        for p in sorted(root.rglob("*")):
            if not p.is_file() or p.name in PUBLIC_EXCLUDES:
                continue
            rel_dir = p.parent.relative_to(root).as_posix()
            found.append(self._source("public", p, "" if rel_dir == "." else rel_dir))
        return found

    def _source(self, kind: str, path: Path, output_dir: str) -> AssetSource:
        return AssetSource(
            kind=kind,  # type: ignore[arg-type]
            path=path,
            key=self._layout.source_key(path),
            output_dir=output_dir,
            name=path.name,
        )

    # --- Passes ---

    async def process_all(self) -> AssetPassReport:
        """Full asset pass: fingerprint everything, prune vanished sources."""
        return await self._run_pass(focus=None)

    async def process_changed(self, path: Path) -> AssetPassReport:
        """Reprocess one changed source (and style entries that import it).

        Every other source is trusted from its cache entry, but still
        registered, so the manifest stays complete.
        """
        key = self._layout.source_key(path)
        focus = {key}
        if Path(path).suffix.lower() == ".css":
            for source_key, entry in (await self._store.list_entries()).items():
                if entry.kind == "styles" and key in entry.dependencies:
                    focus.add(source_key)
        logger.info("Reprocessing %s", ", ".join(sorted(focus)))
        return await self._run_pass(focus=focus)

    async def _run_pass(self, focus: set[str] | None) -> AssetPassReport:
        async with self._lock:
            await self.load()
            report = AssetPassReport()
            self._manifest.begin_pass()

            sources = self.discover()
            for source in sources:
                verify = focus is None or source.key in focus
                try:
                    await self._process_one(source, report, verify)
                except (OSError, ValueError) as e:
                    logger.error("Failed to process %s: %s", source.key, e)
                    self._issues.record("asset", source.key, str(e), severity="error")
                    report.failed.append(source.key)

            if focus is None:
                await self._prune_vanished({s.key for s in sources}, report)

            report.manifest_entries = self._manifest.staged_count
            await self._manifest.flush()
            await self._store.save()

            logger.info("Asset pass: %s", report.summary())
            return report

    async def _process_one(
        self, source: AssetSource, report: AssetPassReport, verify: bool
    ) -> None:
        production = self._settings.production
        entry = await self._store.get(source.key)

        if not verify and entry is not None:
            reason = await self._detector.reason(
                source.key, entry.fingerprint, entry.outputs.paths(), production
            )
            # A reassigned WebP sibling changes the plan without touching the source.
            planned = self._generator.plan(source, entry.fingerprint)
            if reason is None and planned.outputs == entry.outputs:
                self._manifest.register_all(entry.urls)
                report.cached.append(source.key)
                return

        content, dependencies = self._read(source)
        fingerprint = compute_fingerprint(content)
        planned = self._generator.plan(source, fingerprint)
        reason = await self._detector.reason(
            source.key, fingerprint, planned.outputs.paths(), production
        )
        if reason is None and entry is not None and entry.outputs == planned.outputs:
            self._manifest.register_all(entry.urls)
            report.cached.append(source.key)
            return

        logger.debug("Processing %s (%s)", source.key, reason)
        result = await self._generator.generate(source, content, fingerprint)
        self._manifest.register_all(result.urls)
        report.pruned.extend(result.pruned)

        if result.degraded:
            # Not a successful processing: leave no entry so the next pass retries.
            await self._store.delete(source.key)
            report.degraded.append(source.key)
            return

        await self._store.put(
            source.key,
            CacheEntry(
                kind=source.kind,
                source_path=source.key,
                fingerprint=fingerprint,
                outputs=result.outputs,
                urls=result.urls,
                source_modified_at=source.path.stat().st_mtime,
                production=production,
                dependencies=dependencies,
            ),
        )
        report.processed.append(source.key)

    def _read(self, source: AssetSource) -> tuple[bytes, list[str]]:
        """Source bytes plus dependency keys (stylesheets are resolved and inlined)."""
        if source.kind != "styles":
            return source.path.read_bytes(), []
        resolved = self._resolver.resolve(source.path)
        content = self._resolver.concatenate(resolved).encode("utf-8")
        deps = [self._layout.source_key(p) for p in resolved[:-1]]
        return content, deps

    async def _prune_vanished(self, current: set[str], report: AssetPassReport) -> None:
        """Drop cache entries (and their outputs) whose source is gone."""
        for key, entry in (await self._store.list_entries()).items():
            if key in current:
                continue
            for rel in entry.outputs.paths():
                if await self._writer.remove(rel):
                    logger.info("Removed output %s of vanished source %s", rel, key)
            await self._store.delete(key)
            report.removed.append(key)
