# src/pipeline/site_builder.py — v1
"""Site builder: wires the asset pipeline, renderer and generators together.

Operations:
  - build(): full asset pass, then full page regeneration.
  - process_assets() / process_asset(path): asset passes only.
  - regenerate_all(): every base route × locale, then site generators.
  - rebuild_base(base_id): one base route in every configured locale.

Pages of a pass are rendered in memory first and committed only if the
caller's is_current() still holds, so a superseded rebuild never writes.
Writes skip files whose bytes did not change.
"""

from __future__ import annotations

import logging
import time
import uuid
from pathlib import Path
from typing import Callable

from lingosite.assets.manifest import ManifestBuilder
from lingosite.assets.models import AssetPassReport
from lingosite.assets.processor import AssetPipeline
from lingosite.cache.base_cache_store import BaseCacheStore
from lingosite.cache.cache_factory import create_cache_store
from lingosite.config.routes import load_routes_config
from lingosite.config.settings import Settings
from lingosite.core.errors import RenderError
from lingosite.logging.context import set_build_context, set_locale_context
from lingosite.pages.generators import SiteGenerators
from lingosite.pages.grouper import NOT_FOUND_ID, discover_templates, group_by_base_route
from lingosite.pages.locale_data import load_locale_data, load_meta_data
from lingosite.pages.models import RenderedPage
from lingosite.pages.renderer import PageRenderer
from lingosite.pipeline.models import BuildReport
from lingosite.storage.layout import SiteLayout
from lingosite.storage.local_writer import LocalWriter
from lingosite.tracking.issues import IssueLog

logger = logging.getLogger(__name__)

IsCurrent = Callable[[], bool]


def _new_build_id() -> str:
    return uuid.uuid4().hex[:12]


class SiteBuilder:
    """Build and incrementally rebuild one site configuration."""

    def __init__(
        self,
        settings: Settings,
        issues: IssueLog | None = None,
        store: BaseCacheStore | None = None,
    ) -> None:
        """Validate the source tree and wire components.

        Raises:
            ConfigurationError: If a required source directory is missing.
        """
        settings.check_directories()
        self.settings = settings
        self.layout = SiteLayout.from_settings(settings)
        self.issues = issues if issues is not None else IssueLog()
        self.writer = LocalWriter(self.layout.output)
        self.store = store or create_cache_store(settings, self.issues)
        self.manifest = ManifestBuilder(self.layout.manifest_file, self.issues)
        self.assets = AssetPipeline(
            settings, self.layout, self.store, self.manifest, self.issues, self.writer
        )
        self.renderer = PageRenderer(settings, self.layout, self.manifest)
        self.generators = SiteGenerators(settings, self.renderer, self.layout.public)

    # --- Entry points ---

    async def build(self) -> BuildReport:
        """One-shot full build: assets first so pages see a fresh manifest."""
        mark = len(self.issues)
        started = time.monotonic()
        build_id = _new_build_id()
        set_build_context(build_id, "full")
        logger.info(
            "Building %s (%s) into %s",
            ", ".join(self.settings.locales_list),
            "production" if self.settings.production else "development",
            self.layout.output,
        )

        asset_report = await self.assets.process_all()
        report = await self._render(None, None, build_id, mark)
        report.assets = asset_report
        report.issues = self.issues.summary(mark)
        report.duration_ms = int((time.monotonic() - started) * 1000)
        logger.info("Build %s finished in %d ms: %s", build_id, report.duration_ms, report.summary())
        return report

    async def process_assets(self) -> AssetPassReport:
        set_build_context(_new_build_id(), "assets")
        return await self.assets.process_all()

    async def process_asset(self, path: Path) -> AssetPassReport:
        set_build_context(_new_build_id(), "assets")
        return await self.assets.process_changed(path)

    async def regenerate_all(self, is_current: IsCurrent | None = None) -> BuildReport:
        """Render every page in every locale, then the site-level outputs."""
        build_id = _new_build_id()
        set_build_context(build_id, "full")
        return await self._render(None, is_current, build_id, len(self.issues))

    async def rebuild_base(self, base_id: str, is_current: IsCurrent | None = None) -> BuildReport:
        """Render one base route in every configured locale."""
        build_id = _new_build_id()
        set_build_context(build_id, f"page:{base_id}")
        return await self._render(base_id, is_current, build_id, len(self.issues))

    # --- Rendering ---

    async def _render(
        self,
        base_id: str | None,
        is_current: IsCurrent | None,
        build_id: str,
        mark: int,
    ) -> BuildReport:
        started = time.monotonic()
        s = self.settings
        locales = s.locales_list
        report = BuildReport(build_id=build_id, scope="full" if base_id is None else f"page:{base_id}")

        routes = load_routes_config(self.layout.routes_file, locales)
        locale_data = load_locale_data(self.layout.data, locales)
        meta = load_meta_data(self.layout.data)
        groups = group_by_base_route(
            discover_templates(self.layout.pages, s.template_extension),
            self.layout.pages,
            s.template_extension,
        )
        not_found = groups.pop(NOT_FOUND_ID, None)

        if base_id is None:
            targets = groups
        elif base_id in groups:
            targets = {base_id: groups[base_id]}
        else:
            logger.warning("No templates left for base route %r", base_id)
            targets = {}

        pages: list[RenderedPage] = []
        for base, group in targets.items():
            for locale in locales:
                set_locale_context(locale)
                page_id = f"{base}:{locale}"
                try:
                    page = self.renderer.render_page(group, locale, routes, locale_data, meta)
                except RenderError as e:
                    logger.error("Failed to render %s: %s", page_id, e.reason)
                    self.issues.record("render", page_id, e.reason, severity="error")
                    report.pages_failed.append(page_id)
                    continue
                if page is None:
                    report.pages_skipped.append(page_id)
                else:
                    pages.append(page)
        set_locale_context(None)

        extra: dict[str, str] = {}
        if base_id is None:
            extra = self._generate_site_files(routes, locale_data, meta, not_found)

        if is_current is not None and not is_current():
            logger.info("Discarding superseded %s pass", report.scope)
            report.committed = False
            report.issues = self.issues.summary(mark)
            return report

        for page in pages:
            await self._commit(page.output_file, page.html, report)
            report.pages_rendered.append(page.page_id)
        for rel, content in extra.items():
            await self._commit(rel, content, report)
            report.generated.append(rel)

        report.issues = self.issues.summary(mark)
        report.duration_ms = int((time.monotonic() - started) * 1000)
        logger.info("Pages (%s): %s", report.scope, report.summary())
        return report

    def _generate_site_files(self, routes, locale_data, meta, not_found) -> dict[str, str]:
        s = self.settings
        out: dict[str, str] = {}
        steps = [("root redirect", lambda: self.generators.root_redirect(routes))]
        if s.emit_sitemaps:
            steps.append(("sitemaps", lambda: self.generators.sitemaps(routes)))
        if s.emit_404s:
            steps.append(
                ("404 pages", lambda: self.generators.not_found_pages(routes, locale_data, meta, not_found))
            )
        if s.emit_webmanifests:
            steps.append(("web manifests", lambda: self.generators.webmanifests(routes, locale_data)))

        for name, step in steps:
            try:
                out.update(step())
            except Exception as e:
                logger.error("Failed to generate %s: %s", name, e)
                self.issues.record("render", name, str(e), severity="error")
        return out

    async def _commit(self, rel: str, content: str, report: BuildReport) -> None:
        try:
            changed = await self.writer.write(rel, content)
        except OSError as e:
            logger.error("Could not write %s: %s", rel, e)
            self.issues.record("render", rel, f"write failed: {e}", severity="error")
            return
        (report.files_written if changed else report.files_unchanged).append(rel)
