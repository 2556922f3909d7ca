# src/assets/variants.py — v2
"""Variant generation: primary output, optional secondary sibling, pruning.

Development builds write the source bytes under the unhashed logical name.
Production builds write transformed bytes under '<stem>.<hash><suffix>',
plus a WebP sibling for convertible images, then delete previously emitted
siblings whose hash segment no longer matches.

Any transform failure degrades to a plain copy of the original bytes under
the intended primary name; a failing asset never aborts the pass.
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial

from lingosite.assets.images import CONVERTIBLE_SUFFIXES, recompress, to_webp
from lingosite.assets.minify import minify_css, minify_js
from lingosite.assets.models import AssetSource, PlannedOutputs, VariantResult
from lingosite.cache.fingerprint import hashed_name_pattern, short_fingerprint
from lingosite.cache.models import AssetOutputs
from lingosite.config.settings import Settings
from lingosite.core.errors import AssetTransformError
from lingosite.storage.layout import public_url
from lingosite.storage.local_writer import LocalWriter
from lingosite.tracking.issues import IssueLog

logger = logging.getLogger(__name__)

SECONDARY_SUFFIX = ".webp"


def _join(directory: str, name: str) -> str:
    return f"{directory}/{name}" if directory else name


class VariantGenerator:
    """Produce the outputs for one source asset."""

    def __init__(self, writer: LocalWriter, settings: Settings, issues: IssueLog) -> None:
        self._writer = writer
        self._settings = settings
        self._issues = issues

    @property
    def production(self) -> bool:
        return self._settings.production

    def _hashed(self, source: AssetSource) -> bool:
        # Public files keep their published names in every mode.
        return self.production and source.kind != "public"

    def _wants_secondary(self, source: AssetSource) -> bool:
        if source.kind != "images" or source.suffix not in CONVERTIBLE_SUFFIXES:
            return False
        if not source.webp_sibling:
            return False
        return self.production or self._settings.dev_webp

    def plan(self, source: AssetSource, fingerprint: str) -> PlannedOutputs:
        """Output paths and manifest URLs for a source at a given fingerprint."""
        if self._hashed(source):
            h = short_fingerprint(fingerprint, self._settings.fingerprint_length)
            primary = _join(source.output_dir, f"{source.stem}.{h}{source.suffix}")
            secondary = _join(source.output_dir, f"{source.stem}.{h}{SECONDARY_SUFFIX}")
        else:
            primary = source.logical_path
            secondary = _join(source.output_dir, f"{source.stem}{SECONDARY_SUFFIX}")
        if not self._wants_secondary(source):
            secondary = None

        urls: dict[str, str] = {}
        if source.kind != "public":
            urls[source.logical_url] = public_url(primary)
            if secondary:
                logical = _join(source.output_dir, f"{source.stem}{SECONDARY_SUFFIX}")
                urls[public_url(logical)] = public_url(secondary)

        return PlannedOutputs(
            outputs=AssetOutputs(primary=primary, secondary=secondary), urls=urls
        )

    async def generate(
        self, source: AssetSource, content: bytes, fingerprint: str
    ) -> VariantResult:
        """Transform and write one source.

        Args:
            source: The asset being processed.
            content: Source bytes (concatenated stylesheet for style entries).
            fingerprint: Full fingerprint of content.
        """
        planned = self.plan(source, fingerprint)
        outputs = planned.outputs
        urls = dict(planned.urls)
        degraded = False

        try:
            primary_bytes, secondary_bytes = await self._transform(
                source, content, want_secondary=outputs.secondary is not None
            )
        except (AssetTransformError, OSError, ValueError) as e:
            logger.warning("Degrading %s to a plain copy: %s", source.key, e)
            self._issues.record("asset", source.key, str(e))
            degraded = True
            primary_bytes, secondary_bytes = content, None

        written: list[str] = []
        if await self._writer.write(outputs.primary, primary_bytes):
            written.append(outputs.primary)

        if outputs.secondary and secondary_bytes is not None:
            if await self._writer.write(outputs.secondary, secondary_bytes):
                written.append(outputs.secondary)
        elif outputs.secondary:
            # No sibling was produced; its logical URL must not resolve to it.
            urls = {k: v for k, v in urls.items() if v != public_url(outputs.secondary)}
            outputs = AssetOutputs(primary=outputs.primary)

        pruned: list[str] = []
        if self._hashed(source):
            for keep in outputs.paths():
                pruned.extend(await self.prune_siblings(source.output_dir, keep))

        logger.debug("Wrote %s for %s", ", ".join(outputs.paths()), source.key)
        return VariantResult(
            outputs=outputs, urls=urls, degraded=degraded, written=written, pruned=pruned
        )

    async def _transform(
        self, source: AssetSource, content: bytes, want_secondary: bool
    ) -> tuple[bytes, bytes | None]:
        loop = asyncio.get_running_loop()
        s = self._settings

        if source.kind == "styles":
            if not self.production:
                return content, None
            return minify_css(content.decode("utf-8")).encode("utf-8"), None

        if source.kind == "scripts":
            if not self.production:
                return content, None
            return minify_js(content.decode("utf-8")).encode("utf-8"), None

        primary = content
        if self.production:
            primary = await loop.run_in_executor(
                None,
                partial(recompress, content, source.suffix, source.key, s.image_quality, s.webp_quality),
            )
        secondary = None
        if want_secondary:
            secondary = await loop.run_in_executor(
                None,
                partial(to_webp, content, source.key, s.webp_quality, not self.production),
            )
        return primary, secondary

    async def prune_siblings(self, output_dir: str, keep: str) -> list[str]:
        """Delete '<stem>.<hash><suffix>' files next to keep with a different hash."""
        keep_name = keep.rsplit("/", 1)[-1]
        stem, h, suffix = keep_name.rsplit(".", 2)
        suffix = f".{suffix}"
        pattern = hashed_name_pattern(stem, suffix, len(h))

        removed: list[str] = []
        for name in await self._writer.list_dir(output_dir):
            match = pattern.match(name)
            if match and match.group(1) != h:
                rel = _join(output_dir, name)
                if await self._writer.remove(rel):
                    logger.info("Pruned stale %s", rel)
                    removed.append(rel)
        return removed
