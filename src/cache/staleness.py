# src/cache/staleness.py — v1
"""Staleness detection for processed assets.

A source needs reprocessing when it has no cache entry, when its fingerprint
differs from the cached one, or when any declared output is missing on disk.
The last branch makes a manually deleted output regenerate on the next pass.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from lingosite.cache.base_cache_store import BaseCacheStore

logger = logging.getLogger(__name__)

StaleReason = Literal["no-entry", "fingerprint", "missing-output", "mode"]


class StalenessDetector:
    """Decide whether a source must be reprocessed."""

    def __init__(self, store: BaseCacheStore, output_root: Path) -> None:
        self._store = store
        self._root = Path(output_root)

    async def reason(
        self,
        source_path: str,
        current_fingerprint: str,
        declared_outputs: list[str],
        production: bool | None = None,
    ) -> StaleReason | None:
        """Why the source is stale, or None when the cached result is valid.

        Args:
            source_path: Cache key of the source.
            current_fingerprint: Fingerprint of the source as it is now.
            declared_outputs: Output paths (relative to the output root) the
                current configuration would produce.
            production: Build mode; a cached entry from the other mode is stale.
        """
        entry = await self._store.get(source_path)
        if entry is None:
            return "no-entry"
        if entry.fingerprint != current_fingerprint:
            return "fingerprint"
        if production is not None and entry.production != production:
            return "mode"
        for rel in declared_outputs:
            if not (self._root / rel).is_file():
                logger.debug("Output %s for %s is missing", rel, source_path)
                return "missing-output"
        return None

    async def is_stale(
        self,
        source_path: str,
        current_fingerprint: str,
        declared_outputs: list[str],
        production: bool | None = None,
    ) -> bool:
        return (
            await self.reason(source_path, current_fingerprint, declared_outputs, production)
            is not None
        )
