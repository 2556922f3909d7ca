# src/cache/json_store.py — v2
"""JSON file cache store (default CACHE_BACKEND=json).

The whole cache lives in one document under the output root, grouped by
asset class: {"version": 1, "styles": {...}, "scripts": {...},
"images": {...}, "public": {...}}. The shape is private to this module.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from lingosite.cache.base_cache_store import BaseCacheStore
from lingosite.cache.models import CacheDocument, CacheEntry
from lingosite.storage.local_writer import atomic_write_bytes
from lingosite.tracking.issues import IssueLog

logger = logging.getLogger(__name__)


class JsonCacheStore(BaseCacheStore):
    """Single-document JSON cache, held in memory between load() and save()."""

    def __init__(self, cache_file: Path, issues: IssueLog | None = None) -> None:
        self._path = Path(cache_file).expanduser()
        self._issues = issues
        self._entries: dict[str, CacheEntry] = {}

    @property
    def path(self) -> Path:
        return self._path

    async def load(self) -> None:
        """Read the cache document; a missing or corrupt file is a cold cache."""
        self._entries = {}
        if not self._path.exists():
            logger.debug("No cache file at %s, starting cold", self._path)
            return
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            doc = CacheDocument.model_validate(raw)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning("Ignoring unreadable cache %s: %s", self._path, e)
            if self._issues is not None:
                self._issues.record("persistence", str(self._path), f"cache load failed: {e}")
            return
        self._entries = doc.all_entries()
        logger.debug("Loaded %d cache entries from %s", len(self._entries), self._path)

    async def get(self, source_path: str) -> CacheEntry | None:
        return self._entries.get(source_path)

    async def put(self, source_path: str, entry: CacheEntry) -> None:
        self._entries[source_path] = entry

    async def delete(self, source_path: str) -> None:
        self._entries.pop(source_path, None)

    async def list_entries(self) -> dict[str, CacheEntry]:
        return dict(self._entries)

    async def save(self) -> bool:
        """Write the document atomically. Failure keeps the in-memory cache."""
        doc = CacheDocument.from_entries(self._entries)
        try:
            atomic_write_bytes(
                self._path, doc.model_dump_json(indent=2).encode("utf-8")
            )
        except OSError as e:
            logger.warning("Could not save cache %s: %s", self._path, e)
            if self._issues is not None:
                self._issues.record("persistence", str(self._path), f"cache save failed: {e}")
            return False
        return True
