# src/cache/memory_store.py — v1
"""In-memory cache store (CACHE_ENABLED=false or CACHE_BACKEND=memory).

Skips unchanged work within one process only; nothing is persisted.
"""

from __future__ import annotations

from lingosite.cache.base_cache_store import BaseCacheStore
from lingosite.cache.models import CacheEntry


class MemoryCacheStore(BaseCacheStore):
    """Process-local cache store."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    async def load(self) -> None:
        """Nothing to load."""

    async def get(self, source_path: str) -> CacheEntry | None:
        return self._entries.get(source_path)

    async def put(self, source_path: str, entry: CacheEntry) -> None:
        self._entries[source_path] = entry

    async def delete(self, source_path: str) -> None:
        self._entries.pop(source_path, None)

    async def list_entries(self) -> dict[str, CacheEntry]:
        return dict(self._entries)

    async def save(self) -> bool:
        return True
