# src/cache/base_cache_store.py — v2
"""Abstract cache store interface.

Lifecycle is explicit: load() once per process, get()/put() during passes,
save() at the end of every asset pass. There is no implicit autosave.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from lingosite.cache.models import CacheEntry


class BaseCacheStore(ABC):
    """Unified interface for cache storage backends."""

    @abstractmethod
    async def load(self) -> None:
        """Load persisted state; any failure yields an empty cache."""

    @abstractmethod
    async def get(self, source_path: str) -> CacheEntry | None:
        """Retrieve cache entry by source path."""

    @abstractmethod
    async def put(self, source_path: str, entry: CacheEntry) -> None:
        """Store (overwrite) a cache entry."""

    @abstractmethod
    async def delete(self, source_path: str) -> None:
        """Remove cache entry (source disappeared)."""

    @abstractmethod
    async def list_entries(self) -> dict[str, CacheEntry]:
        """All entries keyed by source path."""

    @abstractmethod
    async def save(self) -> bool:
        """Persist state. Best-effort: returns False on failure, never raises."""
