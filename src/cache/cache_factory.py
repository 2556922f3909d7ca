# src/cache/cache_factory.py — v3
"""Factory for cache store instantiation."""

from __future__ import annotations

from lingosite.cache.base_cache_store import BaseCacheStore
from lingosite.config.settings import Settings
from lingosite.tracking.issues import IssueLog


def create_cache_store(
    settings: Settings | None = None, issues: IssueLog | None = None
) -> BaseCacheStore:
    """Instantiate the configured cache backend.

    Args:
        settings: Application settings. Defaults to the JSON backend.
        issues: Issue log receiving persistence failures.

    Returns:
        Configured BaseCacheStore implementation.
    """
    settings = settings or Settings(_env_file=None)  # type: ignore[call-arg]

    if not settings.cache_enabled or settings.cache_backend == "memory":
        from lingosite.cache.memory_store import MemoryCacheStore
        return MemoryCacheStore()

    if settings.cache_backend == "json":
        from lingosite.cache.json_store import JsonCacheStore
        return JsonCacheStore(
            cache_file=settings.active_output_dir / settings.cache_file,
            issues=issues,
        )

    raise ValueError(f"Unsupported cache backend: {settings.cache_backend!r}")
