# src/cache/cache_factory.py — v3
"""Factory for cache store instantiation."""

from __future__ import annotations

from docsorter.cache.base_cache_store import BaseCacheStore
from docsorter.config.settings import Settings


def create_cache_store(settings: Settings | None = None) -> BaseCacheStore | None:
    """Instantiate the configured cache backend.

    Args:
        settings: Application settings. Defaults to an in-memory store.

    Returns:
        Configured BaseCacheStore, or None when caching is disabled.
    """
    if settings is not None and not settings.cache_enabled:
        return None

    backend = "memory" if settings is None else settings.cache_backend
    max_entries = 1000 if settings is None else settings.cache_max_entries

    if backend == "memory":
        from docsorter.cache.memory_store import MemoryCacheStore
        return MemoryCacheStore(max_entries=max_entries)

    if backend == "json":
        from docsorter.cache.json_store import JsonCacheStore
        cache_root = ".docsorter_cache" if settings is None else str(settings.cache_root)
        return JsonCacheStore(cache_root=cache_root, max_entries=max_entries)

    raise ValueError(f"Unsupported cache backend: {backend!r}")
