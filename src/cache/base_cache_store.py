# src/cache/base_cache_store.py — v2
"""Abstract cache store interface.

Keys are content hashes (see cache.fingerprint). Values are AI-sourced
DocumentAnalysis objects. Backends must treat their own I/O failures as a
miss rather than raising into the analysis path.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from docsorter.cache.models import CacheStats
from docsorter.core.models import DocumentAnalysis


class BaseCacheStore(ABC):
    """Unified interface for cache storage backends."""

    @abstractmethod
    async def get(self, key: str) -> DocumentAnalysis | None:
        """Retrieve the cached analysis for ``key``. Counts a hit or miss."""

    @abstractmethod
    async def set(self, key: str, analysis: DocumentAnalysis) -> None:
        """Store an analysis, evicting the least recently used on overflow."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a cache entry."""

    @abstractmethod
    async def clear(self) -> None:
        """Drop every entry. Counters are kept."""

    @abstractmethod
    def stats(self) -> CacheStats:
        """Current counters and size."""
