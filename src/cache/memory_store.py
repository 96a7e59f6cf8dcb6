# src/cache/memory_store.py — v2
"""In-process LRU cache store (CACHE_BACKEND=memory)."""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from datetime import datetime, timezone

from docsorter.cache.base_cache_store import BaseCacheStore
from docsorter.cache.models import CacheEntry, CacheStats
from docsorter.core.models import DocumentAnalysis

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 1000


class MemoryCacheStore(BaseCacheStore):
    """Bounded LRU keyed by content hash.

    ``get`` refreshes recency; ``set`` on a full cache evicts the least
    recently used entry. Mutations are serialised by an asyncio.Lock.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        self._max_entries = max_entries
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = asyncio.Lock()
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._evictions = 0

    async def get(self, key: str) -> DocumentAnalysis | None:
        async with self._lock:
            await self._ensure_loaded()
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            self._entries.move_to_end(key)
            self._entries[key] = entry.model_copy(
                update={"last_accessed_at": datetime.now(timezone.utc)}
            )
            self._hits += 1
            await self._after_access()
            return entry.analysis

    async def set(self, key: str, analysis: DocumentAnalysis) -> None:
        async with self._lock:
            await self._ensure_loaded()
            if key in self._entries:
                self._entries.move_to_end(key)
            self._entries[key] = CacheEntry(key=key, analysis=analysis)
            self._sets += 1
            while len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                self._evictions += 1
                logger.debug("Evicted cache entry %s", evicted[:12])
            await self._after_mutation()

    async def delete(self, key: str) -> None:
        async with self._lock:
            await self._ensure_loaded()
            if self._entries.pop(key, None) is not None:
                await self._after_mutation()

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()
            await self._after_mutation()

    def stats(self) -> CacheStats:
        return CacheStats(
            hits=self._hits,
            misses=self._misses,
            sets=self._sets,
            evictions=self._evictions,
            size=len(self._entries),
            max_size=self._max_entries,
        )

    def __len__(self) -> int:
        return len(self._entries)

    # --- Persistence hooks (no-ops in memory) ---

    async def _ensure_loaded(self) -> None:
        return None

    async def _after_mutation(self) -> None:
        return None

    async def _after_access(self) -> None:
        return None
