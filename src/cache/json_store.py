# src/cache/json_store.py — v3
"""JSON file-backed cache store (CACHE_BACKEND=json).

Same LRU semantics as MemoryCacheStore, persisted to a single JSON file
under CACHE_ROOT. The file is read lazily on first access and rewritten
after each mutation and after each hit, so the on-disk order is the LRU
order. File reads and writes run in a worker thread via asyncio.to_thread.
A missing, unreadable or corrupt file starts an empty cache; write
failures are logged and the in-memory state is kept.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from docsorter.cache.memory_store import DEFAULT_MAX_ENTRIES, MemoryCacheStore
from docsorter.cache.models import CacheEntry

logger = logging.getLogger(__name__)

CACHE_FILENAME = "ai_cache.json"
CACHE_FORMAT_VERSION = 1


def _read_payload(path: Path) -> dict[str, Any] | None:
    if not path.exists():
        return None
    return json.loads(path.read_text(encoding="utf-8"))


def _write_payload(path: Path, payload: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(".tmp")
    tmp.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    tmp.replace(path)


class JsonCacheStore(MemoryCacheStore):
    """File-persisted LRU cache store."""

    def __init__(self, cache_root: Path | str, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        super().__init__(max_entries=max_entries)
        self._root = Path(cache_root).expanduser()
        self._path = self._root / CACHE_FILENAME
        self._loaded = False

    @property
    def path(self) -> Path:
        return self._path

    async def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        self._loaded = True
        try:
            data = await asyncio.to_thread(_read_payload, self._path)
            if data is None:
                return
            entries = [CacheEntry(**raw) for raw in data.get("entries", [])]
        except (OSError, json.JSONDecodeError, ValidationError, AttributeError, TypeError) as e:
            logger.warning("Failed to load cache file %s, starting empty: %s", self._path, e)
            return

        # File order is LRU order; keep only the most recent entries.
        for entry in entries[-self._max_entries:]:
            self._entries[entry.key] = entry
        logger.info("Loaded %d cache entries from %s", len(self._entries), self._path)

    async def _after_mutation(self) -> None:
        payload = {
            "version": CACHE_FORMAT_VERSION,
            "entries": [
                json.loads(entry.model_dump_json()) for entry in self._entries.values()
            ],
        }
        try:
            await asyncio.to_thread(_write_payload, self._path, payload)
        except OSError as e:
            logger.warning("Failed to persist cache file %s: %s", self._path, e)

    async def _after_access(self) -> None:
        await self._after_mutation()
