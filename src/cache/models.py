# src/cache/models.py — v2
"""Cache domain models: CacheEntry, CacheStats."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from docsorter.core.models import DocumentAnalysis


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CacheEntry(BaseModel):
    """AI-sourced analysis stored under the content hash of its text."""

    key: str
    analysis: DocumentAnalysis
    created_at: datetime = Field(default_factory=_utcnow)
    last_accessed_at: datetime = Field(default_factory=_utcnow)


class CacheStats(BaseModel):
    """Snapshot of cache counters."""

    hits: int = 0
    misses: int = 0
    sets: int = 0
    evictions: int = 0
    size: int = 0
    max_size: int = 0

    @property
    def hit_rate(self) -> float:
        lookups = self.hits + self.misses
        return self.hits / lookups if lookups else 0.0

    def as_dict(self) -> dict[str, float | int]:
        data: dict[str, float | int] = self.model_dump()
        data["hit_rate"] = round(self.hit_rate, 4)
        return data
