# src/tracking/stats.py — v1
"""Cumulative processing counters for DocumentAnalyzer.

One collector per analyzer instance. Cache hit/miss counts are read from
the cache store so they are never double counted.
"""

from __future__ import annotations

from docsorter.cache.base_cache_store import BaseCacheStore
from docsorter.core.models import DocumentAnalysis, ProcessingStats


class StatsCollector:
    """Running totals plus a running mean of overall confidence."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._total = 0
        self._regex = 0
        self._ai = 0
        self._errors = 0
        self._average_confidence = 0.0
        self._cache_baseline: tuple[int, int] = (0, 0)

    def record(self, analysis: DocumentAnalysis) -> None:
        """Count one finished analysis."""
        self._total += 1
        if analysis.source == "regex":
            self._regex += 1
        else:
            self._ai += 1
        # Incremental mean: avg += (x - avg) / n
        self._average_confidence += (
            analysis.overall_confidence - self._average_confidence
        ) / self._total

    def record_error(self) -> None:
        self._errors += 1

    def rebase_cache(self, cache: BaseCacheStore | None) -> None:
        """Start counting cache hits/misses from the cache's current totals."""
        if cache is None:
            self._cache_baseline = (0, 0)
            return
        stats = cache.stats()
        self._cache_baseline = (stats.hits, stats.misses)

    def snapshot(self, cache: BaseCacheStore | None = None) -> ProcessingStats:
        hits = misses = 0
        cache_dict = None
        if cache is not None:
            cache_stats = cache.stats()
            hits = cache_stats.hits - self._cache_baseline[0]
            misses = cache_stats.misses - self._cache_baseline[1]
            cache_dict = cache_stats.as_dict()
        return ProcessingStats(
            total_processed=self._total,
            regex_processed=self._regex,
            ai_processed=self._ai,
            cache_hits=hits,
            cache_misses=misses,
            errors=self._errors,
            average_confidence=round(self._average_confidence, 4),
            cache=cache_dict,
        )
