# tests/unit/cache/test_unit_cache_factory.py — v2
"""Tests for cache/cache_factory.py, cache/fingerprint.py and cache/models.py."""

from __future__ import annotations

import pytest

from docsorter.cache.cache_factory import create_cache_store
from docsorter.cache.fingerprint import compute_content_hash, short_id
from docsorter.cache.json_store import JsonCacheStore
from docsorter.cache.memory_store import MemoryCacheStore
from docsorter.cache.models import CacheStats


class TestCreateCacheStore:
    def test_default_memory(self):
        assert isinstance(create_cache_store(), MemoryCacheStore)

    def test_memory_from_settings(self, settings):
        store = create_cache_store(settings.model_copy(update={"cache_max_entries": 7}))
        assert isinstance(store, MemoryCacheStore)
        assert store.stats().max_size == 7

    def test_json_backend(self, settings):
        store = create_cache_store(settings.model_copy(update={"cache_backend": "json"}))
        assert isinstance(store, JsonCacheStore)

    def test_disabled(self, settings):
        assert create_cache_store(settings.model_copy(update={"cache_enabled": False})) is None

    def test_unknown_backend(self, settings):
        with pytest.raises(ValueError, match="Unsupported cache backend"):
            create_cache_store(settings.model_copy(update={"cache_backend": "redis"}))


class TestFingerprint:
    def test_deterministic(self):
        assert compute_content_hash("abc") == compute_content_hash("abc")

    def test_sha256_hex(self):
        h = compute_content_hash("abc")
        assert len(h) == 64
        assert h.startswith("ba7816bf")

    def test_whitespace_matters(self):
        assert compute_content_hash("abc") != compute_content_hash("abc ")

    def test_short_id(self):
        assert short_id(compute_content_hash("abc")) == "ba7816bf8f01"


class TestCacheStats:
    def test_hit_rate_empty(self):
        assert CacheStats().hit_rate == 0.0

    def test_as_dict(self):
        d = CacheStats(hits=3, misses=1, size=2, max_size=10).as_dict()
        assert d["hit_rate"] == 0.75
        assert d["size"] == 2
