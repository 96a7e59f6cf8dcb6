# tests/unit/core/test_unit_models.py — v3
"""Tests for core/models.py — DocumentAnalysis, AnalysisOptions, BatchItem."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from docsorter.core.models import (
    MAX_SNIPPET_CHARS,
    MAX_SNIPPETS,
    MERGED_FIELDS,
    AnalysisOptions,
    BatchItem,
    DocumentAnalysis,
    ProcessingStats,
)


class TestDocumentAnalysis:
    def test_defaults(self):
        a = DocumentAnalysis()
        assert a.client_name is None
        assert a.source == "regex"
        assert a.snippets == ()
        assert a.overall_confidence == 0.0

    def test_confidence_clamped(self):
        a = DocumentAnalysis(client_confidence=1.7, date_confidence=-0.2)
        assert a.client_confidence == 1.0
        assert a.date_confidence == 0.0

    def test_non_numeric_confidence_is_zero(self):
        a = DocumentAnalysis(client_confidence="high", doc_type_confidence=True)
        assert a.client_confidence == 0.0
        assert a.doc_type_confidence == 0.0

    def test_overall_is_computed(self):
        a = DocumentAnalysis(
            client_name="Acme", client_confidence=0.8,
            date="2024-01-15", date_confidence=0.6,
        )
        assert a.overall_confidence == pytest.approx(0.8)

    def test_overall_in_dump(self):
        a = DocumentAnalysis(client_name="Acme", client_confidence=0.5)
        assert a.model_dump()["overall_confidence"] == pytest.approx(0.5)

    def test_frozen(self):
        a = DocumentAnalysis()
        with pytest.raises(ValidationError):
            a.client_name = "Other"  # type: ignore[misc]

    def test_invalid_source_rejected(self):
        with pytest.raises(ValidationError):
            DocumentAnalysis(source="magic")

    def test_snippets_cleaned(self):
        a = DocumentAnalysis(snippets=["  first  ", "", 3, "second"])
        assert a.snippets == ("first", "second")

    def test_snippets_capped(self):
        a = DocumentAnalysis(snippets=[f"s{i}" for i in range(8)])
        assert len(a.snippets) == MAX_SNIPPETS

    def test_long_snippet_dropped(self):
        a = DocumentAnalysis(snippets=["x" * MAX_SNIPPET_CHARS, "kept"])
        assert a.snippets == ("kept",)

    def test_snippets_not_a_list(self):
        assert DocumentAnalysis(snippets="oops").snippets == ()

    def test_field_sources_read_only(self):
        a = DocumentAnalysis(field_sources={"client_name": "ai"})
        with pytest.raises(TypeError):
            a.field_sources["client_name"] = "regex"  # type: ignore[index]
        assert a.field_sources == {"client_name": "ai"}

    def test_field_sources_dump_as_dict(self):
        a = DocumentAnalysis(field_sources={"date": "regex"})
        assert a.model_dump()["field_sources"] == {"date": "regex"}
        restored = DocumentAnalysis.model_validate_json(a.model_dump_json())
        assert restored.field_sources == {"date": "regex"}

    def test_merged_fields_name_model_fields(self):
        for field, conf_field in MERGED_FIELDS:
            assert field in DocumentAnalysis.model_fields
            assert conf_field in DocumentAnalysis.model_fields


class TestHasMissingFields:
    def test_complete(self):
        a = DocumentAnalysis(client_name="Acme", date="2024-01-15", doc_type="Invoice")
        assert a.has_missing_fields() is False

    def test_unclassified_counts_as_missing(self):
        a = DocumentAnalysis(client_name="Acme", date="2024-01-15", doc_type="Unclassified")
        assert a.has_missing_fields() is True

    def test_missing_date(self):
        a = DocumentAnalysis(client_name="Acme", doc_type="Invoice")
        assert a.has_missing_fields() is True


class TestAnalysisOptions:
    def test_defaults(self):
        o = AnalysisOptions()
        assert o.use_ai is True
        assert o.ai_confidence_threshold == 0.5
        assert o.ai_batch_size == 5
        assert o.force_ai is False
        assert o.use_cache is True
        assert o.force_refresh is False

    def test_threshold_range(self):
        with pytest.raises(ValidationError):
            AnalysisOptions(ai_confidence_threshold=1.5)

    def test_batch_size_positive(self):
        with pytest.raises(ValidationError):
            AnalysisOptions(ai_batch_size=0)

    def test_from_settings(self, settings):
        s = settings.model_copy(update={"ai_confidence_threshold": 0.7, "cache_enabled": False})
        o = AnalysisOptions.from_settings(s)
        assert o.ai_confidence_threshold == 0.7
        assert o.use_cache is False

    def test_from_settings_overrides(self, settings):
        o = AnalysisOptions.from_settings(settings, force_ai=True)
        assert o.force_ai is True


class TestBatchItem:
    def test_minimal(self):
        item = BatchItem(text="hello")
        assert item.file_path is None
        assert item.model is None


class TestProcessingStats:
    def test_defaults(self):
        s = ProcessingStats()
        assert s.total_processed == 0
        assert s.cache is None
