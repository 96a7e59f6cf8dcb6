# tests/unit/api/test_unit_facade.py — v2
"""Tests for api/facade.py — DocumentAnalyzer end to end (LLM mocked)."""

from __future__ import annotations

import pytest

from docsorter.api.facade import DocumentAnalyzer
from docsorter.cache.memory_store import MemoryCacheStore
from docsorter.core.models import AnalysisOptions, BatchItem
from docsorter.naming.filename import file_modified_date
from docsorter.pipeline.ai_orchestrator import AIOrchestrator
from docsorter.tracking.telemetry import InMemoryTelemetry


# ---------------------------------------------------------------------------
# Helper factories
# ---------------------------------------------------------------------------

def _analyzer(client, sleep, telemetry=None, **kwargs) -> DocumentAnalyzer:
    orchestrator = AIOrchestrator(
        client, cache=MemoryCacheStore(), telemetry=telemetry, sleep=sleep
    )
    return DocumentAnalyzer(orchestrator=orchestrator, telemetry=telemetry, **kwargs)


# ---------------------------------------------------------------------------
# Single document
# ---------------------------------------------------------------------------

class TestAnalyze:
    @pytest.mark.asyncio
    async def test_confident_heuristics_skip_ai(self, invoice_text, fake_client, recording_sleep):
        analyzer = _analyzer(fake_client, recording_sleep)
        a = await analyzer.analyze(invoice_text)

        assert a.source == "regex"
        assert a.doc_type == "Invoice"
        assert a.client_name == "Acme Corporation"
        assert a.date == "2024-01-15"
        assert a.suggested_filename == "Invoice_Acme_2024-01-15"
        assert fake_client.call_count == 0

    @pytest.mark.asyncio
    async def test_vague_text_escalates(self, vague_text, fake_client, recording_sleep):
        analyzer = _analyzer(fake_client, recording_sleep)
        a = await analyzer.analyze(vague_text, file_path="notes.txt")

        assert a.source == "hybrid"
        assert a.client_name == "Globex Corporation"
        assert a.doc_type == "Contract"
        assert a.field_sources["client_name"] == "ai"
        assert a.suggested_filename == "Contract_Globex_2024-03-01.txt"
        assert a.file_path == "notes.txt"
        assert fake_client.call_count == 1

    @pytest.mark.asyncio
    async def test_force_ai(self, invoice_text, fake_client, recording_sleep):
        analyzer = _analyzer(fake_client, recording_sleep)
        a = await analyzer.analyze(invoice_text, options=AnalysisOptions(force_ai=True))
        assert fake_client.call_count == 1
        assert a.source == "hybrid"
        # Heuristic client is more confident than the AI answer (0.95 > 0.9).
        assert a.client_name == "Acme Corporation"

    @pytest.mark.asyncio
    async def test_ai_off_by_option(self, vague_text, fake_client, recording_sleep):
        analyzer = _analyzer(fake_client, recording_sleep)
        a = await analyzer.analyze(vague_text, options=AnalysisOptions(use_ai=False))
        assert a.source == "regex"
        assert fake_client.call_count == 0

    @pytest.mark.asyncio
    async def test_ai_failure_keeps_heuristic_result(self, vague_text, make_client, recording_sleep):
        client = make_client(["definitely not json"])
        analyzer = _analyzer(client, recording_sleep)

        a = await analyzer.analyze(vague_text)

        assert a.source == "regex"
        assert a.doc_type == "Unclassified"
        assert client.call_count == 3
        assert recording_sleep.delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_without_orchestrator(self, vague_text):
        a = await DocumentAnalyzer().analyze(vague_text)
        assert a.source == "regex"
        assert a.suggested_filename == "Unknown_UnknownClient_UnknownDate"

    @pytest.mark.asyncio
    async def test_empty_text(self):
        a = await DocumentAnalyzer().analyze("")
        assert a.doc_type == "Unclassified"
        assert a.overall_confidence == 0.0

    @pytest.mark.asyncio
    async def test_modified_date_fallback(self, tmp_path, vague_text):
        path = tmp_path / "notes.txt"
        path.write_text(vague_text, encoding="utf-8")
        a = await DocumentAnalyzer().analyze(vague_text, file_path=str(path))
        expected = file_modified_date(path).isoformat()
        assert a.suggested_filename == f"Unknown_UnknownClient_{expected}.txt"

    @pytest.mark.asyncio
    async def test_known_clients(self):
        analyzer = DocumentAnalyzer(known_clients=["Acme Corporation"])
        a = await analyzer.analyze("Bill to: Acme Corp\nAmount due: $100")
        assert a.client_name == "Acme Corporation"

    @pytest.mark.asyncio
    async def test_heuristic_failure(self, vague_text, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("regex engine exploded")

        monkeypatch.setattr("docsorter.api.facade.extract_heuristic", boom)
        telemetry = InMemoryTelemetry()
        analyzer = DocumentAnalyzer(telemetry=telemetry)

        a = await analyzer.analyze(vague_text)

        assert a.doc_type == "Unclassified"
        assert analyzer.get_stats().errors == 1
        assert telemetry.errors[0].stage == "heuristics"


# ---------------------------------------------------------------------------
# Batch
# ---------------------------------------------------------------------------

class TestAnalyzeBatch:
    @pytest.mark.asyncio
    async def test_order_and_escalation(self, invoice_text, vague_text, fake_client, recording_sleep):
        analyzer = _analyzer(fake_client, recording_sleep)
        items = [
            BatchItem(text=invoice_text, file_path="a.txt"),
            BatchItem(text=vague_text, file_path="b.md"),
            BatchItem(text=vague_text + "\nmore", file_path="c.txt"),
        ]

        results = await analyzer.analyze_batch(items)

        assert [r.file_path for r in results] == ["a.txt", "b.md", "c.txt"]
        assert [r.source for r in results] == ["regex", "hybrid", "hybrid"]
        assert results[1].suggested_filename.endswith(".md")
        assert fake_client.call_count == 2

    @pytest.mark.asyncio
    async def test_duplicate_documents_one_ai_call(self, vague_text, fake_client, recording_sleep):
        analyzer = _analyzer(fake_client, recording_sleep)
        results = await analyzer.analyze_batch([BatchItem(text=vague_text)] * 3)
        assert [r.source for r in results] == ["hybrid"] * 3
        assert fake_client.call_count == 1

    @pytest.mark.asyncio
    async def test_ai_failure_in_batch(self, vague_text, make_client, recording_sleep):
        analyzer = _analyzer(make_client(["bad"]), recording_sleep)
        results = await analyzer.analyze_batch([BatchItem(text=vague_text)])
        assert results[0].source == "regex"

    @pytest.mark.asyncio
    async def test_empty(self):
        assert await DocumentAnalyzer().analyze_batch([]) == []


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------

class TestStats:
    @pytest.mark.asyncio
    async def test_cache_hit_on_repeat(self, vague_text, fake_client, recording_sleep):
        analyzer = _analyzer(fake_client, recording_sleep)
        await analyzer.analyze(vague_text)
        await analyzer.analyze(vague_text)

        stats = analyzer.get_stats()
        assert fake_client.call_count == 1
        assert stats.total_processed == 2
        assert stats.ai_processed == 2
        assert stats.regex_processed == 0
        assert stats.cache_hits == 1
        assert stats.cache_misses == 1
        assert stats.cache["size"] == 1

    @pytest.mark.asyncio
    async def test_average_confidence(self, invoice_text, vague_text):
        analyzer = DocumentAnalyzer()
        first = await analyzer.analyze(invoice_text)
        await analyzer.analyze(vague_text)
        stats = analyzer.get_stats()
        assert stats.regex_processed == 2
        assert stats.average_confidence == pytest.approx(first.overall_confidence / 2, abs=1e-4)
        assert stats.cache is None

    @pytest.mark.asyncio
    async def test_reset(self, vague_text, fake_client, recording_sleep):
        analyzer = _analyzer(fake_client, recording_sleep)
        await analyzer.analyze(vague_text)
        analyzer.reset_stats()

        stats = analyzer.get_stats()
        assert stats.total_processed == 0
        assert stats.cache_misses == 0

        await analyzer.analyze(vague_text)
        assert analyzer.get_stats().cache_hits == 1


class TestFromSettings:
    @pytest.mark.asyncio
    async def test_without_api_key(self, settings, vague_text):
        analyzer = DocumentAnalyzer.from_settings(settings)
        assert analyzer.options.use_ai is True
        a = await analyzer.analyze(vague_text)
        assert a.source == "regex"

    def test_options_follow_settings(self, settings):
        s = settings.model_copy(update={"ai_confidence_threshold": 0.8, "ai_batch_size": 3})
        analyzer = DocumentAnalyzer.from_settings(s)
        assert analyzer.options.ai_confidence_threshold == 0.8
        assert analyzer.options.ai_batch_size == 3
