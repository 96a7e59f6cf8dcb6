# src/api/facade.py — v2
"""Public API facade — single entry point for document analysis.

Usage:
    from docsorter.api.facade import DocumentAnalyzer
    analyzer = DocumentAnalyzer.from_settings(load_settings())
    analysis = await analyzer.analyze(text, file_path="invoice.txt")

Flow per document: heuristics -> escalation check -> AI (cache, retry,
validation) -> merge -> filename proposal. analyze() never raises: any AI
failure degrades to the heuristic result.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from docsorter.cache.fingerprint import compute_content_hash, short_id
from docsorter.core.models import AnalysisOptions, BatchItem, DocumentAnalysis, ProcessingStats
from docsorter.core.result import Ok
from docsorter.heuristics.extractor import empty_analysis, extract_heuristic
from docsorter.logging.context import document_context, set_stage
from docsorter.naming.filename import DEFAULT_MAX_LENGTH, file_modified_date, suggest_filename
from docsorter.pipeline.ai_orchestrator import AIOrchestrator, should_use_ai
from docsorter.pipeline.merger import merge_results
from docsorter.tracking.models import ErrorEvent
from docsorter.tracking.stats import StatsCollector
from docsorter.tracking.telemetry import NullTelemetry, TelemetrySink

if TYPE_CHECKING:
    from docsorter.config.settings import Settings

logger = logging.getLogger(__name__)


class DocumentAnalyzer:
    """Hybrid heuristic + AI document analyzer.

    Args:
        orchestrator: AI orchestrator (None = heuristics only).
        options: Default per-call options.
        known_clients: Client names used for fuzzy matching.
        telemetry: Event sink for heuristic-path errors.
        filename_max_length: Cap for suggested filenames.
    """

    def __init__(
        self,
        orchestrator: AIOrchestrator | None = None,
        options: AnalysisOptions | None = None,
        known_clients: Sequence[str] = (),
        telemetry: TelemetrySink | None = None,
        filename_max_length: int = DEFAULT_MAX_LENGTH,
    ) -> None:
        self._orchestrator = orchestrator
        self._options = options or AnalysisOptions()
        self._known_clients = tuple(known_clients)
        self._telemetry = telemetry or NullTelemetry()
        self._filename_max_length = filename_max_length
        self._stats = StatsCollector()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        telemetry: TelemetrySink | None = None,
    ) -> DocumentAnalyzer:
        """Wire cache, LLM client and orchestrator from settings."""
        from docsorter.cache.cache_factory import create_cache_store
        from docsorter.llm.client_factory import create_client_from_settings

        cache = create_cache_store(settings)
        client = create_client_from_settings(settings)
        orchestrator = AIOrchestrator.from_settings(
            settings, client=client, cache=cache, telemetry=telemetry
        )
        return cls(
            orchestrator=orchestrator,
            options=AnalysisOptions.from_settings(settings),
            known_clients=settings.known_clients_list,
            telemetry=telemetry,
            filename_max_length=settings.filename_max_length,
        )

    @property
    def options(self) -> AnalysisOptions:
        return self._options

    # --- Single document ---

    async def analyze(
        self,
        text: str,
        file_path: str | None = None,
        options: AnalysisOptions | None = None,
    ) -> DocumentAnalysis:
        """Analyse one document. Never raises."""
        options = options or self._options
        with document_context(short_id(compute_content_hash(text or "")), file_path, "heuristics"):
            heuristic = self._run_heuristics(text, file_path)

            final = heuristic
            if self._ai_ready(options) and should_use_ai(heuristic, options):
                set_stage("ai")
                assert self._orchestrator is not None
                result = await self._orchestrator.extract_metadata_ai(text, options)
                if isinstance(result, Ok):
                    set_stage("merge")
                    final = merge_results(heuristic, result.value)
                else:
                    logger.info("AI unavailable (%s), keeping heuristic result", result.error.kind)

            final = self._finish(final, file_path)
            logger.info(
                "Analysed document: source=%s type=%s overall=%.2f",
                final.source, final.doc_type, final.overall_confidence,
            )
            return final

    # --- Batch ---

    async def analyze_batch(
        self,
        items: Sequence[BatchItem],
        options: AnalysisOptions | None = None,
    ) -> list[DocumentAnalysis]:
        """Analyse many documents, preserving input order.

        Heuristics run for every item; only escalated items go to the AI,
        through the orchestrator's batch flow.
        """
        options = options or self._options
        heuristics = [self._run_heuristics(item.text, item.file_path) for item in items]

        finals: list[DocumentAnalysis] = list(heuristics)
        if self._ai_ready(options):
            escalated = [i for i, h in enumerate(heuristics) if should_use_ai(h, options)]
            logger.info("Batch: %d/%d item(s) escalated to AI", len(escalated), len(items))
            if escalated:
                assert self._orchestrator is not None
                ai_results = await self._orchestrator.extract_metadata_ai_batch(
                    [items[i] for i in escalated], options, concurrency=options.ai_batch_size
                )
                for i, ai_result in zip(escalated, ai_results):
                    if ai_result is not None:
                        finals[i] = merge_results(heuristics[i], ai_result)

        return [self._finish(a, item.file_path) for a, item in zip(finals, items)]

    # --- Stats ---

    def get_stats(self) -> ProcessingStats:
        cache = self._orchestrator.cache if self._orchestrator else None
        return self._stats.snapshot(cache)

    def reset_stats(self) -> None:
        self._stats.reset()
        self._stats.rebase_cache(self._orchestrator.cache if self._orchestrator else None)

    # --- Internal helpers ---

    def _ai_ready(self, options: AnalysisOptions) -> bool:
        return options.use_ai and self._orchestrator is not None

    def _run_heuristics(self, text: str, file_path: str | None) -> DocumentAnalysis:
        try:
            return extract_heuristic(text, file_path, self._known_clients)
        except Exception as e:
            logger.exception("Heuristic extraction failed")
            self._stats.record_error()
            self._telemetry.emit(ErrorEvent(stage="heuristics", message=str(e)))
            return empty_analysis(text or "", file_path)

    def _finish(self, analysis: DocumentAnalysis, file_path: str | None) -> DocumentAnalysis:
        fallback = file_modified_date(file_path) if file_path and not analysis.date else None
        filename = suggest_filename(
            analysis,
            extension=Path(file_path).suffix if file_path else "",
            fallback_date=fallback,
            max_length=self._filename_max_length,
        )
        final = analysis.model_copy(update={"suggested_filename": filename, "file_path": file_path})
        self._stats.record(final)
        return final
