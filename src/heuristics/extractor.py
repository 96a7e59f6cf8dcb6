# src/heuristics/extractor.py — v1
"""Heuristic (non-AI) metadata extraction.

Combines the doc-type, date, client and title detectors into one
DocumentAnalysis with ``source="regex"``. Per-field confidences come from
heuristics.confidence, not from the detectors' internal scores.
"""

from __future__ import annotations

import logging

from docsorter.cache.fingerprint import compute_content_hash
from docsorter.core.models import DocumentAnalysis
from docsorter.heuristics.client import extract_client
from docsorter.heuristics.confidence import (
    UNCLASSIFIED,
    score_client_confidence,
    score_date_confidence,
    score_doc_type_confidence,
)
from docsorter.heuristics.dates import extract_date
from docsorter.heuristics.doc_type import classify_doc_type
from docsorter.heuristics.title import extract_title

logger = logging.getLogger(__name__)


def empty_analysis(text: str = "", file_path: str | None = None) -> DocumentAnalysis:
    """All-null regex result used for empty input and heuristic failures."""
    return DocumentAnalysis(
        doc_type=UNCLASSIFIED,
        source="regex",
        raw_text_ref=compute_content_hash(text) if text else None,
        file_path=file_path,
        field_sources={"client_name": "none", "date": "none", "doc_type": "regex"},
    )


def extract_heuristic(
    text: str,
    file_path: str | None = None,
    known_clients: tuple[str, ...] | list[str] = (),
) -> DocumentAnalysis:
    """Run every heuristic detector over ``text``.

    Never raises: empty input gives the all-null result with
    ``doc_type="Unclassified"``.
    """
    if not text or not text.strip():
        return empty_analysis(text or "", file_path)

    classification = classify_doc_type(text)
    doc_type = classification.doc_type
    date = extract_date(text)
    client_name = extract_client(text, known_clients)
    title = extract_title(text)

    analysis = DocumentAnalysis(
        client_name=client_name,
        client_confidence=score_client_confidence(client_name, text),
        date=date,
        date_confidence=score_date_confidence(date, text),
        doc_type=doc_type,
        doc_type_confidence=score_doc_type_confidence(doc_type, text),
        source="regex",
        title=title,
        raw_text_ref=compute_content_hash(text),
        file_path=file_path,
        field_sources={
            "client_name": "regex" if client_name else "none",
            "date": "regex" if date else "none",
            "doc_type": "regex",
        },
    )
    logger.debug(
        "Heuristic extraction: type=%s (%s) client=%s date=%s overall=%.2f",
        doc_type, classification.method, client_name, date, analysis.overall_confidence,
    )
    return analysis
