# src/validation/sanitizer.py — v1
"""Sanitization of AI output and conversion into a DocumentAnalysis.

sanitize_text() is idempotent: applying it twice gives the same result as
applying it once.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from docsorter.cache.fingerprint import compute_content_hash
from docsorter.core.models import MAX_SNIPPET_CHARS, MAX_SNIPPETS, DocumentAnalysis
from docsorter.heuristics.confidence import clamp_confidence
from docsorter.heuristics.dates import normalize_date

logger = logging.getLogger(__name__)

MAX_CLIENT_NAME_CHARS = 200
MAX_DOC_TYPE_CHARS = 100

_EVENT_HANDLER_RE = re.compile(r"\bon\w+\s*=", re.IGNORECASE)
_JS_URI_RE = re.compile(r"javascript\s*:", re.IGNORECASE)
_ANGLE_RE = re.compile(r"[<>]")
_WS_RE = re.compile(r"\s+")


def sanitize_text(value: str) -> str:
    """Strip markup-injection vectors and collapse whitespace."""
    previous = None
    current = value
    # Removing one vector can expose another ("jajavascript:vascript:").
    while current != previous:
        previous = current
        current = _ANGLE_RE.sub("", current)
        current = _JS_URI_RE.sub("", current)
        current = _EVENT_HANDLER_RE.sub("", current)
        current = _WS_RE.sub(" ", current).strip()
    return current


def clean_client_name(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    cleaned = sanitize_text(value)
    return cleaned if 0 < len(cleaned) < MAX_CLIENT_NAME_CHARS else None


def clean_doc_type(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    cleaned = sanitize_text(value)
    return cleaned if 0 < len(cleaned) < MAX_DOC_TYPE_CHARS else None


def clean_date(value: Any) -> str | None:
    """ISO date string, or the normalization of a common format, else None."""
    if not isinstance(value, str) or not value.strip():
        return None
    return normalize_date(value.strip())


def clean_snippets(value: Any) -> list[str]:
    """Sanitized, non-empty snippets shorter than MAX_SNIPPET_CHARS, at most MAX_SNIPPETS."""
    if not isinstance(value, list):
        return []
    kept: list[str] = []
    for item in value:
        if not isinstance(item, str):
            continue
        cleaned = sanitize_text(item)
        if cleaned and len(cleaned) < MAX_SNIPPET_CHARS:
            kept.append(cleaned)
        if len(kept) == MAX_SNIPPETS:
            break
    return kept


def enhance_ai_metadata(data: dict[str, Any], text: str) -> DocumentAnalysis | None:
    """Build an AI-sourced DocumentAnalysis from validated response data.

    A field whose value is rejected gets confidence 0.0.

    Returns:
        The analysis, or None when no field survived ("no usable data").
    """
    client_name = clean_client_name(data.get("clientName"))
    date = clean_date(data.get("date"))
    doc_type = clean_doc_type(data.get("docType"))

    if client_name is None and date is None and doc_type is None:
        logger.debug("AI response carried no usable field")
        return None

    return DocumentAnalysis(
        client_name=client_name,
        client_confidence=clamp_confidence(data.get("clientConfidence")) if client_name else 0.0,
        date=date,
        date_confidence=clamp_confidence(data.get("dateConfidence")) if date else 0.0,
        doc_type=doc_type,
        doc_type_confidence=clamp_confidence(data.get("docTypeConfidence")) if doc_type else 0.0,
        snippets=clean_snippets(data.get("snippets")),
        source="ai",
        raw_text_ref=compute_content_hash(text) if text else None,
        field_sources={
            "client_name": "ai" if client_name else "none",
            "date": "ai" if date else "none",
            "doc_type": "ai" if doc_type else "none",
        },
    )
