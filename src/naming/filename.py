# src/naming/filename.py — v1
"""Filename proposal from an analysis: ``DocType_Client_YYYY-MM-DD.ext``."""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from pathlib import Path

from docsorter.core.models import DocumentAnalysis

logger = logging.getLogger(__name__)

DEFAULT_MAX_LENGTH = 100
MAX_CLIENT_CHARS = 30
MAX_COMPONENT_CHARS = 50

_UNSAFE_RE = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
_SUFFIX_RE = re.compile(r"\b(Inc|Corp|LLC|Ltd|Incorporated|Corporation)\b\.?", re.IGNORECASE)


def sanitize_component(component: str | None, placeholder: str = "Unknown") -> str:
    """Filesystem-safe filename component with business suffixes removed."""
    if not component or not component.strip():
        return placeholder
    value = _UNSAFE_RE.sub("_", component.strip())
    value = _SUFFIX_RE.sub("", value)
    value = re.sub(r"[\s.,]+", "_", value)
    value = re.sub(r"_+", "_", value).strip("_")
    return value[:MAX_COMPONENT_CHARS] or placeholder


def file_modified_date(path: str | Path) -> date | None:
    """Modification date of ``path``, or None when it cannot be read."""
    try:
        return datetime.fromtimestamp(Path(path).stat().st_mtime).date()
    except (OSError, ValueError) as e:
        logger.debug("Cannot read modification time of %s: %s", path, e)
        return None


def suggest_filename(
    analysis: DocumentAnalysis,
    extension: str = "",
    fallback_date: date | None = None,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> str:
    """Propose a filename for an analysed document.

    Args:
        analysis: Final analysis.
        extension: File extension, with or without the leading dot.
        fallback_date: Used when the analysis has no date (e.g. file mtime).
        max_length: Cap on the whole filename including the extension.
    """
    if extension and not extension.startswith("."):
        extension = f".{extension}"

    doc_type = analysis.doc_type if analysis.doc_type != "Unclassified" else None
    parts = [
        sanitize_component(doc_type, "Unknown"),
        sanitize_component(analysis.client_name, "UnknownClient")[:MAX_CLIENT_CHARS].rstrip("_"),
    ]
    if analysis.date:
        parts.append(analysis.date)
    elif fallback_date is not None:
        parts.append(fallback_date.isoformat())
    else:
        parts.append("UnknownDate")

    base = "_".join(parts)
    if len(base) + len(extension) > max_length:
        base = base[: max(1, max_length - len(extension))].rstrip("_")
    return base + extension
