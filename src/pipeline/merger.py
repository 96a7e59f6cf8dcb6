# src/pipeline/merger.py — v2
"""Field-by-field reconciliation of heuristic and AI analyses.

For each of client_name, date and doc_type the value with the strictly
higher confidence wins; ties go to the heuristic value. A null value never
beats a non-null one. Neither input is modified.
"""

from __future__ import annotations

import logging

from docsorter.core.models import MERGED_FIELDS, DocumentAnalysis

logger = logging.getLogger(__name__)


def _is_present(field: str, value: object) -> bool:
    if value is None:
        return False
    return not (field == "doc_type" and value == "Unclassified")


def merge_results(regex_result: DocumentAnalysis, ai_result: DocumentAnalysis) -> DocumentAnalysis:
    """Merge a heuristic analysis with an AI analysis into a ``hybrid`` one."""
    values: dict[str, object] = {}
    field_sources: dict[str, str] = {}

    for field, conf_field in MERGED_FIELDS:
        regex_value = getattr(regex_result, field)
        ai_value = getattr(ai_result, field)
        regex_conf = getattr(regex_result, conf_field)
        ai_conf = getattr(ai_result, conf_field)

        regex_ok = _is_present(field, regex_value)
        ai_ok = _is_present(field, ai_value)

        if ai_ok and (not regex_ok or ai_conf > regex_conf):
            values[field], values[conf_field] = ai_value, ai_conf
            field_sources[field] = "ai"
        else:
            values[field], values[conf_field] = regex_value, regex_conf
            field_sources[field] = "regex" if regex_ok else "none"

    merged = DocumentAnalysis(
        **values,
        snippets=ai_result.snippets or regex_result.snippets,
        source="hybrid",
        title=regex_result.title,
        raw_text_ref=regex_result.raw_text_ref or ai_result.raw_text_ref,
        file_path=regex_result.file_path,
        field_sources=field_sources,
    )
    logger.debug("Merged analysis field sources: %s", field_sources)
    return merged
