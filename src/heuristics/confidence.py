# src/heuristics/confidence.py — v2
"""Per-field confidence scoring for heuristic extraction.

Every function here is pure: the score depends only on the extracted value
and the source text. All results are clamped into [0.0, 1.0].
"""

from __future__ import annotations

import math
import re
from datetime import date as Date

from docsorter.heuristics.keywords import (
    BILLING_LABELS,
    CLIENT_LABELS,
    COMPANY_SUFFIXES,
    DATE_CONTEXT_WORDS,
    DOC_TYPE_KEYWORDS,
    MONTH_NAMES,
    count_keyword,
    has_label,
)

UNCLASSIFIED = "Unclassified"

# Bonus applied to the overall score when at least two fields are confident.
MULTI_FIELD_BONUS = 0.1


def clamp_confidence(value: object) -> float:
    """Coerce any value into a confidence in [0.0, 1.0].

    Non-numeric values, booleans and NaN map to 0.0.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, float(value)))


def compute_overall_confidence(
    client_confidence: float,
    date_confidence: float,
    doc_type_confidence: float,
) -> float:
    """Mean of the non-zero field confidences, +0.1 when two or more are set."""
    confident = [
        c
        for c in (
            clamp_confidence(client_confidence),
            clamp_confidence(date_confidence),
            clamp_confidence(doc_type_confidence),
        )
        if c > 0
    ]
    if not confident:
        return 0.0
    avg = sum(confident) / len(confident)
    bonus = MULTI_FIELD_BONUS if len(confident) > 1 else 0.0
    return min(1.0, avg + bonus)


def score_client_confidence(client_name: str | None, text: str) -> float:
    """Confidence that ``client_name`` is the document's client.

    Weighs the label the name appears next to, its position in the document,
    whether it carries a company suffix, and exact-case presence.
    """
    if not client_name or not text:
        return 0.0

    lines = _non_empty_lines(text)
    needle = client_name.lower()
    score = 0.0

    holding = [i for i, line in enumerate(lines) if needle in line.lower()]
    if not holding:
        # Matched only through fuzzy lookup against the known-client list.
        return clamp_confidence(0.3 + min(len(client_name) / 100, 0.1))

    best_label = 0.25
    for i in holding:
        if has_label(lines[i], BILLING_LABELS):
            best_label = max(best_label, 0.5)
        elif has_label(lines[i], CLIENT_LABELS):
            best_label = max(best_label, 0.4)
    score += best_label

    if holding[0] < 5:
        score += 0.2
    if _has_company_suffix(client_name):
        score += 0.15
    if client_name in text:
        score += 0.1
    if len(client_name.split()) == 1:
        score -= 0.1

    return clamp_confidence(score)


def score_date_confidence(date: str | None, text: str) -> float:
    """Confidence that ``date`` (YYYY-MM-DD) is the document date."""
    if not date or not text:
        return 0.0
    parsed = _parse_iso(date)
    if parsed is None:
        return 0.0

    score = 0.3
    lines = _non_empty_lines(text)
    renderings = _renderings(parsed)
    found_at = [
        i
        for i, line in enumerate(lines)
        if any(r in line.lower() for r in renderings)
    ]
    if found_at:
        score += 0.3
        if any(
            any(count_keyword(word, lines[i]) for word in DATE_CONTEXT_WORDS)
            for i in found_at
        ):
            score += 0.2
        if found_at[0] < 10:
            score += 0.1
    if not 1900 <= parsed.year <= 2100:
        score -= 0.3

    return clamp_confidence(score)


def score_doc_type_confidence(doc_type: str | None, text: str) -> float:
    """Confidence that ``doc_type`` classifies ``text`` correctly."""
    if not doc_type or doc_type == UNCLASSIFIED or not text:
        return 0.0

    keywords = DOC_TYPE_KEYWORDS.get(doc_type, ())
    content = text.lower()
    matches = sum(count_keyword(k, content) for k in keywords)
    score = min(matches / 5, 1.0) * 0.6

    header = " ".join(_non_empty_lines(text)[:10]).lower()
    if any(count_keyword(k, header) for k in keywords):
        score += 0.25
    if count_keyword(doc_type.lower(), content):
        score += 0.15
    # Types outside the dictionary (secondary classifier) stay modest.
    if not keywords:
        score = min(score + 0.2, 0.5)

    return clamp_confidence(score)


# --- Internal helpers ---


def _non_empty_lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def _has_company_suffix(name: str) -> bool:
    last = name.rstrip(".").split()[-1].lower()
    return last in COMPANY_SUFFIXES


def _parse_iso(value: str) -> Date | None:
    match = re.fullmatch(r"(\d{4})-(\d{2})-(\d{2})", value)
    if not match:
        return None
    try:
        return Date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None


def _renderings(d: Date) -> list[str]:
    """Lowercase textual forms the heuristic date parser accepts for ``d``."""
    month = MONTH_NAMES[d.month - 1]
    forms = {
        d.isoformat(),
        f"{d.month}/{d.day}/{d.year}",
        f"{d.month:02d}/{d.day:02d}/{d.year}",
        f"{d.day:02d}-{d.month:02d}-{d.year}",
        f"{d.day}-{d.month}-{d.year}",
        f"{d.month:02d}-{d.day:02d}-{d.year}",
        f"{d.day:02d}.{d.month:02d}.{d.year}",
        f"{d.month:02d}/{d.day:02d}/{d.year % 100:02d}",
        f"{month} {d.day}, {d.year}",
        f"{month} {d.day} {d.year}",
        f"{d.day} {month} {d.year}",
        f"{month[:3]} {d.day}, {d.year}",
    }
    return sorted(forms)
