# src/heuristics/title.py — v1
"""Title detection over the first lines of a document."""

from __future__ import annotations

import re

SCAN_LINES = 10
MIN_TITLE_SCORE = 20
MAX_TITLE_CHARS = 120

_BOILERPLATE_RE = re.compile(
    r"^(page\s+\d+(\s+of\s+\d+)?|\d+)$|copyright|©|\(c\)|all rights reserved|confidential",
    re.IGNORECASE,
)
_DATE_LIKE_RE = re.compile(
    r"\b\d{1,4}[/.-]\d{1,2}[/.-]\d{1,4}\b|\b(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?\s+\d{1,2}\b",
    re.IGNORECASE,
)
_PHONE_RE = re.compile(r"(\+?\d[\d\s().-]{7,}\d)")
_ADDRESS_RE = re.compile(
    r"^\d+\s+\w+.*\b(street|st|avenue|ave|road|rd|blvd|lane|ln|drive|dr|suite)\b\.?",
    re.IGNORECASE,
)
_EMAIL_URL_RE = re.compile(r"@|https?://|www\.", re.IGNORECASE)


def extract_title(text: str) -> str | None:
    """Best title candidate among the first non-empty lines, or None."""
    if not text:
        return None
    lines = [line.strip() for line in text.splitlines() if line.strip()][:SCAN_LINES]

    best: str | None = None
    best_score = MIN_TITLE_SCORE - 1
    for index, line in enumerate(lines):
        score = score_title_line(line, index)
        if score > best_score:
            best, best_score = line, score
    return best


def score_title_line(line: str, index: int) -> int:
    """Score one line as a title candidate. Boilerplate scores -1."""
    if not line or len(line) > MAX_TITLE_CHARS or _BOILERPLATE_RE.search(line):
        return -1
    words = line.split()
    alpha = [w for w in words if any(ch.isalpha() for ch in w)]
    if not alpha:
        return -1

    score = 0
    if 1 <= len(words) <= 5:
        score += 20
    elif len(words) <= 10:
        score += 10
    if line.isupper():
        score += 15
    elif all(w[0].isupper() for w in alpha):
        score += 10
    score += max(0, 10 - index * 2)

    if _DATE_LIKE_RE.search(line):
        score -= 15
    if _PHONE_RE.search(line):
        score -= 20
    if _ADDRESS_RE.search(line) or _EMAIL_URL_RE.search(line):
        score -= 20
    if line.endswith((".", ",", ";")):
        score -= 5
    return score
