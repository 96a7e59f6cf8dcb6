# src/heuristics/doc_type.py — v1
"""Document type classification by weighted keyword scoring.

Primary pass: every type in DOC_TYPE_KEYWORDS is scored over three zones
(header, early content, whole document). When the best primary confidence
stays under SECONDARY_TRIGGER, a word-frequency classifier over a smaller
keyword map gets a chance and wins if it is more confident.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from typing import Literal

from docsorter.heuristics.keywords import (
    DOC_TYPE_KEYWORDS,
    SECONDARY_KEYWORDS,
    STOP_WORDS,
    count_keyword,
)

UNCLASSIFIED = "Unclassified"

HEADER_LINES = 20
EARLY_WORDS = 100
HEADER_WEIGHT = 20
EARLY_WEIGHT = 15
BODY_WEIGHT = 5
EXACT_NAME_BONUS = 50
MIN_PRIMARY_SCORE = 10
SECONDARY_TRIGGER = 0.3
SECONDARY_CAP = 0.8

_TOKEN_RE = re.compile(r"[a-z][a-z'-]+")


@dataclass(frozen=True)
class DocTypeClassification:
    doc_type: str
    confidence: float
    method: Literal["primary", "secondary", "none"]


def classify_doc_type(text: str) -> DocTypeClassification:
    """Classify ``text`` into a document type. Never raises."""
    if not text or not text.strip():
        return DocTypeClassification(UNCLASSIFIED, 0.0, "none")

    lines = [line.strip() for line in text.splitlines() if line.strip()]
    header = " ".join(lines[:HEADER_LINES]).lower()
    early = " ".join(text.split()[:EARLY_WORDS]).lower()
    content = " ".join(lines).lower()

    best = DocTypeClassification(UNCLASSIFIED, 0.0, "none")
    best_score = 0
    for doc_type, keywords in DOC_TYPE_KEYWORDS.items():
        score = score_doc_type(doc_type, keywords, header, early, content)
        if score > best_score:
            best_score = score
            best = DocTypeClassification(doc_type, min(score / 100, 1.0), "primary")

    if best_score <= MIN_PRIMARY_SCORE:
        best = DocTypeClassification(UNCLASSIFIED, 0.0, "none")

    if best.confidence < SECONDARY_TRIGGER:
        secondary = classify_by_frequency(content)
        if secondary.confidence > best.confidence:
            return secondary
    return best


def score_doc_type(
    doc_type: str,
    keywords: tuple[str, ...],
    header: str,
    early: str,
    content: str,
) -> int:
    score = 0
    for keyword in keywords:
        score += count_keyword(keyword, header) * HEADER_WEIGHT
        score += count_keyword(keyword, early) * EARLY_WEIGHT
        score += count_keyword(keyword, content) * BODY_WEIGHT
    if count_keyword(doc_type.lower(), content):
        score += EXACT_NAME_BONUS
    return score


def classify_by_frequency(content: str) -> DocTypeClassification:
    """Secondary classifier: token frequency against SECONDARY_KEYWORDS."""
    tokens = [t for t in _TOKEN_RE.findall(content.lower()) if t not in STOP_WORDS]
    if not tokens:
        return DocTypeClassification(UNCLASSIFIED, 0.0, "none")

    frequencies = Counter(tokens)
    scores: Counter[str] = Counter()
    for token, count in frequencies.items():
        doc_type = SECONDARY_KEYWORDS.get(token)
        if doc_type:
            scores[doc_type] += count

    if not scores:
        return DocTypeClassification(UNCLASSIFIED, 0.0, "none")
    doc_type, score = scores.most_common(1)[0]
    return DocTypeClassification(doc_type, min(score * 0.1, SECONDARY_CAP), "secondary")
