# src/heuristics/client.py — v1
"""Client-name detection.

Three candidate sources, scored and merged per name:
    - label lines (``Bill To: X``, ``From: X``, ``Attn: X`` ...)
    - company-suffix names (``Acme Corp``, ``Foo Holdings LLC``)
    - standalone Title-Case names on their own line

Scoring: base 10, +20 for a billing label, +15 for a company suffix, +10 when
found in the first 5 lines, +25 when it fuzzy-matches a known client.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from docsorter.core.similarity import best_fuzzy_match
from docsorter.heuristics.keywords import (
    BILLING_LABELS,
    CLIENT_LABELS,
    COMPANY_SUFFIXES,
    NAME_STOP_WORDS,
)

logger = logging.getLogger(__name__)

BASE_SCORE = 10
BILLING_BONUS = 20
SUFFIX_BONUS = 15
EARLY_BONUS = 10
KNOWN_CLIENT_BONUS = 25
EARLY_LINES = 5
MIN_NAME_LEN = 2
MAX_NAME_LEN = 100

_LABEL_RE = re.compile(
    r"^\s*(?P<label>"
    + "|".join(r"\s+".join(map(re.escape, label.split())) for label in BILLING_LABELS + CLIENT_LABELS)
    + r")\s*[:\-]\s*(?P<value>.+)$",
    re.IGNORECASE,
)
_SUFFIX_ALT = "|".join(sorted(COMPANY_SUFFIXES, key=len, reverse=True))
_COMPANY_RE = re.compile(
    rf"\b((?:[A-Z][\w&'-]*\s+){{0,4}}[A-Z][\w&'-]*,?\s+(?i:{_SUFFIX_ALT})\b\.?)"
)
_TITLE_CASE_RE = re.compile(r"^(?:[A-Z][a-z]+(?:\s+|$)){2,4}$")


@dataclass(frozen=True)
class ClientCandidate:
    name: str
    score: int
    line_index: int


def extract_client(text: str, known_clients: tuple[str, ...] | list[str] = ()) -> str | None:
    """Best-scoring client name in ``text``, or None."""
    candidates = find_client_candidates(text, known_clients)
    if not candidates:
        return None
    return candidates[0].name


def find_client_candidates(
    text: str,
    known_clients: tuple[str, ...] | list[str] = (),
) -> list[ClientCandidate]:
    """All client candidates, best first. Ties keep document order."""
    if not text:
        return []

    lines = [line.strip() for line in text.splitlines() if line.strip()]
    scores: dict[str, ClientCandidate] = {}

    def offer(raw: str, index: int, billing: bool) -> None:
        name = _clean_name(raw)
        if name is None:
            return
        score = BASE_SCORE
        if billing:
            score += BILLING_BONUS
        if _has_suffix(name):
            score += SUFFIX_BONUS
        if index < EARLY_LINES:
            score += EARLY_BONUS
        if known_clients:
            matched = best_fuzzy_match(name, known_clients)
            if matched:
                name = matched
                score += KNOWN_CLIENT_BONUS
        key = name.lower()
        current = scores.get(key)
        if current is None or score > current.score:
            scores[key] = ClientCandidate(name, score, current.line_index if current else index)

    for index, line in enumerate(lines):
        label_match = _LABEL_RE.match(line)
        if label_match:
            label = " ".join(label_match.group("label").lower().split())
            offer(label_match.group("value"), index, label in BILLING_LABELS)
            continue
        for company in _COMPANY_RE.findall(line):
            offer(company, index, False)
        if _TITLE_CASE_RE.match(line):
            offer(line, index, False)

    if not scores and known_clients:
        fallback = _known_client_mention(text, known_clients)
        if fallback:
            scores[fallback.lower()] = ClientCandidate(fallback, KNOWN_CLIENT_BONUS, len(lines))

    ranked = sorted(scores.values(), key=lambda c: (-c.score, c.line_index))
    logger.debug("Client candidates: %s", [(c.name, c.score) for c in ranked[:5]])
    return ranked


# --- Internal helpers ---


def _clean_name(raw: str) -> str | None:
    # Labels like "Bill To: Acme Corp, 12 Main St" keep the name part only.
    value = re.split(r"\s{2,}|\t|,\s*\d|\s+\d{2,}", raw.strip())[0]
    value = re.sub(r"[^\w\s\-&.,']", "", value).strip(" ,.-")
    if not (MIN_NAME_LEN < len(value) < MAX_NAME_LEN):
        return None
    words = value.split()
    if not words or not any(ch.isalpha() for ch in value):
        return None
    if all(w.lower().strip(".,") in NAME_STOP_WORDS for w in words):
        return None
    if words[0].lower().strip(".,") in NAME_STOP_WORDS and len(words) == 1:
        return None
    return value


def _has_suffix(name: str) -> bool:
    last = name.rstrip(".").split()[-1].lower().strip(",")
    return last in COMPANY_SUFFIXES


def _known_client_mention(text: str, known_clients: tuple[str, ...] | list[str]) -> str | None:
    """Fuzzy lookup of longer words against the known-client list."""
    for word in text.split():
        if len(word) <= 3:
            continue
        matched = best_fuzzy_match(word.strip(".,:;"), known_clients)
        if matched:
            return matched
    return None
