# src/core/similarity.py — v4
"""String similarity helpers used for fuzzy client-name matching.

Scores come from rapidfuzz's ``fuzz.ratio`` (normalized InDel similarity,
0-100) and are exposed here on a 0.0-1.0 scale.
"""

from __future__ import annotations

from rapidfuzz import fuzz, process


def similarity_ratio(a: str, b: str) -> float:
    """Normalized similarity in [0.0, 1.0]. Two empty strings score 1.0."""
    if not a and not b:
        return 1.0
    return fuzz.ratio(a, b) / 100.0


def best_fuzzy_match(
    candidate: str,
    choices: list[str] | tuple[str, ...],
    threshold: float = 0.6,
) -> str | None:
    """Return the choice most similar to ``candidate`` (case-insensitive).

    Containment either way counts as a match before the ratio is consulted.
    """
    needle = candidate.lower().strip()
    if not needle or not choices:
        return None
    for choice in choices:
        hay = choice.lower()
        if needle in hay or hay in needle:
            return choice

    match = process.extractOne(
        needle,
        choices,
        scorer=fuzz.ratio,
        processor=str.lower,
        score_cutoff=threshold * 100,
    )
    return match[0] if match else None
