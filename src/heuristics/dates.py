# src/heuristics/dates.py — v1
"""Date detection and normalization to ``YYYY-MM-DD``.

Patterns are tried in a fixed order; within a pattern the first match that is
a real calendar date wins. Numeric dates are read month-first when the first
group is <= 12, day-first when only the second group can be a month.
"""

from __future__ import annotations

import re
from datetime import date as Date

from docsorter.heuristics.keywords import MONTH_NAMES

_MONTHS = "|".join(MONTH_NAMES)
_MONTH_ABBR = "|".join(m[:3] for m in MONTH_NAMES) + "|sept"
_MONTH_ALT = rf"(?:{_MONTHS}|{_MONTH_ABBR})\.?"

# (name, pattern). Numeric patterns forbid adjacent digits so that
# "2024-01-15" is never read as "24-01-15".
DATE_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    (
        "month_first",
        re.compile(r"(?<!\d)(\d{1,2})/(\d{1,2})/((?:19|20)?\d{2})(?!\d)"),
    ),
    (
        "day_first",
        re.compile(r"(?<!\d)(\d{1,2})[-.](\d{1,2})[-.]((?:19|20)?\d{2})(?!\d)"),
    ),
    (
        "iso",
        re.compile(r"(?<!\d)((?:19|20)\d{2})[-/](\d{1,2})[-/](\d{1,2})(?!\d)"),
    ),
    (
        "month_name",
        re.compile(rf"\b({_MONTH_ALT})\s+(\d{{1,2}})(?:st|nd|rd|th)?,?\s+((?:19|20)\d{{2}})\b", re.IGNORECASE),
    ),
    (
        "day_month_name",
        re.compile(rf"\b(\d{{1,2}})(?:st|nd|rd|th)?\s+({_MONTH_ALT})\s+((?:19|20)\d{{2}})\b", re.IGNORECASE),
    ),
)


def extract_date(text: str) -> str | None:
    """First valid date in ``text`` as ``YYYY-MM-DD``, or None."""
    if not text:
        return None
    for name, pattern in DATE_PATTERNS:
        for match in pattern.finditer(text):
            normalized = _normalize_match(name, match.groups())
            if normalized:
                return normalized
    return None


def normalize_date(value: str) -> str | None:
    """Normalize a free-form date string (ISO or common formats)."""
    if not value:
        return None
    value = value.strip()
    return extract_date(value)


def _normalize_match(name: str, groups: tuple[str, ...]) -> str | None:
    if name == "iso":
        year, month, day = int(groups[0]), int(groups[1]), int(groups[2])
    elif name == "month_name":
        month = _month_number(groups[0])
        day, year = int(groups[1]), int(groups[2])
    elif name == "day_month_name":
        day = int(groups[0])
        month = _month_number(groups[1])
        year = int(groups[2])
    else:
        a, b, year = int(groups[0]), int(groups[1]), int(groups[2])
        if year < 100:
            year += 2000
        month, day = _order_numeric(a, b)
    return _to_iso(year, month, day)


def _order_numeric(a: int, b: int) -> tuple[int, int]:
    """(month, day) for two numeric groups."""
    if a > 12 and b <= 12:
        return b, a
    return a, b


def _month_number(token: str) -> int:
    prefix = token.lower().rstrip(".")[:3]
    for i, month in enumerate(MONTH_NAMES, start=1):
        if month.startswith(prefix):
            return i
    return 0


def _to_iso(year: int, month: int, day: int) -> str | None:
    try:
        return Date(year, month, day).isoformat()
    except ValueError:
        return None
