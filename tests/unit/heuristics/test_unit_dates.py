# tests/unit/heuristics/test_unit_dates.py — v1
"""Tests for heuristics/dates.py — detection and normalization."""

from __future__ import annotations

import pytest

from docsorter.heuristics.dates import extract_date, normalize_date


class TestExtractDate:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Date: 03/15/2024", "2024-03-15"),
            ("Date: 15/03/2024", "2024-03-15"),
            ("Issued 15.03.2024", "2024-03-15"),
            ("Created 2024-01-15 by admin", "2024-01-15"),
            ("Invoice Date: January 15, 2024", "2024-01-15"),
            ("Signed on 15th March 2024", "2024-03-15"),
            ("Due Sept. 5, 2023", "2023-09-05"),
            ("Short form 01/15/24", "2024-01-15"),
        ],
    )
    def test_formats(self, text, expected):
        assert extract_date(text) == expected

    def test_iso_not_misread_as_short_date(self):
        assert extract_date("Ref 2024-01-15") == "2024-01-15"

    def test_invalid_calendar_date_skipped(self):
        assert extract_date("February 30, 2024 then March 2, 2024") == "2024-03-02"

    def test_both_groups_above_twelve(self):
        assert extract_date("13/13/2024") is None

    def test_no_date(self):
        assert extract_date("no dates in here") is None

    def test_empty(self):
        assert extract_date("") is None


class TestNormalizeDate:
    def test_iso_passthrough(self):
        assert normalize_date("2024-01-15") == "2024-01-15"

    def test_common_format(self):
        assert normalize_date(" March 1, 2024 ") == "2024-03-01"

    def test_garbage(self):
        assert normalize_date("soon") is None
