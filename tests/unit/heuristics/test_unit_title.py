# tests/unit/heuristics/test_unit_title.py — v1
"""Tests for heuristics/title.py — title line scoring."""

from __future__ import annotations

from docsorter.heuristics.title import extract_title, score_title_line


class TestExtractTitle:
    def test_upper_case_heading(self):
        text = "QUARTERLY SALES REPORT\nPrepared by the finance team for review.\nRevenue grew."
        assert extract_title(text) == "QUARTERLY SALES REPORT"

    def test_skips_boilerplate(self):
        text = "Page 1 of 3\nProject Kickoff Notes\nwe discussed the plan."
        assert extract_title(text) == "Project Kickoff Notes"

    def test_invoice_heading(self, invoice_text):
        assert extract_title(invoice_text) == "INVOICE #12345"

    def test_no_candidate(self):
        text = "call me at +1 (555) 123-4567 or write to info@example.com, thanks."
        assert extract_title(text) is None

    def test_empty(self):
        assert extract_title("") is None


class TestScoreTitleLine:
    def test_boilerplate(self):
        assert score_title_line("Confidential", 0) == -1
        assert score_title_line("Page 2", 0) == -1

    def test_earlier_lines_score_higher(self):
        assert score_title_line("Annual Report", 0) > score_title_line("Annual Report", 4)

    def test_date_penalty(self):
        assert score_title_line("Annual Report", 0) > score_title_line("March 5, 2024", 0)

    def test_address_penalty(self):
        assert score_title_line("12 Main Street", 0) < score_title_line("Main Office", 0)
