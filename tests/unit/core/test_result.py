# tests/unit/core/test_result.py — v1
"""Tests for core/result.py — Ok/Err values and AIError."""

from __future__ import annotations

import dataclasses

import pytest

from docsorter.core.result import AIError, Err, Ok


class TestResult:
    def test_ok_holds_value(self):
        r = Ok(42)
        assert isinstance(r, Ok)
        assert r.value == 42

    def test_err_holds_error(self):
        r = Err(AIError("disabled"))
        assert not isinstance(r, Ok)
        assert r.error.kind == "disabled"

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            Ok(1).value = 2  # type: ignore[misc]


class TestAIError:
    def test_str_with_attempts(self):
        e = AIError("retries_exhausted", "bad json", attempts=3)
        assert str(e) == "retries_exhausted: bad json after 3 attempt(s)"

    def test_str_without_attempts(self):
        assert str(AIError("unavailable", "no client")) == "unavailable: no client"
