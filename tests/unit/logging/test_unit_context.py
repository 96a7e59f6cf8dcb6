# tests/unit/logging/test_unit_context.py — v2
"""Tests for logging/context.py — contextvars-based log context."""

from __future__ import annotations

import asyncio

import pytest

from docsorter.logging.context import (
    LogContext,
    clear_context,
    document_context,
    get_context,
    set_document_context,
    set_stage,
)


class TestLogContext:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_empty(self):
        assert get_context().as_dict() == {}

    def test_set_document_and_stage(self):
        set_document_context("abc123", "inv.txt")
        set_stage("heuristics")
        ctx = get_context()
        assert ctx == LogContext("abc123", "inv.txt", "heuristics")

    def test_scoped_context_restores(self):
        set_document_context("outer")
        with document_context("inner", "b.txt", "ai"):
            assert get_context().document_id == "inner"
        assert get_context().document_id == "outer"
        assert get_context().stage is None

    def test_scoped_context_restores_on_error(self):
        with pytest.raises(RuntimeError):
            with document_context("inner"):
                raise RuntimeError("x")
        assert get_context().document_id is None

    @pytest.mark.asyncio
    async def test_isolated_per_task(self):
        seen: dict[str, str | None] = {}

        async def work(doc_id: str) -> None:
            with document_context(doc_id):
                await asyncio.sleep(0)
                seen[doc_id] = get_context().document_id

        await asyncio.gather(work("a"), work("b"))
        assert seen == {"a": "a", "b": "b"}
