# src/logging/context.py — v2
"""Contextual logging support: attach document_id, file_path and stage to log records.

Context lives in contextvars, so each asyncio task analysing a document in
a batch sees its own values.
"""

from __future__ import annotations

import contextvars
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

_document_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "document_id", default=None
)
_file_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "file_path", default=None
)
_stage: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "stage", default=None
)


@dataclass(frozen=True)
class LogContext:
    """Immutable snapshot of current logging context."""

    document_id: str | None = None
    file_path: str | None = None
    stage: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        document_id=_document_id.get(),
        file_path=_file_path.get(),
        stage=_stage.get(),
    )


def set_document_context(document_id: str, file_path: str | None = None) -> None:
    """Set document-level context (called once per analysed document)."""
    _document_id.set(document_id)
    _file_path.set(file_path)


def set_stage(stage: str | None) -> None:
    """Set the current processing stage (heuristics, ai, merge ...)."""
    _stage.set(stage)


@contextmanager
def document_context(
    document_id: str, file_path: str | None = None, stage: str | None = None
) -> Iterator[None]:
    """Scope document context to a block, restoring the previous values after."""
    tokens = (
        _document_id.set(document_id),
        _file_path.set(file_path),
        _stage.set(stage),
    )
    try:
        yield
    finally:
        _stage.reset(tokens[2])
        _file_path.reset(tokens[1])
        _document_id.reset(tokens[0])


def clear_context() -> None:
    """Reset all context variables."""
    _document_id.set(None)
    _file_path.set(None)
    _stage.set(None)
