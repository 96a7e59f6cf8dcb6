# src/core/result.py — v1
"""Explicit success/failure values for the AI path.

The AI path never signals degradation through exceptions; callers branch on
``isinstance(result, Ok)`` instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Literal, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")

AIErrorKind = Literal[
    "disabled",
    "empty_input",
    "unavailable",
    "retries_exhausted",
    "unexpected",
]


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E


Result = Union[Ok[T], Err[E]]


@dataclass(frozen=True)
class AIError:
    """Why the AI path produced no analysis."""

    kind: AIErrorKind
    message: str = ""
    attempts: int = 0

    def __str__(self) -> str:
        suffix = f" after {self.attempts} attempt(s)" if self.attempts else ""
        return f"{self.kind}: {self.message}{suffix}"
