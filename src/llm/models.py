# src/llm/models.py — v2
"""LLM-specific types: Message, LLMRequest, LLMResponse."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class Message(BaseModel):
    """Single message in a conversation."""

    role: Literal["user", "assistant", "system"]
    content: str


class LLMRequest(BaseModel):
    """One independent completion inside a provider batch submission.

    ``custom_id`` is echoed on the matching response so results can be
    paired back to their input regardless of completion order.
    """

    custom_id: str
    messages: list[Message]
    system: str | None = None
    model: str | None = None
    max_tokens: int = 500
    temperature: float = 0.1


class LLMResponse(BaseModel):
    """Normalized response from any LLM provider."""

    content: str
    input_tokens: int = 0
    output_tokens: int = 0
    model: str
    provider: str
    latency_ms: int = 0
    custom_id: str | None = None
    raw_response: Any = Field(default=None, exclude=True)
