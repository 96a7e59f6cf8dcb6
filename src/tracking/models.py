# src/tracking/models.py — v2
"""Tracking domain models: telemetry events emitted by the AI path."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CacheEvent(BaseModel):
    """One cache lookup."""

    kind: Literal["cache"] = "cache"
    timestamp: datetime = Field(default_factory=_utcnow)
    content_hash: str
    hit: bool


class AICallEvent(BaseModel):
    """One AI extraction attempt sequence (all retries of one document)."""

    kind: Literal["ai_call"] = "ai_call"
    timestamp: datetime = Field(default_factory=_utcnow)
    content_hash: str
    provider: str
    model: str
    success: bool
    latency_ms: int
    attempts: int
    input_tokens: int = 0
    output_tokens: int = 0
    error_type: str | None = None
    batched: bool = False


class ErrorEvent(BaseModel):
    """Unexpected failure somewhere in the analysis path."""

    kind: Literal["error"] = "error"
    timestamp: datetime = Field(default_factory=_utcnow)
    stage: str
    message: str
    content_hash: str | None = None


TelemetryEvent = CacheEvent | AICallEvent | ErrorEvent
