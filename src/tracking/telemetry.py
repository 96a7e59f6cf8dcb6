# src/tracking/telemetry.py — v1
"""Telemetry sinks for cache and AI-call events.

The orchestrator receives a sink at construction time; there is no global
telemetry state. Sinks must not raise into the analysis path.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from docsorter.tracking.models import AICallEvent, CacheEvent, ErrorEvent, TelemetryEvent

logger = logging.getLogger(__name__)


class TelemetrySink(ABC):
    """Receives telemetry events."""

    @abstractmethod
    def emit(self, event: TelemetryEvent) -> None:
        """Record one event."""


class NullTelemetry(TelemetrySink):
    """Discards every event."""

    def emit(self, event: TelemetryEvent) -> None:
        return None


class LoggingTelemetry(TelemetrySink):
    """Writes events to the log as structured ``data`` payloads."""

    def __init__(self, level: int = logging.DEBUG) -> None:
        self._level = level

    def emit(self, event: TelemetryEvent) -> None:
        logger.log(
            self._level,
            "telemetry %s",
            event.kind,
            extra={"data": event.model_dump(mode="json")},
        )


class InMemoryTelemetry(TelemetrySink):
    """Accumulates events in memory for inspection and tests."""

    def __init__(self) -> None:
        self._events: list[TelemetryEvent] = []

    def emit(self, event: TelemetryEvent) -> None:
        self._events.append(event)

    @property
    def events(self) -> list[TelemetryEvent]:
        return list(self._events)

    @property
    def cache_events(self) -> list[CacheEvent]:
        return [e for e in self._events if isinstance(e, CacheEvent)]

    @property
    def ai_calls(self) -> list[AICallEvent]:
        return [e for e in self._events if isinstance(e, AICallEvent)]

    @property
    def errors(self) -> list[ErrorEvent]:
        return [e for e in self._events if isinstance(e, ErrorEvent)]

    @property
    def cache_hits(self) -> int:
        return sum(1 for e in self.cache_events if e.hit)

    @property
    def cache_misses(self) -> int:
        return sum(1 for e in self.cache_events if not e.hit)

    @property
    def total_tokens(self) -> int:
        return sum(e.input_tokens + e.output_tokens for e in self.ai_calls)

    def clear(self) -> None:
        self._events.clear()
