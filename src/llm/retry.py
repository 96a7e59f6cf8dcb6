# src/llm/retry.py — v2
"""Retry policy with capped exponential backoff for AI calls.

Delay before retry n (1-based) is ``base_delay_s * backoff_factor ** (n - 1)``
capped at ``max_delay_s``. Every exception is retried; the error type from
classify_error() is only used for logging.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[Any]]


class LLMRetryExhausted(Exception):
    """All retries exhausted for an LLM call."""

    def __init__(self, label: str, error_type: str, attempts: int, last_error: Exception):
        self.label = label
        self.error_type = error_type
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"'{label}' failed after {attempts} attempts ({error_type}): {last_error}"
        )


class RetryableResponseError(Exception):
    """The provider answered, but the answer cannot be used (empty, malformed, no data)."""

    def __init__(self, reason: str, detail: str = ""):
        self.reason = reason
        self.detail = detail
        super().__init__(f"{reason}: {detail}" if detail else reason)


@dataclass(frozen=True)
class RetryPolicy:
    """Retry configuration for AI calls."""

    max_attempts: int = 3
    base_delay_s: float = 1.0
    backoff_factor: float = 2.0
    max_delay_s: float = 10.0
    jitter: bool = False

    @classmethod
    def from_settings(cls, settings: Any) -> RetryPolicy:
        return cls(
            max_attempts=settings.ai_max_attempts,
            base_delay_s=settings.ai_retry_base_delay_s,
            max_delay_s=settings.ai_retry_max_delay_s,
        )


def classify_error(error: Exception) -> str:
    """Classify an exception into an error type for logs and telemetry."""
    if isinstance(error, RetryableResponseError):
        return error.reason

    msg = str(error).lower()
    name = type(error).__name__.lower()

    if "429" in msg or "rate" in msg:
        return "rate_limit"
    if "timeout" in name or "timeout" in msg:
        return "timeout"
    if any(c in msg for c in ("500", "502", "503", "504", "server")):
        return "server_error"
    if "json" in msg or "parse" in msg or "decode" in msg:
        return "parse_error"
    if "token" in msg and ("limit" in msg or "exceed" in msg):
        return "token_limit"
    return "unknown"


def compute_delay(policy: RetryPolicy, attempt: int) -> float:
    """Delay to wait after failed ``attempt`` (1-based)."""
    delay = policy.base_delay_s * (policy.backoff_factor ** (attempt - 1))
    delay = min(delay, policy.max_delay_s)
    if policy.jitter:
        delay *= 0.5 + random.random()  # noqa: S311
    return delay


async def with_retry(
    fn: Callable[[], Awaitable[Any]],
    policy: RetryPolicy | None = None,
    label: str = "ai_call",
    sleep: SleepFn = asyncio.sleep,
) -> Any:
    """Await ``fn()`` until it succeeds or ``policy.max_attempts`` is reached.

    Raises:
        LLMRetryExhausted: If every attempt failed.
    """
    policy = policy or RetryPolicy()
    attempts = 0

    while True:
        try:
            return await fn()
        except Exception as e:
            error_type = classify_error(e)
            attempts += 1

            if attempts >= policy.max_attempts:
                logger.error(
                    "'%s' — %s on final attempt %d/%d: %s",
                    label, error_type, attempts, policy.max_attempts, e,
                )
                raise LLMRetryExhausted(label, error_type, attempts, e) from e

            delay = compute_delay(policy, attempts)
            logger.warning(
                "'%s' — %s (attempt %d/%d), retrying in %.1fs",
                label, error_type, attempts, policy.max_attempts, delay,
            )
            await sleep(delay)
