# tests/unit/llm/test_unit_retry.py — v2
"""Tests for llm/retry.py — backoff policy and retry loop."""

from __future__ import annotations

import pytest

from docsorter.llm.retry import (
    LLMRetryExhausted,
    RetryableResponseError,
    RetryPolicy,
    classify_error,
    compute_delay,
    with_retry,
)


class TestComputeDelay:
    def test_exponential(self):
        policy = RetryPolicy()
        assert [compute_delay(policy, n) for n in (1, 2, 3)] == [1.0, 2.0, 4.0]

    def test_capped(self):
        policy = RetryPolicy(base_delay_s=1.0, max_delay_s=3.0)
        assert compute_delay(policy, 3) == 3.0
        assert compute_delay(policy, 10) == 3.0

    def test_jitter_bounds(self):
        policy = RetryPolicy(jitter=True)
        for _ in range(20):
            assert 1.0 <= compute_delay(policy, 2) <= 3.0


class TestClassifyError:
    def test_retryable_response(self):
        assert classify_error(RetryableResponseError("parse_error", "bad")) == "parse_error"

    def test_rate_limit(self):
        assert classify_error(RuntimeError("HTTP 429 Too Many Requests")) == "rate_limit"

    def test_timeout(self):
        assert classify_error(TimeoutError()) == "timeout"

    def test_server(self):
        assert classify_error(RuntimeError("503 Service Unavailable")) == "server_error"

    def test_unknown(self):
        assert classify_error(ValueError("boom")) == "unknown"


class TestWithRetry:
    @pytest.mark.asyncio
    async def test_success_first_try(self, recording_sleep):
        async def fn():
            return "ok"

        assert await with_retry(fn, sleep=recording_sleep) == "ok"
        assert recording_sleep.delays == []

    @pytest.mark.asyncio
    async def test_recovers(self, recording_sleep):
        calls = {"n": 0}

        async def fn():
            calls["n"] += 1
            if calls["n"] < 3:
                raise RetryableResponseError("empty_response")
            return "ok"

        assert await with_retry(fn, RetryPolicy(), sleep=recording_sleep) == "ok"
        assert recording_sleep.delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_exhausted(self, recording_sleep):
        async def fn():
            raise RetryableResponseError("parse_error", "not json")

        with pytest.raises(LLMRetryExhausted) as exc_info:
            await with_retry(fn, RetryPolicy(max_attempts=3), label="t", sleep=recording_sleep)

        err = exc_info.value
        assert err.attempts == 3
        assert err.error_type == "parse_error"
        assert isinstance(err.last_error, RetryableResponseError)
        assert recording_sleep.delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_single_attempt_never_sleeps(self, recording_sleep):
        async def fn():
            raise RuntimeError("down")

        with pytest.raises(LLMRetryExhausted):
            await with_retry(fn, RetryPolicy(max_attempts=1), sleep=recording_sleep)
        assert recording_sleep.delays == []


class TestRetryPolicyFromSettings:
    def test_from_settings(self, settings):
        s = settings.model_copy(update={"ai_max_attempts": 5, "ai_retry_base_delay_s": 0.5})
        policy = RetryPolicy.from_settings(s)
        assert policy.max_attempts == 5
        assert policy.base_delay_s == 0.5
        assert policy.max_delay_s == 10.0
