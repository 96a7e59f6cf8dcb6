# tests/conftest.py — v3
"""Shared test fixtures for all unit tests.

Provides a scripted LLM client, a recording sleep, sample documents and
settings built without reading any .env file. No network access: every LLM
call goes through FakeLLMClient.
"""

from __future__ import annotations

import json
from typing import Any

import pytest

from docsorter.config.settings import Settings
from docsorter.llm.base_client import BaseLLMClient
from docsorter.llm.models import LLMRequest, LLMResponse, Message


# === Scripted LLM client ===


class FakeLLMClient(BaseLLMClient):
    """LLM client answering from a script.

    Each entry of ``responses`` is either a string (returned as content) or
    an exception instance (raised). The last entry repeats once the script
    is exhausted.
    """

    def __init__(
        self,
        responses: list[str | Exception] | None = None,
        supports_batching: bool = False,
        batch_error: Exception | None = None,
        model: str = "fake-model",
    ) -> None:
        self.responses: list[str | Exception] = list(responses or [])
        self.calls: list[dict[str, Any]] = []
        self.batch_calls: list[list[LLMRequest]] = []
        self.batch_limits: list[int | None] = []
        self._supports_batching = supports_batching
        self._batch_error = batch_error
        self._model = model

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def _next(self) -> str | Exception:
        if not self.responses:
            return ""
        if len(self.responses) == 1:
            return self.responses[0]
        return self.responses.pop(0)

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 500,
        temperature: float = 0.1,
        model: str | None = None,
    ) -> LLMResponse:
        self.calls.append({"messages": messages, "system": system, "model": model})
        answer = self._next()
        if isinstance(answer, Exception):
            raise answer
        return LLMResponse(
            content=answer,
            input_tokens=100,
            output_tokens=20,
            model=model or self._model,
            provider="fake",
        )

    async def complete_batch(
        self, requests: list[LLMRequest], max_concurrency: int | None = None
    ) -> list[LLMResponse]:
        self.batch_calls.append(list(requests))
        self.batch_limits.append(max_concurrency)
        if self._batch_error is not None:
            raise self._batch_error
        responses = []
        for request in requests:
            answer = self._next()
            if isinstance(answer, Exception):
                raise answer
            responses.append(
                LLMResponse(
                    content=answer,
                    model=request.model or self._model,
                    provider="fake",
                    custom_id=request.custom_id,
                )
            )
        return responses

    @property
    def supports_batching(self) -> bool:
        return self._supports_batching

    @property
    def provider_name(self) -> str:
        return "fake"

    @property
    def model_name(self) -> str:
        return self._model


class RecordingSleep:
    """Awaitable stand-in for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def ai_json(**overrides: Any) -> str:
    """A valid AI response body, with fields optionally overridden."""
    payload: dict[str, Any] = {
        "clientName": "Globex Corporation",
        "clientConfidence": 0.9,
        "date": "2024-03-01",
        "dateConfidence": 0.85,
        "docType": "Contract",
        "docTypeConfidence": 0.92,
        "snippets": ["SERVICE AGREEMENT", "Globex Corporation"],
    }
    payload.update(overrides)
    return json.dumps(payload)


# === FIXTURES: Sample documents ===


INVOICE_TEXT = "INVOICE #12345\nBill to: Acme Corporation\nInvoice Date: January 15, 2024"

VAGUE_TEXT = "some notes about things we talked about\nnothing else here"


@pytest.fixture
def invoice_text() -> str:
    """Clear invoice: heuristics are confident on every field."""
    return INVOICE_TEXT


@pytest.fixture
def vague_text() -> str:
    """Unstructured text: heuristics find nothing."""
    return VAGUE_TEXT


@pytest.fixture
def contract_text() -> str:
    return (
        "SERVICE AGREEMENT\n"
        "This agreement is made between Globex Corporation and Initech LLC.\n"
        "Effective Date: March 1, 2024\n"
        "The terms and conditions of this contract are set out below.\n"
    )


@pytest.fixture
def valid_ai_response() -> str:
    return ai_json()


# === FIXTURES: Infrastructure ===


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def fake_client() -> FakeLLMClient:
    return FakeLLMClient([ai_json()])


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        openai_api_key="",
        anthropic_api_key="",
        cache_root=tmp_path / "cache",
    )


@pytest.fixture
def make_client() -> type[FakeLLMClient]:
    """FakeLLMClient class, for tests that script their own responses."""
    return FakeLLMClient


@pytest.fixture
def make_ai_json():
    """Builder for valid AI response bodies (see ai_json)."""
    return ai_json
