# src/llm/adapters/openai_adapter.py — v2
"""OpenAI GPT adapter implementing BaseLLMClient.

Uses the official openai SDK in JSON mode.
"""

from __future__ import annotations

import time
from typing import Any

from docsorter.llm.base_client import BaseLLMClient
from docsorter.llm.models import LLMRequest, LLMResponse, Message


class OpenAIAdapter(BaseLLMClient):
    """OpenAI GPT adapter."""

    def __init__(self, model: str = "gpt-4o-mini", api_key: str = "", **kwargs: Any):
        self._model = model
        self._api_key = api_key
        self._client: Any = None

    def _get_client(self) -> Any:
        if self._client is None:
            import openai

            self._client = openai.AsyncOpenAI(api_key=self._api_key)
        return self._client

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 500,
        temperature: float = 0.1,
        model: str | None = None,
    ) -> LLMResponse:
        client = self._get_client()
        oai_messages: list[dict[str, Any]] = []
        if system:
            oai_messages.append({"role": "system", "content": system})
        for m in messages:
            oai_messages.append({"role": m.role, "content": m.content})

        used_model = model or self._model
        t0 = time.monotonic()
        resp = await client.chat.completions.create(
            model=used_model,
            messages=oai_messages,
            max_tokens=max_tokens,
            temperature=temperature,
            response_format={"type": "json_object"},
        )
        latency = int((time.monotonic() - t0) * 1000)

        choice = resp.choices[0]
        usage = resp.usage
        return LLMResponse(
            content=choice.message.content or "",
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            model=used_model,
            provider="openai",
            latency_ms=latency,
            raw_response=resp,
        )

    async def complete_batch(
        self, requests: list[LLMRequest], max_concurrency: int | None = None
    ) -> list[LLMResponse]:
        """Run the requests concurrently, at most ``max_concurrency`` at a time."""
        return await self._complete_concurrently(requests, max_concurrency)

    @property
    def supports_batching(self) -> bool:
        return True

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def model_name(self) -> str:
        return self._model
