# src/llm/base_client.py — v3
"""Abstract LLM client interface."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod

from docsorter.llm.models import LLMRequest, LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for all LLM providers."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 500,
        temperature: float = 0.1,
        model: str | None = None,
    ) -> LLMResponse:
        """Text completion. ``model`` overrides the client default."""

    async def complete_batch(
        self, requests: list[LLMRequest], max_concurrency: int | None = None
    ) -> list[LLMResponse]:
        """Submit several independent completions in one call.

        Responses carry the ``custom_id`` of their request. At most
        ``max_concurrency`` completions are in flight at once (None = all).
        Only called when ``supports_batching`` is True.
        """
        raise NotImplementedError(f"{self.provider_name} does not support batching")

    async def _complete_concurrently(
        self, requests: list[LLMRequest], max_concurrency: int | None = None
    ) -> list[LLMResponse]:
        """complete() every request under a semaphore, tagging each response."""
        semaphore = asyncio.Semaphore(max(1, max_concurrency or len(requests)))

        async def run(request: LLMRequest) -> LLMResponse:
            async with semaphore:
                response = await self.complete(
                    request.messages,
                    system=request.system,
                    max_tokens=request.max_tokens,
                    temperature=request.temperature,
                    model=request.model,
                )
            return response.model_copy(update={"custom_id": request.custom_id})

        return list(await asyncio.gather(*(run(r) for r in requests)))

    @property
    def supports_batching(self) -> bool:
        """Whether complete_batch() is available."""
        return False

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (anthropic, openai)."""

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Default model used when a call does not override it."""
