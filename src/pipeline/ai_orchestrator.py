# src/pipeline/ai_orchestrator.py — v2
"""AI extraction orchestration: cache, rate limiting, retry, validation.

Single document flow (extract_metadata_ai):
    1. disabled / empty text           -> Err
    2. cache lookup (unless bypassed)  -> Ok(ai-cached)
    3. no client                       -> Err(unavailable)
    4. LLM call with retry             -> validate -> sanitize -> Ok(ai)
    5. store in cache, emit telemetry
Concurrent calls for the same text share one in-flight LLM call.

Batch flow (extract_metadata_ai_batch) has two modes:
    - traditional: chunks of ``concurrency`` items, each chunk drained by a
      fixed pool of workers reading from a queue, fixed delay between chunks;
    - intelligent: when the client supports batching, one complete_batch()
      call per model, responses paired by custom_id. Duplicate texts are
      sent once and share the result. Unusable responses are
      retried through the single-document path. Any exception falls back to
      traditional mode for the whole batch.

Degradation is reported through Result values; nothing here raises into the
caller.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING, Any

from docsorter.cache.fingerprint import compute_content_hash, short_id
from docsorter.core.models import AnalysisOptions, BatchItem, DocumentAnalysis
from docsorter.core.result import AIError, Err, Ok, Result
from docsorter.llm.models import LLMRequest, LLMResponse
from docsorter.llm.prompts import DEFAULT_MAX_TEXT_CHARS, build_metadata_messages
from docsorter.llm.rate_limiter import AsyncTokenBucket
from docsorter.llm.retry import (
    LLMRetryExhausted,
    RetryableResponseError,
    RetryPolicy,
    with_retry,
)
from docsorter.logging.context import document_context
from docsorter.tracking.models import AICallEvent, CacheEvent, ErrorEvent
from docsorter.tracking.telemetry import NullTelemetry, TelemetrySink
from docsorter.validation.response_validator import validate_response
from docsorter.validation.sanitizer import enhance_ai_metadata

if TYPE_CHECKING:
    from docsorter.cache.base_cache_store import BaseCacheStore
    from docsorter.config.settings import Settings
    from docsorter.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

DEFAULT_BATCH_DELAY_S = 0.1

AIResult = Result[DocumentAnalysis, AIError]
SleepFn = Callable[[float], Awaitable[Any]]


def should_use_ai(
    analysis: DocumentAnalysis,
    options: AnalysisOptions,
    threshold: float | None = None,
) -> bool:
    """Decide whether a heuristic analysis needs AI escalation.

    True when AI is forced, when overall confidence is below the threshold,
    or when client, date or a real doc type is missing. Whether AI may run at
    all (``use_ai``, a configured client) is the caller's check.
    """
    if options.force_ai:
        return True
    limit = options.ai_confidence_threshold if threshold is None else threshold
    if analysis.overall_confidence < limit:
        return True
    return analysis.has_missing_fields()


class AIOrchestrator:
    """Runs AI metadata extraction for one or many documents.

    Args:
        client: LLM client, or None when no provider is configured.
        cache: Content-hash cache, or None to disable caching.
        telemetry: Event sink (defaults to NullTelemetry).
        rate_limiter: Token bucket gating every LLM call (None = unlimited).
        retry_policy: Attempts and backoff for each document.
        enabled: Master switch; a disabled orchestrator returns Err(disabled).
        sleep: Awaitable sleep used for backoff and inter-chunk delays.
    """

    def __init__(
        self,
        client: BaseLLMClient | None,
        cache: BaseCacheStore | None = None,
        telemetry: TelemetrySink | None = None,
        rate_limiter: AsyncTokenBucket | None = None,
        retry_policy: RetryPolicy | None = None,
        enabled: bool = True,
        max_tokens: int = 500,
        temperature: float = 0.1,
        prompt_max_chars: int = DEFAULT_MAX_TEXT_CHARS,
        batch_delay_s: float = DEFAULT_BATCH_DELAY_S,
        intelligent_batching: bool = True,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._client = client
        self._cache = cache
        self._telemetry = telemetry or NullTelemetry()
        self._rate_limiter = rate_limiter
        self._retry_policy = retry_policy or RetryPolicy()
        self._enabled = enabled
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._prompt_max_chars = prompt_max_chars
        self._batch_delay_s = batch_delay_s
        self._intelligent_batching = intelligent_batching
        self._sleep = sleep
        # content hash -> the LLM extraction currently running for it
        self._in_flight: dict[str, asyncio.Task[AIResult]] = {}

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: BaseLLMClient | None,
        cache: BaseCacheStore | None = None,
        telemetry: TelemetrySink | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> AIOrchestrator:
        return cls(
            client=client,
            cache=cache,
            telemetry=telemetry,
            rate_limiter=AsyncTokenBucket(settings.ai_rate_limit_rpm, sleep=sleep),
            retry_policy=RetryPolicy.from_settings(settings),
            enabled=settings.ai_enabled,
            max_tokens=settings.ai_max_tokens,
            temperature=settings.ai_temperature,
            prompt_max_chars=settings.ai_prompt_max_chars,
            batch_delay_s=settings.ai_batch_delay_s,
            intelligent_batching=settings.ai_intelligent_batching,
            sleep=sleep,
        )

    @property
    def available(self) -> bool:
        return self._enabled and self._client is not None

    @property
    def cache(self) -> BaseCacheStore | None:
        return self._cache

    # --- Single document ---

    async def extract_metadata_ai(
        self,
        text: str,
        options: AnalysisOptions | None = None,
        model: str | None = None,
    ) -> AIResult:
        """AI analysis of one document text."""
        options = options or AnalysisOptions()
        if not self._enabled:
            return Err(AIError("disabled", "AI extraction is disabled"))
        if not text or not text.strip():
            return Err(AIError("empty_input", "No text to analyse"))

        content_hash = compute_content_hash(text)
        with document_context(short_id(content_hash), stage="ai"):
            try:
                cached = await self._cache_lookup(content_hash, options)
                if cached is not None:
                    return Ok(cached)
                return await self._extract_shared(text, content_hash, options, model)
            except Exception as e:
                logger.exception("Unexpected failure in AI extraction")
                self._telemetry.emit(
                    ErrorEvent(stage="ai", message=str(e), content_hash=content_hash)
                )
                return Err(AIError("unexpected", str(e)))

    async def call_ai_service(
        self,
        text: str,
        model: str | None = None,
    ) -> AIResult:
        """Call the LLM with retry and turn the answer into an AI analysis.

        Retries on empty responses, validation failures, responses without
        any usable field, and client exceptions.
        """
        if self._client is None:
            return Err(AIError("unavailable", "No AI client configured"))

        client = self._client
        content_hash = compute_content_hash(text)
        system, messages = build_metadata_messages(text, self._prompt_max_chars)
        attempts = 0
        last: LLMResponse | None = None

        async def attempt() -> DocumentAnalysis:
            nonlocal attempts, last
            attempts += 1
            if self._rate_limiter is not None:
                await self._rate_limiter.acquire()
            last = await client.complete(
                messages,
                system=system,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
                model=model,
            )
            return interpret_response(last.content, text)

        start = time.monotonic()
        try:
            analysis = await with_retry(
                attempt, self._retry_policy, label="ai_extract", sleep=self._sleep
            )
        except LLMRetryExhausted as e:
            self._emit_call(content_hash, model, last, start, False, e.attempts, e.error_type)
            return Err(AIError("retries_exhausted", str(e.last_error), e.attempts))

        self._emit_call(content_hash, model, last, start, True, attempts)
        return Ok(analysis)

    # --- Batch ---

    async def extract_metadata_ai_batch(
        self,
        items: Sequence[BatchItem],
        options: AnalysisOptions | None = None,
        concurrency: int | None = None,
    ) -> list[DocumentAnalysis | None]:
        """AI analysis of many documents. Output is aligned with ``items``."""
        options = options or AnalysisOptions()
        concurrency = max(1, concurrency or options.ai_batch_size)
        if not items:
            return []
        if not self._enabled:
            return [None] * len(items)

        if (
            self._intelligent_batching
            and self._client is not None
            and self._client.supports_batching
        ):
            try:
                return await self._intelligent_batch(items, options, concurrency)
            except Exception:
                logger.warning(
                    "Intelligent batching failed, falling back to traditional batching",
                    exc_info=True,
                )

        return await self._traditional_batch(items, options, concurrency)

    async def _traditional_batch(
        self,
        items: Sequence[BatchItem],
        options: AnalysisOptions,
        concurrency: int,
    ) -> list[DocumentAnalysis | None]:
        results: list[DocumentAnalysis | None] = [None] * len(items)
        pending = [i for i, item in enumerate(items) if item.text and item.text.strip()]

        async def handle(i: int) -> AIResult:
            return await self.extract_metadata_ai(items[i].text, options, model=items[i].model)

        await self._run_chunked(pending, concurrency, handle, results)
        return results

    async def _intelligent_batch(
        self,
        items: Sequence[BatchItem],
        options: AnalysisOptions,
        concurrency: int,
    ) -> list[DocumentAnalysis | None]:
        assert self._client is not None
        client = self._client
        results: list[DocumentAnalysis | None] = [None] * len(items)
        hashes: dict[int, str] = {}
        leaders: dict[str, int] = {}
        followers: dict[int, int] = {}

        groups: dict[str, list[int]] = {}
        for i, item in enumerate(items):
            if not item.text or not item.text.strip():
                continue
            content_hash = compute_content_hash(item.text)
            if content_hash in leaders:
                followers[i] = leaders[content_hash]
                continue
            leaders[content_hash] = i
            hashes[i] = content_hash
            cached = await self._cache_lookup(hashes[i], options)
            if cached is not None:
                results[i] = cached
                continue
            groups.setdefault(item.model or client.model_name, []).append(i)

        retry_single: list[int] = []
        for model, indices in groups.items():
            requests = []
            for i in indices:
                system, messages = build_metadata_messages(items[i].text, self._prompt_max_chars)
                requests.append(
                    LLMRequest(
                        custom_id=str(i),
                        system=system,
                        messages=messages,
                        model=model,
                        max_tokens=self._max_tokens,
                        temperature=self._temperature,
                    )
                )
                if self._rate_limiter is not None:
                    await self._rate_limiter.acquire()

            logger.info("Submitting batch of %d request(s) for model %s", len(requests), model)
            start = time.monotonic()
            responses = await client.complete_batch(requests, max_concurrency=concurrency)
            by_id = _pair_responses(requests, responses)

            for i in indices:
                response = by_id.get(str(i))
                try:
                    if response is None:
                        raise RetryableResponseError("missing_response")
                    analysis = interpret_response(response.content, items[i].text)
                except RetryableResponseError as e:
                    logger.debug("Batch item %d unusable (%s), retrying singly", i, e.reason)
                    self._emit_call(hashes[i], model, response, start, False, 1, e.reason, batched=True)
                    retry_single.append(i)
                    continue
                self._emit_call(hashes[i], model, response, start, True, 1, batched=True)
                await self._cache_store(hashes[i], analysis, options)
                results[i] = analysis

        if retry_single:

            async def handle(i: int) -> AIResult:
                with document_context(short_id(hashes[i]), stage="ai"):
                    return await self._extract_shared(
                        items[i].text, hashes[i], options, items[i].model
                    )

            await self._run_chunked(retry_single, concurrency, handle, results)

        # Identical texts share the result of their first occurrence
        for i, leader in followers.items():
            results[i] = results[leader]
        return results

    async def _run_chunked(
        self,
        indices: list[int],
        concurrency: int,
        handler: Callable[[int], Awaitable[AIResult]],
        results: list[DocumentAnalysis | None],
    ) -> None:
        """Process ``indices`` in chunks with a bounded worker pool per chunk."""
        chunks = [indices[k : k + concurrency] for k in range(0, len(indices), concurrency)]
        for n, chunk in enumerate(chunks):
            if n > 0 and self._batch_delay_s > 0:
                await self._sleep(self._batch_delay_s)
            logger.debug("Processing chunk %d/%d (%d item(s))", n + 1, len(chunks), len(chunk))

            queue: asyncio.Queue[int] = asyncio.Queue()
            for i in chunk:
                queue.put_nowait(i)

            async def worker() -> None:
                while True:
                    try:
                        i = queue.get_nowait()
                    except asyncio.QueueEmpty:
                        return
                    outcome = await handler(i)
                    results[i] = outcome.value if isinstance(outcome, Ok) else None

            await asyncio.gather(*(worker() for _ in range(min(concurrency, len(chunk)))))

    # --- Internal helpers ---

    async def _extract_shared(
        self,
        text: str,
        content_hash: str,
        options: AnalysisOptions,
        model: str | None,
    ) -> AIResult:
        """Run _extract_uncached at most once at a time per content hash.

        Concurrent callers with the same text await the running call instead
        of issuing their own.
        """
        task = self._in_flight.get(content_hash)
        if task is None:
            task = asyncio.ensure_future(
                self._extract_uncached(text, content_hash, options, model)
            )
            self._in_flight[content_hash] = task
            task.add_done_callback(lambda _: self._in_flight.pop(content_hash, None))
        else:
            logger.debug("Joining in-flight AI call for identical content")
        return await asyncio.shield(task)

    async def _extract_uncached(
        self,
        text: str,
        content_hash: str,
        options: AnalysisOptions,
        model: str | None,
    ) -> AIResult:
        if self._client is None:
            logger.warning("AI extraction requested but no AI client is configured")
            return Err(AIError("unavailable", "No AI client configured"))
        result = await self.call_ai_service(text, model=model)
        if isinstance(result, Ok):
            await self._cache_store(content_hash, result.value, options)
        else:
            logger.warning("AI extraction failed: %s", result.error)
        return result

    async def _cache_lookup(
        self, content_hash: str, options: AnalysisOptions
    ) -> DocumentAnalysis | None:
        if self._cache is None or not options.use_cache or options.force_refresh:
            return None
        try:
            cached = await self._cache.get(content_hash)
        except Exception as e:
            logger.warning("Cache lookup failed, treating as miss: %s", e)
            cached = None
        self._telemetry.emit(CacheEvent(content_hash=content_hash, hit=cached is not None))
        if cached is None:
            return None
        logger.debug("AI cache hit")
        return cached.model_copy(update={"source": "ai-cached"})

    async def _cache_store(
        self, content_hash: str, analysis: DocumentAnalysis, options: AnalysisOptions
    ) -> None:
        if self._cache is None or not options.use_cache:
            return
        try:
            await self._cache.set(content_hash, analysis)
        except Exception as e:
            logger.warning("Cache write failed: %s", e)

    def _emit_call(
        self,
        content_hash: str,
        model: str | None,
        response: LLMResponse | None,
        start: float,
        success: bool,
        attempts: int,
        error_type: str | None = None,
        batched: bool = False,
    ) -> None:
        assert self._client is not None
        self._telemetry.emit(
            AICallEvent(
                content_hash=content_hash,
                provider=self._client.provider_name,
                model=(response.model if response else None) or model or self._client.model_name,
                success=success,
                latency_ms=int((time.monotonic() - start) * 1000),
                attempts=attempts,
                input_tokens=response.input_tokens if response else 0,
                output_tokens=response.output_tokens if response else 0,
                error_type=error_type,
                batched=batched,
            )
        )


def interpret_response(raw: str, text: str) -> DocumentAnalysis:
    """Validate and sanitize one raw AI answer.

    Raises:
        RetryableResponseError: empty, invalid or without any usable field.
    """
    if not raw or not raw.strip():
        raise RetryableResponseError("empty_response")
    validation = validate_response(raw)
    if not validation.valid:
        raise RetryableResponseError(validation.kind, "; ".join(validation.errors))
    assert validation.data is not None
    analysis = enhance_ai_metadata(validation.data, text)
    if analysis is None:
        raise RetryableResponseError("no_usable_data")
    return analysis


def _pair_responses(
    requests: list[LLMRequest], responses: list[LLMResponse]
) -> dict[str, LLMResponse]:
    """Map custom_id -> response, falling back to position for untagged responses."""
    paired: dict[str, LLMResponse] = {}
    for position, response in enumerate(responses):
        if response.custom_id is not None:
            paired[response.custom_id] = response
        elif position < len(requests):
            paired.setdefault(requests[position].custom_id, response)
    return paired
