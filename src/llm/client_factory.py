# src/llm/client_factory.py — v3
"""Build the LLM client used for AI extraction.

Providers are registered as ``module:Class`` paths and imported on first
use, so a missing SDK only matters for the provider actually selected.
"""

from __future__ import annotations

import importlib
import logging
from typing import NamedTuple

from docsorter.config.settings import Settings
from docsorter.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)


class ProviderEntry(NamedTuple):
    class_path: str
    key_field: str | None = None


_PROVIDER_REGISTRY: dict[str, ProviderEntry] = {
    "anthropic": ProviderEntry(
        "docsorter.llm.adapters.anthropic_adapter:AnthropicAdapter", "anthropic_api_key"
    ),
    "openai": ProviderEntry(
        "docsorter.llm.adapters.openai_adapter:OpenAIAdapter", "openai_api_key"
    ),
}


class UnsupportedProviderError(ValueError):
    """Raised when a provider is not registered."""


def create_llm_client(
    provider: str,
    model: str,
    settings: Settings | None = None,
    **kwargs: object,
) -> BaseLLMClient:
    """Instantiate the adapter registered for ``provider``.

    The API key comes from ``settings`` unless passed explicitly in kwargs.

    Raises:
        UnsupportedProviderError: If provider is not registered.
    """
    entry = _PROVIDER_REGISTRY.get(provider)
    if entry is None:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {provider!r}. "
            f"Available: {', '.join(sorted(_PROVIDER_REGISTRY))}"
        )

    if settings is not None and entry.key_field:
        kwargs.setdefault("api_key", getattr(settings, entry.key_field))

    logger.debug("Creating LLM client: provider=%s, model=%s", provider, model)
    return _load(entry.class_path)(model=model, **kwargs)


def create_client_from_settings(settings: Settings) -> BaseLLMClient | None:
    """Client for the configured provider, or None when AI cannot run.

    AI is unavailable when disabled or when the provider has no API key.
    """
    if not settings.ai_enabled:
        logger.info("AI extraction disabled by configuration")
        return None
    if not settings.api_key:
        logger.warning(
            "No API key configured for provider %s, AI extraction unavailable",
            settings.ai_provider,
        )
        return None
    return create_llm_client(settings.ai_provider, settings.ai_model, settings)


def register_provider(name: str, class_path: str, key_field: str | None = None) -> None:
    """Register an extra adapter, e.g. an OpenAI-compatible gateway.

    Args:
        name: Provider identifier.
        class_path: ``module:Class`` of a BaseLLMClient implementation.
        key_field: Settings attribute holding its API key, if any.
    """
    _PROVIDER_REGISTRY[name] = ProviderEntry(class_path, key_field)
    logger.info("Registered LLM provider %s (%s)", name, class_path)


def _load(class_path: str) -> type[BaseLLMClient]:
    module_name, _, attr = class_path.partition(":")
    return getattr(importlib.import_module(module_name), attr)
