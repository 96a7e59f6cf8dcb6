# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings. Per-call
behaviour (force_ai, force_refresh ...) lives in core.models.AnalysisOptions;
this module only holds defaults and wiring.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === AI provider ===
    ai_enabled: bool = True
    ai_provider: Literal["anthropic", "openai"] = "openai"
    ai_model: str = "gpt-4o-mini"
    ai_max_tokens: int = 500
    ai_temperature: float = 0.1

    # Provider API keys
    anthropic_api_key: str = ""
    openai_api_key: str = ""

    # === Escalation ===
    ai_confidence_threshold: float = 0.5

    # === Retry / batching ===
    ai_max_attempts: int = 3
    ai_retry_base_delay_s: float = 1.0
    ai_retry_max_delay_s: float = 10.0
    ai_batch_size: int = 5
    ai_batch_delay_s: float = 0.1
    ai_rate_limit_rpm: int = 60
    ai_intelligent_batching: bool = True

    # === Prompt ===
    ai_prompt_max_chars: int = 3000

    # === Cache ===
    cache_enabled: bool = True
    cache_backend: Literal["memory", "json"] = "memory"
    cache_root: Path = Path("~/.docsorter/cache")
    cache_max_entries: int = 1000

    # === Heuristics ===
    known_clients: str = ""

    # === Filename proposal ===
    filename_max_length: int = 100

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("ai_confidence_threshold", "ai_temperature")
    @classmethod
    def validate_unit_interval(cls, v: float, info) -> float:  # noqa: N805
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"{info.field_name} must be within [0, 1]")
        return v

    @field_validator(
        "ai_max_attempts", "ai_batch_size", "cache_max_entries", "ai_max_tokens"
    )
    @classmethod
    def validate_positive(cls, v: int, info) -> int:  # noqa: N805
        if v < 1:
            raise ValueError(f"{info.field_name} must be >= 1")
        return v

    @field_validator(
        "ai_retry_base_delay_s", "ai_retry_max_delay_s", "ai_batch_delay_s", "ai_rate_limit_rpm"
    )
    @classmethod
    def validate_non_negative(cls, v: float, info) -> float:  # noqa: N805
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.ai_retry_max_delay_s < self.ai_retry_base_delay_s:
            errors.append("AI_RETRY_MAX_DELAY_S must be >= AI_RETRY_BASE_DELAY_S")

        if self.ai_prompt_max_chars < 100:
            errors.append("AI_PROMPT_MAX_CHARS must be >= 100")

        if self.filename_max_length < 20:
            errors.append("FILENAME_MAX_LENGTH must be >= 20")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def known_clients_list(self) -> list[str]:
        """Parse comma-separated known client names."""
        return [c.strip() for c in self.known_clients.split(",") if c.strip()]

    @property
    def api_key(self) -> str:
        """API key for the configured provider."""
        return self.anthropic_api_key if self.ai_provider == "anthropic" else self.openai_api_key


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-run config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
