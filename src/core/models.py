# src/core/models.py — v3
"""Shared Pydantic domain models used across modules.

No module redefines these types — all imports come from core.models.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_serializer,
    field_validator,
)

from docsorter.heuristics.confidence import clamp_confidence, compute_overall_confidence

if TYPE_CHECKING:
    from docsorter.config.settings import Settings

AnalysisSource = Literal["regex", "ai", "ai-cached", "hybrid"]

MAX_SNIPPETS = 5
MAX_SNIPPET_CHARS = 500

# (value field, confidence field) pairs reconciled by the merger; ``title`` is heuristic-only.
MERGED_FIELDS: tuple[tuple[str, str], ...] = (
    ("client_name", "client_confidence"),
    ("date", "date_confidence"),
    ("doc_type", "doc_type_confidence"),
)


# === DOCUMENT ANALYSIS ===


class DocumentAnalysis(BaseModel):
    """Extracted metadata for one document.

    Immutable: every stage (heuristics, AI, merge) builds a new instance.
    ``overall_confidence`` is derived from the three field confidences and
    cannot be set directly.
    """

    model_config = ConfigDict(frozen=True)

    client_name: str | None = None
    client_confidence: float = 0.0
    date: str | None = None
    date_confidence: float = 0.0
    doc_type: str | None = None
    doc_type_confidence: float = 0.0
    snippets: tuple[str, ...] = ()
    source: AnalysisSource = "regex"
    title: str | None = None
    raw_text_ref: str | None = None
    file_path: str | None = None
    field_sources: Mapping[str, str] = Field(default_factory=lambda: MappingProxyType({}))
    suggested_filename: str | None = None

    @field_validator("client_confidence", "date_confidence", "doc_type_confidence", mode="before")
    @classmethod
    def _clamp(cls, v: Any) -> float:
        return clamp_confidence(v)

    @field_validator("snippets", mode="before")
    @classmethod
    def _cap_snippets(cls, v: Any) -> tuple[str, ...]:
        # Same rule as validation.sanitizer.clean_snippets: oversize snippets are dropped
        if not isinstance(v, (list, tuple)):
            return ()
        kept = [s.strip() for s in v if isinstance(s, str) and s.strip()]
        return tuple(s for s in kept if len(s) < MAX_SNIPPET_CHARS)[:MAX_SNIPPETS]

    @field_validator("field_sources", mode="after")
    @classmethod
    def _freeze_sources(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(v))

    @field_serializer("field_sources")
    def _dump_sources(self, v: Mapping[str, str]) -> dict[str, str]:
        return dict(v)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def overall_confidence(self) -> float:
        return compute_overall_confidence(
            self.client_confidence, self.date_confidence, self.doc_type_confidence
        )

    def has_missing_fields(self) -> bool:
        """True when client, date or a real doc type is absent."""
        return (
            self.client_name is None
            or self.date is None
            or self.doc_type is None
            or self.doc_type == "Unclassified"
        )


# === OPTIONS ===


class AnalysisOptions(BaseModel):
    """Per-call analysis options. Every recognised option is listed here."""

    model_config = ConfigDict(frozen=True)

    use_ai: bool = True
    ai_confidence_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    ai_batch_size: int = Field(default=5, ge=1)
    force_ai: bool = False
    use_cache: bool = True
    force_refresh: bool = False

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> AnalysisOptions:
        values: dict[str, Any] = {
            "use_ai": settings.ai_enabled,
            "ai_confidence_threshold": settings.ai_confidence_threshold,
            "ai_batch_size": settings.ai_batch_size,
            "use_cache": settings.cache_enabled,
        }
        values.update(overrides)
        return cls(**values)


# === BATCH ===


class BatchItem(BaseModel):
    """One document submitted to batch analysis."""

    model_config = ConfigDict(frozen=True)

    text: str
    file_path: str | None = None
    model: str | None = None


# === STATS ===


class ProcessingStats(BaseModel):
    """Cumulative counters exposed by DocumentAnalyzer.get_stats()."""

    total_processed: int = 0
    regex_processed: int = 0
    ai_processed: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    errors: int = 0
    average_confidence: float = 0.0
    cache: dict[str, Any] | None = None
