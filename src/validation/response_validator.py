# src/validation/response_validator.py — v1
"""Structural validation of raw AI responses.

Locates the JSON object in the raw text (first ``{`` to last ``}``), parses
it and checks the field contract of llm.prompts.SYSTEM_PROMPT. Never raises.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Any, Literal

ValidationKind = Literal["valid", "parse_error", "missing_fields", "type_errors"]

REQUIRED_FIELDS: tuple[str, ...] = (
    "clientName",
    "clientConfidence",
    "date",
    "dateConfidence",
    "docType",
    "docTypeConfidence",
    "snippets",
)
NULLABLE_STRING_FIELDS: tuple[str, ...] = ("clientName", "date", "docType")
CONFIDENCE_FIELDS: tuple[str, ...] = ("clientConfidence", "dateConfidence", "docTypeConfidence")
# Accepted but discarded; the overall score is always recomputed.
TOLERATED_FIELDS: frozenset[str] = frozenset({"overallConfidence"})


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validate_response()."""

    kind: ValidationKind
    data: dict[str, Any] | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return self.kind == "valid"


def extract_json_object(raw: str) -> str | None:
    """Substring from the first ``{`` to the last ``}``, or None."""
    if not raw:
        return None
    start = raw.find("{")
    end = raw.rfind("}")
    if start == -1 or end == -1 or end < start:
        return None
    return raw[start : end + 1]


def validate_response(raw: str | None) -> ValidationResult:
    """Parse and validate one AI response.

    Returns:
        ValidationResult whose ``kind`` is ``valid`` with the parsed ``data``,
        or one of the failure kinds with human-readable ``errors``.
    """
    if not isinstance(raw, str) or not raw.strip():
        return ValidationResult("parse_error", errors=["Empty response"])

    payload = extract_json_object(raw)
    if payload is None:
        return ValidationResult("parse_error", errors=["No JSON object found in response"])

    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, RecursionError) as e:
        return ValidationResult("parse_error", errors=[f"Invalid JSON: {e}"])

    if not isinstance(data, dict):
        return ValidationResult("parse_error", errors=["Response JSON is not an object"])

    missing = [f for f in REQUIRED_FIELDS if f not in data]
    if missing:
        return ValidationResult(
            "missing_fields",
            data=data,
            errors=[f"Missing required field: {f}" for f in missing],
        )

    errors = _type_errors(data)
    if errors:
        return ValidationResult("type_errors", data=data, errors=errors)
    return ValidationResult("valid", data=data)


def _type_errors(data: dict[str, Any]) -> list[str]:
    errors: list[str] = []

    for name in NULLABLE_STRING_FIELDS:
        value = data[name]
        if value is not None and not isinstance(value, str):
            errors.append(f"{name} must be a string or null")

    for name in CONFIDENCE_FIELDS:
        value = data[name]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            errors.append(f"{name} must be a number")
        elif math.isnan(value) or not 0.0 <= value <= 1.0:
            errors.append(f"{name} must be between 0.0 and 1.0")

    if not isinstance(data["snippets"], list):
        errors.append("snippets must be an array")

    extra = sorted(set(data) - set(REQUIRED_FIELDS) - TOLERATED_FIELDS)
    if extra:
        errors.append(f"Unexpected fields: {', '.join(extra)}")

    return errors
