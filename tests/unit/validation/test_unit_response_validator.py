# tests/unit/validation/test_unit_response_validator.py — v1
"""Tests for validation/response_validator.py — AI response contract."""

from __future__ import annotations

import json

import pytest

from docsorter.validation.response_validator import extract_json_object, validate_response


class TestExtractJsonObject:
    def test_surrounding_prose(self):
        assert extract_json_object('Sure! {"a": 1} Hope this helps') == '{"a": 1}'

    def test_no_braces(self):
        assert extract_json_object("no json") is None

    def test_reversed_braces(self):
        assert extract_json_object("} oops {") is None


class TestValidateResponse:
    def test_valid(self, valid_ai_response):
        result = validate_response(valid_ai_response)
        assert result.valid
        assert result.data["clientName"] == "Globex Corporation"
        assert result.errors == []

    def test_valid_inside_code_fence(self, valid_ai_response):
        result = validate_response(f"```json\n{valid_ai_response}\n```")
        assert result.valid

    def test_null_fields_valid(self, make_ai_json):
        raw = make_ai_json(clientName=None, clientConfidence=0.0)
        assert validate_response(raw).valid

    def test_overall_confidence_tolerated(self, make_ai_json):
        assert validate_response(make_ai_json(overallConfidence=0.9)).valid

    @pytest.mark.parametrize("raw", [None, "", "   ", "not json", "{not: valid}", "[1, 2]"])
    def test_parse_error(self, raw):
        result = validate_response(raw)
        assert result.kind == "parse_error"
        assert not result.valid
        assert result.errors

    def test_missing_fields(self, valid_ai_response):
        data = json.loads(valid_ai_response)
        del data["snippets"]
        del data["date"]
        result = validate_response(json.dumps(data))
        assert result.kind == "missing_fields"
        assert any("snippets" in e for e in result.errors)
        assert any("date" in e for e in result.errors)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"clientConfidence": "high"},
            {"clientConfidence": True},
            {"dateConfidence": 1.5},
            {"docTypeConfidence": -0.1},
            {"clientName": 42},
            {"snippets": "one snippet"},
            {"summary": "extra field"},
        ],
    )
    def test_type_errors(self, make_ai_json, overrides):
        result = validate_response(make_ai_json(**overrides))
        assert result.kind == "type_errors"
        assert result.errors

    def test_nan_confidence(self, valid_ai_response):
        raw = valid_ai_response.replace('"clientConfidence": 0.9', '"clientConfidence": NaN')
        assert validate_response(raw).kind == "type_errors"
