# tests/unit/logging/test_logger.py — v2
"""Tests for logging/logger.py — logger factory and formatters."""

from __future__ import annotations

import io
import json
import logging
import sys

from docsorter.logging.context import clear_context, document_context, set_document_context
from docsorter.logging.logger import (
    ROOT_LOGGER_NAME,
    JsonFormatter,
    TextFormatter,
    get_logger,
    setup_logging,
)


def _record(msg: str = "Hello", level: int = logging.INFO, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test", level=level, pathname="", lineno=0,
        msg=msg, args=(), exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Hello"
        assert "timestamp" in parsed
        assert "context" not in parsed

    def test_format_with_context(self):
        set_document_context("3f2a9c", "inv.txt")
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["context"] == {"document_id": "3f2a9c", "file_path": "inv.txt"}

    def test_format_with_data(self):
        parsed = json.loads(JsonFormatter().format(_record(data={"hits": 2})))
        assert parsed["data"] == {"hits": 2}

    def test_format_exception(self):
        try:
            raise ValueError("bad")
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()
        parsed = json.loads(JsonFormatter().format(record))
        assert "ValueError" in parsed["exception"]


class TestTextFormatter:
    def test_format_basic(self):
        output = TextFormatter().format(_record("Hello text"))
        assert "Hello text" in output
        assert "[INFO" in output

    def test_format_with_context(self):
        with document_context("3f2a9c", stage="ai"):
            output = TextFormatter().format(_record())
        assert "<3f2a9c>" in output
        assert "(ai)" in output


class TestSetupLogging:
    def teardown_method(self):
        root = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in root.handlers:
            handler.close()
        root.handlers.clear()

    def test_stream_json(self):
        stream = io.StringIO()
        logger = setup_logging(level="DEBUG", log_format="json", stream=stream)
        get_logger("unit").debug("visible")
        assert logger.name == ROOT_LOGGER_NAME
        assert json.loads(stream.getvalue().strip())["message"] == "visible"

    def test_level_filters(self):
        stream = io.StringIO()
        setup_logging(level="WARNING", log_format="text", stream=stream)
        get_logger("unit").info("hidden")
        assert stream.getvalue() == ""

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "docsorter.log"
        logger = setup_logging(log_file=str(log_file), stream=io.StringIO())
        get_logger("unit").info("to file")
        for handler in logger.handlers:
            handler.flush()
        assert len(logger.handlers) == 2
        assert "to file" in log_file.read_text(encoding="utf-8")

    def test_reinit_does_not_duplicate(self):
        setup_logging(stream=io.StringIO())
        logger = setup_logging(stream=io.StringIO())
        assert len(logger.handlers) == 1


class TestGetLogger:
    def test_nested(self):
        assert get_logger("cache").name == "docsorter.cache"

    def test_already_qualified(self):
        assert get_logger("docsorter.api").name == "docsorter.api"
