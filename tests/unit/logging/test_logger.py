# tests/unit/logging/test_logger.py — v2
"""Tests for logging/logger.py — formatters and setup."""

from __future__ import annotations

import json
import logging

from lingosite.logging.context import clear_context, set_build_context, set_locale_context
from lingosite.logging.logger import (
    ROOT_LOGGER,
    JsonFormatter,
    TextFormatter,
    get_logger,
    setup_logging,
)


def _record(msg: str = "hello", name: str = "lingosite.test") -> logging.LogRecord:
    return logging.LogRecord(
        name=name, level=logging.INFO, pathname="", lineno=0,
        msg=msg, args=(), exc_info=None,
    )


class TestJsonFormatter:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_basic_format(self):
        data = json.loads(JsonFormatter().format(_record()))
        assert data["level"] == "INFO"
        assert data["message"] == "hello"
        assert data["logger"] == "lingosite.test"
        assert "timestamp" in data
        assert "context" not in data

    def test_with_context(self):
        set_build_context("b-1", scope="*")
        set_locale_context("fr")
        data = json.loads(JsonFormatter().format(_record()))
        assert data["context"] == {"build_id": "b-1", "scope": "*", "locale": "fr"}

    def test_extra_data(self):
        record = _record()
        record.data = {"files": 3}
        data = json.loads(JsonFormatter().format(record))
        assert data["data"] == {"files": 3}


class TestTextFormatter:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_strips_root_prefix(self):
        text = TextFormatter().format(_record(name="lingosite.assets.processor"))
        assert " assets.processor " in text
        assert text.endswith("- hello")

    def test_includes_scope_and_locale(self):
        set_build_context("b-2", scope="page:about")
        set_locale_context("en")
        text = TextFormatter().format(_record())
        assert "[page:about]" in text
        assert "(en)" in text


class TestSetupLogging:
    def teardown_method(self):
        logging.getLogger(ROOT_LOGGER).handlers.clear()

    def test_get_logger_namespaced(self):
        assert get_logger("x").name == "lingosite.x"

    def test_setup_text(self):
        setup_logging(level="DEBUG", log_format="text")
        root = logging.getLogger(ROOT_LOGGER)
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_setup_json_no_duplicates(self):
        setup_logging(log_format="json")
        setup_logging(log_format="json")
        root = logging.getLogger(ROOT_LOGGER)
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_setup_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "build.log"
        setup_logging(log_file=log_file)
        root = logging.getLogger(ROOT_LOGGER)
        assert len(root.handlers) == 2
        assert log_file.parent.is_dir()
        for handler in root.handlers:
            handler.close()
