"""Unit tests for logging infrastructure."""

import json
import logging
import sys

from ecochef.utils.logger import JSONFormatter, RichTextFormatter, get_logger, logger, set_level


def _record(msg="Test message", level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord(
        name="test_logger",
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Test JSONFormatter produces valid JSON output."""

    def test_json_formatter_outputs_valid_json(self):
        """Test that JSONFormatter produces valid JSON."""
        parsed = json.loads(JSONFormatter().format(_record()))

        assert parsed["level"] == "INFO"
        assert parsed["logger"] == "test_logger"
        assert parsed["message"] == "Test message"
        assert "timestamp" in parsed

    def test_json_formatter_keeps_accents(self):
        """Spanish text is written as-is, not as \\u escapes."""
        output = JSONFormatter().format(_record("Diseñando recetas"))
        assert "Diseñando" in output

    def test_json_formatter_includes_context_extras(self):
        """Test that provider and view extras are emitted when present."""
        parsed = json.loads(JSONFormatter().format(_record(provider="gemini", view="CAMERA")))

        assert parsed["provider"] == "gemini"
        assert parsed["view"] == "CAMERA"

    def test_json_formatter_omits_missing_extras(self):
        parsed = json.loads(JSONFormatter().format(_record()))
        assert "provider" not in parsed
        assert "view" not in parsed

    def test_json_formatter_includes_exception_traceback(self):
        """Test that JSONFormatter includes exception traceback when present."""
        try:
            raise ValueError("Test error")
        except ValueError:
            record = _record("Error occurred", level=logging.ERROR, exc_info=sys.exc_info())

        parsed = json.loads(JSONFormatter().format(record))

        assert "exception" in parsed
        assert "ValueError" in parsed["exception"]


class TestRichTextFormatter:
    """Test colored text output."""

    def test_text_formatter_includes_level_and_message(self):
        output = RichTextFormatter().format(_record(level=logging.WARNING))

        assert "WARNING" in output
        assert "Test message" in output
        assert "\033[33m" in output

    def test_text_formatter_appends_context(self):
        output = RichTextFormatter().format(_record(provider="openai"))
        assert "[provider=openai]" in output


class TestGetLogger:
    """Test logger construction."""

    def test_get_logger_does_not_stack_handlers(self):
        first = get_logger("ecochef.test.handlers")
        second = get_logger("ecochef.test.handlers")

        assert first is second
        assert len(second.handlers) == 1

    def test_get_logger_uses_json_formatter_when_configured(self, monkeypatch):
        monkeypatch.setenv("LOG_TYPE", "json")
        instance = get_logger("ecochef.test.json")
        assert isinstance(instance.handlers[0].formatter, JSONFormatter)

    def test_get_logger_respects_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        instance = get_logger("ecochef.test.level")
        assert instance.level == logging.ERROR

    def test_set_level_updates_logger_and_handlers(self):
        original = logger.level
        try:
            set_level(logging.DEBUG)
            assert logger.level == logging.DEBUG
            assert all(handler.level == logging.DEBUG for handler in logger.handlers)
        finally:
            set_level(original)
