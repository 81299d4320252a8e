"""Logging infrastructure for EcoChef.

Provides centralized logging with configurable format (text/JSON) and level.
Configured via environment variables:
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_TYPE: text, json (default: text)

Records may carry ``provider`` and ``view`` extras, e.g.
``logger.info("...", extra={"provider": "gemini"})``.
"""

import json
import logging
import os
import sys
from typing import Any


_CONTEXT_FIELDS = ("provider", "view")


class JSONFormatter(logging.Formatter):
    """Formatter that outputs structured JSON."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a single JSON line.

        Args:
            record: Log record to format.

        Returns:
            JSON string with timestamp, level, logger name, message, context
            extras and optional traceback.
        """
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in _CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = str(getattr(record, field))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False)


class RichTextFormatter(logging.Formatter):
    """Formatter that outputs colored text with level icons."""

    COLORS = {
        "DEBUG": "\033[36m",      # Cyan
        "INFO": "\033[32m",       # Green
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
        "CRITICAL": "\033[35m",   # Magenta
        "RESET": "\033[0m",
    }

    ICONS = {
        "DEBUG": "🔍",
        "INFO": "🥦",
        "WARNING": "⚠️",
        "ERROR": "❌",
        "CRITICAL": "🔥",
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as colored text.

        Context extras are appended as ``[provider=... view=...]``.
        """
        level = record.levelname
        color = self.COLORS.get(level, self.COLORS["RESET"])
        icon = self.ICONS.get(level, "")
        reset = self.COLORS["RESET"]
        timestamp = self.formatTime(record, "%Y-%m-%d %H:%M:%S")

        context = " ".join(
            f"{field}={getattr(record, field)}" for field in _CONTEXT_FIELDS if hasattr(record, field)
        )
        suffix = f" [{context}]" if context else ""

        message = f"{color}{icon} {timestamp} {level:<8} {record.name:<18} {record.getMessage()}{suffix}{reset}"

        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"

        return message


def get_logger(name: str) -> logging.Logger:
    """Create and configure logger instance.

    Args:
        name: Logger name, typically module name.

    Returns:
        Configured logger instance. Calling twice with the same name returns
        the same logger without stacking handlers.
    """
    logger_instance = logging.getLogger(name)

    if logger_instance.handlers:
        return logger_instance

    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_type = os.getenv("LOG_TYPE", "text").lower()

    log_level = getattr(logging, log_level_str, logging.INFO)
    logger_instance.setLevel(log_level)

    # stderr keeps the terminal front end's stdout clean
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(JSONFormatter() if log_type == "json" else RichTextFormatter())
    logger_instance.addHandler(handler)
    logger_instance.propagate = False

    return logger_instance


def set_level(level: int) -> None:
    """Change the level of the shared logger and its handlers at runtime."""
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


# Create module-level logger instance
logger = get_logger("ecochef")

# Suppress chatty request logs from provider SDKs
for _noisy in ("google.genai", "google_genai", "openai", "httpx"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
