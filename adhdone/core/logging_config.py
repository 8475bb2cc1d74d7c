"""
Enhanced logging configuration with structured logging.

Supports JSON logging for production and human-readable logging for development.
"""

import json
import logging
import sys
from typing import Any

from adhdone.core.config import settings
from adhdone.core.constants import CALLER_ID_LOG_LENGTH

# Extra record attributes copied into structured log lines when present
STRUCTURED_EXTRAS = (
    "method",
    "path",
    "status_code",
    "process_time",
    "client",
    "session_id",
    "rpc_method",
    "tool",
    "caller",
    "error",
)


class StructuredFormatter(logging.Formatter):
    """Structured JSON formatter for production logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in STRUCTURED_EXTRAS:
            value = getattr(record, key, None)
            if value is not None:
                log_data[key] = value

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(stream=None):
    """Configure application logging based on environment.

    The stdio transport passes ``sys.stderr`` because stdout carries protocol frames.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setLevel(logging.DEBUG)

    # Use structured formatter in production, simple formatter in development
    if settings.LOG_LEVEL.upper() == "DEBUG":
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    else:
        formatter = StructuredFormatter()

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Suppress noisy loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    return root_logger


def truncate_caller(caller_id: str | None) -> str | None:
    """Shorten an opaque caller identifier for log output."""
    if caller_id is None:
        return None
    return str(caller_id)[:CALLER_ID_LOG_LENGTH]
