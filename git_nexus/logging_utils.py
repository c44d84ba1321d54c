"""Structured logging utilities.

Modules log through `logging.getLogger(__name__)` and attach structured
fields with `extra={"event": "...", ...}`. `configure_logging` decides how
records are rendered: through Rich on stderr, or as one JSON object per
line.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime

__all__ = ["JsonLogFormatter", "LOG_LEVELS", "configure_logging"]

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")

_STANDARD_RECORD_KEYS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "message",
}

_HANDLER_NAME = "git-nexus"


class JsonLogFormatter(logging.Formatter):
    """Minimal JSON formatter for structured logs."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_KEYS and not key.startswith("_"):
                payload[key] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def configure_logging(level: str = "WARNING", *, json_output: bool = False) -> None:
    """Configure the package logger.

    Args:
        level: Level name, one of LOG_LEVELS (case-insensitive)
        json_output: Emit JSON lines instead of Rich-formatted records

    Raises:
        ValueError: Unknown level name
    """
    normalized = level.upper()
    if normalized not in LOG_LEVELS:
        raise ValueError(f"unknown log level '{level}' (expected one of: {', '.join(LOG_LEVELS)})")

    logger = logging.getLogger("git_nexus")
    for existing in [h for h in logger.handlers if h.get_name() == _HANDLER_NAME]:
        logger.removeHandler(existing)

    handler: logging.Handler
    if json_output:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JsonLogFormatter())
    else:
        from rich.console import Console
        from rich.logging import RichHandler

        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))

    handler.set_name(_HANDLER_NAME)
    logger.addHandler(handler)
    logger.setLevel(normalized)
    logger.propagate = False
