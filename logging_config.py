"""
logging_config.py - Logging setup for the conformance gate.

All modules log through get_logger(__name__) with pipe-style messages
("event | key=value | ..."). The CLI calls setup_logging once; library use
and tests leave the root logger alone.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Optional

import orjson

TEXT_FORMAT = "%(asctime)s [%(name)-22s] %(levelname)-7s %(message)s"
DATE_FORMAT = "%H:%M:%S"


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record, for CI log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "module": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return orjson.dumps(payload).decode()


def setup_logging(
    level: int = logging.INFO,
    json_format: bool = False,
    stream: Optional[IO[str]] = None,
) -> None:
    """Route every gate logger to one stderr handler.

    Args:
        level: Logging level for the root logger.
        json_format: Emit JSON lines instead of the text layout.
        stream: Output stream; stderr keeps stdout free for the report.
    """
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    if json_format:
        handler.setFormatter(JsonLineFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger."""
    return logging.getLogger(name)


def level_from_name(name: str | None, default: int = logging.INFO) -> int:
    """Translate a LOG_LEVEL string such as 'debug' into a logging level."""
    if not name:
        return default
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else default
