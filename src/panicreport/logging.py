from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional

from .config import ENV_LOG_LEVEL

DEFAULT_LEVEL = "WARNING"


class PlainFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        timestamp = datetime.fromtimestamp(record.created, timezone.utc).isoformat(timespec="seconds")
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return f"{timestamp} {record.levelname} {record.name}: {message}"


def _level_from_str(level: str) -> int:
    value = getattr(logging, level.strip().upper(), None)
    if isinstance(value, int):
        return value
    return logging.WARNING


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger once. Subsequent calls are no-ops.
    Env override:
      - PANICREPORT_LOG_LEVEL (default WARNING)
    """
    if getattr(setup_logging, "_configured", False):
        return

    resolved = _level_from_str(level or os.getenv(ENV_LOG_LEVEL) or DEFAULT_LEVEL)

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(PlainFormatter())

    root = logging.getLogger()
    root.setLevel(resolved)
    root.handlers = [handler]

    # Request-level chatter from the HTTP stack stays hidden unless raised
    logging.getLogger("httpx").setLevel(max(resolved, logging.WARNING))
    logging.getLogger("httpcore").setLevel(max(resolved, logging.WARNING))

    setattr(setup_logging, "_configured", True)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
