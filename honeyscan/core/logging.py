"""Logging setup for the CLI and the API.

Two formatters share one set of context fields that callers attach with
``extra=``: the token address, the id of the check that logged, the RPC
endpoint in use, and request data on the API side.

  - ``JSONFormatter``: one JSON object per line (staging / production)
  - ``DevFormatter``: coloured single-line output (development)
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

CONTEXT_FIELDS = (
    "address",
    "check",
    "rpc_url",
    "duration_ms",
    "request_id",
    "method",
    "path",
    "status_code",
)

NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "asyncio")


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Context fields present on ``record``, skipping ``None`` values."""
    return {
        key: getattr(record, key)
        for key in CONTEXT_FIELDS
        if getattr(record, key, None) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON document per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        entry.update(record_context(record))

        if record.exc_info and record.exc_info[1] is not None:
            exc_type, exc, _ = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__ if exc_type else type(exc).__name__,
                "message": str(exc),
                "traceback": self.formatException(record.exc_info),
            }
        return json.dumps(entry, default=str)


class DevFormatter(logging.Formatter):
    """``HH:MM:SS LEVEL logger: [req] [check] message`` with ANSI colours."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        colour = self.LEVEL_COLORS.get(record.levelno, "")
        stamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        tags = []
        request_id = getattr(record, "request_id", None)
        if request_id:
            tags.append(f"[{request_id[:8]}]")
        check = getattr(record, "check", None)
        if check:
            tags.append(f"[{check}]")

        line = f"{colour}{stamp} {record.levelname:<8}{self.RESET} {record.name}: "
        line += " ".join(tags + [record.getMessage()])
        if record.exc_info and record.exc_info[1] is not None:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    env: str = "development",
    log_level: str = "INFO",
    stream: TextIO | None = None,
) -> None:
    """Install a single root handler.

    Output goes to stderr by default so that CLI reports on stdout stay
    machine-readable.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JSONFormatter() if env in ("staging", "production") else DevFormatter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
