"""Structured logging with context injection.

Features:
- console handler
- JSON logs optional (easy ingestion)
- context injection (url/outcome/elapsed) without needing a big framework

The fetcher only picks levels and messages. Hosts that already configure
logging can ignore setup_logger entirely.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from dataclasses import dataclass
from typing import Any

LOGGER_NAME = "jsfetch"
CONTEXT_FIELDS = ("url", "outcome", "elapsed_ms", "session_id", "event")

# ---------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------


class JsonFormatter(logging.Formatter):
    """Format log records as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        base: dict[str, Any] = {
            "ts": time.time(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for k in CONTEXT_FIELDS:
            if hasattr(record, k):
                base[k] = getattr(record, k)

        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)

        payload = getattr(record, "payload", None)
        if isinstance(payload, dict):
            base["payload"] = payload

        return json.dumps(base, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Format log records as human-readable text."""

    def format(self, record: logging.LogRecord) -> str:
        parts = [record.levelname, record.name]

        ctx = []
        for k in ("url", "outcome", "elapsed_ms"):
            v = getattr(record, k, None)
            if v is None or v == "":
                continue
            if k == "elapsed_ms":
                ctx.append(f"elapsed={float(v):.0f}ms")
            else:
                ctx.append(f"{k}={v}")

        if ctx:
            parts.append("[" + " ".join(ctx) + "]")

        parts.append(record.getMessage())
        s = " ".join(parts)

        if record.exc_info:
            s += "\n" + self.formatException(record.exc_info)

        return s


# ---------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class LoggingOptions:
    level: str = "INFO"
    json_logs: bool = False
    stream: Any = None  # defaults to sys.stderr


def setup_logger(options: LoggingOptions | None = None) -> logging.Logger:
    """Attach one console handler to the package logger; repeated calls reconfigure it."""
    options = options or LoggingOptions()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, options.level.upper(), logging.INFO))

    for h in list(logger.handlers):
        if getattr(h, "_jsfetch_handler", False):
            logger.removeHandler(h)

    handler = logging.StreamHandler(options.stream or sys.stderr)
    handler.setLevel(logger.level)
    handler.setFormatter(JsonFormatter() if options.json_logs else TextFormatter())
    handler._jsfetch_handler = True
    logger.addHandler(handler)
    return logger


# ---------------------------------------------------------------------
# Context injection
# ---------------------------------------------------------------------


class ContextAdapter(logging.LoggerAdapter):
    """Inject context fields into log records."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        extra = kwargs.get("extra", {})
        merged = dict(self.extra)
        merged.update(extra)
        kwargs["extra"] = merged
        return msg, kwargs


def with_context(
    logger: logging.Logger,
    *,
    url: str | None = None,
    session_id: str | None = None,
) -> ContextAdapter:
    extra: dict[str, Any] = {}
    if url:
        extra["url"] = url
    if session_id:
        extra["session_id"] = session_id
    return ContextAdapter(logger, extra)
