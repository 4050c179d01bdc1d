"""Standardized fetch events for better traceability."""

from __future__ import annotations

import logging
from typing import Any


def emit_event(
    logger: logging.Logger | logging.LoggerAdapter,
    event: str,
    payload: dict[str, Any] | None = None,
    *,
    level: str = "info",
    message: str | None = None,
) -> None:
    """Emit a structured event to the logger."""
    lvl = getattr(logging, level.upper(), logging.INFO)
    payload = payload or {}

    extra: dict[str, Any] = {"event": event, "payload": payload}
    # promote well-known fields so formatters can render them
    for k in ("url", "outcome", "elapsed_ms", "session_id"):
        if k in payload:
            extra[k] = payload[k]

    logger.log(lvl, message or f"Event: {event}", extra=extra)
