"""Structured logging helpers for the FitLockr services."""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
import re
import uuid
from typing import Any, Dict, Iterator

CORRELATION_ID: contextvars.ContextVar[str | None] = contextvars.ContextVar("correlation_id", default=None)

# Attributes every LogRecord carries; anything else on a record came in via ``extra``.
_RECORD_ATTRIBUTES = set(vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))) | {"message"}
_REDACTED_KEYS = {
    "email",
    "password",
    "new_password",
    "password_hash",
    "picture",
    "image",
    "primary_img",
    "secondary_imgs",
    "phone_number",
    "address",
    "api_secret",
}
_EMAIL_PATTERN = re.compile(r"[\w.\-]+@[\w.\-]+")


class JsonFormatter(logging.Formatter):
    """One JSON object per line: level, logger, event, correlation id and extras."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        message = super().format(record)
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
            "event": getattr(record, "event", message),
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }
        extras = {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRIBUTES}
        for key, value in extras.items():
            payload.setdefault(key, redact_for_log(value))
        return json.dumps(payload)


def configure_logging(level: int | str | None = None) -> None:
    """Send root logging to stderr as JSON at ``LOG_LEVEL`` (INFO by default)."""

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logging.basicConfig(level=level or os.getenv("LOG_LEVEL", "INFO"), handlers=[handler], force=True)


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def redact_for_log(payload: Any) -> Any:
    """Recursively mask credentials, contact details and inline image data."""

    if payload is None or isinstance(payload, (bool, int, float)):
        return payload
    if isinstance(payload, str):
        if payload.startswith("data:"):
            return "[redacted-data-url]"
        return _EMAIL_PATTERN.sub("[redacted-email]", payload)
    if isinstance(payload, (list, tuple)):
        return [redact_for_log(item) for item in payload]
    if isinstance(payload, dict):
        return {
            key: "[redacted]" if key in _REDACTED_KEYS else redact_for_log(value)
            for key, value in payload.items()
        }
    return str(payload)


def _current_correlation_id() -> str:
    """Return the active correlation id, assigning one outside a request."""

    correlation_id = CORRELATION_ID.get()
    if correlation_id is None:
        correlation_id = uuid.uuid4().hex
        CORRELATION_ID.set(correlation_id)
    return correlation_id


@contextlib.contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    """Scope a correlation id (``X-Request-ID`` or a fresh one) to a block."""

    token = CORRELATION_ID.set(correlation_id or uuid.uuid4().hex)
    try:
        yield CORRELATION_ID.get()
    finally:
        CORRELATION_ID.reset(token)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    exc_info = fields.pop("exc_info", None)
    logger.log(
        level,
        event,
        exc_info=exc_info,
        extra={"event": event, "correlation_id": _current_correlation_id(), **redact_for_log(fields)},
    )


__all__ = [
    "JsonFormatter",
    "configure_logging",
    "correlation_context",
    "get_logger",
    "log_event",
    "redact_for_log",
]
