"""JSON logging, request correlation and log redaction for the Vesture API."""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import re
import uuid
from typing import Any, Dict, Iterator, Mapping

CORRELATION_ID: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)

# attributes every LogRecord carries; anything else arrived through ``extra``
_RECORD_ATTRIBUTES = set(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {
    "message",
    "asctime",
}
SENSITIVE_KEYS = frozenset(
    {
        "authorization",
        "custom_image",
        "email",
        "image",
        "image_url",
        "jwt_secret",
        "password",
        "password_hash",
        "profile_photo",
        "recognition_api_key",
        "text",
        "token",
    }
)
_EMAIL_PATTERN = re.compile(r"[\w.\-+]+@[\w\-]+(?:\.[\w\-]+)+")
_BEARER_PATTERN = re.compile(r"(?i)\b(bearer|key)\s+[\w\-.=]+")


class JsonFormatter(logging.Formatter):
    """One JSON object per line, tagged with service metadata and the request id."""

    def __init__(self, service: str = "vesture", environment: str | None = None) -> None:
        super().__init__()
        self.service = service
        self.environment = environment or "local"

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        message = super().format(record)
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "service": self.service,
            "environment": self.environment,
            "event": getattr(record, "event", message),
            "message": message,
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRIBUTES and key not in payload
        }
        payload.update(redact_for_log(extras))
        return json.dumps(payload, default=str)


def configure_logging(level: int | str = "INFO", environment: str | None = None) -> None:
    """Route the root logger through a single JSON stream handler."""

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter(environment=environment))
    logging.basicConfig(level=level, handlers=[handler], force=True)


def _scrub_text(value: str) -> str:
    if value.lower().startswith(("http://", "https://")):
        return "[redacted-url]"
    value = _BEARER_PATTERN.sub(lambda match: f"{match.group(1)} [redacted]", value)
    return _EMAIL_PATTERN.sub("[redacted-email]", value)


def redact_for_log(payload: Any) -> Any:
    """Mask credentials, emails and image URLs before they reach a log line."""

    if payload is None or isinstance(payload, (bool, int, float)):
        return payload
    if isinstance(payload, str):
        return _scrub_text(payload)
    if isinstance(payload, Mapping):
        return {
            key: "[redacted]" if str(key).lower() in SENSITIVE_KEYS else redact_for_log(value)
            for key, value in payload.items()
        }
    if isinstance(payload, (list, tuple, set)):
        return [redact_for_log(item) for item in payload]
    return _scrub_text(str(payload))


def get_logger(name: str) -> logging.Logger:
    """Return a module logger, configuring JSON output on first use."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def ensure_correlation_id(correlation_id: str | None = None) -> str:
    """Return the active request id, binding ``correlation_id`` or a new one if unset."""

    if correlation_id:
        CORRELATION_ID.set(correlation_id)
        return correlation_id
    current = CORRELATION_ID.get()
    if current:
        return current
    generated = uuid.uuid4().hex
    CORRELATION_ID.set(generated)
    return generated


@contextlib.contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    """Bind a request id for the duration of one HTTP request."""

    token = CORRELATION_ID.set(correlation_id or uuid.uuid4().hex)
    try:
        yield CORRELATION_ID.get()
    finally:
        CORRELATION_ID.reset(token)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Emit a named, redacted, correlated log entry."""

    correlation_id = ensure_correlation_id(fields.pop("correlation_id", None))
    exc_info = fields.pop("exc_info", None)
    logger.log(
        level,
        event,
        exc_info=exc_info,
        extra={"event": event, "correlation_id": correlation_id, **redact_for_log(fields)},
    )


__all__ = [
    "JsonFormatter",
    "SENSITIVE_KEYS",
    "configure_logging",
    "correlation_context",
    "ensure_correlation_id",
    "get_logger",
    "log_event",
    "redact_for_log",
]
