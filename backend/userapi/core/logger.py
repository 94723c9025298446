"""Structured logging configuration with request correlation."""

from __future__ import annotations

import json
import logging
import re
import sys
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_HEADERS = ("X-Correlation-ID", "X-Request-ID")

# Matches ``phone_number='...'`` (dataclass repr) and ``'phoneNumber': '...'`` (dict repr).
_PHONE_PATTERN = re.compile(r"(phone_?number'?(?:=|: ))'([^']*)'", re.IGNORECASE)


class JSONFormatter(logging.Formatter):
    """Render log records as JSON objects."""

    def format(self, record: logging.LogRecord) -> str:  # pragma: no cover - formatting logic
        payload: dict[str, Any] = {
            "time": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for key in ("endpoint", "elapsed_ms", "error_code"):
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        return json.dumps(payload, default=str)


class RequestIdFilter(logging.Filter):
    """Ensure a ``request_id`` attribute is always present on log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - trivial
        if has_request_context():
            record.request_id = ensure_request_id()
        elif not hasattr(record, "request_id"):
            record.request_id = None
        return True


def supplied_correlation_id() -> str | None:
    """Return the correlation id sent by the caller, if any."""

    if not has_request_context():
        return None
    for header in CORRELATION_HEADERS:
        value = request.headers.get(header)
        if value:
            return value
    return None


def ensure_request_id() -> str:
    """Return the current request identifier, generating one when necessary."""

    if has_request_context():
        if "request_id" in g:
            return g.request_id  # type: ignore[no-any-return]
        request_id = supplied_correlation_id() or str(uuid4())
        g.request_id = request_id
        return request_id
    return str(uuid4())


def mask_phone(phone: str | None) -> str:
    """Keep the first two and last four characters of a phone number."""

    if phone is None or len(phone) < 4:
        return "***"
    return phone[:2] + "***" + phone[-4:]


def to_safe_value(obj: Any) -> str:
    """Render ``obj`` for logs with any phone number field masked."""

    return _PHONE_PATTERN.sub(
        lambda match: f"{match.group(1)}'{mask_phone(match.group(2))}'", str(obj)
    )


def to_safe_args(args: Iterable[Any] | None) -> str:
    """Render a sequence of call arguments for logs."""

    if not args:
        return "[]"
    return "[" + ", ".join(to_safe_value(arg) for arg in args) + "]"


def configure_logging(level: str | int = "INFO") -> None:
    """Configure the root logger with JSON-formatted stdout output."""

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestIdFilter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    level_value: int | str = level
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level_value = resolved if isinstance(resolved, int) else level.upper()
    root.setLevel(level_value)


def init_app(app: Flask) -> None:
    """Inject request-id middleware and attach filters to the app logger."""

    app.logger.addFilter(RequestIdFilter())

    @app.before_request
    def _seed_request_id() -> None:
        # The app context may outlive a single request (tests, CLI); reseed.
        g.pop("request_id", None)
        ensure_request_id()

    @app.after_request
    def _inject_response_header(response):
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = [
    "configure_logging",
    "init_app",
    "ensure_request_id",
    "supplied_correlation_id",
    "mask_phone",
    "to_safe_value",
    "to_safe_args",
]
