"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, jsonify, request
from marshmallow import Schema, ValidationError
from werkzeug.exceptions import BadRequest, UnsupportedMediaType

from userapi.core.logger import ensure_request_id, to_safe_args, to_safe_value
from userapi.schemas.user import describe_errors
from userapi.services._shared.base import ServiceContext
from userapi.services._shared.errors import ServiceError

F = TypeVar("F", bound=Callable[..., Any])

log = logging.getLogger("userapi.api")


def call_context() -> ServiceContext:
    """Build the service context for the current HTTP request."""

    return ServiceContext(request_id=ensure_request_id(), in_http_call=True)


def load_json_body(schema: Schema) -> Any:
    """Decode the JSON request body with ``schema``.

    :raises ServiceError: ``MALFORMED_INPUT`` when the body is not valid JSON
        or a value cannot be decoded (bad date, unknown gender, wrong type).
    :raises werkzeug.exceptions.UnsupportedMediaType: When the request is not
        ``application/json``.
    """

    try:
        raw = request.get_json()
    except UnsupportedMediaType:
        raise
    except BadRequest as exc:
        raise ServiceError.malformed(str(exc.description or exc)) from exc
    if raw is None:
        raise ServiceError.malformed("Request body is empty")
    try:
        return schema.load(raw)
    except ValidationError as exc:
        raise ServiceError.malformed(describe_errors(exc)) from exc


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def _status_of(result: Any) -> int:
    if isinstance(result, Response):
        return result.status_code
    if isinstance(result, tuple) and len(result) > 1 and isinstance(result[1], int):
        return result[1]
    return 200


def log_api_call(func: F) -> F:
    """Decorator logging each API call with its outcome and duration.

    Arguments and response bodies are only logged at DEBUG, with phone
    numbers masked. Failures are logged by exception class; the error
    handlers log the details.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        signature = f"{func.__module__.rsplit('.', 1)[-1]}.{func.__name__}"
        http_info = f"{request.method} {request.path}"
        start = time.perf_counter()
        if log.isEnabledFor(logging.DEBUG):
            log.debug(
                "ApiCall START %s http=%s args=%s",
                signature,
                http_info,
                to_safe_args(list(kwargs.values())),
            )
        try:
            result = func(*args, **kwargs)
        except Exception as exc:
            elapsed_ms = (time.perf_counter() - start) * 1000
            log.info(
                "ApiCall FAIL %s http=%s duration=%dms exception=%s",
                signature,
                http_info,
                elapsed_ms,
                type(exc).__name__,
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )
            raise
        elapsed_ms = (time.perf_counter() - start) * 1000
        status = _status_of(result)
        extra = {"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)}
        if log.isEnabledFor(logging.DEBUG):
            body = result.get_json(silent=True) if isinstance(result, Response) else result
            log.debug(
                "ApiCall SUCCESS %s http=%s status=%s duration=%dms result=%s",
                signature,
                http_info,
                status,
                elapsed_ms,
                to_safe_value(body),
                extra=extra,
            )
        else:
            log.info(
                "ApiCall SUCCESS %s http=%s status=%s duration=%dms",
                signature,
                http_info,
                status,
                elapsed_ms,
                extra=extra,
            )
        return result

    return wrapper  # type: ignore[return-value]
