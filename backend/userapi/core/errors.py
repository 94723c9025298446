"""Centralized JSON error handling for the API.

Every failure leaves the service as one payload shape::

    {
        "status": 409,
        "error": "Conflict",
        "message": "User with username 'bob' already exists",
        "path": "/api/users",
        "errorCode": "ERR_USER_ALREADY_EXISTS",
        "correlationId": "abc-123",          # caller-supplied, else null
        "validationErrors": {"field": "msg"} # structural failures only
    }
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, has_request_context, jsonify, request
from werkzeug.exceptions import HTTPException

from userapi.core.logger import supplied_correlation_id
from userapi.services._shared.errors import ErrorKind, ServiceError

log = logging.getLogger(__name__)

# Every ErrorKind must appear here: (status, code, error text).
SIGNAL_TABLE: Mapping[ErrorKind, tuple[HTTPStatus, str, str]] = {
    ErrorKind.VALIDATION: (HTTPStatus.BAD_REQUEST, "ERR_VALIDATION", "Validation Failed"),
    ErrorKind.MALFORMED_INPUT: (HTTPStatus.BAD_REQUEST, "ERR_JSON_PARSE", "Bad Request"),
    ErrorKind.AGE_MIN: (
        HTTPStatus.UNPROCESSABLE_ENTITY,
        "ERR_RULE_AGE_MIN",
        "Unprocessable Content",
    ),
    ErrorKind.COUNTRY_FR: (
        HTTPStatus.UNPROCESSABLE_ENTITY,
        "ERR_RULE_COUNTRY_FR",
        "Unprocessable Content",
    ),
    ErrorKind.ALREADY_EXISTS: (HTTPStatus.CONFLICT, "ERR_USER_ALREADY_EXISTS", "Conflict"),
    ErrorKind.NOT_FOUND: (HTTPStatus.NOT_FOUND, "ERR_USER_NOT_FOUND", "Not Found"),
}

# ``HTTPStatus.phrase`` changes between Python releases (422 in 3.13).
REASON_PHRASES: Mapping[int, str] = {
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    409: "Conflict",
    415: "Unsupported Media Type",
    422: "Unprocessable Content",
    500: "Internal Server Error",
}

INTERNAL_ERROR_CODE = "ERR_INTERNAL"
INTERNAL_ERROR_MESSAGE = "An unexpected error occurred"

DATE_FORMAT_MESSAGE = "Invalid date format for birthdate. Expected format: yyyy-MM-dd"
GENDER_VALUES_MESSAGE = "Invalid value for gender. Accepted values: MALE, FEMALE, OTHER"
MALFORMED_JSON_MESSAGE = "Malformed JSON request"


def classify_malformed(cause: str | None) -> str:
    """
    Pick a client message for a wire-level decoding failure.

    Best effort: the decision is made on the wording of the underlying
    error, so unusual wording falls back to the generic message.

    :param cause: Text of the decoding failure.
    :returns: Client-safe message.
    """
    text = (cause or "").lower()
    if "date" in text:
        return DATE_FORMAT_MESSAGE
    if "gender" in text or "enum" in text or "must be one of" in text:
        return GENDER_VALUES_MESSAGE
    return MALFORMED_JSON_MESSAGE


def _http_status_to_code(status_code: int) -> str:
    """Map framework-level HTTP errors to stable error codes."""
    mapping = {
        404: "ERR_ROUTE_NOT_FOUND",
        405: "ERR_METHOD_NOT_ALLOWED",
        415: "ERR_UNSUPPORTED_MEDIA_TYPE",
    }
    return mapping.get(status_code, "ERR_HTTP")


def error_payload(
    *,
    status: int,
    code: str,
    message: str,
    validation_errors: Mapping[str, str] | None = None,
    error: str | None = None,
) -> dict[str, Any]:
    """
    Build the error body returned to clients.

    :param status: HTTP status code.
    :param code: Stable machine-consumable error code.
    :param message: Human-readable error summary (safe for clients).
    :param validation_errors: Field → message mapping, omitted when empty.
    :param error: Short error text; defaults to the pinned reason phrase.
    :returns: JSON-serializable dictionary.
    """
    payload: dict[str, Any] = {
        "status": int(status),
        "error": error or REASON_PHRASES.get(int(status)) or HTTPStatus(status).phrase,
        "message": message,
        "path": request.path if has_request_context() else None,
        "errorCode": code,
        "correlationId": supplied_correlation_id(),
    }
    if validation_errors:
        payload["validationErrors"] = dict(validation_errors)
    return payload


class APIError(Exception):
    """
    Represent a JSON-serializable API error.

    Parameters
    ----------
    message : str
        Human-readable description presented to clients.
    status_code : int, optional
        HTTP status code to return. Defaults to ``400``.
    code : str, optional
        Stable error code. Defaults to ``"ERR_VALIDATION"``.
    validation_errors : Mapping[str, str] | None, optional
        Field-level messages for structural failures.
    error : str | None, optional
        Short error text; defaults to the reason phrase of ``status_code``.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "ERR_VALIDATION",
        validation_errors: Mapping[str, str] | None = None,
        error: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.validation_errors = dict(validation_errors or {})
        self.error = error

    def to_payload(self) -> dict[str, Any]:
        return error_payload(
            status=self.status_code,
            code=self.code,
            message=self.message,
            validation_errors=self.validation_errors or None,
            error=self.error,
        )


def translate_service_error(err: ServiceError) -> APIError:
    """
    Map a service signal to its HTTP status, error code and client message.

    :param err: Signal raised by the service or API layer.
    :returns: API error ready to be rendered.
    :raises KeyError: If ``err.kind`` is missing from :data:`SIGNAL_TABLE`.
    """
    status, code, error = SIGNAL_TABLE[err.kind]
    message = err.message
    if err.kind is ErrorKind.MALFORMED_INPUT:
        message = classify_malformed(err.message)
    return APIError(
        message,
        status_code=status,
        code=code,
        validation_errors=err.violations,
        error=error,
    )


def _json_error(payload: dict[str, Any], status: int) -> tuple[Response, int]:
    return jsonify(payload), status


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - 4xx are logged as warnings without traceback.
    - Anything unexpected is logged with ``exc_info`` and answered with a
      generic 500 that carries no internal detail.
    """

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        return handle_api_error(translate_service_error(err))

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        level = log.error if err.status_code >= 500 else log.warning
        level(
            "APIError: code=%s status=%s msg=%s",
            err.code,
            err.status_code,
            err.message,
            extra={"error_code": err.code},
        )
        return _json_error(err.to_payload(), err.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        code = _http_status_to_code(status)
        message = (err.description or HTTPStatus(status).phrase).strip()
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route '{request.path}' not found"
        log.warning("HTTPException: code=%s status=%s detail=%s", code, status, message)
        return _json_error(error_payload(status=status, code=code, message=message), status)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        log.error("Unhandled exception on %s", request.path, exc_info=err)
        payload = error_payload(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            code=INTERNAL_ERROR_CODE,
            message=INTERNAL_ERROR_MESSAGE,
        )
        return _json_error(payload, HTTPStatus.INTERNAL_SERVER_ERROR)
