"""RFC 7807 (``application/problem+json``) error responses for the API.

Every failure leaving a request, whether raised by the HTTP layer, a
service, marshmallow, the database or Redis, is rendered through
:func:`problem_response` so clients see a single error shape that always
carries the request correlation id.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from shopcart.core.logger import ensure_request_id

log = logging.getLogger(__name__)

PROBLEM_MIMETYPE = "application/problem+json"

#: Infrastructure failures reported as 503 rather than as client errors
STORE_UNAVAILABLE_ERRORS: tuple[type[Exception], ...] = (OperationalError, RedisError)


def status_code_name(status: int) -> str:
    """Return a stable snake_case code for an HTTP status (``404`` -> ``not_found``)."""
    try:
        return HTTPStatus(status).phrase.lower().replace(" ", "_").replace("-", "_")
    except ValueError:
        return "error"


def problem_response(
    status: int,
    code: str,
    message: str,
    *,
    details: dict[str, Any] | None = None,
) -> tuple[Response, int]:
    """
    Build the problem+json response for ``status``.

    :param status: HTTP status code.
    :param code: Stable machine-consumable error code.
    :param message: Client-safe description.
    :param details: Optional structured context (e.g. validation messages).
    :returns: ``(response, status)`` suitable for returning from a handler.
    """
    body: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": status,
        "detail": message,
        "instance": request.path if request else None,
        "code": code,
        "request_id": ensure_request_id(),
    }
    if details:
        body["details"] = details

    resp = jsonify(body)
    resp.mimetype = PROBLEM_MIMETYPE
    if status == HTTPStatus.UNAUTHORIZED:
        resp.headers["WWW-Authenticate"] = 'Bearer realm="shopcart"'

    if status >= 500:
        log.error("problem.%s status=%s", code, status, exc_info=True)
    else:
        log.warning("problem.%s status=%s detail=%s", code, status, message)
    return resp, status


class APIError(Exception):
    """
    Error raised directly by the HTTP layer (before any service runs).

    Parameters
    ----------
    message : str
        Human-readable description presented to clients.
    status_code : int, optional
        HTTP status code to return. Defaults to ``400``.
    code : str, optional
        Machine-readable identifier. Defaults to ``"bad_request"``.
    details : dict[str, Any] | None, optional
        Optional structured payload included in the response body.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details or {}


class Unauthorized(APIError):
    """401: no principal, or no usable credential on the request."""

    def __init__(self, message: str = "Unauthorized", code: str = "unauthorized") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED, code=code)


class BadRequest(APIError):
    """400 for malformed requests that never reach a service."""

    def __init__(self, message: str = "Bad request") -> None:
        super().__init__(message, status_code=HTTPStatus.BAD_REQUEST, code="bad_request")


def init_app(app: Flask) -> None:
    """
    Register the problem+json handlers on ``app``.

    Notes
    -----
    - Service errors are translated in one place, never inside endpoints.
    - Store outages (database or Redis) surface as 503 and are never reported
      as authentication failures.
    """
    from shopcart.services._shared.errors import ServiceError, translate_service_error

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        return problem_response(err.status_code, err.code, err.message, details=err.details)

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        status, code, message = translate_service_error(err)
        return problem_response(status, code, message)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        message = (err.description or HTTPStatus(status).phrase).strip()
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route '{request.path}' not found"
        return problem_response(status, status_code_name(status), message)

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        return problem_response(
            HTTPStatus.UNPROCESSABLE_ENTITY,
            "validation_error",
            "Validation failed",
            details={"errors": err.messages},
        )

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        return problem_response(HTTPStatus.CONFLICT, "conflict", "Resource conflict")

    for exc_type in STORE_UNAVAILABLE_ERRORS:
        app.register_error_handler(
            exc_type,
            lambda err: problem_response(
                HTTPStatus.SERVICE_UNAVAILABLE,
                "service_unavailable",
                "Service temporarily unavailable",
            ),
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        return problem_response(
            HTTPStatus.INTERNAL_SERVER_ERROR, "internal_server_error", "Unexpected error"
        )
