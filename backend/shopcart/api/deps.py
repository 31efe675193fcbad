"""Shared API helpers for request context, authentication and responses."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Flask, Response, current_app, g, jsonify, request

from shopcart.core.errors import BadRequest, Unauthorized
from shopcart.core.logger import ensure_request_id
from shopcart.services._shared.base import ServiceContext

F = TypeVar("F", bound=Callable[..., Any])

DEVICE_ID_HEADER = "X-Device-Id"


def init_app(app: Flask) -> None:
    """Run the authentication gate once per request, before any endpoint."""

    @app.before_request
    def _authenticate_request() -> None:
        from shopcart.core.container import get_container

        ctx = ServiceContext(
            request_id=ensure_request_id(),
            device_id=request.headers.get(DEVICE_ID_HEADER) or None,
        )
        # Lookup failures propagate here and become a 5xx response.
        g.service_ctx = get_container().gate.authenticate(
            ctx, request.headers.get("Authorization")
        )


def current_context() -> ServiceContext:
    """Return the request's :class:`ServiceContext` (unauthenticated if the gate did not run)."""
    ctx = getattr(g, "service_ctx", None)
    if ctx is None:
        ctx = ServiceContext(request_id=ensure_request_id())
        g.service_ctx = ctx
    return ctx


def require_auth(func: F) -> F:
    """Reject the request with 401 unless the gate attached a principal."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        if not current_context().is_authenticated:
            raise Unauthorized("Authentication required")
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def bearer_credential() -> str:
    """Return the Bearer credential of the request or raise 401."""
    from shopcart.services.auth.gate import bearer_token

    token = bearer_token(request.headers.get("Authorization"))
    if token is None:
        raise Unauthorized("Missing bearer credential")
    return token


def device_id_header(required: bool = False) -> str | None:
    value = request.headers.get(DEVICE_ID_HEADER) or None
    if required and value is None:
        raise BadRequest(f"Missing {DEVICE_ID_HEADER} header")
    return value


def json_body() -> dict[str, Any]:
    return request.get_json(silent=True) or {}


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
