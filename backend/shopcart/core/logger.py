"""JSON logging to stdout with per-request correlation ids.

Every record carries ``request_id``; anything passed through ``extra=`` is
emitted as a top-level JSON field so call sites can log structured context
(``shopper_id``, ``cart_id``, ``device_id`` ...) without format strings.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Any
from uuid import uuid4

from flask import Flask, Response, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
INBOUND_ID_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")

# Attributes every LogRecord has; anything else came from ``extra=``
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "request_id"}

# Third-party loggers that are noisy at INFO
_QUIET_LOGGERS = ("apscheduler", "urllib3")


class JSONFormatter(logging.Formatter):
    """Render a record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # pragma: no cover - formatting logic
        entry: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        entry.update(
            (key, value) for key, value in vars(record).items() if key not in _RECORD_ATTRS
        )
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


class RequestIdFilter(logging.Filter):
    """Stamp ``request_id`` on each record (``None`` outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = ensure_request_id() if has_request_context() else None
        return True


def ensure_request_id() -> str:
    """Return the correlation id of the current request.

    The id is taken from the first inbound correlation header, or generated,
    and cached on :data:`flask.g`. Outside a request a throwaway id is returned.
    """
    if not has_request_context():
        return uuid4().hex
    cached = g.get("request_id")
    if cached:
        return cached
    inbound = next((request.headers[h] for h in INBOUND_ID_HEADERS if request.headers.get(h)), None)
    g.request_id = inbound or uuid4().hex
    return g.request_id


def token_hint(token: str | None) -> str:
    """Return a log-safe prefix of a credential."""
    if not token:
        return "<empty>"
    return f"{token[:6]}…"


def configure_logging(level: str | int = "INFO", *, stream: IO[str] | None = None) -> None:
    """Send all logging through a single JSON handler on ``stream`` (stdout)."""
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level.upper() if isinstance(level, str) else level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def init_app(app: Flask) -> None:
    """Seed the correlation id before each request and echo it on the response."""
    app.logger.addFilter(RequestIdFilter())

    @app.before_request
    def _seed_request_id() -> None:
        ensure_request_id()

    @app.after_request
    def _echo_request_id(response: Response) -> Response:
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = ["configure_logging", "ensure_request_id", "init_app", "token_hint"]
