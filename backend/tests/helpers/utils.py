"""Tiny helpers shared across test modules."""

from __future__ import annotations

from typing import Any

from werkzeug.test import TestResponse


def problem(resp: TestResponse) -> dict[str, Any]:
    """Return the RFC 7807 body of an error response, checking its media type."""
    assert resp.mimetype == "application/problem+json", resp.mimetype
    return resp.get_json()
