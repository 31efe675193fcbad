"""Authentication helpers shared by API tests."""

from __future__ import annotations

from typing import Any

from flask.testing import FlaskClient

from shopcart.services._shared.ports import VerifiedClaims

GOOGLE_TOKEN = "google-id-token-ana"
GOOGLE_CLAIMS = VerifiedClaims(email="ana@example.com", name="Ana", subject="google-ana")

DEVICE = "device-1"


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def google_login(
    client: FlaskClient, token: str = GOOGLE_TOKEN, device_id: str = DEVICE
) -> dict[str, Any]:
    """Log in through ``POST /api/v1/auth/google`` and return the token payload."""
    resp = client.post(
        "/api/v1/auth/google",
        headers={**bearer(token), "X-Device-Id": device_id},
    )
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()["data"]
