# tests/api/test_dev_auth_api.py
"""Development sign-in paths exist only when UNSAFE_DEV_AUTH is switched on."""

from __future__ import annotations

import pytest

from shopcart import create_app
from shopcart.core.config import TestingConfig
from shopcart.core.container import get_container
from shopcart.core.extensions import db as _db
from shopcart.infra.google.google_identity_verifier import DEV_IDENTITY, DevSentinelVerifier

from tests.helpers.auth import bearer

SENTINEL = "dev-sentinel-token"


class UnsafeDevConfig(TestingConfig):
    UNSAFE_DEV_AUTH = True
    DEV_AUTH_SENTINEL = SENTINEL


@pytest.fixture()
def dev_app():
    application = create_app(UnsafeDevConfig)
    with application.app_context():
        _db.create_all()
        yield application
        _db.session.remove()
        _db.drop_all()


def test_container_wraps_verifier_with_sentinel(dev_app):
    container = get_container(dev_app)

    assert isinstance(container.verifier, DevSentinelVerifier)
    assert container.dev_auth_enabled is True


def test_sentinel_logs_in_as_dev_identity(dev_app):
    client = dev_app.test_client()

    resp = client.post(
        "/api/v1/auth/google", headers={**bearer(SENTINEL), "X-Device-Id": "emulator"}
    )

    assert resp.status_code == 200
    access = resp.get_json()["data"]["access_token"]
    me = client.get("/api/v1/auth/me", headers=bearer(access)).get_json()["data"]
    assert me["email"] == DEV_IDENTITY.email
    assert me["name"] == DEV_IDENTITY.name


def test_dev_login_endpoint(dev_app):
    client = dev_app.test_client()

    resp = client.post(
        "/api/v1/dev/auth/login", json={"email": "tester@example.com", "device_id": "emu"}
    )

    assert resp.status_code == 200
    assert resp.get_json()["data"]["device_id"] == "emu"


def test_sentinel_rejected_when_flag_is_off(client, db):
    resp = client.post("/api/v1/auth/google", headers={**bearer(SENTINEL), "X-Device-Id": "emu"})

    assert resp.status_code == 401


def test_dev_login_route_absent_when_flag_is_off(client, db):
    resp = client.post("/api/v1/dev/auth/login", json={"email": "tester@example.com"})

    assert resp.status_code == 404
