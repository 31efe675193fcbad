# tests/unit/core/test_container.py
"""Composition of the authentication collaborators."""

from __future__ import annotations

import fakeredis
import pytest
from flask import Flask

from shopcart.core.container import build_container, get_container
from shopcart.infra.google.google_identity_verifier import (
    DevSentinelVerifier,
    GoogleIdentityVerifier,
)
from shopcart.infra.jwt.flask_jwt_token_provider import JWTTokenProvider
from shopcart.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore
from shopcart.services._shared.ports import InMemoryRefreshTokenStore


def _config(**overrides):
    cfg = {
        "ACCESS_TOKEN_TTL_SECONDS": 900,
        "REFRESH_TOKEN_TTL_SECONDS": 86400,
        "GOOGLE_CLIENT_ID": "client",
        "UNSAFE_DEV_AUTH": False,
        "DEV_AUTH_SENTINEL": None,
    }
    cfg.update(overrides)
    return cfg


def test_defaults():
    container = build_container(_config())

    assert isinstance(container.verifier, GoogleIdentityVerifier)
    assert isinstance(container.token_provider, JWTTokenProvider)
    assert isinstance(container.refresh_store, InMemoryRefreshTokenStore)
    assert container.dev_auth_enabled is False
    assert container.sweeper.store is container.refresh_store
    assert container.gate.sessions is container.sessions
    assert container.token_cfg.access_expires.total_seconds() == 900


def test_redis_client_selects_redis_store():
    container = build_container(_config(), redis_client=fakeredis.FakeRedis(decode_responses=True))

    assert isinstance(container.refresh_store, RedisRefreshTokenStore)


def test_unsafe_mode_wraps_verifier():
    container = build_container(_config(UNSAFE_DEV_AUTH=True, DEV_AUTH_SENTINEL="s"))

    assert isinstance(container.verifier, DevSentinelVerifier)
    assert container.dev_auth_enabled is True


@pytest.mark.parametrize("flag", [False, "true", 1, None])
def test_only_boolean_true_enables_unsafe_mode(flag):
    container = build_container(_config(UNSAFE_DEV_AUTH=flag, DEV_AUTH_SENTINEL="s"))

    assert isinstance(container.verifier, GoogleIdentityVerifier)
    assert container.dev_auth_enabled is False


def test_access_ttl_must_be_shorter_than_refresh_ttl():
    with pytest.raises(ValueError):
        build_container(_config(ACCESS_TOKEN_TTL_SECONDS=86400))


def test_get_container_before_init_fails():
    with pytest.raises(RuntimeError):
        get_container(Flask("bare"))
