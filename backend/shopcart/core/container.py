"""Composition root for the authentication collaborators.

Everything is constructed explicitly once per application and stored on
``app.extensions``; request handlers fetch it through :func:`get_container`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from flask import Flask, current_app

from shopcart.infra.google.google_identity_verifier import (
    DevSentinelVerifier,
    GoogleIdentityVerifier,
)
from shopcart.infra.jwt.flask_jwt_token_provider import JWTTokenProvider
from shopcart.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore
from shopcart.services._shared.clock import Clock, epoch_millis
from shopcart.services._shared.ports import (
    IdentityVerifier,
    InMemoryRefreshTokenStore,
    RefreshTokenStore,
    TokenProvider,
)
from shopcart.services.auth.dto import AuthTokenConfig
from shopcart.services.auth.gate import AuthenticationGate
from shopcart.services.auth.session import SessionTokenService
from shopcart.services.auth.sweeper import RefreshTokenSweeper
from shopcart.services.shoppers.service import ShopperService

log = logging.getLogger(__name__)

EXTENSION_KEY = "shopcart.container"


@dataclass(slots=True)
class AuthContainer:
    """Process-wide authentication collaborators."""

    token_cfg: AuthTokenConfig
    verifier: IdentityVerifier
    token_provider: TokenProvider
    refresh_store: RefreshTokenStore
    sessions: SessionTokenService
    gate: AuthenticationGate
    sweeper: RefreshTokenSweeper
    dev_auth_enabled: bool = False


def _find_shopper(shopper_id: str):
    return ShopperService().find(shopper_id)


def build_container(
    config: Mapping[str, Any],
    *,
    redis_client: Any | None = None,
    verifier: IdentityVerifier | None = None,
    token_provider: TokenProvider | None = None,
    refresh_store: RefreshTokenStore | None = None,
    clock: Clock = epoch_millis,
) -> AuthContainer:
    """
    Build every collaborator from ``config``; keyword arguments replace defaults.

    :param config: Flask config mapping (already validated).
    :param redis_client: Connected client; selects the Redis refresh-token store.
    :returns: A fully wired :class:`AuthContainer`.
    """
    token_cfg = AuthTokenConfig(
        access_expires=timedelta(seconds=int(config["ACCESS_TOKEN_TTL_SECONDS"])),
        refresh_expires=timedelta(seconds=int(config["REFRESH_TOKEN_TTL_SECONDS"])),
    )

    dev_auth_enabled = config.get("UNSAFE_DEV_AUTH") is True
    if verifier is None:
        verifier = GoogleIdentityVerifier(str(config.get("GOOGLE_CLIENT_ID") or ""))
        if dev_auth_enabled:
            verifier = DevSentinelVerifier(verifier, str(config["DEV_AUTH_SENTINEL"]))

    if refresh_store is None:
        if redis_client is not None:
            refresh_store = RedisRefreshTokenStore(redis_client)
        else:
            refresh_store = InMemoryRefreshTokenStore()
            log.warning("auth.refresh_store.in_memory; tokens do not survive restarts")

    token_provider = token_provider or JWTTokenProvider()
    sessions = SessionTokenService(
        token_provider=token_provider,
        refresh_store=refresh_store,
        token_cfg=token_cfg,
        clock=clock,
    )
    return AuthContainer(
        token_cfg=token_cfg,
        verifier=verifier,
        token_provider=token_provider,
        refresh_store=refresh_store,
        sessions=sessions,
        gate=AuthenticationGate(sessions=sessions, shopper_lookup=_find_shopper),
        sweeper=RefreshTokenSweeper(refresh_store, clock=clock),
        dev_auth_enabled=dev_auth_enabled,
    )


def install(app: Flask, container: AuthContainer) -> AuthContainer:
    app.extensions[EXTENSION_KEY] = container
    return container


def init_app(app: Flask) -> None:
    from shopcart.core.extensions import redis_client

    install(app, build_container(app.config, redis_client=redis_client))


def get_container(app: Flask | None = None) -> AuthContainer:
    """Return the container of ``app`` (default: the current app)."""
    target = app or current_app
    try:
        return target.extensions[EXTENSION_KEY]
    except KeyError as exc:
        raise RuntimeError("Auth container is not initialized. Call init_app() first.") from exc
