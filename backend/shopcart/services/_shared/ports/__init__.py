"""
shopcart.services._shared.ports
===============================

Collection of *ports* (hexagonal interfaces) for the authentication
infrastructure.

Modules
-------
- :mod:`identity_verifier`:
    :class:`~.IdentityVerifier` validates third-party identity tokens.

- :mod:`token_provider`:
    :class:`~.TokenProvider` signs and decodes access tokens.

- :mod:`refresh_token_store`:
    :class:`~.RefreshTokenStore` persists outstanding refresh tokens.

Concrete adapters (Google JWKS, flask-jwt-extended, Redis) live under
``shopcart.infra``; the in-memory and stub doubles live next to their port.
"""

from __future__ import annotations

from .identity_verifier import IdentityVerifier, StubIdentityVerifier, VerifiedClaims
from .refresh_token_store import (
    InMemoryRefreshTokenStore,
    RefreshTokenRecord,
    RefreshTokenStore,
)
from .token_provider import StubTokenProvider, TokenProvider

__all__ = [
    "IdentityVerifier",
    "InMemoryRefreshTokenStore",
    "RefreshTokenRecord",
    "RefreshTokenStore",
    "StubIdentityVerifier",
    "StubTokenProvider",
    "TokenProvider",
    "VerifiedClaims",
]
