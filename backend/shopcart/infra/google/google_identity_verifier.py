"""Google ID token verification against Google's published signing keys."""

from __future__ import annotations

import hmac
import logging
from typing import Any

import jwt
from jwt import PyJWKClient, PyJWTError

from shopcart.core.logger import token_hint
from shopcart.services._shared.errors import VerificationFailed
from shopcart.services._shared.ports.identity_verifier import IdentityVerifier, VerifiedClaims

log = logging.getLogger(__name__)

GOOGLE_JWKS_URI = "https://www.googleapis.com/oauth2/v3/certs"
GOOGLE_ISSUERS = frozenset({"accounts.google.com", "https://accounts.google.com"})
GOOGLE_ALGORITHMS = ["RS256"]

DEV_IDENTITY = VerifiedClaims(email="devuser@example.com", name="Dev User", subject="dev-user")


class GoogleIdentityVerifier(IdentityVerifier):
    """
    Verify Google-issued ID tokens.

    Checks the RS256 signature against Google's JWKS, the audience against
    the application's client id, the issuer, and ``exp``/``iat``. Every
    failure, including network errors while fetching keys, is raised as
    :class:`VerificationFailed`.

    :param client_id: Expected ``aud`` claim.
    :param jwks_client: Key source; defaults to a caching client on
        :data:`GOOGLE_JWKS_URI`.
    :param leeway_seconds: Clock skew tolerated on ``exp``/``iat``.
    """

    def __init__(
        self,
        client_id: str,
        *,
        jwks_client: PyJWKClient | None = None,
        leeway_seconds: int = 30,
    ) -> None:
        self.client_id = client_id
        self.jwks_client = jwks_client or PyJWKClient(GOOGLE_JWKS_URI, cache_keys=True)
        self.leeway_seconds = leeway_seconds

    def verify(self, identity_token: str) -> VerifiedClaims:
        if not identity_token or not self.client_id:
            raise VerificationFailed()
        try:
            signing_key = self.jwks_client.get_signing_key_from_jwt(identity_token)
            payload: dict[str, Any] = jwt.decode(
                identity_token,
                signing_key.key,
                algorithms=GOOGLE_ALGORITHMS,
                audience=self.client_id,
                leeway=self.leeway_seconds,
                options={"require": ["exp", "iat", "aud", "iss", "sub"]},
            )
        except (PyJWTError, ValueError, TypeError, KeyError, OSError) as exc:
            log.info("auth.identity.rejected reason=%s", type(exc).__name__)
            raise VerificationFailed() from exc

        if payload.get("iss") not in GOOGLE_ISSUERS:
            log.info("auth.identity.rejected reason=issuer")
            raise VerificationFailed("Identity token issuer is not Google")

        email = payload.get("email")
        if not isinstance(email, str) or not email:
            raise VerificationFailed("Identity token carries no email")
        if payload.get("email_verified") is False:
            raise VerificationFailed("Email address is not verified")

        name = payload.get("name")
        if not isinstance(name, str) or not name.strip():
            name = email.split("@")[0]
        return VerifiedClaims(email=email, name=name, subject=str(payload["sub"]))


class DevSentinelVerifier(IdentityVerifier):
    """
    Accept one fixed sentinel token and return :data:`DEV_IDENTITY`.

    UNSAFE: only constructed when ``UNSAFE_DEV_AUTH`` is on, which start-up
    validation refuses in production. Any other token goes to ``inner``.
    """

    def __init__(self, inner: IdentityVerifier, sentinel: str) -> None:
        if not sentinel:
            raise ValueError("A development sentinel value is required.")
        self.inner = inner
        self._sentinel = sentinel
        log.warning("auth.identity.dev_sentinel_enabled; identity checks can be bypassed")

    def verify(self, identity_token: str) -> VerifiedClaims:
        if identity_token and hmac.compare_digest(
            identity_token.encode("utf-8"), self._sentinel.encode("utf-8")
        ):
            log.warning(
                "auth.identity.dev_sentinel_used token=%s", token_hint(identity_token)
            )
            return DEV_IDENTITY
        return self.inner.verify(identity_token)
