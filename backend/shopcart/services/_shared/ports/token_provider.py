from __future__ import annotations

from datetime import timedelta
from typing import Any, Protocol

from shopcart.services._shared.clock import Clock, epoch_millis
from shopcart.services._shared.errors import TokenInvalid


class TokenProvider(Protocol):
    """Port for signing and decoding access tokens.

    :meth:`decode` verifies the signature and structure only. Expiry is
    checked by the caller against its own clock so that ``now`` is sampled
    once per operation.
    """

    def create_access_token(
        self,
        *,
        identity: str,
        expires_delta: timedelta,
        additional_claims: dict[str, Any] | None = None,
    ) -> str: ...

    def decode(self, token: str) -> dict[str, Any]:
        """Return the verified claims.

        :raises TokenInvalid: For malformed, forged or unverifiable tokens.
        """
        ...


class StubTokenProvider(TokenProvider):
    """Deterministic token provider used in unit tests.

    Tokens are opaque strings mapped to their claims; ``iat``/``exp`` are taken
    from the injected clock in whole seconds like a real JWT.
    """

    def __init__(self, clock: Clock = epoch_millis) -> None:
        self._clock = clock
        self._seq = 0
        self._issued: dict[str, dict[str, Any]] = {}

    def create_access_token(
        self,
        *,
        identity: str,
        expires_delta: timedelta,
        additional_claims: dict[str, Any] | None = None,
    ) -> str:
        self._seq += 1
        now_s = self._clock() // 1000
        token = f"access.{identity}.{self._seq}"
        payload: dict[str, Any] = {
            "sub": identity,
            "type": "access",
            "iat": now_s,
            "exp": now_s + int(expires_delta.total_seconds()),
        }
        if additional_claims:
            payload.update(additional_claims)
        self._issued[token] = payload
        return token

    def decode(self, token: str) -> dict[str, Any]:
        try:
            return dict(self._issued[token])
        except KeyError as exc:
            raise TokenInvalid() from exc

    def forge(self, token: str, claims: dict[str, Any]) -> None:
        """Register arbitrary claims under ``token`` (for negative tests)."""
        self._issued[token] = dict(claims)
