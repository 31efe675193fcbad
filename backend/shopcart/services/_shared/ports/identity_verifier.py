from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from shopcart.services._shared.errors import VerificationFailed


@dataclass(frozen=True, slots=True)
class VerifiedClaims:
    """
    Identity asserted by the external provider.

    :ivar email: Verified email address.
    :ivar name: Display name (falls back to the email local part).
    :ivar subject: Provider-side stable user id, when available.
    """

    email: str
    name: str
    subject: str | None = None


class IdentityVerifier(Protocol):
    """Port for validating externally issued identity tokens."""

    def verify(self, identity_token: str) -> VerifiedClaims:
        """Return the verified claims.

        :raises VerificationFailed: On any failure. No other exception type
            may escape an implementation.
        """
        ...


class StubIdentityVerifier(IdentityVerifier):
    """Table-driven verifier used in unit and API tests."""

    def __init__(self, accepted: Mapping[str, VerifiedClaims] | None = None) -> None:
        self._accepted: dict[str, VerifiedClaims] = dict(accepted or {})

    def accept(self, identity_token: str, claims: VerifiedClaims) -> None:
        self._accepted[identity_token] = claims

    def verify(self, identity_token: str) -> VerifiedClaims:
        claims = self._accepted.get(identity_token)
        if claims is None:
            raise VerificationFailed()
        return claims
