"""Per-request authentication gate.

The gate never rejects a request by itself: a missing, malformed, expired or
orphaned token simply leaves the context unauthenticated, and endpoints that
need identity refuse later with a uniform 401. Failures of the shopper lookup
are *not* caught here; they propagate and become a 5xx so that a store outage
is never mistaken for a bad token.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from shopcart.services._shared.base import ServiceContext
from shopcart.services.auth.session import SessionTokenService

if TYPE_CHECKING:  # pragma: no cover
    from shopcart.models.shopper import Shopper

log = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"

ShopperLookup = Callable[[str], "Shopper | None"]


def bearer_token(authorization: str | None) -> str | None:
    """Return the token of a ``Bearer <token>`` header, else ``None``."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != BEARER_SCHEME or not token or " " in token:
        return None
    return token


class AuthenticationGate:
    """
    Establish the request principal from an access token.

    :param sessions: Validates access tokens and extracts their subject.
    :param shopper_lookup: Loads a shopper by id, returning ``None`` when absent.
    """

    def __init__(self, *, sessions: SessionTokenService, shopper_lookup: ShopperLookup) -> None:
        self.sessions = sessions
        self.shopper_lookup = shopper_lookup

    def authenticate(self, ctx: ServiceContext, authorization: str | None) -> ServiceContext:
        """
        Return ``ctx`` with the principal attached when the bearer token checks out.

        :param ctx: Request context; returned unchanged when no principal results.
        :param authorization: Raw ``Authorization`` header value.
        :raises Exception: Whatever the shopper lookup raises.
        """
        token = bearer_token(authorization)
        if token is None:
            return ctx
        if ctx.principal is not None:
            return ctx
        # Validity and subject come from a single decode at a single instant
        shopper_id = self.sessions.extract_shopper_id(token)
        if shopper_id is None:
            log.debug("auth.gate.invalid_token")
            return ctx
        shopper = self.shopper_lookup(shopper_id)
        if shopper is None:
            log.info("auth.gate.unknown_shopper", extra={"shopper_id": shopper_id})
            return ctx
        return ctx.with_principal(shopper)
