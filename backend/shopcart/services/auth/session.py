from __future__ import annotations

import logging
from typing import Any

from shopcart.core.logger import token_hint
from shopcart.services._shared.clock import Clock, epoch_millis
from shopcart.services._shared.errors import TokenExpired, TokenInvalid, TokenNotFound
from shopcart.services._shared.ports.refresh_token_store import (
    RefreshTokenRecord,
    RefreshTokenStore,
)
from shopcart.services._shared.ports.token_provider import TokenProvider
from shopcart.services.auth.dto import AuthTokenConfig, TokenPair

log = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
DEVICE_CLAIM = "device_id"


class SessionTokenService:
    """
    Issue, validate, rotate and revoke session tokens.

    Access tokens are stateless JWTs validated by signature and expiry only.
    Refresh tokens are opaque values whose store record is the single source
    of truth: deleting the record revokes the token.

    Every operation samples ``now`` exactly once from the injected
    millisecond clock.

    Refresh policy is **rotation**: a successful :meth:`refresh` replaces the
    presented refresh token with a new one, and the old value stops working.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        refresh_store: RefreshTokenStore,
        token_cfg: AuthTokenConfig,
        clock: Clock = epoch_millis,
    ) -> None:
        self.tokens = token_provider
        self.store = refresh_store
        self.cfg = token_cfg
        self.clock = clock

    @property
    def _refresh_ttl_ms(self) -> int:
        return int(self.cfg.refresh_expires.total_seconds() * 1000)

    # ------------------------------------------------------------------ #
    # Issue
    # ------------------------------------------------------------------ #

    def issue(self, shopper_id: str, device_id: str | None = None) -> TokenPair:
        """
        Mint an access token and persist a fresh refresh token.

        :param shopper_id: Subject of both tokens.
        :param device_id: Optional device the refresh token is bound to.
        :returns: The new token pair.
        """
        now = self.clock()
        record = self._new_record(shopper_id, device_id, now)
        self.store.save(record)
        log.info(
            "auth.session.issued",
            extra={"shopper_id": shopper_id, "device_id": device_id},
        )
        return self._pair(record)

    # ------------------------------------------------------------------ #
    # Access token validation
    # ------------------------------------------------------------------ #

    def is_valid(self, access_token: str | None) -> bool:
        """Return ``True`` for a well-signed, unexpired access token. No store access."""
        return self._valid_claims(access_token, self.clock()) is not None

    def extract_shopper_id(self, access_token: str | None) -> str | None:
        """Return the subject of a valid access token; ``None`` for anything else."""
        claims = self._valid_claims(access_token, self.clock())
        if claims is None:
            return None
        return str(claims["sub"])

    def _valid_claims(self, access_token: str | None, now_ms: int) -> dict[str, Any] | None:
        if not isinstance(access_token, str) or not access_token.strip():
            return None
        try:
            claims = self.tokens.decode(access_token)
        except TokenInvalid:
            return None
        if claims.get("type") != ACCESS_TOKEN_TYPE:
            return None
        exp = claims.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, int | float):
            return None
        if now_ms > int(exp * 1000):
            return None
        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject:
            return None
        return claims

    # ------------------------------------------------------------------ #
    # Refresh with rotation
    # ------------------------------------------------------------------ #

    def refresh(self, refresh_token: str, device_id: str | None = None) -> TokenPair:
        """
        Exchange a refresh token for a new pair, rotating the refresh token.

        :param refresh_token: Token previously returned by :meth:`issue` or
            :meth:`refresh`.
        :param device_id: When given, must equal the device stored with the token.
        :raises TokenNotFound: Unknown, revoked, or already rotated token.
        :raises TokenExpired: Token past its expiry; its record is deleted.
        :raises TokenInvalid: Device mismatch.
        """
        now = self.clock()
        record = self.store.find_by_token(refresh_token) if refresh_token else None
        if record is None:
            raise TokenNotFound()

        if record.is_expired(now):
            self.store.delete_by_token(record.token)
            log.info(
                "auth.refresh.expired",
                extra={"shopper_id": record.shopper_id, "device_id": record.device_id},
            )
            raise TokenExpired("Refresh token expired")

        if device_id is not None and device_id != record.device_id:
            log.warning(
                "auth.refresh.device_mismatch token=%s",
                token_hint(refresh_token),
                extra={"shopper_id": record.shopper_id, "device_id": device_id},
            )
            raise TokenInvalid("Refresh token was issued to another device")

        # Persist the successor first, then claim the old record by deleting it.
        successor = self._new_record(record.shopper_id, record.device_id, now)
        self.store.save(successor)
        if not self.store.delete_by_token(record.token):
            # A concurrent refresh consumed the old token first.
            self.store.delete_by_token(successor.token)
            raise TokenNotFound()

        log.info(
            "auth.refresh.rotated",
            extra={"shopper_id": record.shopper_id, "device_id": record.device_id},
        )
        return self._pair(successor)

    # ------------------------------------------------------------------ #
    # Revocation
    # ------------------------------------------------------------------ #

    def lookup(self, refresh_token: str) -> RefreshTokenRecord | None:
        if not refresh_token:
            return None
        return self.store.find_by_token(refresh_token)

    def revoke(self, refresh_token: str) -> bool:
        """Delete the refresh token record. Revoking an absent token is not an error."""
        if not refresh_token:
            return False
        removed = self.store.delete_by_token(refresh_token)
        log.info("auth.session.revoked token=%s removed=%s", token_hint(refresh_token), removed)
        return removed

    def revoke_all(self, shopper_id: str) -> int:
        """Delete every refresh token of ``shopper_id`` (logout from all devices)."""
        removed = self.store.delete_by_shopper(shopper_id)
        log.info("auth.session.revoked_all", extra={"shopper_id": shopper_id, "deleted": removed})
        return removed

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _new_record(self, shopper_id: str, device_id: str | None, now: int) -> RefreshTokenRecord:
        return RefreshTokenRecord(
            token=self.store.new_token(),
            shopper_id=str(shopper_id),
            device_id=device_id,
            expires_at=now + self._refresh_ttl_ms,
            issued_at=now,
        )

    def _pair(self, record: RefreshTokenRecord) -> TokenPair:
        claims: dict[str, Any] = {}
        if record.device_id is not None:
            claims[DEVICE_CLAIM] = record.device_id
        access = self.tokens.create_access_token(
            identity=record.shopper_id,
            expires_delta=self.cfg.access_expires,
            additional_claims=claims or None,
        )
        return TokenPair(
            access_token=access,
            refresh_token=record.token,
            shopper_id=record.shopper_id,
            device_id=record.device_id,
            expires_in=int(self.cfg.access_expires.total_seconds()),
        )
