from __future__ import annotations

import logging

from shopcart.models.shopper import PROVIDER_GOOGLE, PROVIDER_MANUAL, Shopper
from shopcart.services._shared.base import BaseService, ServiceContext
from shopcart.services._shared.errors import (
    AuthorizationError,
    ConflictError,
    InvalidCredentials,
    NotFoundError,
    TokenInvalid,
)
from shopcart.services._shared.ports.identity_verifier import IdentityVerifier
from shopcart.services.auth.dto import (
    LoginIn,
    LogoutIn,
    PrincipalOut,
    RefreshIn,
    RegisterIn,
    TokenPair,
)
from shopcart.services.auth.session import SessionTokenService
from shopcart.services.shoppers.service import ShopperService

log = logging.getLogger(__name__)

DEV_USER_NAME = "Dev User"


class AuthService(BaseService):
    """
    Authentication use cases on top of :class:`SessionTokenService`.

    Covers federated (Google) login, password accounts, development login,
    refresh, logout of one device and logout of every device.
    """

    def __init__(
        self,
        *,
        sessions: SessionTokenService,
        verifier: IdentityVerifier,
        dev_login_enabled: bool = False,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        :param sessions: Token issuance and refresh-token lifecycle.
        :param verifier: Validates third-party identity tokens.
        :param dev_login_enabled: Whether :meth:`dev_login` may run at all.
        :param ctx: Request-scoped context.
        """
        super().__init__(ctx=ctx)
        self.sessions = sessions
        self.verifier = verifier
        self.dev_login_enabled = dev_login_enabled

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login_with_identity_token(self, identity_token: str, device_id: str | None) -> TokenPair:
        """
        Verify a Google ID token, provision the shopper on first login and issue tokens.

        A shopper created by this call is removed again when the tokens
        cannot be issued.

        :raises VerificationFailed: When the identity token is rejected.
        """
        claims = self.verifier.verify(identity_token)
        return self._login_or_provision(claims.email, claims.name, PROVIDER_GOOGLE, device_id)

    def dev_login(self, email: str, device_id: str | None = None) -> TokenPair:
        """
        Issue tokens for ``email`` without any identity proof.

        :raises AuthorizationError: Unless unsafe development auth is enabled.
        """
        if not self.dev_login_enabled:
            raise AuthorizationError("Development login is disabled")
        log.warning("auth.dev_login used; never enable this in production")
        return self._login_or_provision(email, DEV_USER_NAME, PROVIDER_GOOGLE, device_id)

    def register(self, dto: RegisterIn) -> TokenPair:
        """
        Create a password account and log it in.

        :raises ConflictError: If the email is already registered.
        """
        with self.rw_uow() as uow:
            if uow.shoppers.exists_by_email(dto.email):
                raise ConflictError("Shopper", "email already registered")
            shopper = Shopper(email=dto.email, name=dto.name, provider=PROVIDER_MANUAL)
            shopper.password = dto.password
            uow.shoppers.add(shopper)
            shopper_id = shopper.id
        log.info("shopper.registered", extra={"shopper_id": shopper_id})
        return self.sessions.issue(shopper_id, dto.device_id)

    def login(self, dto: LoginIn) -> TokenPair:
        """
        Authenticate email and password and issue a fresh token pair.

        :raises InvalidCredentials: If the credentials do not match.
        """
        with self.ro_uow() as uow:
            shopper = uow.shoppers.authenticate(dto.email, dto.password)
            if shopper is None:
                raise InvalidCredentials()
            shopper_id = shopper.id
        return self.sessions.issue(shopper_id, dto.device_id)

    def _login_or_provision(
        self, email: str, name: str, provider: str, device_id: str | None
    ) -> TokenPair:
        shoppers = ShopperService(ctx=self.ctx)
        shopper, created = shoppers.get_or_create(email=email, name=name, provider=provider)
        shopper_id = shopper.id
        try:
            pair = self.sessions.issue(shopper_id, device_id)
        except Exception:
            if created:
                log.warning(
                    "auth.login.rollback_shopper",
                    extra={"shopper_id": shopper_id},
                )
                shoppers.delete(shopper_id)
            raise
        log.info(
            "auth.login.ok",
            extra={"shopper_id": shopper_id, "device_id": device_id, "provider": provider},
        )
        return pair

    # ------------------------------------------------------------------ #
    # Refresh / logout
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPair:
        return self.sessions.refresh(dto.refresh_token, dto.device_id)

    def logout(self, dto: LogoutIn) -> None:
        """
        Revoke one refresh token. Unknown tokens are accepted silently.

        :raises TokenInvalid: When a device id is given and the token belongs
            to another device.
        """
        record = self.sessions.lookup(dto.refresh_token)
        if record is None:
            return
        if dto.device_id is not None and dto.device_id != record.device_id:
            raise TokenInvalid("Refresh token was issued to another device")
        self.sessions.revoke(dto.refresh_token)

    def logout_all(self) -> int:
        """Revoke every refresh token of the authenticated shopper."""
        return self.sessions.revoke_all(self.require_actor())

    # ------------------------------------------------------------------ #
    # Principal
    # ------------------------------------------------------------------ #

    def me(self) -> PrincipalOut:
        actor_id = self.require_actor()
        with self.ro_uow() as uow:
            shopper = uow.shoppers.get(actor_id)
            if shopper is None:
                raise NotFoundError("Shopper", actor_id)
            return PrincipalOut(
                id=shopper.id,
                email=shopper.email,
                name=shopper.name,
                provider=shopper.provider,
                cart_ids=uow.carts.cart_ids_for(actor_id),
            )
