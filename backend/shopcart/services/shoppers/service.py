from __future__ import annotations

import logging

from shopcart.models.shopper import PROVIDER_GOOGLE, Shopper
from shopcart.services._shared.base import BaseService
from shopcart.services._shared.errors import NotFoundError

log = logging.getLogger(__name__)


class ShopperService(BaseService):
    """Shopper lookups and first-login provisioning."""

    def find(self, shopper_id: str) -> Shopper | None:
        """Return the shopper or ``None``; storage errors propagate."""
        with self.ro_uow() as uow:
            return uow.shoppers.get(shopper_id)

    def get(self, shopper_id: str) -> Shopper:
        """
        Return the shopper with ``shopper_id``.

        :raises NotFoundError: If no such shopper exists.
        """
        shopper = self.find(shopper_id)
        if shopper is None:
            raise NotFoundError("Shopper", shopper_id)
        return shopper

    def get_by_email(self, email: str) -> Shopper | None:
        with self.ro_uow() as uow:
            return uow.shoppers.get_by_email(email)

    def get_or_create(
        self, *, email: str, name: str, provider: str = PROVIDER_GOOGLE
    ) -> tuple[Shopper, bool]:
        """
        Find a shopper by email or create one.

        :param email: Email asserted by the identity provider.
        :param name: Display name used only when creating.
        :param provider: Identity provider tag for a new shopper.
        :returns: ``(shopper, created)``.
        """
        with self.rw_uow() as uow:
            shopper = uow.shoppers.get_by_email(email)
            if shopper is not None:
                return shopper, False
            shopper = uow.shoppers.add(
                Shopper(email=email, name=name or email.split("@")[0], provider=provider)
            )
            shopper_id = shopper.id
        log.info("shopper.created", extra={"shopper_id": shopper_id, "provider": provider})
        return shopper, True

    def delete(self, shopper_id: str) -> bool:
        """Remove a shopper. :returns: ``False`` if it did not exist."""
        with self.rw_uow() as uow:
            shopper = uow.shoppers.get(shopper_id)
            if shopper is None:
                return False
            uow.shoppers.delete(shopper)
        log.info("shopper.deleted", extra={"shopper_id": shopper_id})
        return True
