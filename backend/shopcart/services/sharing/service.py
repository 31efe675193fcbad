from __future__ import annotations

import logging

from shopcart.models.cart import SharePermission, ShopCart
from shopcart.services._shared.base import BaseService
from shopcart.services._shared.errors import (
    AuthorizationError,
    CannotShareWithSelf,
    NotFoundError,
    TargetNotFound,
)
from shopcart.services._shared.policies.sharing import (
    can_administer,
    can_view,
    is_owner,
    permission_of,
)
from shopcart.services.sharing.dto import PermissionEntryOut, ShareIn, ShareOut
from shopcart.uow.base import UnitOfWork

log = logging.getLogger(__name__)


class SharingService(BaseService):
    """
    Share and unshare carts on behalf of the authenticated shopper.

    Both mutations require ADMIN on the cart. The owner holds ADMIN
    implicitly; explicit ADMIN grantees may share too.
    """

    def _load_cart(self, uow: UnitOfWork, cart_id: str) -> ShopCart:
        cart = uow.carts.get(cart_id)
        if cart is None:
            raise NotFoundError("ShopCart", cart_id)
        return cart

    def share(self, dto: ShareIn) -> ShareOut:
        """
        Grant ``dto.permission`` on the cart to the shopper owning ``dto.target_email``.

        Re-sharing replaces the previous level; there is never more than one
        entry per shopper.

        :raises AuthorizationError: Acting shopper lacks ADMIN.
        :raises TargetNotFound: No shopper has that email.
        :raises CannotShareWithSelf: Target is the owner or the acting shopper.
        """
        actor_id = self.require_actor()
        if dto.permission is SharePermission.NONE:
            raise ValueError("NONE cannot be granted.")
        with self.rw_uow() as uow:
            cart = self._load_cart(uow, dto.cart_id)
            if not can_administer(cart, actor_id):
                raise AuthorizationError("ADMIN permission required to share this cart")
            target = uow.shoppers.get_by_email(dto.target_email)
            if target is None:
                raise TargetNotFound(dto.target_email)
            if is_owner(actor_id=target.id, owner_id=cart.created_by) or target.id == actor_id:
                raise CannotShareWithSelf()
            replaced = cart.entry_for(target.id) is not None
            cart.grant(target.id, dto.permission)
            out = ShareOut(
                cart_id=cart.id,
                shopper_id=target.id,
                email=target.email,
                permission=dto.permission,
                replaced=replaced,
            )
        log.info(
            "cart.shared",
            extra={
                "cart_id": out.cart_id,
                "shopper_id": actor_id,
                "target_shopper_id": out.shopper_id,
                "permission": out.permission.name,
            },
        )
        return out

    def unshare(self, cart_id: str, target_shopper_id: str) -> bool:
        """
        Remove the entry of ``target_shopper_id``.

        :returns: ``False`` when there was no entry (still a success).
        :raises AuthorizationError: Acting shopper lacks ADMIN.
        """
        actor_id = self.require_actor()
        with self.rw_uow() as uow:
            cart = self._load_cart(uow, cart_id)
            if not can_administer(cart, actor_id):
                raise AuthorizationError("ADMIN permission required to unshare this cart")
            removed = cart.revoke_share(target_shopper_id)
        log.info(
            "cart.unshared",
            extra={
                "cart_id": cart_id,
                "shopper_id": actor_id,
                "target_shopper_id": target_shopper_id,
            },
        )
        return removed

    def list_permissions(self, cart_id: str) -> list[PermissionEntryOut]:
        """
        Return the owner (ADMIN) followed by the explicit entries.

        :raises AuthorizationError: Acting shopper cannot view the cart.
        """
        actor_id = self.require_actor()
        with self.ro_uow() as uow:
            cart = self._load_cart(uow, cart_id)
            if not can_view(cart, actor_id):
                raise AuthorizationError("You cannot view this cart")
            entries = [
                PermissionEntryOut(
                    shopper_id=cart.created_by, permission=SharePermission.ADMIN, owner=True
                )
            ]
            entries.extend(
                PermissionEntryOut(shopper_id=s.shopper_id, permission=s.permission)
                for s in cart.shares
            )
        return entries

    def permission_for(self, cart_id: str, shopper_id: str | None = None) -> SharePermission:
        """Return the effective level of ``shopper_id`` (default: the actor) on a cart."""
        subject = shopper_id if shopper_id is not None else self.require_actor()
        with self.ro_uow() as uow:
            return permission_of(self._load_cart(uow, cart_id), subject)

    def ensure_permission(self, cart_id: str, required: SharePermission) -> SharePermission:
        """
        Guard for cart operations that need at least ``required``.

        :raises AuthorizationError: If the actor's level is lower.
        """
        level = self.permission_for(cart_id)
        if level < required:
            raise AuthorizationError(f"{required.name} permission required")
        return level

    def cart_ids_for(self, shopper_id: str) -> list[str]:
        with self.ro_uow() as uow:
            return uow.carts.cart_ids_for(shopper_id)
