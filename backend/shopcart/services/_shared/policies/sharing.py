"""Permission evaluation for shared carts.

The creator of a cart holds ADMIN implicitly and is never stored as an
entry, so every check starts with the ownership rule before scanning
explicit grants.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from shopcart.models.cart import SharePermission

if TYPE_CHECKING:  # pragma: no cover
    from shopcart.models.cart import ShopCart


def is_owner(*, actor_id, owner_id) -> bool:
    """Return True if the actor owns the resource."""
    return actor_id is not None and str(actor_id) == str(owner_id)


def permission_of(cart: ShopCart, shopper_id: str | None) -> SharePermission:
    """Return the effective level of ``shopper_id`` on ``cart``.

    Owner → ADMIN; explicit entry → its level; otherwise NONE.
    """
    if shopper_id is None:
        return SharePermission.NONE
    if is_owner(actor_id=shopper_id, owner_id=cart.created_by):
        return SharePermission.ADMIN
    entry = cart.entry_for(str(shopper_id))
    if entry is None:
        return SharePermission.NONE
    return SharePermission(entry.permission)


def can_view(cart: ShopCart, shopper_id: str | None) -> bool:
    return permission_of(cart, shopper_id) >= SharePermission.VIEW


def can_edit(cart: ShopCart, shopper_id: str | None) -> bool:
    return permission_of(cart, shopper_id) >= SharePermission.EDIT


def can_administer(cart: ShopCart, shopper_id: str | None) -> bool:
    return permission_of(cart, shopper_id) == SharePermission.ADMIN
