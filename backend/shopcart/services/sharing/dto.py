from __future__ import annotations

from dataclasses import dataclass

from shopcart.models.cart import SharePermission


@dataclass(frozen=True, slots=True)
class ShareIn:
    """
    Input DTO for granting access to a cart.

    :param cart_id: Cart to share.
    :param target_email: Email of the shopper receiving access.
    :param permission: Level to grant (never ``NONE``).
    """

    cart_id: str
    target_email: str
    permission: SharePermission


@dataclass(frozen=True, slots=True)
class ShareOut:
    cart_id: str
    shopper_id: str
    email: str
    permission: SharePermission
    replaced: bool


@dataclass(frozen=True, slots=True)
class PermissionEntryOut:
    shopper_id: str
    permission: SharePermission
    owner: bool = False
