"""Shopping cart and per-shopper share entries."""

from __future__ import annotations

from enum import IntEnum

from sqlalchemy import Enum, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from shopcart.core.extensions import db

from .base import AuditMixin, StrPKMixin


class SharePermission(IntEnum):
    """Ordered capability a shopper holds on a cart.

    ``NONE`` is only ever computed, never stored.
    """

    NONE = 0
    VIEW = 1
    EDIT = 2
    ADMIN = 3

    @classmethod
    def parse(cls, raw: str) -> SharePermission:
        """Return the grantable level named by ``raw`` (case-insensitive).

        :raises ValueError: For unknown names and for ``NONE``.
        """
        try:
            level = cls[str(raw).strip().upper()]
        except KeyError as exc:
            raise ValueError(f"Unknown permission: {raw!r}") from exc
        if level is cls.NONE:
            raise ValueError("NONE cannot be granted.")
        return level


class ShopCart(StrPKMixin, AuditMixin, db.Model):
    """
    A shareable grocery cart.

    The creator (``created_by``) holds ADMIN implicitly and never appears in
    :attr:`shares`.
    """

    __tablename__ = "shop_carts"

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    created_by: Mapped[str] = mapped_column(
        ForeignKey("shoppers.id", ondelete="CASCADE"), nullable=False
    )

    shares: Mapped[list[CartShare]] = relationship(
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartShare.created_at",
        lazy="selectin",
    )

    __table_args__ = (Index("ix_shop_carts_created_by", "created_by"),)

    def entry_for(self, shopper_id: str) -> CartShare | None:
        """Return the explicit share entry of ``shopper_id``, if any."""
        for share in self.shares:
            if share.shopper_id == shopper_id:
                return share
        return None

    def grant(self, shopper_id: str, level: SharePermission) -> CartShare:
        """
        Upsert the entry for ``shopper_id``: replace the level if present.

        :raises ValueError: When ``shopper_id`` is the creator.
        """
        if shopper_id == self.created_by:
            raise ValueError("The cart creator holds ADMIN implicitly.")
        existing = self.entry_for(shopper_id)
        if existing is not None:
            existing.permission = level
            return existing
        share = CartShare(shopper_id=shopper_id, permission=level)
        self.shares.append(share)
        return share

    def revoke_share(self, shopper_id: str) -> bool:
        """Drop the entry for ``shopper_id``. Return ``False`` when none existed."""
        existing = self.entry_for(shopper_id)
        if existing is None:
            return False
        self.shares.remove(existing)
        return True


class CartShare(AuditMixin, db.Model):
    """Explicit ``(cart, shopper, permission)`` grant."""

    __tablename__ = "cart_shares"

    id: Mapped[int] = mapped_column(primary_key=True)
    cart_id: Mapped[str] = mapped_column(
        ForeignKey("shop_carts.id", ondelete="CASCADE"), nullable=False
    )
    shopper_id: Mapped[str] = mapped_column(
        ForeignKey("shoppers.id", ondelete="CASCADE"), nullable=False
    )
    permission: Mapped[SharePermission] = mapped_column(
        Enum(SharePermission, native_enum=False, name="share_permission", length=8),
        nullable=False,
    )

    cart: Mapped[ShopCart] = relationship(back_populates="shares")

    __table_args__ = (
        UniqueConstraint("cart_id", "shopper_id", name="uq_cart_shares_cart_shopper"),
        Index("ix_cart_shares_shopper_id", "shopper_id"),
    )

    @validates("permission")
    def _validate_permission(self, key: str, value: SharePermission) -> SharePermission:
        level = SharePermission(value)
        if level is SharePermission.NONE:
            raise ValueError("NONE cannot be stored as a share entry.")
        return level

    def __repr__(self) -> str:
        return f"<CartShare cart={self.cart_id} shopper={self.shopper_id} {self.permission.name}>"
