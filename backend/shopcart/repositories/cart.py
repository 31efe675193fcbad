"""Cart repository: ownership lookups and derived membership."""

from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.orm import selectinload

from shopcart.models.cart import CartShare, ShopCart
from shopcart.repositories.base import BaseRepository


class CartRepository(BaseRepository[ShopCart]):
    """Persistence-only repository for :class:`ShopCart` and its share entries."""

    model = ShopCart

    load_options = (selectinload(ShopCart.shares),)

    def cart_ids_for(self, shopper_id: str) -> list[str]:
        """Return ids of carts created by or shared with ``shopper_id``.

        Ordered by cart creation time, id as tiebreaker.
        """
        shared = select(CartShare.cart_id).where(CartShare.shopper_id == shopper_id)
        stmt = (
            select(ShopCart.id)
            .where(or_(ShopCart.created_by == shopper_id, ShopCart.id.in_(shared)))
            .order_by(ShopCart.created_at.asc(), ShopCart.id.asc())
        )
        return list(self.session.execute(stmt).scalars().all())
