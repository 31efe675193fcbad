"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from shopcart.repositories.base import BaseRepository
from shopcart.repositories.cart import CartRepository
from shopcart.repositories.shopper import ShopperRepository

__all__ = [
    "BaseRepository",
    "CartRepository",
    "ShopperRepository",
]
