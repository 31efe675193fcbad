"""Unit of Work contract shared by the service layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from shopcart.repositories import CartRepository, ShopperRepository


class UnitOfWork(ABC):
    """
    One transactional boundary per use case.

    Repositories exposed here share the same session, so everything staged
    inside a ``with`` block is committed or discarded together.

    :ivar shoppers: Shopper repository bound to this unit.
    :ivar carts: Cart repository bound to this unit.
    """

    shoppers: ShopperRepository
    carts: CartRepository

    def __enter__(self) -> UnitOfWork:
        return self

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
