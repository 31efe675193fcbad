"""Shopper repository for lookups and credential checks."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from shopcart.models.shopper import Shopper
from shopcart.repositories.base import BaseRepository


class ShopperRepository(BaseRepository[Shopper]):
    """Persistence-only repository for :class:`Shopper`.

    Emails are matched exactly as stored (case-sensitive); this repository
    never issues tokens or sessions.
    """

    model = Shopper

    def get_by_email(self, email: str) -> Shopper | None:
        """Fetch a shopper by exact email.

        :param email: Email address exactly as stored.
        :returns: Shopper instance or ``None`` when not found.
        """
        stmt = select(Shopper).where(Shopper.email == email)
        return cast(Shopper | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str) -> bool:
        stmt = select(Shopper.id).where(Shopper.email == email)
        return bool(self.session.execute(stmt).first())

    def authenticate(self, email: str, password: str) -> Shopper | None:
        """Return the shopper when ``password`` matches, else ``None``.

        :param email: Email address to authenticate.
        :param password: Raw password to verify.
        """
        shopper = self.get_by_email(email)
        if not shopper or not shopper.verify_password(password):
            return None
        return shopper
