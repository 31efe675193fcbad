"""Session-bound repository base.

Repositories only read and stage rows. Committing belongs to the unit of
work that owns the session.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Generic, TypeVar, cast

from sqlalchemy.orm import Session
from sqlalchemy.orm.interfaces import ORMOption

from shopcart.core.extensions import db

E = TypeVar("E")


class BaseRepository(Generic[E]):
    """Primary-key access to one mapped ``model``.

    ``load_options`` are applied to every :meth:`get`, e.g. a
    ``selectinload`` for a collection callers always need.
    """

    model: type[E]
    load_options: Sequence[ORMOption] = ()

    def __init__(self, session: Session | None = None) -> None:
        # ``None`` defers to the Flask-scoped session at call time
        self._session = session

    @property
    def session(self) -> Session:
        return self._session if self._session is not None else cast(Session, db.session)

    def get(self, entity_id: Any) -> E | None:
        if not entity_id:
            return None
        return self.session.get(self.model, entity_id, options=list(self.load_options))

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so unique/foreign-key violations raise here."""
        self.session.add(instance)
        self.session.flush()
        return instance

    def delete(self, instance: E) -> None:
        self.session.delete(instance)
        self.session.flush()
