"""Session-backed units of work (read-write and read-only)."""

from __future__ import annotations

from sqlalchemy import event
from sqlalchemy.orm import Session

from shopcart.core.extensions import db
from shopcart.repositories import CartRepository, ShopperRepository
from shopcart.uow.base import UnitOfWork


class _SessionBound(UnitOfWork):
    def __init__(self, session: Session | None = None) -> None:
        self.session: Session = session if session is not None else db.session
        self.shoppers = ShopperRepository(session=self.session)
        self.carts = CartRepository(session=self.session)

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyUnitOfWork(_SessionBound):
    """Commit when the block exits cleanly, roll back when it raises.

    A failed commit is rolled back before the error propagates so the scoped
    session stays usable for the rest of the request.
    """

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()


class SQLAlchemyReadOnlyUnitOfWork(_SessionBound):
    """Reject any ORM flush carrying pending changes while the block runs.

    Nothing is committed on exit; loaded instances remain attached.
    """

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        event.listen(self.session, "before_flush", _refuse_writes)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if event.contains(self.session, "before_flush", _refuse_writes):
            event.remove(self.session, "before_flush", _refuse_writes)

    def commit(self) -> None:
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")


def _refuse_writes(session: Session, flush_context, instances) -> None:
    if session.new or session.dirty or session.deleted:
        raise RuntimeError("Read-only UnitOfWork: ORM flush blocked (pending writes).")
