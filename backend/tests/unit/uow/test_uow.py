# tests/unit/uow/test_uow.py
from __future__ import annotations

import pytest

from shopcart.models.shopper import Shopper
from shopcart.uow import SQLAlchemyReadOnlyUnitOfWork as ROuow
from shopcart.uow import SQLAlchemyUnitOfWork as RWuow

from tests.factories.shopper import ShopperFactory


class TestSQLAlchemyUnitOfWork:
    def test_commits_on_clean_exit(self, db):
        with RWuow() as uow:
            uow.shoppers.add(Shopper(email="rw@example.com", name="RW", provider="google"))
        db.session.expunge_all()

        assert db.session.query(Shopper).filter_by(email="rw@example.com").count() == 1

    def test_rolls_back_on_error(self, db):
        with pytest.raises(RuntimeError), RWuow() as uow:
            uow.shoppers.add(Shopper(email="rb@example.com", name="RB", provider="google"))
            raise RuntimeError("abort")

        assert db.session.query(Shopper).filter_by(email="rb@example.com").count() == 0


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_blocks_orm_flush_writes(self, db):
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            uow.session.add(Shopper(email="ro@example.com", name="RO", provider="google"))
            uow.session.flush()
        db.session.rollback()

    def test_allows_reads(self, db):
        shopper = ShopperFactory()

        with ROuow() as uow:
            assert uow.shoppers.get(shopper.id) is not None

    def test_disallows_commit(self, db):
        with ROuow() as uow, pytest.raises(RuntimeError):
            uow.commit()

    def test_guard_removed_after_exit(self, db):
        with ROuow():
            pass

        db.session.add(Shopper(email="after@example.com", name="After", provider="google"))
        db.session.commit()
