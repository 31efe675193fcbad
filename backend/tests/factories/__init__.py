"""Factory Boy helpers wired to the application's SQLAlchemy session."""

from __future__ import annotations

import factory

from shopcart.core.extensions import db


def _session():
    """Return the Flask-scoped session of the active app context."""
    return db.session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Base class persisting objects through ``db.session``.

    Objects are committed so services running their own units of work see
    them, exactly as rows written by an earlier request would be.
    """

    class Meta:
        abstract = True
        sqlalchemy_session_factory = _session
        sqlalchemy_session_persistence = "commit"
