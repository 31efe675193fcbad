"""Pytest fixtures building an isolated application per test.

Each test gets a fresh Flask app on an in-memory SQLite database and an
in-memory refresh-token store. The Google verifier is replaced by a
table-driven stub so no network access ever happens.
"""

from __future__ import annotations

from collections.abc import Generator

import pytest
from flask import Flask
from flask.testing import FlaskClient

from shopcart import create_app
from shopcart.core import container as container_module
from shopcart.core.config import TestingConfig
from shopcart.core.container import AuthContainer, build_container
from shopcart.core.extensions import db as _db
from shopcart.services._shared.ports import StubIdentityVerifier, VerifiedClaims

from tests.helpers.clock import FakeClock
from tests.helpers.auth import GOOGLE_TOKEN, GOOGLE_CLAIMS


@pytest.fixture()
def clock() -> FakeClock:
    """Millisecond clock starting at the real current time."""
    return FakeClock()


@pytest.fixture()
def identity_verifier() -> StubIdentityVerifier:
    """Verifier accepting :data:`GOOGLE_TOKEN` only."""
    return StubIdentityVerifier({GOOGLE_TOKEN: GOOGLE_CLAIMS})


@pytest.fixture()
def app(identity_verifier: StubIdentityVerifier, clock: FakeClock) -> Generator[Flask, None, None]:
    """Create the application with test collaborators installed.

    Yields
    ------
    flask.Flask
        Application with an active app context and created tables.
    """
    application = create_app(TestingConfig)
    application.logger.setLevel("WARNING")
    container_module.install(
        application,
        build_container(application.config, verifier=identity_verifier, clock=clock),
    )
    with application.app_context():
        _db.create_all()
        yield application
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def db(app: Flask):
    """Database extension bound to the test application."""
    return _db


@pytest.fixture()
def container(app: Flask) -> AuthContainer:
    return container_module.get_container(app)


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


@pytest.fixture()
def claims_for():
    """Build :class:`VerifiedClaims` for ad-hoc Google identities."""

    def _build(email: str, name: str = "Test Shopper") -> VerifiedClaims:
        return VerifiedClaims(email=email, name=name, subject=f"sub-{email}")

    return _build
