"""Pytest fixtures configuring an isolated database per test.

Each test gets its own application bound to a fresh in-memory SQLite database;
the schema is created before the test and dropped after it, so committed
writes never leak between cases.
"""

from __future__ import annotations

import os

import pytest

from catetin.core.config import TestingConfig
from catetin.core.extensions import db as _db
from catetin.factory import create_app
from catetin.services import AuthService
from catetin.services._shared.ports import PlainTextPasswordHasher, StubTokenProvider
from catetin.uow import SQLAlchemyTransactionManager


@pytest.fixture()
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestingConfig` applied, inside an
        active application context, with the schema created.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestingConfig, instance_relative_config=False)
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def db(app):
    """Database extension bound to the testing application."""
    return _db


@pytest.fixture()
def session(db):
    """The Flask-scoped session the repositories write through."""
    return db.session


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def tx(app):
    """Transaction manager over the application session.

    Any transaction a test leaves bound (manual ``begin`` without ``commit``)
    is rolled back so the next test starts unbound.
    """
    manager = SQLAlchemyTransactionManager()
    yield manager
    if manager.current() is not None:
        manager.rollback()


@pytest.fixture()
def auth_service(app, tx) -> AuthService:
    """AuthService wired to SQLAlchemy repositories and in-memory doubles."""
    return AuthService(
        password_hasher=PlainTextPasswordHasher(),
        token_provider=StubTokenProvider(),
        tx=tx,
    )


@pytest.fixture()
def provider(auth_service):
    """The seeded ``email-password`` provider."""
    return auth_service.ensure_email_password_provider()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk
