"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

from pathlib import Path

from flask import Flask
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address)


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, JWT and rate limiting.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`catetin.models` package to ensure SQLAlchemy metadata is ready for
        migrations.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from catetin import models as _models  # noqa: F401

    migrate.init_app(app, db, directory=app.config.get("MIGRATIONS_DIR", _default_migrations_dir()))
    jwt.init_app(app)
    limiter.init_app(app)


def _default_migrations_dir() -> str:
    """Return ``backend/migrations`` regardless of the current working directory."""
    return str(Path(__file__).resolve().parents[2] / "migrations")
