"""``flask migrate`` shortcuts over the Flask-Migrate / Alembic API."""

from __future__ import annotations

import logging

import click
import flask_migrate
from flask.cli import with_appcontext

LOGGER = logging.getLogger(__name__)


@click.group("migrate")
def migrate_cli() -> None:
    """Apply, roll back and inspect schema migrations."""


@migrate_cli.command("up")
@click.option("--revision", default="head", show_default=True, help="Target revision.")
@with_appcontext
def up_command(revision: str) -> None:
    """Upgrade the schema to ``revision``."""
    LOGGER.info("Upgrading schema to %s", revision)
    flask_migrate.upgrade(revision=revision)
    click.echo(f"Schema upgraded to {revision}.")


@migrate_cli.command("down")
@click.option("--steps", default=1, show_default=True, type=click.IntRange(min=1))
@with_appcontext
def down_command(steps: int) -> None:
    """Roll back the last ``steps`` revisions."""
    LOGGER.info("Downgrading schema by %d step(s)", steps)
    flask_migrate.downgrade(revision=f"-{steps}")
    click.echo(f"Schema rolled back {steps} step(s).")


@migrate_cli.command("version")
@with_appcontext
def version_command() -> None:
    """Print the revision the database is currently stamped with."""
    flask_migrate.current()


@migrate_cli.command("force")
@click.option("--revision", required=True, help="Revision to stamp without running it.")
@with_appcontext
def force_command(revision: str) -> None:
    """Stamp ``revision`` after a manual fix, skipping its upgrade body."""
    LOGGER.warning("Forcing schema stamp to %s", revision)
    flask_migrate.stamp(revision=revision)
    click.echo(f"Schema stamped at {revision}.")
