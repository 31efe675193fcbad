"""Flask CLI commands for refresh-token maintenance and schema setup."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from shopcart.core.config import is_production
from shopcart.core.container import get_container
from shopcart.core.extensions import db

LOGGER = logging.getLogger(__name__)


def _ensure_non_production(command: str) -> None:
    """Abort destructive commands when running in production."""
    if is_production(current_app.config):
        raise click.UsageError(
            f"The 'flask {command}' command is restricted to non-production environments."
        )


@click.group("tokens")
def tokens_cli() -> None:
    """Refresh-token maintenance commands."""


@tokens_cli.command("sweep")
@with_appcontext
def sweep_command() -> None:
    """Delete expired refresh tokens now (same job as the daily schedule)."""
    report = get_container().sweeper.sweep()
    click.echo(
        f"Sweep: scanned={report.scanned} deleted={report.deleted} failed={report.failed}"
    )
    if not report.ok:
        raise click.ClickException("Sweep could not query expired tokens; see logs.")


@tokens_cli.command("purge")
@click.option("--yes", is_flag=True, help="Skip the destructive confirmation prompt.")
@with_appcontext
def purge_command(yes: bool) -> None:
    """Delete every refresh token, logging out all shoppers."""
    _ensure_non_production("tokens purge")
    if not yes:
        click.confirm("This revokes every refresh token. Continue?", abort=True)
    removed = get_container().refresh_store.delete_all()
    LOGGER.warning("refresh_tokens.purged", extra={"deleted": removed})
    click.echo(f"Purged {removed} refresh token(s).")


@click.command("db-init")
@click.option("--drop", is_flag=True, help="Drop existing tables first (non-production only).")
@with_appcontext
def db_init_command(drop: bool) -> None:
    """Create database tables for all models."""
    if drop:
        _ensure_non_production("db-init --drop")
        db.drop_all()
    db.create_all()
    click.echo("Database tables created.")
