"""Flask CLI commands for inspecting and migrating legacy credentials."""

from __future__ import annotations

import json
import logging
from concurrent.futures import TimeoutError as FutureTimeoutError

import click
from flask import current_app
from flask.cli import with_appcontext

from authmigrate.core.extensions import get_migrator
from authmigrate.services.migration import MigrationResult, MigrationStatus

LOGGER = logging.getLogger(__name__)

persistence_key_option = click.option(
    "--persistence-key",
    "-k",
    default=None,
    help="Account slot to act on (defaults to the app's own slot).",
)


def _configure_logging(verbose: bool) -> None:
    """Raise logging verbosity for migration modules when requested."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.getLogger("authmigrate.services.migration").setLevel(level)
    logging.getLogger("authmigrate.infra.http").setLevel(level)
    LOGGER.setLevel(level)


def _echo_result(result: MigrationResult) -> None:
    """Pretty-print the terminal state of a migration."""
    click.echo(f"Migration: {result.status.value}")
    if result.session is not None:
        click.echo(f"  user       {result.session.uid}")
    if result.reason:
        click.echo(f"  reason     {result.reason}")
    if result.rejection is not None:
        click.echo(f"  rejection  {result.rejection.value}")
    if result.status_code:
        click.echo(f"  http       {result.status_code}")


def _ensure_non_production() -> None:
    """Abort commands that plant credentials when running in production."""
    config = current_app.config
    is_debug = bool(config.get("DEBUG"))
    is_testing = bool(config.get("TESTING"))
    if not (is_debug or is_testing):
        raise click.UsageError(
            "The 'flask legacy seed' command is restricted to non-production environments."
        )


@click.group("legacy")
@click.option("--verbose", is_flag=True, help="Enable verbose logging for migration.")
@click.pass_context
def legacy_cli(ctx: click.Context, verbose: bool) -> None:
    """Inspect, clear and migrate credentials left by the legacy SDK."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose)


@legacy_cli.command("status")
@persistence_key_option
@with_appcontext
def status_command(persistence_key: str | None) -> None:
    """Report whether a legacy credential is stored."""
    migrator = get_migrator()
    key = migrator.default_persistence_key if persistence_key is None else persistence_key
    present = migrator.has_legacy_credential(key)
    click.echo(f"{migrator.storage_key(key)}: {'present' if present else 'absent'}")


@legacy_cli.command("clear")
@persistence_key_option
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt.")
@with_appcontext
def clear_command(persistence_key: str | None, yes: bool) -> None:
    """Delete the legacy credential without migrating it."""
    migrator = get_migrator()
    storage_key = migrator.storage_key(persistence_key)
    if not yes:
        click.confirm(f"Delete legacy credential {storage_key}?", abort=True)
    migrator.clear_legacy_credential(persistence_key)
    click.echo(f"Cleared {storage_key}")


@legacy_cli.command("migrate")
@persistence_key_option
@with_appcontext
def migrate_command(persistence_key: str | None) -> None:
    """Exchange the legacy credential and sign in with the result."""
    timeout = current_app.config["MIGRATION_RESULT_TIMEOUT_SECONDS"]
    try:
        result = get_migrator().migrate(persistence_key).result(timeout=timeout)
    except FutureTimeoutError as exc:
        raise click.ClickException(f"Migration did not finish within {timeout}s") from exc
    _echo_result(result)
    if result.status is MigrationStatus.REJECTED:
        raise click.exceptions.Exit(1)


@legacy_cli.command("seed")
@persistence_key_option
@click.option("--token", required=True, help="Legacy token to plant.")
@with_appcontext
def seed_command(persistence_key: str | None, token: str) -> None:
    """Plant a legacy credential for local testing."""
    _ensure_non_production()
    migrator = get_migrator()
    storage_key = migrator.storage_key(persistence_key)
    migrator.store.put(storage_key, json.dumps({"token": token}))
    LOGGER.debug("legacy.seeded", extra={"persistence_key": persistence_key})
    click.echo(f"Seeded {storage_key}")


@legacy_cli.command("sign-out")
@with_appcontext
def sign_out_command() -> None:
    """End the current session; legacy credentials are kept."""
    ended = get_migrator().sign_out()
    click.echo(f"Signed out {ended.uid}" if ended is not None else "No active session")
