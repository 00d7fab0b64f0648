"""Command-line interface for pomolite stores."""

import sqlite3
from pathlib import Path

import click

from . import store as store_module
from .config import (
    ConfigError,
    configure_logging,
    find_project_root,
    get_active_db,
    get_log_level,
    reset_db_path,
    set_db_path,
)
from .fixtures import DEFAULT_ACTIVITY_TYPES
from .probe import missing_tables, probe_version, row_counts
from .schema import CURRENT_VERSION, TABLE_ACTIVITY_TYPE, TABLE_INFO
from .store import Severity, StoreHandle


class Context:
    def __init__(self, root: Path, db_path: Path):
        self.root = root
        self.db_path = db_path


def status_line(handle: StoreHandle) -> tuple[str, str | None]:
    """Text and colour summarising the handle's last diagnostic."""
    severity = handle.severity()
    if severity in (Severity.NONE, Severity.INFO):
        return "Success", "green"
    if severity is Severity.WARNING:
        return f"Warning: {handle.message()}", "yellow"
    return f"Error: {handle.message()}", "red"


@click.group()
@click.version_option(package_name="pomolite")
@click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Store file to use (default: from config).",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output.")
@click.pass_context
def cli(ctx: click.Context, db_path: Path | None, verbose: bool) -> None:
    """Manage the pomolite time-tracking store.

    Create the schema of a new store, upgrade an existing one and
    inspect what it holds.
    """
    root = find_project_root()
    try:
        level = "DEBUG" if verbose else get_log_level(root)
        active = get_active_db(root, db_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    configure_logging(level)
    ctx.obj = Context(root, active)


@cli.command()
@click.pass_obj
def init(obj: Context) -> None:
    """Create or upgrade the store schema.

    Prints "Success", or the last warning/error reported by the store.
    """
    obj.db_path.parent.mkdir(parents=True, exist_ok=True)

    with store_module.open(obj.db_path) as handle:
        result = handle.initialize()
        text, colour = status_line(handle)

    click.echo(click.style(text, fg=colour))
    if not result.successful():
        raise SystemExit(1)


@cli.command()
@click.pass_obj
def version(obj: Context) -> None:
    """Print the stored schema version."""
    if not obj.db_path.exists():
        raise click.ClickException(f"Store not found: {obj.db_path}")

    with store_module.open(obj.db_path) as handle:
        found = probe_version(handle)

    click.echo("absent" if found is None else str(found))


@cli.command()
@click.pass_obj
def info(obj: Context) -> None:
    """Show store version, tables and seed data."""
    if not obj.db_path.exists():
        raise click.ClickException(f"Store not found: {obj.db_path}")

    click.echo(click.style("=== Store Info ===", bold=True))
    click.echo()
    click.echo(f"Path: {obj.db_path}")
    size_kb = obj.db_path.stat().st_size / 1024
    click.echo(f"Size: {size_kb:.1f} KB")

    with store_module.open(obj.db_path) as handle:
        if not handle.is_open():
            raise click.ClickException(handle.message())
        try:
            _print_info(handle)
        except sqlite3.Error as e:
            raise click.ClickException(f"Cannot read store: {e}") from e


def _print_info(handle: StoreHandle) -> None:
    found = probe_version(handle)
    if found is None:
        click.echo("Version: absent")
    else:
        outdated = "" if found == CURRENT_VERSION else f" (current: {CURRENT_VERSION})"
        click.echo(f"Version: {found}{click.style(outdated, fg='yellow')}")
    click.echo()

    click.echo(click.style("Tables:", bold=True))
    counts = row_counts(handle)
    for name, count in counts.items():
        click.echo(f"  {name:15} {count} rows")
    for name in missing_tables(handle):
        click.echo(f"  {name:15} {click.style('(missing)', fg='red')}")
    click.echo()

    if TABLE_INFO in counts:
        click.echo(click.style("Properties:", bold=True))
        for prop, value in handle.query_all(f"SELECT property, value FROM {TABLE_INFO}"):
            click.echo(f"  {prop}: {value}")
        click.echo()

    if TABLE_ACTIVITY_TYPE in counts:
        click.echo(click.style("Activity types:", bold=True))
        rows = handle.query_all(
            f"SELECT short_name, full_name FROM {TABLE_ACTIVITY_TYPE} ORDER BY id"
        )
        for short_name, full_name in rows:
            click.echo(f"  {short_name:15} - {full_name}")


@cli.command("activities")
def activities() -> None:
    """List the activity types every new store is seeded with."""
    for activity in DEFAULT_ACTIVITY_TYPES:
        click.echo(f"  {activity['short_name']:15} - {activity['full_name']}: {activity['description']}")


@cli.command()
@click.argument("path", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.option("--reset", is_flag=True, help="Remove the override and use the default store.")
@click.pass_obj
def use(obj: Context, path: Path | None, reset: bool) -> None:
    """Switch to a different store file.

    Writes the path to config.toml at the project root.

    Examples:

        pomolite use data/test.db   # Use another store
        pomolite use --reset        # Back to the default store
    """
    if reset:
        if reset_db_path(obj.root):
            click.echo("Removed database override from config.toml")
        else:
            click.echo("No database override in config.toml")
        return

    if path is None:
        raise click.ClickException("PATH is required (or use --reset)")

    try:
        rel_path = path.resolve().relative_to(obj.root)
    except ValueError:
        rel_path = path.resolve()

    config_file = set_db_path(obj.root, rel_path.as_posix())
    click.echo(click.style(f"Switched to: {rel_path}", fg="green"))
    click.echo(f"Config: {config_file}")


@cli.command("path")
@click.pass_obj
def show_path(obj: Context) -> None:
    """Print the active store path."""
    click.echo(str(obj.db_path))
