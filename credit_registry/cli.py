"""CLI entry point for the credit registry."""

import sys
from typing import List

import click
import uvicorn
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from credit_registry.config import settings
from credit_registry.infrastructure.database.session import engine, init_schema
from credit_registry.infrastructure.observability.logging import LogEntry, format_summary
from credit_registry.utils.log_reader import (
    compute_stats,
    errors,
    filter_by_path,
    find_latest_log_file,
    latest,
    read_log_entries,
)


@click.group()
@click.version_option(version="0.1.0")
def cli():
    """Credit Registry - clients, banks and their credits over HTTP."""
    pass


@cli.command()
@click.option("--host", default=None, help="Bind address (default: settings.host)")
@click.option("--port", type=int, default=None, help="Port (default: settings.port, 8080)")
def serve(host: str | None, port: int | None):
    """Run the HTTP API."""
    uvicorn.run(
        "credit_registry.api.main:app",
        host=host or settings.host,
        port=port or settings.port,
    )


# -------------------------------------------------------------------------
# Database Commands
# -------------------------------------------------------------------------


@cli.group()
def db():
    """Database management commands."""
    pass


@db.command("init")
def db_init():
    """Create any missing tables."""
    click.echo("Initializing database schema...")
    try:
        init_schema(engine)
    except SQLAlchemyError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo("Database schema initialized.")


@db.command("check")
def db_check():
    """List the tables present in the database."""
    try:
        tables = inspect(engine).get_table_names()
    except SQLAlchemyError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo("Existing tables:")
    for name in sorted(tables):
        click.echo(f"  - {name}")


# -------------------------------------------------------------------------
# Request Log Commands
# -------------------------------------------------------------------------


@cli.group()
@click.option("--log-dir", default=None, help="Directory holding api_*.log files")
@click.pass_context
def logs(ctx: click.Context, log_dir: str | None):
    """Inspect the request log (newest file only)."""
    directory = log_dir or settings.log_dir
    try:
        path = find_latest_log_file(directory)
    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    ctx.obj = read_log_entries(path)


def _echo_entries(entries: List[LogEntry]) -> None:
    for entry in entries:
        click.echo(format_summary(entry))
        if entry.error:
            click.echo(f"  Error: {entry.error}")


@logs.command("latest")
@click.argument("n", type=int, default=10)
@click.pass_obj
def logs_latest(entries: List[LogEntry], n: int):
    """Show the latest N entries."""
    click.echo(f"Latest {n} log entries:")
    click.echo("-" * 80)
    _echo_entries(latest(entries, n))


@logs.command("errors")
@click.pass_obj
def logs_errors(entries: List[LogEntry]):
    """Show entries with a 4xx/5xx status or an error message."""
    click.echo("Error entries:")
    click.echo("-" * 80)
    _echo_entries(errors(entries))


@logs.command("filter")
@click.argument("path")
@click.pass_obj
def logs_filter(entries: List[LogEntry], path: str):
    """Show entries whose path contains PATH."""
    click.echo(f"Entries for path containing '{path}':")
    click.echo("-" * 80)
    _echo_entries(filter_by_path(entries, path))


@logs.command("stats")
@click.pass_obj
def logs_stats(entries: List[LogEntry]):
    """Show request statistics."""
    if not entries:
        click.echo("No log entries found")
        return

    stats = compute_stats(entries)
    click.echo(f"API Request Statistics ({stats.total} total requests)")
    click.echo("=" * 50)

    click.echo("\nStatus Code Distribution:")
    for status, count in sorted(stats.by_status.items()):
        click.echo(f"  {status}: {count} ({count / stats.total * 100:.1f}%)")

    click.echo("\nMethod Distribution:")
    for method, count in sorted(stats.by_method.items()):
        click.echo(f"  {method}: {count} ({count / stats.total * 100:.1f}%)")

    click.echo("\nTop Endpoints:")
    for path, count in stats.top_paths:
        click.echo(f"  {path}: {count} ({count / stats.total * 100:.1f}%)")

    click.echo(f"\nAverage Response Time: {stats.avg_response_time_ms}ms")


def main():
    cli()


if __name__ == "__main__":
    main()
