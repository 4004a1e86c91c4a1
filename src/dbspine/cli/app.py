"""
Root Typer application for the dbspine CLI.

Every command opens one adapter from ``--url`` (or ``DBSPINE_URL``), runs a
single adapter operation and prints the result as a Rich table or, with
``--json``, as JSON on stdout.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.markup import escape
from typer import Typer

from dbspine.cli.utils import (
    connected,
    console,
    fail,
    output_json,
    output_records,
    output_tabular,
)
from dbspine.core.errors import ValidationError
from dbspine.core.logging import configure_logging
from dbspine.core.models import PendingChange
from dbspine.core.settings import get_settings

app = Typer(
    name="dbspine",
    help="dbspine — browse and edit SQLite, PostgreSQL, MySQL and SQL Server databases.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _url_option() -> typer.models.OptionInfo:
    return typer.Option(None, "--url", "-u", help="Connection string (default: DBSPINE_URL)")


def _json_option() -> typer.models.OptionInfo:
    return typer.Option(False, "--json", help="JSON output")


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        from dbspine import __version__

        try:
            v = pkg_version("dbspine")
        except PackageNotFoundError:
            v = __version__
        typer.echo(f"dbspine {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Override DBSPINE_LOG_LEVEL"),
) -> None:
    """dbspine CLI — introspect schemas, page through records, apply edits."""
    settings = get_settings()
    configure_logging(level=log_level or settings.log_level, json_format=settings.log_json)


# ── Introspection ────────────────────────────────────────────────────────


@app.command()
def databases(
    url: str | None = _url_option(),
    json_out: bool = _json_option(),
) -> None:
    """List databases on the server."""
    with connected(url) as adapter:
        output_tabular(adapter.list_databases(), as_json=json_out, title="Databases")


@app.command()
def tables(
    database: str = typer.Argument(..., help="Database name"),
    url: str | None = _url_option(),
    json_out: bool = _json_option(),
) -> None:
    """List tables of a database, grouped by schema."""
    with connected(url) as adapter:
        grouped = adapter.list_tables(database)

    if json_out:
        output_json(grouped)
        return
    if not grouped:
        console.print("[dim]No tables.[/dim]")
        return
    for schema, names in grouped.items():
        console.print(f"[bold]{escape(schema)}[/bold]")
        for name in names:
            console.print(f"  [cyan]{escape(name)}[/cyan]", highlight=False)


@app.command()
def columns(
    database: str = typer.Argument(..., help="Database name"),
    table: str = typer.Argument(..., help="Table (schema.table on PostgreSQL / SQL Server)"),
    url: str | None = _url_option(),
    json_out: bool = _json_option(),
) -> None:
    """Show the columns of a table."""
    with connected(url) as adapter:
        output_tabular(adapter.list_columns(database, table), as_json=json_out, title=table)


@app.command()
def constraints(
    database: str = typer.Argument(..., help="Database name"),
    table: str = typer.Argument(..., help="Table (schema.table on PostgreSQL / SQL Server)"),
    url: str | None = _url_option(),
    json_out: bool = _json_option(),
) -> None:
    """Show primary key, unique and check constraints of a table."""
    with connected(url) as adapter:
        output_tabular(adapter.list_constraints(database, table), as_json=json_out, title=table)


@app.command("foreign-keys")
def foreign_keys(
    database: str = typer.Argument(..., help="Database name"),
    table: str = typer.Argument(..., help="Table (schema.table on PostgreSQL / SQL Server)"),
    url: str | None = _url_option(),
    json_out: bool = _json_option(),
) -> None:
    """Show the foreign keys of a table."""
    with connected(url) as adapter:
        output_tabular(adapter.list_foreign_keys(database, table), as_json=json_out, title=table)


@app.command()
def indexes(
    database: str = typer.Argument(..., help="Database name"),
    table: str = typer.Argument(..., help="Table (schema.table on PostgreSQL / SQL Server)"),
    url: str | None = _url_option(),
    json_out: bool = _json_option(),
) -> None:
    """Show the indexes of a table."""
    with connected(url) as adapter:
        output_tabular(adapter.list_indexes(database, table), as_json=json_out, title=table)


@app.command("primary-keys")
def primary_keys(
    database: str = typer.Argument(..., help="Database name"),
    table: str = typer.Argument(..., help="Table (schema.table on PostgreSQL / SQL Server)"),
    url: str | None = _url_option(),
    json_out: bool = _json_option(),
) -> None:
    """Show the primary key columns of a table."""
    with connected(url) as adapter:
        output_tabular(
            adapter.list_primary_key_columns(database, table), as_json=json_out, title=table
        )


# ── Records ──────────────────────────────────────────────────────────────


@app.command()
def records(
    database: str = typer.Argument(..., help="Database name"),
    table: str = typer.Argument(..., help="Table (schema.table on PostgreSQL / SQL Server)"),
    where: str = typer.Option("", "--where", "-w", help="Raw WHERE clause, e.g. \"WHERE id > 3\""),
    sort: str = typer.Option("", "--sort", "-s", help="Raw ORDER BY clause"),
    offset: int = typer.Option(0, "--offset", min=0),
    limit: int = typer.Option(0, "--limit", min=0, help="0 = DBSPINE_DEFAULT_ROW_LIMIT"),
    url: str | None = _url_option(),
    json_out: bool = _json_option(),
) -> None:
    """Page through the rows of a table."""
    with connected(url) as adapter:
        page, total = adapter.get_records(database, table, where, sort, offset, limit)
    output_records(page, total, offset=offset, as_json=json_out, title=table)


@app.command()
def update(
    database: str = typer.Argument(..., help="Database name"),
    table: str = typer.Argument(..., help="Table (schema.table on PostgreSQL / SQL Server)"),
    column: str = typer.Argument(..., help="Column to set"),
    value: str = typer.Argument(..., help="New value"),
    pk_column: str = typer.Option(..., "--pk-column", help="Primary key column"),
    pk_value: str = typer.Option(..., "--pk-value", help="Primary key value"),
    url: str | None = _url_option(),
) -> None:
    """Set one cell of the row with the given primary key."""
    with connected(url) as adapter:
        adapter.update_record(database, table, column, value, pk_column, pk_value)
    console.print("[green]Updated.[/green]")


@app.command()
def delete(
    database: str = typer.Argument(..., help="Database name"),
    table: str = typer.Argument(..., help="Table (schema.table on PostgreSQL / SQL Server)"),
    pk_column: str = typer.Option(..., "--pk-column", help="Primary key column"),
    pk_value: str = typer.Option(..., "--pk-value", help="Primary key value"),
    url: str | None = _url_option(),
) -> None:
    """Delete the row with the given primary key."""
    with connected(url) as adapter:
        adapter.delete_record(database, table, pk_column, pk_value)
    console.print("[green]Deleted.[/green]")


# ── Raw SQL ──────────────────────────────────────────────────────────────


@app.command()
def query(
    sql: str = typer.Argument(..., help="SQL returning rows"),
    url: str | None = _url_option(),
    json_out: bool = _json_option(),
) -> None:
    """Run a query and print its rows."""
    with connected(url) as adapter:
        output_tabular(adapter.execute_query(sql), as_json=json_out)


@app.command("exec")
def exec_(
    sql: str = typer.Argument(..., help="SQL statement without a result set"),
    url: str | None = _url_option(),
    json_out: bool = _json_option(),
) -> None:
    """Run a statement and report the affected row count."""
    with connected(url) as adapter:
        affected, message = adapter.execute_statement(sql)

    if json_out:
        output_json({"rows_affected": affected})
    else:
        console.print(message)


# ── Pending changes ──────────────────────────────────────────────────────


@app.command()
def apply(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON list of changes"),
    database: str | None = typer.Option(None, "--database", "-d", help="Target database"),
    url: str | None = _url_option(),
) -> None:
    """Apply a JSON file of pending changes in one transaction."""
    try:
        data = json.loads(file.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise ValidationError("change file must contain a JSON list", field="file")
        changes = [PendingChange.from_dict(item) for item in data]
    except json.JSONDecodeError as e:
        fail(ValidationError(f"Invalid JSON in {file}: {e}", field="file", cause=e))
    except ValidationError as e:
        fail(e)

    with connected(url) as adapter:
        adapter.execute_pending_changes(changes, database)
    console.print(f"[green]Applied {len(changes)} change(s).[/green]")
