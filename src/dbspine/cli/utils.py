"""
CLI utility helpers — output formatting and connection management.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dbspine.core.adapters import DatabaseAdapter, open_adapter
from dbspine.core.errors import DbSpineError
from dbspine.core.settings import get_settings
from dbspine.core.tabular import TabularResult

console = Console()
err_console = Console(stderr=True)


# ── Connection helper ────────────────────────────────────────────────────


@contextmanager
def connected(url: str | None = None) -> Iterator[DatabaseAdapter]:
    """Open the adapter for ``url`` (default ``DBSPINE_URL``) for one command.

    Any :class:`DbSpineError` raised while connecting or inside the block is
    printed to stderr and turned into exit code 1.
    """
    target = url or get_settings().url
    if not target:
        err_console.print(
            "[bold red]Error[/bold red]: no connection string. "
            "Pass --url or set DBSPINE_URL."
        )
        raise typer.Exit(code=1)

    try:
        adapter = open_adapter(target)
        try:
            yield adapter
        finally:
            adapter.disconnect()
    except DbSpineError as e:
        fail(e)


def fail(error: DbSpineError) -> NoReturn:
    """Print ``error`` to stderr and exit 1."""
    err_console.print(
        f"[bold red]Error[/bold red] ({error.category.value}): {escape(error.message)}"
    )
    raise typer.Exit(code=1)


# ── Output helpers ───────────────────────────────────────────────────────


def output_json(payload: Any) -> None:
    console.print_json(json.dumps(payload, default=str))


def output_tabular(
    result: TabularResult,
    *,
    as_json: bool = False,
    title: str = "",
) -> None:
    """Render a :class:`TabularResult` to the terminal."""
    if as_json:
        output_json(result.as_dicts())
        return

    if not result.header:
        console.print("[dim]No result set.[/dim]")
        return
    if not len(result):
        console.print("[dim]No rows.[/dim]")
        return

    _print_table(result.header, result.rows, title=title)


def output_records(
    result: TabularResult,
    total: int,
    *,
    offset: int,
    as_json: bool = False,
    title: str = "",
) -> None:
    """Render one page of records with pagination info."""
    if as_json:
        output_json(
            {
                "columns": list(result.header),
                "rows": [list(row) for row in result.rows],
                "total": total,
                "offset": offset,
            }
        )
        return

    output_tabular(result, title=title)
    console.print(f"\n[dim]Showing {len(result)} of {total} (offset {offset})[/dim]")


# ── Private helpers ──────────────────────────────────────────────────────


def _print_table(
    header: tuple[str, ...],
    rows: tuple[tuple[str, ...], ...],
    *,
    title: str = "",
) -> None:
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in header:
        table.add_column(escape(col), overflow="fold")
    for row in rows:
        table.add_row(*(escape(cell) for cell in row))
    console.print(table)
