"""Pending changes -- turn a batch of row edits into one atomic transaction.

Manifesto:
    A user edits cells, inserts rows and deletes rows, then commits them
    all at once.  Either every edit lands or none does: a half-applied batch
    is silent data corruption.  The two halves are kept apart so the SQL
    can be inspected without a database:

    - :class:`ChangeSetBuilder` is pure: changes in, ``Statement`` list out
    - :func:`execute_atomically` runs statements in one transaction

Architecture::

    PendingChange ──► ChangeSetBuilder.build() ──► [Statement(text, args), ...]
                                                          │
                            execute_atomically(conn, ...) ◄┘
                            ├── every statement on one cursor
                            ├── commit once at the end
                            └── rollback + TransactionError on first failure

Placeholder numbering:
    One running ordinal per statement.  An UPDATE's WHERE placeholders
    continue after its SET placeholders (``SET a = ?1 WHERE id = ?2``);
    ``DEFAULT`` and ``NULL`` cells consume no ordinal and bind nothing.

Examples:
    >>> builder = ChangeSetBuilder(get_dialect("postgresql"))
    >>> [stmt] = builder.build([
    ...     PendingChange(
    ...         table="public.t",
    ...         kind=ChangeKind.INSERT,
    ...         values=(CellEdit("a", kind=CellKind.DEFAULT), CellEdit("b", "x")),
    ...     )
    ... ])
    >>> stmt.text
    'INSERT INTO "public"."t" ("a", "b") VALUES (DEFAULT, %s)'
    >>> stmt.args
    ('x',)

Tags:
    transaction, pending-changes, dml, atomicity, dbspine

Doc-Types:
    - API Reference
    - Architecture Documentation
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable, Iterator, Sequence

from dbspine.core.dialect import Dialect, bound_text
from dbspine.core.errors import ErrorContext, TransactionError, ValidationError
from dbspine.core.logging import get_logger
from dbspine.core.models import (
    CellEdit,
    CellKind,
    ChangeKind,
    PendingChange,
    PrimaryKey,
    Statement,
    TableIdentifier,
)
from dbspine.core.protocols import Connection

logger = get_logger(__name__)


class ChangeSetBuilder:
    """
    Build parameterized INSERT/UPDATE/DELETE statements for a dialect.

    Changes are translated in the order given; nothing is reordered or
    merged.  All validation happens here, before any I/O.
    """

    def __init__(self, dialect: Dialect):
        self._dialect = dialect

    def build(self, changes: Iterable[PendingChange], database: str = "") -> list[Statement]:
        """Translate ``changes`` into one statement each.

        ``database`` qualifies table names on dialects that address other
        databases by name (MySQL, SQLite).
        """
        return [self.build_one(change, database) for change in changes]

    def build_one(self, change: PendingChange, database: str = "") -> Statement:
        table = TableIdentifier.parse(change.table, namespaced=self._dialect.namespaced)
        qualified = self._dialect.qualify(table, database)

        try:
            match change.kind:
                case ChangeKind.INSERT:
                    return self._insert(qualified, change.values)
                case ChangeKind.UPDATE:
                    return self._update(qualified, change.values, change.primary_key)
                case ChangeKind.DELETE:
                    return self._delete(qualified, change.primary_key)
                case _:
                    raise ValidationError(f"Unknown change kind: {change.kind}", field="kind")
        except ValidationError as e:
            raise e.with_context(table=change.table, dialect=self._dialect.name)

    # -- statement builders ------------------------------------------------

    def _insert(self, qualified: str, values: Sequence[CellEdit]) -> Statement:
        cells = [
            cell
            for cell in values
            if cell.kind is not CellKind.DEFAULT or self._dialect.supports_default_keyword
        ]
        if not cells:
            return Statement(self._dialect.empty_insert(qualified))

        ordinal = itertools.count(1)
        args: list[str] = []
        columns = ", ".join(self._dialect.quote_identifier(cell.column) for cell in cells)
        markers = ", ".join(self._render(cell, ordinal, args) for cell in cells)
        if args:
            qualified = bound_text(self._dialect, qualified)
            columns = bound_text(self._dialect, columns)
        return Statement(f"INSERT INTO {qualified} ({columns}) VALUES ({markers})", tuple(args))

    def _update(
        self,
        qualified: str,
        values: Sequence[CellEdit],
        primary_key: Sequence[PrimaryKey],
    ) -> Statement:
        if not values:
            raise ValidationError("update requires at least one value", field="values")
        if not self._dialect.supports_default_keyword and any(
            cell.kind is CellKind.DEFAULT for cell in values
        ):
            raise ValidationError(
                f"{self._dialect.name} cannot set a column to DEFAULT in an UPDATE",
                field="values",
            )
        self._require_primary_key(primary_key)

        # the primary key always binds, so identifiers are escaped throughout
        ordinal = itertools.count(1)
        args: list[str] = []
        assignments = ", ".join(
            f"{self._column(cell.column)} = {self._render(cell, ordinal, args)}"
            for cell in values
        )
        where = self._where(primary_key, ordinal, args)
        return Statement(
            f"UPDATE {bound_text(self._dialect, qualified)} SET {assignments} WHERE {where}",
            tuple(args),
        )

    def _delete(self, qualified: str, primary_key: Sequence[PrimaryKey]) -> Statement:
        self._require_primary_key(primary_key)

        args: list[str] = []
        where = self._where(primary_key, itertools.count(1), args)
        return Statement(
            f"DELETE FROM {bound_text(self._dialect, qualified)} WHERE {where}", tuple(args)
        )

    # -- helpers -----------------------------------------------------------

    def _render(self, cell: CellEdit, ordinal: Iterator[int], args: list[str]) -> str:
        """Value marker for one cell; appends its bound argument, if any."""
        match cell.kind:
            case CellKind.DEFAULT:
                return "DEFAULT"
            case CellKind.NULL:
                return "NULL"
            case CellKind.EMPTY:
                args.append("")
            case _:
                args.append(cell.value)
        return self._dialect.placeholder(next(ordinal))

    def _where(
        self,
        primary_key: Sequence[PrimaryKey],
        ordinal: Iterator[int],
        args: list[str],
    ) -> str:
        conditions = []
        for pk in primary_key:
            conditions.append(
                f"{self._column(pk.column)} = {self._dialect.placeholder(next(ordinal))}"
            )
            args.append(pk.value)
        return " AND ".join(conditions)

    def _column(self, name: str) -> str:
        """Quoted column for a statement with bound arguments."""
        return bound_text(self._dialect, self._dialect.quote_identifier(name))

    @staticmethod
    def _require_primary_key(primary_key: Sequence[PrimaryKey]) -> None:
        if not primary_key:
            raise ValidationError("primary key is required", field="primary_key")


def execute_atomically(conn: Connection, statements: Sequence[Statement]) -> None:
    """Run ``statements`` in one transaction on ``conn``.

    Commits once after the last statement.  On the first failure the
    transaction is rolled back and :class:`TransactionError` is raised,
    chained to the driver error; no statement of the batch stays applied.
    """
    if not statements:
        return

    cursor = None
    try:
        try:
            cursor = conn.cursor()
        except Exception as e:
            raise TransactionError(
                f"Could not open a cursor: {e}",
                cause=e,
                context=ErrorContext(operation="execute_pending_changes"),
            ) from e
        for index, statement in enumerate(statements):
            try:
                if statement.args:
                    cursor.execute(statement.text, statement.args)
                else:
                    cursor.execute(statement.text)
            except Exception as e:
                raise TransactionError(
                    f"Statement {index + 1} of {len(statements)} failed: {e}",
                    statement_index=index,
                    cause=e,
                    context=ErrorContext(
                        operation="execute_pending_changes",
                        metadata={"sql": statement.text},
                    ),
                ) from e
        try:
            conn.commit()
        except Exception as e:
            raise TransactionError(f"Commit failed: {e}", cause=e) from e
    except Exception:
        _rollback(conn)
        raise
    finally:
        if cursor is not None:
            cursor.close()

    logger.info("pending_changes_committed", statements=len(statements))


def _rollback(conn: Connection) -> None:
    try:
        conn.rollback()
    except Exception as e:
        # the original failure is what the caller needs to see
        logger.error("pending_changes_rollback_failed", error=str(e))


__all__ = [
    "ChangeSetBuilder",
    "execute_atomically",
]
