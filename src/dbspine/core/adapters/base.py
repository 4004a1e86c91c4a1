"""Database adapter base class.

Manifesto:
    Every engine is browsed and edited the same way: list databases, list
    tables, look at columns/keys/indexes, page through records, edit rows,
    commit a batch of changes.  The abstract base implements that whole
    contract once on top of a raw DB-API handle and the adapter's
    :class:`~dbspine.core.dialect.Dialect`; engine subclasses only know how
    to open a handle.

Features:
    - One live handle per adapter, opened from a connection string
    - Introspection, paginated reads, single-row writes, raw SQL
    - Atomic pending-change batches via :mod:`dbspine.core.changes`
    - Database context switching with scoped best-effort restore

Session state::

    Disconnected ──connect(url)──► Connected(current_database)
                                        │
                    switch_database(db) │ open new handle, then swap,
                                        ▼ then close old handle
                                   Connected(db, previous=old)

    A database-scoped call on another database runs inside
    ``_use_database``: switch, run, and if the call fails after the switch,
    switch back before the original error propagates.

Tags:
    dbspine, database, abstract-base, adapter-pattern

Doc-Types:
    api-reference
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from sqlalchemy.engine import URL

from dbspine.core.changes import ChangeSetBuilder, execute_atomically
from dbspine.core.dialect import CatalogKind, Dialect, bound_text, get_dialect
from dbspine.core.errors import (
    ConfigError,
    ContextSwitchError,
    DatabaseConnectionError,
    DbSpineError,
    ErrorContext,
    QueryError,
    TransactionError,
    ValidationError,
)
from dbspine.core.logging import LogContext, get_logger
from dbspine.core.models import PendingChange, TableIdentifier
from dbspine.core.protocols import Connection, Cursor
from dbspine.core.settings import DbSpineSettings, get_settings
from dbspine.core.tabular import TabularResult

from .types import DatabaseType
from .urls import database_of, database_type, parse_url, redact, with_database

logger = get_logger(__name__)


class DatabaseAdapter(ABC):
    """
    Abstract base class for database adapters.

    Subclasses set ``db_type`` and implement :meth:`_open`.  Mutating
    operations and database switches are serialized by a per-adapter
    re-entrant lock; reads are not locked.
    """

    db_type: DatabaseType

    def __init__(self, url: str | None = None, *, settings: DbSpineSettings | None = None):
        self._settings = settings or get_settings()
        self._dialect: Dialect = get_dialect(self.db_type.value)
        self._initial_url = url
        self._url: URL | None = None
        self._conn: Connection | None = None
        self._lock = threading.RLock()
        self.current_database = ""
        self.previous_database = ""

    @property
    def dialect(self) -> Dialect:
        """SQL dialect for this adapter's database type."""
        return self._dialect

    @property
    def is_connected(self) -> bool:
        """Whether adapter holds a live handle."""
        return self._conn is not None

    @property
    def url(self) -> URL | None:
        """Connection string the live handle was opened with."""
        return self._url

    # ------------------------------------------------------------------ #
    # Engine hooks
    # ------------------------------------------------------------------ #

    @abstractmethod
    def _open(self, url: URL) -> Connection:
        """Open a raw DB-API handle for ``url``."""
        ...

    def _database_for(self, url: URL) -> str:
        """Database the handle opened from ``url`` is bound to."""
        return database_of(url)

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def connect(self, url: str | None = None) -> None:
        """Open the handle, verify it with a ping, and record the URL."""
        raw = url or self._initial_url
        if not raw:
            raise ConfigError("connection string is required")

        parsed = parse_url(raw)
        if database_type(parsed) is not self.db_type:
            raise ConfigError(
                f"{type(self).__name__} cannot open a {database_type(parsed).value} URL"
            )

        with self._lock:
            conn = self._open_and_ping(parsed)
            if self._conn is not None:
                self._close_quietly(self._conn, operation="connect")
            self._conn, self._url = conn, parsed
            self.current_database = self._database_for(parsed)
            self.previous_database = ""

        logger.info(
            "adapter_connected",
            dialect=self.dialect.name,
            url=redact(parsed),
            database=self.current_database,
        )

    def disconnect(self) -> None:
        """Close the handle."""
        with self._lock:
            if self._conn is not None:
                conn, self._conn = self._conn, None
                self._close_quietly(conn, operation="disconnect")

    def _open_and_ping(self, url: URL) -> Connection:
        context = ErrorContext(
            operation="connect",
            database=self._database_for(url),
            dialect=self.dialect.name,
        )
        try:
            conn = self._open(url)
        except DbSpineError:
            raise
        except Exception as e:
            raise DatabaseConnectionError(
                f"Failed to connect to {self.dialect.name}: {e}",
                cause=e,
                context=context,
            ) from e

        try:
            cursor = conn.cursor()
            try:
                cursor.execute(self.dialect.ping_query)
                cursor.fetchall()
            finally:
                cursor.close()
        except Exception as e:
            self._close_quietly(conn, operation="connect")
            raise DatabaseConnectionError(
                f"Liveness check failed for {self.dialect.name}: {e}",
                cause=e,
                context=context,
            ) from e
        return conn

    def __enter__(self) -> DatabaseAdapter:
        if not self.is_connected:
            self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.disconnect()

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #

    def list_databases(self) -> TabularResult:
        """Databases on the server, system databases excluded."""
        sql, args = self.dialect.catalog_query(CatalogKind.DATABASES)
        return self._fetch(sql, args, operation="list_databases")

    def list_tables(self, database: str) -> dict[str, list[str]]:
        """Tables of ``database`` grouped by schema."""
        operation = "list_tables"
        self._require(operation, database=database)

        with self._use_database(database, operation=operation):
            sql, args = self.dialect.catalog_query(CatalogKind.TABLES, database=database)
            result = self._fetch(sql, args, operation=operation, database=database)

        tables: dict[str, list[str]] = {}
        for schema, name in result.rows:
            tables.setdefault(schema, []).append(name)
        return tables

    def list_columns(self, database: str, table: str) -> TabularResult:
        return self._introspect(CatalogKind.COLUMNS, database, table, "list_columns")

    def list_constraints(self, database: str, table: str) -> TabularResult:
        """Non-foreign-key constraints (primary key, unique, check)."""
        return self._introspect(CatalogKind.CONSTRAINTS, database, table, "list_constraints")

    def list_foreign_keys(self, database: str, table: str) -> TabularResult:
        return self._introspect(CatalogKind.FOREIGN_KEYS, database, table, "list_foreign_keys")

    def list_indexes(self, database: str, table: str) -> TabularResult:
        return self._introspect(CatalogKind.INDEXES, database, table, "list_indexes")

    def list_primary_key_columns(self, database: str, table: str) -> TabularResult:
        return self._introspect(
            CatalogKind.PRIMARY_KEYS, database, table, "list_primary_key_columns"
        )

    def _introspect(
        self,
        kind: CatalogKind,
        database: str,
        table: str,
        operation: str,
    ) -> TabularResult:
        self._require(operation, database=database)
        target = self._parse_table(table, operation)

        with self._use_database(database, operation=operation, table=table):
            sql, args = self.dialect.catalog_query(kind, target, database)
            return self._fetch(sql, args, operation=operation, database=database, table=table)

    # ------------------------------------------------------------------ #
    # Records
    # ------------------------------------------------------------------ #

    def get_records(
        self,
        database: str,
        table: str,
        where: str = "",
        sort: str = "",
        offset: int = 0,
        limit: int = 0,
    ) -> tuple[TabularResult, int]:
        """One page of rows plus the table's total row count.

        ``where`` and ``sort`` are raw SQL fragments including their
        ``WHERE`` / ``ORDER BY`` keywords and are appended verbatim.
        ``limit=0`` means the configured default page size.
        """
        operation = "get_records"
        self._require(operation, database=database)
        target = self._parse_table(table, operation)
        if offset < 0 or limit < 0:
            raise ValidationError(
                "offset and limit must be non-negative",
                field="offset" if offset < 0 else "limit",
                value=offset if offset < 0 else limit,
            )

        limit = limit or self._settings.default_row_limit
        qualified = self.dialect.qualify(target, database)

        parts = [f"SELECT * FROM {qualified}"]
        if where.strip():
            parts.append(where.strip())
        if sort.strip():
            parts.append(sort.strip())
        parts.append(self.dialect.pagination_clause(offset, limit, sorted=bool(sort.strip())))

        with self._use_database(database, operation=operation, table=table):
            records = self._fetch(" ".join(parts), operation=operation, database=database, table=table)
            count = self._fetch(
                f"SELECT COUNT(*) FROM {qualified}",
                operation=operation,
                database=database,
                table=table,
            )

        return records, int(count.rows[0][0])

    def update_record(
        self,
        database: str,
        table: str,
        column: str,
        value: str,
        primary_key_column: str,
        primary_key_value: str,
    ) -> None:
        """Set one cell of the row whose primary key matches."""
        operation = "update_record"
        self._require(
            operation,
            database=database,
            table=table,
            column=column,
            value=value,
            primary_key_column=primary_key_column,
            primary_key_value=primary_key_value,
        )
        target = self._parse_table(table, operation)

        quote = self._bound_identifier
        sql = (
            f"UPDATE {bound_text(self.dialect, self.dialect.qualify(target, database))} "
            f"SET {quote(column)} = {self.dialect.placeholder(1)} "
            f"WHERE {quote(primary_key_column)} = {self.dialect.placeholder(2)}"
        )

        with self._lock, self._use_database(database, operation=operation, table=table):
            self._execute(
                sql,
                (value, primary_key_value),
                operation=operation,
                database=database,
                table=table,
            )

    def delete_record(
        self,
        database: str,
        table: str,
        primary_key_column: str,
        primary_key_value: str,
    ) -> None:
        """Delete the row whose primary key matches."""
        operation = "delete_record"
        self._require(
            operation,
            database=database,
            table=table,
            primary_key_column=primary_key_column,
            primary_key_value=primary_key_value,
        )
        target = self._parse_table(table, operation)

        sql = (
            f"DELETE FROM {bound_text(self.dialect, self.dialect.qualify(target, database))} "
            f"WHERE {self._bound_identifier(primary_key_column)} = "
            f"{self.dialect.placeholder(1)}"
        )

        with self._lock, self._use_database(database, operation=operation, table=table):
            self._execute(
                sql,
                (primary_key_value,),
                operation=operation,
                database=database,
                table=table,
            )

    # ------------------------------------------------------------------ #
    # Raw SQL
    # ------------------------------------------------------------------ #

    def execute_query(self, sql: str) -> TabularResult:
        """Run caller-supplied SQL that returns rows."""
        self._require("execute_query", sql=sql)
        return self._fetch(sql, operation="execute_query")

    def execute_statement(self, sql: str) -> tuple[int, str]:
        """Run caller-supplied SQL without a result set; report affected rows."""
        operation = "execute_statement"
        self._require(operation, sql=sql)
        with self._lock:
            affected = self._execute(sql, operation=operation)
        return affected, f"{affected} rows affected"

    # ------------------------------------------------------------------ #
    # Pending changes
    # ------------------------------------------------------------------ #

    def execute_pending_changes(
        self,
        changes: Iterable[PendingChange],
        database: str | None = None,
    ) -> None:
        """Apply a batch of row edits atomically, in the order given."""
        operation = "execute_pending_changes"
        database = database or self.current_database
        statements = ChangeSetBuilder(self.dialect).build(changes, database)
        if not statements:
            return

        with self._lock, self._use_database(database, operation=operation):
            with LogContext(
                dialect=self.dialect.name,
                database=database,
                batch_size=len(statements),
            ):
                try:
                    execute_atomically(self._require_connection(operation), statements)
                except TransactionError as e:
                    raise e.with_context(database=database, dialect=self.dialect.name)

    # ------------------------------------------------------------------ #
    # Database context
    # ------------------------------------------------------------------ #

    def switch_database(self, database: str) -> None:
        """Re-open the handle on ``database`` (same server and credentials).

        The new handle is opened first; if that fails the old handle stays
        authoritative and :class:`ContextSwitchError` is raised.  Once the
        new handle is in place the old one is closed; a failure to close it
        is logged and does not fail the switch.
        """
        operation = "switch_database"
        self._require(operation, database=database)

        with self._lock:
            if self._url is None or self._conn is None:
                raise ContextSwitchError(
                    "adapter is not connected",
                    context=ErrorContext(operation=operation, database=database),
                )

            self._reopen(with_database(self._url, database), database, operation)

        logger.info(
            "database_switched",
            dialect=self.dialect.name,
            database=database,
            previous=self.previous_database,
        )

    def _reopen(self, target: URL, database: str, operation: str) -> None:
        """Swap the live handle for one opened on ``target``. Caller holds the lock."""
        try:
            conn = self._open_and_ping(target)
        except DbSpineError as e:
            raise ContextSwitchError(
                f"Failed to switch to database '{database}': {e.message}",
                cause=e,
                context=self._context(operation, database),
            ) from e

        old_conn = self._conn
        self._conn, self._url = conn, target
        self.previous_database, self.current_database = self.current_database, database
        if old_conn is not None:
            self._close_quietly(old_conn, operation=operation)

    @contextmanager
    def _use_database(
        self,
        database: str,
        *,
        operation: str,
        table: str | None = None,
    ) -> Iterator[None]:
        """Run the block against ``database``, switching first if needed.

        If the block fails after a switch, the handle is reopened on the URL
        it had before the switch (best-effort) and the block's error is
        re-raised unchanged.
        """
        origin: URL | None = None
        if not self.dialect.cross_database and database != self.current_database:
            origin = self._url
            self.switch_database(database)

        try:
            yield
        except Exception:
            if origin is not None:
                self._restore(origin, operation, table)
            raise

    def _restore(self, origin: URL, operation: str, table: str | None) -> None:
        database = self._database_for(origin)
        try:
            with self._lock:
                self._reopen(origin, database, "restore_database")
        except DbSpineError as e:
            logger.warning(
                "database_restore_failed",
                dialect=self.dialect.name,
                operation=operation,
                table=table,
                database=database,
                error=e.message,
            )

    # ------------------------------------------------------------------ #
    # Execution helpers
    # ------------------------------------------------------------------ #

    def _fetch(
        self,
        sql: str,
        args: Sequence[Any] = (),
        *,
        operation: str,
        database: str | None = None,
        table: str | None = None,
    ) -> TabularResult:
        conn = self._require_connection(operation)
        cursor = None
        try:
            cursor = conn.cursor()
            self._run(cursor, sql, args)
            result = TabularResult.from_cursor(cursor)
            # end the read transaction so the next read sees fresh data
            conn.commit()
        except Exception as e:
            self._rollback_quietly(conn, operation)
            raise QueryError(
                f"{operation} failed: {e}",
                cause=e,
                context=self._context(operation, database, table),
            ) from e
        finally:
            if cursor is not None:
                cursor.close()
        return result

    def _execute(
        self,
        sql: str,
        args: Sequence[Any] = (),
        *,
        operation: str,
        database: str | None = None,
        table: str | None = None,
    ) -> int:
        conn = self._require_connection(operation)
        cursor = None
        try:
            cursor = conn.cursor()
            self._run(cursor, sql, args)
            affected = cursor.rowcount
            conn.commit()
        except Exception as e:
            self._rollback_quietly(conn, operation)
            raise QueryError(
                f"{operation} failed: {e}",
                cause=e,
                context=self._context(operation, database, table),
            ) from e
        finally:
            if cursor is not None:
                cursor.close()
        return max(affected, 0)

    @staticmethod
    def _run(cursor: Cursor, sql: str, args: Sequence[Any]) -> None:
        if args:
            cursor.execute(sql, tuple(args))
        else:
            cursor.execute(sql)

    def _require_connection(self, operation: str) -> Connection:
        if self._conn is None:
            raise DatabaseConnectionError(
                "adapter is not connected",
                retryable=False,
                context=ErrorContext(operation=operation, dialect=self.dialect.name),
            )
        return self._conn

    def _bound_identifier(self, name: str) -> str:
        return bound_text(self.dialect, self.dialect.quote_identifier(name))

    def _parse_table(self, table: str, operation: str) -> TableIdentifier:
        try:
            return TableIdentifier.parse(table, namespaced=self.dialect.namespaced)
        except ValidationError as e:
            raise e.with_context(operation=operation, dialect=self.dialect.name)

    def _require(self, operation: str, **arguments: str) -> None:
        """Raise ValidationError for the first empty argument."""
        for name, value in arguments.items():
            if not value:
                raise ValidationError(
                    f"{name.replace('_', ' ')} is required",
                    field=name,
                    context=ErrorContext(operation=operation, dialect=self.dialect.name),
                )

    def _context(
        self,
        operation: str,
        database: str | None = None,
        table: str | None = None,
    ) -> ErrorContext:
        return ErrorContext(
            operation=operation,
            database=database or self.current_database or None,
            table=table,
            dialect=self.dialect.name,
        )

    def _rollback_quietly(self, conn: Connection, operation: str) -> None:
        try:
            conn.rollback()
        except Exception as e:
            logger.warning("rollback_failed", operation=operation, error=str(e))

    def _close_quietly(self, conn: Connection, *, operation: str) -> None:
        try:
            conn.close()
        except Exception as e:
            logger.warning("connection_close_failed", operation=operation, error=str(e))


__all__ = [
    "DatabaseAdapter",
]
