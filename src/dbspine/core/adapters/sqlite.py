"""SQLite database adapter.

Uses the built-in sqlite3 module.  The handle's "databases" are its
attached schemas (``main``, ``temp`` and anything ``ATTACH``-ed), so
switching never reopens the file: it only changes which schema
unqualified calls default to.
"""

from __future__ import annotations

import sqlite3

from sqlalchemy.engine import URL

from dbspine.core.errors import ContextSwitchError
from dbspine.core.protocols import Connection

from .base import DatabaseAdapter
from .types import DatabaseType


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite database adapter.

    Accepts ``sqlite:///path.db``, ``sqlite://`` (in-memory) or a bare
    file path.  Foreign keys are enforced on every handle.
    """

    db_type = DatabaseType.SQLITE

    def _open(self, url: URL) -> Connection:
        path = url.database or ":memory:"
        uri = path.startswith("file:") or "?" in path

        conn = sqlite3.connect(
            path,
            timeout=float(self._settings.connect_timeout),
            check_same_thread=False,
            uri=uri,
        )
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def _database_for(self, url: URL) -> str:  # noqa: ARG002
        return "main"

    def switch_database(self, database: str) -> None:
        """Make ``database`` (an attached schema) the default one."""
        self._require("switch_database", database=database)

        with self._lock:
            attached = self.list_databases().column("name")
            if database not in attached:
                raise ContextSwitchError(
                    f"Database '{database}' is not attached. Attached: {attached}",
                    context=self._context("switch_database", database),
                )
            self.previous_database, self.current_database = self.current_database, database


__all__ = [
    "SQLiteAdapter",
]
