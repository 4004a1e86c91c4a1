"""
Canonical protocol definitions for dbspine.

The adapters hold a raw DB-API 2.0 handle (``sqlite3``, ``psycopg2``,
``mysql.connector``, ``pymssql``).  The change-set executor and the tabular
plumbing only depend on the shape below, never on a driver module.

Architecture:
    ::

        Connection                       Cursor
        ┌─────────────────────────┐      ┌───────────────────────────┐
        │ cursor()   → Cursor     │      │ execute(sql, params)      │
        │ commit()                │      │ fetchall() / fetchone()   │
        │ rollback()              │      │ description / rowcount    │
        │ close()                 │      │ close()                   │
        └─────────────────────────┘      └───────────────────────────┘

Guardrails:
    ❌ DON'T: Import a driver module just to type a parameter
    ✅ DO: Annotate with ``Connection`` / ``Cursor`` from here

Tags:
    protocol, connection, dbapi, dbspine

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Cursor(Protocol):
    """Minimal DB-API 2.0 cursor."""

    description: Sequence[Sequence[Any]] | None
    rowcount: int

    def execute(self, sql: str, params: Sequence[Any] = ...) -> Any: ...

    def fetchone(self) -> Sequence[Any] | None: ...

    def fetchall(self) -> Sequence[Sequence[Any]]: ...

    def close(self) -> Any: ...


@runtime_checkable
class Connection(Protocol):
    """
    Minimal SYNCHRONOUS DB-API 2.0 connection.

    Every engine driver dbspine supports returns an object of this shape
    from its ``connect()`` function.
    """

    def cursor(self) -> Cursor:
        """Open a cursor on this connection."""
        ...

    def commit(self) -> None:
        """Commit the current transaction."""
        ...

    def rollback(self) -> None:
        """Roll back the current transaction."""
        ...

    def close(self) -> None:
        """Close the connection."""
        ...


__all__ = [
    "Connection",
    "Cursor",
]
