"""Database adapters -- one browsing/editing interface for 4 engines.

Manifesto:
    Listing tables, paging through rows and committing a batch of edits
    must work the same against SQLite, PostgreSQL, MySQL and SQL Server.
    Engine differences live in the dialect; the adapter base class
    implements every operation once.

    Each network adapter is **import-guarded**: the database driver is only
    required when a connection is opened, not at import time.  Install the
    corresponding extra::

        pip install dbspine[postgresql]   # psycopg2-binary
        pip install dbspine[mysql]        # mysql-connector-python
        pip install dbspine[sqlserver]    # pymssql

Architecture::

    DatabaseAdapter (base.py)        Abstract base: connect, introspect,
        |                            records, raw SQL, pending changes,
        |                            database switching
        |-- SQLiteAdapter            stdlib sqlite3 (always available)
        |-- PostgreSQLAdapter        psycopg2 (optional)
        |-- MySQLAdapter             mysql.connector (optional)
        |-- SQLServerAdapter         pymssql (optional)

    AdapterRegistry (registry.py)    Backend name -> adapter class
    urls (urls.py)                   Connection-string parsing / re-targeting
    DatabaseType (types.py)          Enum of supported backends

Guardrails:
    ❌ ``execute_query("SELECT * FROM t WHERE id=" + user_input)``
    ✅ ``update_record(...)`` / ``execute_pending_changes(...)`` bind values
    ❌ Importing optional drivers at module scope
    ✅ Import-guarded at connect time with clear ``ConfigError``

Tags:
    dbspine, database, adapters, multi-backend, import-guarded,
    registry-pattern, postgresql, sqlite, mysql, sqlserver

Doc-Types:
    package-overview, architecture-map, module-index
"""

from dbspine.core.dialect import Dialect, get_dialect
from dbspine.core.protocols import Connection

from .base import DatabaseAdapter
from .mysql import MySQLAdapter
from .postgresql import PostgreSQLAdapter
from .registry import AdapterRegistry, adapter_registry, get_adapter, open_adapter
from .sqlite import SQLiteAdapter
from .sqlserver import SQLServerAdapter
from .types import DatabaseType
from .urls import parse_url, with_database

__all__ = [
    # Types
    "DatabaseType",
    # Protocols / Abstractions
    "Connection",
    "Dialect",
    "get_dialect",
    # Base class
    "DatabaseAdapter",
    # Implementations
    "SQLiteAdapter",
    "PostgreSQLAdapter",
    "MySQLAdapter",
    "SQLServerAdapter",
    # Registry
    "AdapterRegistry",
    "adapter_registry",
    "get_adapter",
    "open_adapter",
    # Connection strings
    "parse_url",
    "with_database",
]
