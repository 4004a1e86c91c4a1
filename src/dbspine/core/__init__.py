"""dbspine core -- engine-neutral database browsing and editing.

Manifesto:
    A terminal database client needs the same handful of capabilities on
    every engine: connect from a URL, list what is there, page through
    rows, edit rows, and commit a batch of edits atomically.  ``dbspine.core``
    provides those behind one adapter interface so the layer above never
    branches on the engine.

    - **Dialect-driven SQL:** Quoting, bind markers, pagination, catalogs
    - **Strings in, strings out:** Every read is a ``TabularResult``
    - **Typed errors:** ``DbSpineError`` hierarchy with operation context

Architecture::

    Layer 1 -- Types & Errors
        errors.py          Structured error hierarchy (DbSpineError, ...)
        protocols.py       DB-API Connection / Cursor protocols
        models.py          TableIdentifier, PendingChange, Statement
        tabular.py         TabularResult + NULL/EMPTY sentinels

    Layer 2 -- SQL
        dialect.py         SQL dialect abstraction (4 backends)
        changes.py         Pending changes -> atomic statement batch

    Layer 3 -- Adapters
        adapters/          Database adapters (SQLite, PostgreSQL, MySQL, SQL Server)

    Ambient
        settings.py        DBSPINE_* environment settings (pydantic-settings)
        logging.py         structlog configuration

Tags:
    dbspine, core, database, adapters, dialect

Doc-Types:
    package-overview, architecture-map, module-index
"""

from dbspine.core.adapters import (
    DatabaseAdapter,
    DatabaseType,
    get_adapter,
    open_adapter,
)
from dbspine.core.changes import ChangeSetBuilder, execute_atomically
from dbspine.core.dialect import CatalogKind, Dialect, get_dialect
from dbspine.core.errors import (
    ConfigError,
    ContextSwitchError,
    DatabaseConnectionError,
    DatabaseError,
    DbSpineError,
    QueryError,
    TransactionError,
    ValidationError,
)
from dbspine.core.models import (
    CellEdit,
    CellKind,
    ChangeKind,
    PendingChange,
    PrimaryKey,
    Statement,
    TableIdentifier,
)
from dbspine.core.tabular import EMPTY_SENTINEL, NULL_SENTINEL, TabularResult

__all__ = [
    # Adapters
    "DatabaseAdapter",
    "DatabaseType",
    "get_adapter",
    "open_adapter",
    # SQL
    "CatalogKind",
    "Dialect",
    "get_dialect",
    "ChangeSetBuilder",
    "execute_atomically",
    # Models
    "CellEdit",
    "CellKind",
    "ChangeKind",
    "PendingChange",
    "PrimaryKey",
    "Statement",
    "TableIdentifier",
    "TabularResult",
    "NULL_SENTINEL",
    "EMPTY_SENTINEL",
    # Errors
    "DbSpineError",
    "ValidationError",
    "ConfigError",
    "DatabaseConnectionError",
    "DatabaseError",
    "QueryError",
    "TransactionError",
    "ContextSwitchError",
]
