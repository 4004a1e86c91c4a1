"""Connection strings -- parse, inspect and re-target database URLs.

Every adapter is created from one URL-shaped string.  Switching database
means deriving a *new* URL from the original one (credentials, host, port
and options kept, database replaced), so parsing is delegated to
SQLAlchemy's :class:`~sqlalchemy.engine.URL`, which handles quoting of
credentials and query parameters.

Supported URL schemes
---------------------
==========================  ==========================================  ============
Scheme                      Example                                     Backend
==========================  ==========================================  ============
``(file path)``             ``./data/shop.db`` or ``:memory:``           SQLite
``sqlite`` / ``sqlite3``    ``sqlite:///path/to/file.db``                SQLite
``postgresql``/``postgres`` ``postgres://user:pw@host:5432/db``          PostgreSQL
``mysql`` / ``mariadb``     ``mysql://user:pw@host:3306/db``             MySQL
``sqlserver`` / ``mssql``   ``sqlserver://user:pw@host:1433?database=db`` SQL Server
==========================  ==========================================  ============

Driver suffixes (``postgresql+psycopg2://``) are accepted and ignored.
"""

from __future__ import annotations

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

from dbspine.core.errors import ConfigError

from .types import DatabaseType

_SCHEMES: dict[str, DatabaseType] = {
    "sqlite": DatabaseType.SQLITE,
    "sqlite3": DatabaseType.SQLITE,
    "postgresql": DatabaseType.POSTGRESQL,
    "postgres": DatabaseType.POSTGRESQL,
    "mysql": DatabaseType.MYSQL,
    "mariadb": DatabaseType.MYSQL,
    "sqlserver": DatabaseType.SQLSERVER,
    "mssql": DatabaseType.SQLSERVER,
}


def parse_url(url: str) -> URL:
    """Parse a connection string; bare paths become ``sqlite:///<path>``."""
    if not url:
        raise ConfigError("connection string is required")

    if "://" not in url:
        return URL.create("sqlite", database=url)

    try:
        return make_url(url)
    except ArgumentError as e:
        raise ConfigError(f"Invalid connection string: {e}", cause=e) from e


def database_type(url: URL) -> DatabaseType:
    """Resolve the backend a URL points at."""
    backend = url.get_backend_name().lower()
    try:
        return _SCHEMES[backend]
    except KeyError:
        raise ConfigError(
            f"Unsupported scheme '{backend}'. Supported: {sorted(_SCHEMES)}"
        ) from None


def database_of(url: URL) -> str:
    """Database a URL is bound to (SQL Server may carry it as ``?database=``)."""
    if database_type(url) is DatabaseType.SQLSERVER:
        return url.query.get("database") or url.database or ""
    return url.database or ""


def with_database(url: URL, database: str) -> URL:
    """Same server, credentials and options, different database."""
    if database_type(url) is DatabaseType.SQLSERVER:
        return url.set(database=None).update_query_dict({"database": database})
    return url.set(database=database)


def redact(url: URL) -> str:
    """Render a URL for logs with the password masked."""
    return url.render_as_string(hide_password=True)


__all__ = [
    "parse_url",
    "database_type",
    "database_of",
    "with_database",
    "redact",
]
