"""SQL Server database adapter.

Uses ``pymssql`` (``%s`` placeholders).  The target database may be given
as the URL path or as ``?database=``; switching opens a new connection
with the database replaced.

Install the driver::

    pip install pymssql
    # or:  pip install dbspine[sqlserver]
"""

from __future__ import annotations

from sqlalchemy.engine import URL

from dbspine.core.errors import ConfigError
from dbspine.core.protocols import Connection

from .base import DatabaseAdapter
from .types import DatabaseType
from .urls import database_of


class SQLServerAdapter(DatabaseAdapter):
    """Microsoft SQL Server database adapter."""

    db_type = DatabaseType.SQLSERVER

    def _open(self, url: URL) -> Connection:
        try:
            import pymssql
        except ImportError:
            raise ConfigError(
                "pymssql is required for SQL Server. Install with: pip install pymssql"
            ) from None

        return pymssql.connect(
            server=url.host or "localhost",
            port=str(url.port or 1433),
            user=url.username or "",
            password=url.password or "",
            database=database_of(url),
            login_timeout=self._settings.connect_timeout,
            autocommit=False,
        )


__all__ = [
    "SQLServerAdapter",
]
