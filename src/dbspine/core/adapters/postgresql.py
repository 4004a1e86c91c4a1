"""PostgreSQL database adapter.

Uses ``psycopg2`` (``%s`` placeholders).  A PostgreSQL connection is bound
to one database, so switching opens a new connection on the same server.

Install the driver::

    pip install psycopg2-binary
    # or:  pip install dbspine[postgresql]
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.engine import URL

from dbspine.core.errors import ConfigError
from dbspine.core.protocols import Connection

from .base import DatabaseAdapter
from .types import DatabaseType


class PostgreSQLAdapter(DatabaseAdapter):
    """
    PostgreSQL database adapter.

    URL query parameters (``?sslmode=require``) are passed through to
    ``psycopg2.connect`` as keyword arguments.
    """

    db_type = DatabaseType.POSTGRESQL

    def _open(self, url: URL) -> Connection:
        try:
            import psycopg2
        except ImportError:
            raise ConfigError(
                "psycopg2 is required for PostgreSQL. Install with: pip install psycopg2-binary"
            ) from None

        params: dict[str, Any] = {
            "host": url.host or "localhost",
            "port": url.port or 5432,
            "dbname": url.database,
            "user": url.username,
            "password": url.password,
            "connect_timeout": self._settings.connect_timeout,
        }
        params.update({k: v for k, v in url.query.items() if isinstance(v, str)})
        return psycopg2.connect(**{k: v for k, v in params.items() if v is not None})


__all__ = [
    "PostgreSQLAdapter",
]
