"""MySQL database adapter.

Uses ``mysql.connector`` from the ``mysql-connector-python`` package.
MySQL uses **format** (``%s``) placeholder style.

Install the driver::

    pip install mysql-connector-python
    # or:  pip install dbspine[mysql]

Every database on the server is reachable from one connection as
`` `db`.`table` ``, so this adapter never reopens to switch.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.engine import URL

from dbspine.core.errors import ConfigError
from dbspine.core.protocols import Connection

from .base import DatabaseAdapter
from .types import DatabaseType


class MySQLAdapter(DatabaseAdapter):
    """MySQL / MariaDB database adapter."""

    db_type = DatabaseType.MYSQL

    def _open(self, url: URL) -> Connection:
        try:
            import mysql.connector
        except ImportError:
            raise ConfigError(
                "mysql-connector-python is required for MySQL. "
                "Install with: pip install mysql-connector-python"
            ) from None

        params: dict[str, Any] = {
            "host": url.host or "localhost",
            "port": url.port or 3306,
            "database": url.database,
            "user": url.username,
            "password": url.password,
            "charset": url.query.get("charset", "utf8mb4"),
            "connect_timeout": self._settings.connect_timeout,
            "autocommit": False,
        }
        return mysql.connector.connect(**{k: v for k, v in params.items() if v is not None})


__all__ = [
    "MySQLAdapter",
]
