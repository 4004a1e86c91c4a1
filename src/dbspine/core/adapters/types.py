"""Database types."""

from __future__ import annotations

from enum import Enum


class DatabaseType(str, Enum):
    """Supported database types (values match dialect names)."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    SQLSERVER = "sqlserver"


__all__ = [
    "DatabaseType",
]
