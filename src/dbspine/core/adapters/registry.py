"""Database adapter registry and factory.

Manifesto:
    Callers hold a connection string, not a class name.  The registry maps
    backend names to adapter classes; :func:`open_adapter` goes straight
    from a URL to a connected adapter.

Features:
    - ``AdapterRegistry`` with pre-registered defaults and aliases
    - ``register()`` for custom adapters (or test doubles)
    - ``get_adapter()`` factory: type → adapter instance
    - ``open_adapter()``: URL → connected adapter

Tags:
    dbspine, database, registry, factory

Doc-Types:
    api-reference
"""

from __future__ import annotations

from typing import Any

from dbspine.core.errors import ConfigError

from .base import DatabaseAdapter
from .mysql import MySQLAdapter
from .postgresql import PostgreSQLAdapter
from .sqlite import SQLiteAdapter
from .sqlserver import SQLServerAdapter
from .types import DatabaseType
from .urls import database_type, parse_url


class AdapterRegistry:
    """
    Registry for database adapter factories.

    Pre-registered adapters:
    - ``sqlite`` — :class:`SQLiteAdapter`
    - ``postgresql`` / ``postgres`` — :class:`PostgreSQLAdapter`
    - ``mysql`` / ``mariadb`` — :class:`MySQLAdapter`
    - ``sqlserver`` / ``mssql`` — :class:`SQLServerAdapter`
    """

    def __init__(self):
        self._factories: dict[str, type[DatabaseAdapter]] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        """Register default adapters."""
        self._factories["sqlite"] = SQLiteAdapter
        self._factories["postgresql"] = PostgreSQLAdapter
        self._factories["postgres"] = PostgreSQLAdapter  # Alias
        self._factories["mysql"] = MySQLAdapter
        self._factories["mariadb"] = MySQLAdapter  # Alias
        self._factories["sqlserver"] = SQLServerAdapter
        self._factories["mssql"] = SQLServerAdapter  # Alias

    def register(self, name: str, adapter_class: type[DatabaseAdapter]) -> None:
        """Register an adapter factory."""
        self._factories[name.lower()] = adapter_class

    def create(self, name: str, **kwargs: Any) -> DatabaseAdapter:
        """Create an adapter by name."""
        name = name.lower()
        if name not in self._factories:
            raise ConfigError(f"Unknown database adapter: {name}")
        return self._factories[name](**kwargs)

    def list_adapters(self) -> list[str]:
        """List registered adapter names."""
        return sorted(self._factories.keys())


# Global registry
adapter_registry = AdapterRegistry()


def get_adapter(
    db_type: DatabaseType | str,
    **kwargs: Any,
) -> DatabaseAdapter:
    """
    Get a database adapter by type (not yet connected).

    Usage:
        adapter = get_adapter(DatabaseType.SQLITE, url="sqlite:///shop.db")
        adapter = get_adapter("postgresql", url="postgres://u:p@db/shop")
    """
    if isinstance(db_type, DatabaseType):
        name = db_type.value
    else:
        name = db_type

    return adapter_registry.create(name, **kwargs)


def open_adapter(url: str, **kwargs: Any) -> DatabaseAdapter:
    """Create the adapter matching ``url``'s scheme and connect it."""
    adapter = get_adapter(database_type(parse_url(url)), url=url, **kwargs)
    adapter.connect()
    return adapter


__all__ = [
    "AdapterRegistry",
    "adapter_registry",
    "get_adapter",
    "open_adapter",
]
