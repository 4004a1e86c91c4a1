"""Tests for database adapter registration and URL-based opening."""

from __future__ import annotations

from pathlib import Path

import pytest

from dbspine.core.adapters import (
    AdapterRegistry,
    DatabaseType,
    MySQLAdapter,
    PostgreSQLAdapter,
    SQLiteAdapter,
    SQLServerAdapter,
    adapter_registry,
    get_adapter,
    open_adapter,
)
from dbspine.core.errors import ConfigError


class TestAdapterRegistry:
    @pytest.mark.parametrize(
        "name, cls",
        [
            ("sqlite", SQLiteAdapter),
            ("postgresql", PostgreSQLAdapter),
            ("postgres", PostgreSQLAdapter),
            ("mysql", MySQLAdapter),
            ("mariadb", MySQLAdapter),
            ("sqlserver", SQLServerAdapter),
            ("mssql", SQLServerAdapter),
        ],
    )
    def test_registered(self, name: str, cls: type) -> None:
        assert name in adapter_registry.list_adapters()
        assert isinstance(adapter_registry.create(name), cls)

    def test_unknown_raises(self) -> None:
        with pytest.raises(ConfigError, match="Unknown database adapter"):
            adapter_registry.create("mongodb")

    def test_register_custom(self) -> None:
        registry = AdapterRegistry()
        registry.register("Lite", SQLiteAdapter)
        assert isinstance(registry.create("lite"), SQLiteAdapter)
        assert "lite" not in adapter_registry.list_adapters()


class TestGetAdapter:
    def test_by_enum(self) -> None:
        adapter = get_adapter(DatabaseType.SQLSERVER)
        assert isinstance(adapter, SQLServerAdapter)
        assert adapter.dialect.name == "sqlserver"

    def test_passes_kwargs(self) -> None:
        adapter = get_adapter("sqlite", url="sqlite://")
        adapter.connect()
        assert adapter.is_connected
        adapter.disconnect()


class TestOpenAdapter:
    def test_opens_sqlite_file(self, sqlite_path: Path) -> None:
        adapter = open_adapter(f"sqlite:///{sqlite_path}")
        try:
            assert isinstance(adapter, SQLiteAdapter)
            assert adapter.is_connected
            assert "users" in adapter.list_tables("main")["main"]
        finally:
            adapter.disconnect()

    def test_unknown_scheme(self) -> None:
        with pytest.raises(ConfigError, match="Unsupported scheme"):
            open_adapter("oracle://u:p@h/db")
