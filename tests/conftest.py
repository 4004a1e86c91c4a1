"""
Shared pytest fixtures and configuration for dbspine tests.

This module provides:
- Settings cache isolation between tests
- A populated SQLite database file and connected adapter
- A mocked DB-API connection for server adapters

Usage:
    Fixtures are auto-discovered by pytest.

    def test_something(sqlite_adapter):
        page, total = sqlite_adapter.get_records("main", "users")
"""

from __future__ import annotations

import sqlite3
import sys
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Ensure dbspine package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dbspine.core.adapters.sqlite import SQLiteAdapter
from dbspine.core.settings import _settings_cache

SCHEMA = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT UNIQUE,
    note TEXT DEFAULT 'n/a'
);
CREATE TABLE orders (
    id INTEGER PRIMARY KEY,
    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    total REAL
);
CREATE INDEX idx_orders_user ON orders(user_id);
INSERT INTO users (id, name, email, note) VALUES
    (1, 'ada', 'ada@example.com', NULL),
    (2, 'bob', 'bob@example.com', ''),
    (3, 'cy', NULL, 'hello');
INSERT INTO orders (id, user_id, total) VALUES (10, 1, 9.5), (11, 3, 20.0);
"""


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Iterator[None]:
    """Each test sees a freshly loaded DbSpineSettings."""
    _settings_cache.clear()
    yield
    _settings_cache.clear()


@pytest.fixture
def sqlite_path(tmp_path: Path) -> Path:
    """A SQLite file with ``users`` and ``orders`` tables."""
    path = tmp_path / "shop.db"
    conn = sqlite3.connect(path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()
    return path


@pytest.fixture
def sqlite_adapter(sqlite_path: Path) -> Iterator[SQLiteAdapter]:
    """Connected adapter over ``sqlite_path``."""
    adapter = SQLiteAdapter(f"sqlite:///{sqlite_path}")
    adapter.connect()
    yield adapter
    adapter.disconnect()


@pytest.fixture
def count_rows(sqlite_path: Path):
    """Row count of a table read through an independent connection."""

    def _count(table: str) -> int:
        conn = sqlite3.connect(sqlite_path)
        try:
            return conn.execute(f'SELECT COUNT(*) FROM "{table}"').fetchone()[0]
        finally:
            conn.close()

    return _count


@pytest.fixture
def mock_connection():
    """Factory for DB-API connection doubles whose cursors return ``rows``."""

    def _make(rows=None, description=None) -> MagicMock:
        cursor = MagicMock()
        cursor.description = description if description is not None else [("?column?",)]
        cursor.fetchall.return_value = rows if rows is not None else [(1,)]
        cursor.rowcount = 1
        conn = MagicMock()
        conn.cursor.return_value = cursor
        return conn

    return _make
