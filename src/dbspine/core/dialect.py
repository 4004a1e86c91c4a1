"""SQL dialect abstraction for the four supported engine families.

Provides a ``Dialect`` protocol and one concrete implementation per engine.
Adapters and the change-set builder call dialect methods for every piece of
SQL that differs between engines (identifier quoting, bind markers,
pagination, catalog queries) and never branch on the engine themselves.

Manifesto:
    The same "list the columns of this table" request needs four different
    catalog queries, three quoting styles and two bind-marker styles.
    Without a dialect layer those differences leak into every call site.

    - **One interface:** Dialect protocol for all dialect-specific SQL
    - **Pure:** No I/O; every method returns text (and bind arguments)
    - **Selected once:** An adapter picks its dialect at construction

Architecture::

    ┌──────────────────────────────────────────────────────────────────┐
    │                     Dialect Abstraction Layer                     │
    └──────────────────────────────────────────────────────────────────┘

    ┌────────────┐ ┌──────────────┐ ┌────────────┐ ┌──────────────────┐
    │ SQLite     │ │ PostgreSQL   │ │ MySQL      │ │ SQL Server       │
    │ "x"        │ │ "x"          │ │ `x`        │ │ [x]              │
    │ ?1, ?2     │ │ %s, %s       │ │ %s, %s     │ │ %s, %s           │
    │ LIMIT/OFF  │ │ LIMIT/OFF    │ │ LIMIT/OFF  │ │ OFFSET/FETCH     │
    │ pragma_*   │ │ info_schema  │ │ info_schema│ │ info_schema+sys  │
    └────────────┘ └──────────────┘ └────────────┘ └──────────────────┘

Examples:
    >>> from dbspine.core.dialect import get_dialect
    >>> d = get_dialect("sqlserver")
    >>> d.quote_identifier("order")
    '[order]'
    >>> d.pagination_clause(0, 50, sorted=False)
    'ORDER BY (SELECT NULL) OFFSET 0 ROWS FETCH NEXT 50 ROWS ONLY'

Guardrails:
    ❌ DON'T: Interpolate a table/column name without ``quote_identifier``
    ✅ DO: Quote identifiers, bind values (identifiers cannot be bound)

    ❌ DON'T: Reset the placeholder ordinal between SET and WHERE
    ✅ DO: Thread one running ordinal through the whole statement

Tags:
    dialect, sql, abstraction, portability, catalog, dbspine

Doc-Types:
    - API Reference
    - Architecture Documentation
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable

from dbspine.core.errors import ConfigError, ValidationError
from dbspine.core.models import TableIdentifier


class CatalogKind(str, Enum):
    """Introspection queries every dialect provides."""

    DATABASES = "databases"
    TABLES = "tables"
    COLUMNS = "columns"
    CONSTRAINTS = "constraints"
    FOREIGN_KEYS = "foreign_keys"
    INDEXES = "indexes"
    PRIMARY_KEYS = "primary_keys"


CatalogQuery = tuple[str, tuple[str, ...]]


@runtime_checkable
class Dialect(Protocol):
    """SQL dialect contract.

    Capability flags:
        namespaced: table strings are ``schema.table``.
        cross_database: other databases are reachable by qualification on
            the same handle, so adapters never reopen to switch.
        supports_default_keyword: ``DEFAULT`` is legal as a VALUES/SET item.
        escape_percent: the driver %-formats statement text whenever
            arguments are bound, so a literal ``%`` there must be doubled.
    """

    namespaced: bool
    cross_database: bool
    supports_default_keyword: bool
    escape_percent: bool
    ping_query: str

    @property
    def name(self) -> str:
        """Human-readable dialect name (e.g. ``'sqlserver'``)."""
        ...

    def quote_identifier(self, name: str) -> str:
        """Wrap one identifier in the dialect's quote characters."""
        ...

    def qualify(self, table: TableIdentifier, database: str = "") -> str:
        """Fully quoted table reference for use in FROM/INTO/UPDATE."""
        ...

    def placeholder(self, ordinal: int) -> str:
        """Bind marker for 1-based position ``ordinal``."""
        ...

    def pagination_clause(self, offset: int, limit: int, *, sorted: bool) -> str:
        """OFFSET/LIMIT clause, prefixed with an ORDER BY when one is needed."""
        ...

    def empty_insert(self, qualified_table: str) -> str:
        """INSERT that fills every column with its default."""
        ...

    def catalog_query(
        self,
        kind: CatalogKind,
        table: TableIdentifier | None = None,
        database: str = "",
    ) -> CatalogQuery:
        """Catalog/information-schema query text plus bind arguments."""
        ...


def _quote(name: str, opening: str, closing: str) -> str:
    return f"{opening}{name.replace(closing, closing * 2)}{closing}"


def bound_text(dialect: Dialect, fragment: str) -> str:
    """Escape ``fragment`` (quoted identifiers) for text that has bound arguments."""
    if dialect.escape_percent:
        return fragment.replace("%", "%%")
    return fragment


def _require_table(kind: CatalogKind, table: TableIdentifier | None) -> TableIdentifier:
    if table is None:
        raise ValidationError(f"{kind.value} query requires a table", field="table")
    return table


def _limit_offset(offset: int, limit: int, *, sorted: bool) -> str:
    # ORDER BY 1 keeps pages stable across requests once an offset is applied
    clause = f"LIMIT {limit} OFFSET {offset}"
    if offset > 0 and not sorted:
        return f"ORDER BY 1 {clause}"
    return clause


# =========================================================================
# Concrete Dialect Implementations
# =========================================================================


class SQLiteDialect:
    """SQLite dialect -- ``"x"`` identifiers, ``?N`` numbered placeholders.

    A "database" is a schema attached to the single handle (``main``,
    ``temp``, or an ``ATTACH``-ed file), so tables are qualified with it
    rather than switched to.  Catalog data comes from the ``pragma_*``
    table-valued functions, which accept the schema as a bound argument.
    """

    namespaced = False
    cross_database = True
    supports_default_keyword = False
    escape_percent = False
    ping_query = "SELECT 1"

    @property
    def name(self) -> str:
        return "sqlite"

    def quote_identifier(self, name: str) -> str:
        return _quote(name, '"', '"')

    def qualify(self, table: TableIdentifier, database: str = "") -> str:
        schema = database or table.schema
        if schema:
            return f"{self.quote_identifier(schema)}.{self.quote_identifier(table.name)}"
        return self.quote_identifier(table.name)

    def placeholder(self, ordinal: int) -> str:
        return f"?{ordinal}"

    def pagination_clause(self, offset: int, limit: int, *, sorted: bool) -> str:
        return _limit_offset(offset, limit, sorted=sorted)

    def empty_insert(self, qualified_table: str) -> str:
        return f"INSERT INTO {qualified_table} DEFAULT VALUES"

    def catalog_query(
        self,
        kind: CatalogKind,
        table: TableIdentifier | None = None,
        database: str = "",
    ) -> CatalogQuery:
        schema = database or "main"

        match kind:
            case CatalogKind.DATABASES:
                return "SELECT name FROM pragma_database_list ORDER BY seq", ()
            case CatalogKind.TABLES:
                return (
                    f"SELECT ?1 AS table_schema, name AS table_name "
                    f"FROM {self.quote_identifier(schema)}.sqlite_master "
                    f"WHERE type = 'table' AND name NOT LIKE 'sqlite_%' "
                    f"ORDER BY name",
                    (schema,),
                )

        name = _require_table(kind, table).name
        match kind:
            case CatalogKind.COLUMNS:
                text = (
                    'SELECT name AS column_name, type AS data_type, "notnull" AS not_null, '
                    "dflt_value AS column_default, pk AS primary_key "
                    "FROM pragma_table_info(?1, ?2) ORDER BY cid"
                )
            case CatalogKind.CONSTRAINTS:
                text = (
                    "SELECT il.name AS constraint_name, ii.name AS column_name, "
                    "CASE il.origin WHEN 'pk' THEN 'PRIMARY KEY' ELSE 'UNIQUE' END AS constraint_type "
                    "FROM pragma_index_list(?1, ?2) AS il "
                    "JOIN pragma_index_info(il.name, ?2) AS ii "
                    "WHERE il.origin IN ('pk', 'u') "
                    "ORDER BY il.name, ii.seqno"
                )
            case CatalogKind.FOREIGN_KEYS:
                text = (
                    'SELECT id AS constraint_id, "from" AS column_name, '
                    '"table" AS foreign_table_name, "to" AS foreign_column_name, '
                    "on_update, on_delete "
                    "FROM pragma_foreign_key_list(?1, ?2) ORDER BY id, seq"
                )
            case CatalogKind.INDEXES:
                text = (
                    "SELECT il.name AS index_name, ii.name AS column_name, "
                    'il."unique" AS is_unique, il.origin AS origin '
                    "FROM pragma_index_list(?1, ?2) AS il "
                    "JOIN pragma_index_info(il.name, ?2) AS ii "
                    "ORDER BY il.name, ii.seqno"
                )
            case CatalogKind.PRIMARY_KEYS:
                text = (
                    "SELECT name AS column_name FROM pragma_table_info(?1, ?2) "
                    "WHERE pk > 0 ORDER BY pk"
                )
            case _:
                raise ValidationError(f"Unsupported catalog query: {kind}", field="kind")
        return text, (name, schema)


class PostgreSQLDialect:
    """PostgreSQL dialect -- ``"x"`` identifiers, ``%s`` placeholders (psycopg2).

    Databases are separate catalogs; reaching another one means opening a
    new connection, so ``cross_database`` is False.
    """

    namespaced = True
    cross_database = False
    supports_default_keyword = True
    escape_percent = True
    ping_query = "SELECT 1"

    @property
    def name(self) -> str:
        return "postgresql"

    def quote_identifier(self, name: str) -> str:
        return _quote(name, '"', '"')

    def qualify(self, table: TableIdentifier, database: str = "") -> str:  # noqa: ARG002
        return f"{self.quote_identifier(table.schema or 'public')}.{self.quote_identifier(table.name)}"

    def placeholder(self, ordinal: int) -> str:  # noqa: ARG002
        return "%s"

    def pagination_clause(self, offset: int, limit: int, *, sorted: bool) -> str:
        return _limit_offset(offset, limit, sorted=sorted)

    def empty_insert(self, qualified_table: str) -> str:
        return f"INSERT INTO {qualified_table} DEFAULT VALUES"

    def catalog_query(
        self,
        kind: CatalogKind,
        table: TableIdentifier | None = None,
        database: str = "",
    ) -> CatalogQuery:
        match kind:
            case CatalogKind.DATABASES:
                return (
                    "SELECT datname FROM pg_database "
                    "WHERE datistemplate = false ORDER BY datname",
                    (),
                )
            case CatalogKind.TABLES:
                return (
                    "SELECT table_schema, table_name FROM information_schema.tables "
                    "WHERE table_catalog = %s "
                    "AND table_schema NOT IN ('pg_catalog', 'information_schema') "
                    "ORDER BY table_schema, table_name",
                    (database,),
                )

        target = _require_table(kind, table)
        args = (target.schema or "public", target.name)
        match kind:
            case CatalogKind.COLUMNS:
                text = (
                    "SELECT column_name, data_type, is_nullable, column_default "
                    "FROM information_schema.columns "
                    "WHERE table_schema = %s AND table_name = %s "
                    "ORDER BY ordinal_position"
                )
            case CatalogKind.CONSTRAINTS:
                text = (
                    "SELECT tc.constraint_name, kcu.column_name, tc.constraint_type "
                    "FROM information_schema.table_constraints AS tc "
                    "JOIN information_schema.key_column_usage AS kcu "
                    "ON tc.constraint_name = kcu.constraint_name "
                    "AND tc.table_schema = kcu.table_schema "
                    "WHERE tc.constraint_type != 'FOREIGN KEY' "
                    "AND tc.table_schema = %s AND tc.table_name = %s "
                    "ORDER BY tc.constraint_name, kcu.ordinal_position"
                )
            case CatalogKind.FOREIGN_KEYS:
                text = (
                    "SELECT tc.constraint_name, kcu.column_name, "
                    "ccu.table_name AS foreign_table_name, "
                    "ccu.column_name AS foreign_column_name "
                    "FROM information_schema.table_constraints AS tc "
                    "JOIN information_schema.key_column_usage AS kcu "
                    "ON tc.constraint_name = kcu.constraint_name "
                    "AND tc.table_schema = kcu.table_schema "
                    "JOIN information_schema.constraint_column_usage AS ccu "
                    "ON ccu.constraint_name = tc.constraint_name "
                    "AND ccu.table_schema = tc.table_schema "
                    "WHERE tc.constraint_type = 'FOREIGN KEY' "
                    "AND tc.table_schema = %s AND tc.table_name = %s"
                )
            case CatalogKind.INDEXES:
                text = (
                    "SELECT i.relname AS index_name, a.attname AS column_name, "
                    "am.amname AS type, ix.indisunique AS is_unique, "
                    "ix.indisprimary AS is_primary "
                    "FROM pg_class t "
                    "JOIN pg_namespace n ON n.oid = t.relnamespace "
                    "JOIN pg_index ix ON t.oid = ix.indrelid "
                    "JOIN pg_class i ON i.oid = ix.indexrelid "
                    "JOIN pg_am am ON i.relam = am.oid "
                    "JOIN pg_attribute a ON a.attrelid = t.oid AND a.attnum = ANY(ix.indkey) "
                    "WHERE n.nspname = %s AND t.relname = %s "
                    "ORDER BY i.relname, a.attname"
                )
            case CatalogKind.PRIMARY_KEYS:
                text = (
                    "SELECT kcu.column_name "
                    "FROM information_schema.table_constraints AS tc "
                    "JOIN information_schema.key_column_usage AS kcu "
                    "ON tc.constraint_name = kcu.constraint_name "
                    "AND tc.table_schema = kcu.table_schema "
                    "WHERE tc.constraint_type = 'PRIMARY KEY' "
                    "AND tc.table_schema = %s AND tc.table_name = %s "
                    "ORDER BY kcu.ordinal_position"
                )
            case _:
                raise ValidationError(f"Unsupported catalog query: {kind}", field="kind")
        return text, args


class MySQLDialect:
    """MySQL dialect -- `` `x` `` identifiers, ``%s`` placeholders.

    Compatible with ``mysql.connector``.  A MySQL "database" is a schema on
    the same server, so tables are qualified as `` `db`.`table` `` and the
    adapter never reopens to switch.
    """

    namespaced = False
    cross_database = True
    supports_default_keyword = True
    escape_percent = False
    ping_query = "SELECT 1"

    @property
    def name(self) -> str:
        return "mysql"

    def quote_identifier(self, name: str) -> str:
        return _quote(name, "`", "`")

    def qualify(self, table: TableIdentifier, database: str = "") -> str:
        schema = database or table.schema
        if schema:
            return f"{self.quote_identifier(schema)}.{self.quote_identifier(table.name)}"
        return self.quote_identifier(table.name)

    def placeholder(self, ordinal: int) -> str:  # noqa: ARG002
        return "%s"

    def pagination_clause(self, offset: int, limit: int, *, sorted: bool) -> str:
        return _limit_offset(offset, limit, sorted=sorted)

    def empty_insert(self, qualified_table: str) -> str:
        return f"INSERT INTO {qualified_table} () VALUES ()"

    def catalog_query(
        self,
        kind: CatalogKind,
        table: TableIdentifier | None = None,
        database: str = "",
    ) -> CatalogQuery:
        match kind:
            case CatalogKind.DATABASES:
                return (
                    "SELECT SCHEMA_NAME FROM information_schema.SCHEMATA "
                    "WHERE SCHEMA_NAME NOT IN "
                    "('information_schema', 'mysql', 'performance_schema', 'sys') "
                    "ORDER BY SCHEMA_NAME",
                    (),
                )
            case CatalogKind.TABLES:
                return (
                    "SELECT TABLE_SCHEMA, TABLE_NAME FROM information_schema.TABLES "
                    "WHERE TABLE_SCHEMA = %s ORDER BY TABLE_NAME",
                    (database,),
                )

        args = (database, _require_table(kind, table).name)
        match kind:
            case CatalogKind.COLUMNS:
                text = (
                    "SELECT COLUMN_NAME, COLUMN_TYPE, IS_NULLABLE, COLUMN_DEFAULT, EXTRA "
                    "FROM information_schema.COLUMNS "
                    "WHERE TABLE_SCHEMA = %s AND TABLE_NAME = %s "
                    "ORDER BY ORDINAL_POSITION"
                )
            case CatalogKind.CONSTRAINTS:
                text = (
                    "SELECT tc.CONSTRAINT_NAME, kcu.COLUMN_NAME, tc.CONSTRAINT_TYPE "
                    "FROM information_schema.TABLE_CONSTRAINTS AS tc "
                    "JOIN information_schema.KEY_COLUMN_USAGE AS kcu "
                    "ON tc.CONSTRAINT_NAME = kcu.CONSTRAINT_NAME "
                    "AND tc.TABLE_SCHEMA = kcu.TABLE_SCHEMA "
                    "AND tc.TABLE_NAME = kcu.TABLE_NAME "
                    "WHERE tc.CONSTRAINT_TYPE != 'FOREIGN KEY' "
                    "AND tc.TABLE_SCHEMA = %s AND tc.TABLE_NAME = %s "
                    "ORDER BY tc.CONSTRAINT_NAME, kcu.ORDINAL_POSITION"
                )
            case CatalogKind.FOREIGN_KEYS:
                text = (
                    "SELECT CONSTRAINT_NAME, COLUMN_NAME, "
                    "REFERENCED_TABLE_NAME AS foreign_table_name, "
                    "REFERENCED_COLUMN_NAME AS foreign_column_name "
                    "FROM information_schema.KEY_COLUMN_USAGE "
                    "WHERE REFERENCED_TABLE_NAME IS NOT NULL "
                    "AND TABLE_SCHEMA = %s AND TABLE_NAME = %s "
                    "ORDER BY CONSTRAINT_NAME, ORDINAL_POSITION"
                )
            case CatalogKind.INDEXES:
                text = (
                    "SELECT INDEX_NAME, COLUMN_NAME, NON_UNIQUE, INDEX_TYPE "
                    "FROM information_schema.STATISTICS "
                    "WHERE TABLE_SCHEMA = %s AND TABLE_NAME = %s "
                    "ORDER BY INDEX_NAME, SEQ_IN_INDEX"
                )
            case CatalogKind.PRIMARY_KEYS:
                text = (
                    "SELECT COLUMN_NAME FROM information_schema.KEY_COLUMN_USAGE "
                    "WHERE CONSTRAINT_NAME = 'PRIMARY' "
                    "AND TABLE_SCHEMA = %s AND TABLE_NAME = %s "
                    "ORDER BY ORDINAL_POSITION"
                )
            case _:
                raise ValidationError(f"Unsupported catalog query: {kind}", field="kind")
        return text, args


class SQLServerDialect:
    """SQL Server dialect -- ``[x]`` identifiers, ``%s`` placeholders (pymssql).

    ``OFFSET ... FETCH`` is only legal after an ORDER BY, so an unsorted page
    gets ``ORDER BY (SELECT NULL)``.
    """

    namespaced = True
    cross_database = False
    supports_default_keyword = True
    escape_percent = True
    ping_query = "SELECT 1"

    @property
    def name(self) -> str:
        return "sqlserver"

    def quote_identifier(self, name: str) -> str:
        return _quote(name, "[", "]")

    def qualify(self, table: TableIdentifier, database: str = "") -> str:  # noqa: ARG002
        return f"{self.quote_identifier(table.schema or 'dbo')}.{self.quote_identifier(table.name)}"

    def placeholder(self, ordinal: int) -> str:  # noqa: ARG002
        return "%s"

    def pagination_clause(self, offset: int, limit: int, *, sorted: bool) -> str:
        clause = f"OFFSET {offset} ROWS FETCH NEXT {limit} ROWS ONLY"
        if not sorted:
            return f"ORDER BY (SELECT NULL) {clause}"
        return clause

    def empty_insert(self, qualified_table: str) -> str:
        return f"INSERT INTO {qualified_table} DEFAULT VALUES"

    def catalog_query(
        self,
        kind: CatalogKind,
        table: TableIdentifier | None = None,
        database: str = "",  # noqa: ARG002
    ) -> CatalogQuery:
        match kind:
            case CatalogKind.DATABASES:
                return (
                    "SELECT [name] FROM sys.databases "
                    "WHERE [name] NOT IN ('master', 'tempdb', 'model', 'msdb') "
                    "ORDER BY [name]",
                    (),
                )
            case CatalogKind.TABLES:
                return (
                    "SELECT [TABLE_SCHEMA], [TABLE_NAME] FROM INFORMATION_SCHEMA.TABLES "
                    "ORDER BY [TABLE_SCHEMA], [TABLE_NAME]",
                    (),
                )

        target = _require_table(kind, table)
        args = (target.schema or "dbo", target.name)
        match kind:
            case CatalogKind.COLUMNS:
                text = (
                    "SELECT [COLUMN_NAME], [DATA_TYPE], [IS_NULLABLE], [COLUMN_DEFAULT] "
                    "FROM INFORMATION_SCHEMA.COLUMNS "
                    "WHERE [TABLE_SCHEMA] = %s AND [TABLE_NAME] = %s "
                    "ORDER BY [ORDINAL_POSITION]"
                )
            case CatalogKind.CONSTRAINTS:
                text = (
                    "SELECT tc.CONSTRAINT_NAME, kcu.COLUMN_NAME, tc.CONSTRAINT_TYPE "
                    "FROM INFORMATION_SCHEMA.TABLE_CONSTRAINTS AS tc "
                    "JOIN INFORMATION_SCHEMA.KEY_COLUMN_USAGE AS kcu "
                    "ON tc.CONSTRAINT_NAME = kcu.CONSTRAINT_NAME "
                    "AND tc.TABLE_SCHEMA = kcu.TABLE_SCHEMA "
                    "WHERE tc.CONSTRAINT_TYPE != 'FOREIGN KEY' "
                    "AND tc.TABLE_SCHEMA = %s AND tc.TABLE_NAME = %s "
                    "ORDER BY tc.CONSTRAINT_NAME, kcu.ORDINAL_POSITION"
                )
            case CatalogKind.FOREIGN_KEYS:
                text = (
                    "SELECT tc.CONSTRAINT_NAME, kcu.COLUMN_NAME, "
                    "ccu.TABLE_NAME AS foreign_table_name, "
                    "ccu.COLUMN_NAME AS foreign_column_name "
                    "FROM INFORMATION_SCHEMA.TABLE_CONSTRAINTS AS tc "
                    "INNER JOIN INFORMATION_SCHEMA.KEY_COLUMN_USAGE AS kcu "
                    "ON tc.CONSTRAINT_NAME = kcu.CONSTRAINT_NAME "
                    "AND tc.TABLE_SCHEMA = kcu.TABLE_SCHEMA "
                    "INNER JOIN INFORMATION_SCHEMA.CONSTRAINT_COLUMN_USAGE AS ccu "
                    "ON ccu.CONSTRAINT_NAME = tc.CONSTRAINT_NAME "
                    "AND ccu.TABLE_SCHEMA = tc.TABLE_SCHEMA "
                    "WHERE tc.CONSTRAINT_TYPE = 'FOREIGN KEY' "
                    "AND tc.TABLE_SCHEMA = %s AND tc.TABLE_NAME = %s"
                )
            case CatalogKind.INDEXES:
                text = (
                    "SELECT ind.name AS [index_name], col.name AS [column_name], "
                    "ind.type_desc AS [type] "
                    "FROM sys.indexes ind "
                    "INNER JOIN sys.index_columns ind_col "
                    "ON ind.object_id = ind_col.object_id AND ind.index_id = ind_col.index_id "
                    "INNER JOIN sys.columns col "
                    "ON ind_col.object_id = col.object_id AND ind_col.column_id = col.column_id "
                    "INNER JOIN sys.tables tab ON ind.object_id = tab.object_id "
                    "INNER JOIN sys.schemas schem ON schem.schema_id = tab.schema_id "
                    "WHERE schem.name = %s AND tab.name = %s "
                    "AND ind.is_primary_key = 0 AND ind.is_unique = 0 "
                    "AND ind.is_unique_constraint = 0 AND tab.is_ms_shipped = 0 "
                    "ORDER BY tab.name, ind.name, ind.index_id, "
                    "ind_col.is_included_column, ind_col.key_ordinal"
                )
            case CatalogKind.PRIMARY_KEYS:
                text = (
                    "SELECT ccu.COLUMN_NAME "
                    "FROM INFORMATION_SCHEMA.TABLE_CONSTRAINTS AS tc "
                    "INNER JOIN INFORMATION_SCHEMA.CONSTRAINT_COLUMN_USAGE AS ccu "
                    "ON ccu.CONSTRAINT_NAME = tc.CONSTRAINT_NAME "
                    "AND ccu.TABLE_SCHEMA = tc.TABLE_SCHEMA "
                    "WHERE tc.CONSTRAINT_TYPE = 'PRIMARY KEY' "
                    "AND tc.TABLE_SCHEMA = %s AND tc.TABLE_NAME = %s "
                    "ORDER BY ccu.COLUMN_NAME"
                )
            case _:
                raise ValidationError(f"Unsupported catalog query: {kind}", field="kind")
        return text, args


# =========================================================================
# Registry / Factory
# =========================================================================

# Pre-instantiated singletons (dialects are stateless)
_DIALECTS: dict[str, Dialect] = {
    "sqlite": SQLiteDialect(),
    "postgresql": PostgreSQLDialect(),
    "postgres": PostgreSQLDialect(),  # alias
    "mysql": MySQLDialect(),
    "mariadb": MySQLDialect(),  # alias
    "sqlserver": SQLServerDialect(),
    "mssql": SQLServerDialect(),  # alias
}

_ALIASES = {"postgres", "mariadb", "mssql"}


def get_dialect(db_type: str) -> Dialect:
    """Get a dialect by database type name.

    Raises:
        ConfigError: If ``db_type`` is not recognised.

    Example:
        >>> get_dialect("postgresql").quote_identifier("users")
        '"users"'
    """
    key = db_type.lower()
    if key not in _DIALECTS:
        raise ConfigError(
            f"Unknown dialect '{db_type}'. "
            f"Supported: {sorted(set(_DIALECTS) - _ALIASES)}"
        )
    return _DIALECTS[key]


def register_dialect(name: str, dialect: Dialect) -> None:
    """Register a custom dialect implementation (e.g. a test double)."""
    _DIALECTS[name.lower()] = dialect


__all__ = [
    "CatalogKind",
    "CatalogQuery",
    "Dialect",
    "SQLiteDialect",
    "PostgreSQLDialect",
    "MySQLDialect",
    "SQLServerDialect",
    "bound_text",
    "get_dialect",
    "register_dialect",
]
