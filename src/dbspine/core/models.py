"""Request and change models shared by adapters and the change-set builder.

All models are frozen dataclasses: a pending change is created once by
whatever tracks the user's edits and consumed exactly once by
:class:`~dbspine.core.changes.ChangeSetBuilder`.

Tags:
    models, dataclass, pending-change, dbspine

Doc-Types:
    api-reference
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from dbspine.core.errors import ValidationError


@dataclass(frozen=True, slots=True)
class TableIdentifier:
    """A table name, optionally namespaced by a schema.

    Attributes:
        name: Table name (never empty).
        schema: Schema name on dialects that namespace by schema
            (PostgreSQL, SQL Server); ``None`` elsewhere.
    """

    name: str
    schema: str | None = None

    @classmethod
    def parse(cls, text: str, *, namespaced: bool) -> TableIdentifier:
        """Parse a caller-supplied table string.

        On namespaced dialects ``text`` must be ``"schema.table"`` with both
        parts non-empty.  Otherwise the whole string is the table name.
        """
        if not text:
            raise ValidationError("table name is required", field="table")
        if not namespaced:
            return cls(name=text)

        parts = text.split(".")
        if len(parts) != 2 or not all(parts):
            raise ValidationError(
                "table must be in the format schema.table",
                field="table",
                value=text,
            )
        return cls(name=parts[1], schema=parts[0])

    def __str__(self) -> str:
        return f"{self.schema}.{self.name}" if self.schema else self.name


@dataclass(frozen=True, slots=True)
class PrimaryKey:
    """One ``column = value`` equality targeting a row."""

    column: str
    value: str


class CellKind(str, Enum):
    """How a cell edit is rendered into SQL."""

    PLAIN = "plain"  # bound argument
    DEFAULT = "default"  # DEFAULT keyword, no argument
    NULL = "null"  # NULL literal, no argument
    EMPTY = "empty"  # bound ""


@dataclass(frozen=True, slots=True)
class CellEdit:
    column: str
    value: str = ""
    kind: CellKind = CellKind.PLAIN


class ChangeKind(str, Enum):
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class PendingChange:
    """One uncommitted row-level edit.

    Attributes:
        table: Table string as the caller knows it (``"schema.table"`` on
            namespaced dialects).
        kind: Insert, update or delete.
        values: Cell edits, in column order.  Ignored for deletes.
        primary_key: Row-targeting equalities, ANDed.  Required for updates
            and deletes, ignored for inserts.
    """

    table: str
    kind: ChangeKind
    values: tuple[CellEdit, ...] = ()
    primary_key: tuple[PrimaryKey, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PendingChange:
        """Build from the JSON shape accepted by ``dbspine apply``.

        ::

            {"table": "public.users", "kind": "update",
             "values": [{"column": "name", "value": "Ada"}],
             "primary_key": [{"column": "id", "value": "7"}]}
        """
        try:
            return cls(
                table=data["table"],
                kind=ChangeKind(data["kind"]),
                values=tuple(
                    CellEdit(
                        column=v["column"],
                        value=v.get("value", ""),
                        kind=CellKind(v.get("kind", CellKind.PLAIN.value)),
                    )
                    for v in data.get("values", [])
                ),
                primary_key=tuple(
                    PrimaryKey(column=pk["column"], value=pk["value"])
                    for pk in data.get("primary_key", [])
                ),
            )
        except (KeyError, ValueError, TypeError) as e:
            raise ValidationError(f"Malformed pending change: {e}", cause=e) from e


@dataclass(frozen=True, slots=True)
class Statement:
    """One parameterized statement: SQL text plus bound arguments."""

    text: str
    args: tuple[str, ...] = field(default_factory=tuple)


__all__ = [
    "TableIdentifier",
    "PrimaryKey",
    "CellKind",
    "CellEdit",
    "ChangeKind",
    "PendingChange",
    "Statement",
]
