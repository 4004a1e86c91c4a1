"""Tabular results -- the one in-memory shape every read returns.

Manifesto:
    Four drivers hand back four different row types (``sqlite3.Row``,
    tuples, ``bytearray`` cells, ``Decimal``, ``datetime``).  The layer
    above only wants strings it can put in a grid and later send back as
    edits, so every read is flattened into a header plus string rows.

    NULL and the empty string must survive the round trip as different
    values, so they are encoded as the reserved sentinels ``"NULL&"`` and
    ``"EMPTY&"``.

Examples:
    >>> result = TabularResult.from_rows(["id", "note"], [(1, None), (2, "")])
    >>> result.to_rows()
    [['id', 'note'], ['1', 'NULL&'], ['2', 'EMPTY&']]

Tags:
    tabular, result-set, sentinel, dbspine

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from dbspine.core.errors import ValidationError
from dbspine.core.protocols import Cursor

NULL_SENTINEL = "NULL&"
EMPTY_SENTINEL = "EMPTY&"


def render_cell(value: Any) -> str:
    """Render one driver value as a display string with sentinels."""
    if value is None:
        return NULL_SENTINEL
    if isinstance(value, (bytes, bytearray, memoryview)):
        value = bytes(value).decode("utf-8", errors="replace")
    text = value if isinstance(value, str) else str(value)
    if text == "":
        return EMPTY_SENTINEL
    return text


@dataclass(frozen=True)
class TabularResult:
    """
    Immutable query result: column names plus string-encoded rows.

    Every row has exactly ``len(header)`` cells.
    """

    header: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...] = ()

    def __post_init__(self) -> None:
        width = len(self.header)
        for index, row in enumerate(self.rows):
            if len(row) != width:
                raise ValidationError(
                    f"Row {index} has {len(row)} cells, header has {width}",
                    field="rows",
                )

    @classmethod
    def from_rows(
        cls,
        header: Iterable[str],
        rows: Iterable[Sequence[Any]],
    ) -> TabularResult:
        """Build a result from raw driver values."""
        return cls(
            header=tuple(header),
            rows=tuple(tuple(render_cell(v) for v in row) for row in rows),
        )

    @classmethod
    def from_cursor(cls, cursor: Cursor) -> TabularResult:
        """Drain an executed cursor into a result.

        A statement without a result set yields an empty result.
        """
        if cursor.description is None:
            return cls(header=())
        header = [desc[0] for desc in cursor.description]
        return cls.from_rows(header, cursor.fetchall())

    def to_rows(self) -> list[list[str]]:
        """Header first, then data rows."""
        return [list(self.header)] + [list(row) for row in self.rows]

    def column(self, name: str) -> list[str]:
        """All values of one column."""
        try:
            index = self.header.index(name)
        except ValueError:
            raise ValidationError(f"Unknown column: {name}", field="name", value=name) from None
        return [row[index] for row in self.rows]

    def as_dicts(self) -> list[dict[str, str]]:
        return [dict(zip(self.header, row, strict=True)) for row in self.rows]

    def __iter__(self) -> Iterator[tuple[str, ...]]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)


__all__ = [
    "NULL_SENTINEL",
    "EMPTY_SENTINEL",
    "TabularResult",
    "render_cell",
]
