"""Tests for ``dbspine.core.tabular`` — result shape and sentinels."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from dbspine.core.errors import ValidationError
from dbspine.core.tabular import (
    EMPTY_SENTINEL,
    NULL_SENTINEL,
    TabularResult,
    render_cell,
)


class TestRenderCell:
    def test_sentinels_are_exact(self):
        assert NULL_SENTINEL == "NULL&"
        assert EMPTY_SENTINEL == "EMPTY&"

    def test_null_and_empty_are_distinct(self):
        assert render_cell(None) == "NULL&"
        assert render_cell("") == "EMPTY&"

    @pytest.mark.parametrize(
        "value, expected",
        [
            (1, "1"),
            (9.5, "9.5"),
            (Decimal("1.10"), "1.10"),
            (date(2024, 1, 31), "2024-01-31"),
            (True, "True"),
            ("text", "text"),
            (b"abc", "abc"),
            (bytearray(b"xyz"), "xyz"),
            (memoryview(b"mv"), "mv"),
            (b"", "EMPTY&"),
        ],
    )
    def test_values(self, value, expected):
        assert render_cell(value) == expected

    def test_invalid_utf8_is_replaced(self):
        assert render_cell(b"\xff") == "�"

    def test_literal_sentinel_text_is_not_escaped(self):
        assert render_cell("NULL&") == "NULL&"


class TestTabularResult:
    def test_from_rows(self):
        result = TabularResult.from_rows(["id", "note"], [(1, None), (2, "")])
        assert result.header == ("id", "note")
        assert result.rows == (("1", "NULL&"), ("2", "EMPTY&"))

    def test_to_rows_puts_header_first(self):
        result = TabularResult.from_rows(["a"], [("x",)])
        assert result.to_rows() == [["a"], ["x"]]

    def test_row_width_must_match_header(self):
        with pytest.raises(ValidationError, match="Row 0 has 1 cells, header has 2"):
            TabularResult(header=("a", "b"), rows=(("x",),))

    def test_is_immutable(self):
        result = TabularResult(header=("a",))
        with pytest.raises(AttributeError):
            result.header = ("b",)  # type: ignore[misc]

    def test_column(self):
        result = TabularResult.from_rows(["id", "name"], [(1, "a"), (2, "b")])
        assert result.column("name") == ["a", "b"]

    def test_unknown_column(self):
        result = TabularResult(header=("id",))
        with pytest.raises(ValidationError, match="Unknown column"):
            result.column("nope")

    def test_as_dicts_len_and_iter(self):
        result = TabularResult.from_rows(["id", "name"], [(1, "a")])
        assert result.as_dicts() == [{"id": "1", "name": "a"}]
        assert len(result) == 1
        assert list(result) == [("1", "a")]

    def test_from_cursor(self):
        cursor = MagicMock()
        cursor.description = [("id", None), ("name", None)]
        cursor.fetchall.return_value = [(1, None)]
        result = TabularResult.from_cursor(cursor)
        assert result.header == ("id", "name")
        assert result.rows == (("1", "NULL&"),)

    def test_from_cursor_without_result_set(self):
        cursor = MagicMock()
        cursor.description = None
        result = TabularResult.from_cursor(cursor)
        assert result.header == ()
        assert len(result) == 0
        cursor.fetchall.assert_not_called()
