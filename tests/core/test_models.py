"""Tests for ``dbspine.core.models``."""

from __future__ import annotations

import pytest

from dbspine.core.errors import ValidationError
from dbspine.core.models import (
    CellEdit,
    CellKind,
    ChangeKind,
    PendingChange,
    PrimaryKey,
    TableIdentifier,
)


class TestTableIdentifier:
    def test_namespaced(self):
        assert TableIdentifier.parse("dbo.users", namespaced=True) == TableIdentifier(
            name="users", schema="dbo"
        )

    @pytest.mark.parametrize("text", ["users", "a.b.c", ".users", "dbo.", "."])
    def test_namespaced_requires_exactly_two_parts(self, text):
        with pytest.raises(ValidationError, match="schema.table"):
            TableIdentifier.parse(text, namespaced=True)

    def test_not_namespaced_keeps_whole_text(self):
        table = TableIdentifier.parse("weird.name", namespaced=False)
        assert table.name == "weird.name"
        assert table.schema is None

    @pytest.mark.parametrize("namespaced", [True, False])
    def test_empty_is_rejected(self, namespaced):
        with pytest.raises(ValidationError, match="table name is required"):
            TableIdentifier.parse("", namespaced=namespaced)

    def test_str(self):
        assert str(TableIdentifier("t", "s")) == "s.t"
        assert str(TableIdentifier("t")) == "t"


class TestPendingChangeFromDict:
    def test_update(self):
        change = PendingChange.from_dict(
            {
                "table": "public.users",
                "kind": "update",
                "values": [
                    {"column": "name", "value": "Ada"},
                    {"column": "note", "kind": "null"},
                ],
                "primary_key": [{"column": "id", "value": "7"}],
            }
        )
        assert change.kind is ChangeKind.UPDATE
        assert change.values == (
            CellEdit("name", "Ada"),
            CellEdit("note", "", CellKind.NULL),
        )
        assert change.primary_key == (PrimaryKey("id", "7"),)

    def test_delete_without_values(self):
        change = PendingChange.from_dict(
            {"table": "t", "kind": "delete", "primary_key": [{"column": "id", "value": "1"}]}
        )
        assert change.values == ()

    @pytest.mark.parametrize(
        "data",
        [
            {"kind": "insert"},
            {"table": "t", "kind": "upsert"},
            {"table": "t", "kind": "insert", "values": [{"value": "x"}]},
            {"table": "t", "kind": "insert", "values": [{"column": "a", "kind": "bogus"}]},
            {"table": "t", "kind": "delete", "primary_key": [{"column": "id"}]},
        ],
    )
    def test_malformed(self, data):
        with pytest.raises(ValidationError, match="Malformed pending change"):
            PendingChange.from_dict(data)
