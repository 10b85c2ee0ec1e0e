"""Unit tests for schema descriptor parsing."""

from __future__ import annotations

import pytest

from flybook_db.application.flybook_schema import FLYBOOK_TABLES, flybook_schema
from flybook_db.domain.entities import ColumnSpec, SchemaValidationError, TableSpec
from flybook_db.domain.services import (
    DDLGenerator,
    SchemaParseError,
    build_schema,
    build_table,
    parse_column,
)
from flybook_db.domain.value_objects import ColumnType


@pytest.mark.unit
class TestParseColumn:
    """Tests for single column descriptors."""

    def test_primary_key(self) -> None:
        column = parse_column("username   TEXT   PRIMARY KEY")

        assert column.name == "username"
        assert column.type is ColumnType.TEXT
        assert column.is_primary_key
        assert column.constraints == ("PRIMARY", "KEY")

    def test_version_column(self) -> None:
        """@VERSION becomes DEFAULT 0 and is never kept as a token."""
        column = parse_column("optlock INTEGER @VERSION")

        assert column.is_version
        assert column.has_default
        assert not column.is_primary_key
        assert column.constraints == ("DEFAULT", "0")

    def test_plain_column(self) -> None:
        column = parse_column("firstname TEXT")

        assert column.constraints == ()
        assert not column.is_primary_key
        assert not column.is_version
        assert not column.has_default

    def test_type_with_length(self) -> None:
        column = parse_column("code CHAR(4)")

        assert column.type is ColumnType.CHAR
        assert column.length == 4
        assert column.type_sql == "CHAR(4)"

    def test_default_constraint(self) -> None:
        column = parse_column("role TINYINT DEFAULT 1")

        assert column.has_default
        assert column.constraints == ("DEFAULT", "1")

    def test_constraints_pass_through(self) -> None:
        column = parse_column("username TEXT REFERENCES Users (c_username)")

        assert column.constraints == ("REFERENCES", "Users", "(c_username)")

    def test_lone_key_is_dropped_with_diagnostic(self) -> None:
        """KEY without PRIMARY is reported and skipped; parsing continues."""
        diagnostics: list[SchemaParseError] = []

        column = parse_column("id INTEGER KEY NOT NULL", diagnostics)

        assert not column.is_primary_key
        assert column.constraints == ("NOT", "NULL")
        assert len(diagnostics) == 1
        assert diagnostics[0].column == "id"
        assert diagnostics[0].token == "KEY"

    def test_key_must_follow_primary_directly(self) -> None:
        diagnostics: list[SchemaParseError] = []

        column = parse_column("id INTEGER PRIMARY NOT KEY", diagnostics)

        assert not column.is_primary_key
        assert len(diagnostics) == 1

    def test_unknown_type(self) -> None:
        with pytest.raises(SchemaValidationError):
            parse_column("id BLOBBY")

    def test_missing_type(self) -> None:
        with pytest.raises(SchemaValidationError):
            parse_column("id")


@pytest.mark.unit
class TestBuildTable:
    """Tests for table construction and validation."""

    def test_column_order_preserved(self) -> None:
        table = build_table("Aircrafts", FLYBOOK_TABLES[3][1])

        assert table.column_names == ["register", "class", "capacity", "weight", "optlock"]
        assert table.primary_key.name == "register"
        assert table.version_column.name == "optlock"

    def test_missing_primary_key(self) -> None:
        with pytest.raises(SchemaValidationError, match="primary key"):
            build_table("T", ["a TEXT", "optlock INTEGER @VERSION"])

    def test_missing_version_column(self) -> None:
        with pytest.raises(SchemaValidationError, match="@VERSION"):
            build_table("T", ["id INTEGER PRIMARY KEY", "a TEXT"])

    def test_duplicate_primary_key(self) -> None:
        with pytest.raises(SchemaValidationError, match="composite"):
            build_table(
                "T",
                ["a INTEGER PRIMARY KEY", "b INTEGER PRIMARY KEY", "optlock INTEGER @VERSION"],
            )

    def test_duplicate_version_column(self) -> None:
        with pytest.raises(SchemaValidationError):
            build_table(
                "T",
                ["id INTEGER PRIMARY KEY", "v1 INTEGER @VERSION", "v2 INTEGER @VERSION"],
            )

    def test_duplicate_column_name(self) -> None:
        with pytest.raises(SchemaValidationError, match="duplicate"):
            build_table("T", ["id INTEGER PRIMARY KEY", "id TEXT", "optlock INTEGER @VERSION"])

    def test_version_on_primary_key_rejected(self) -> None:
        with pytest.raises(SchemaValidationError):
            build_table("T", ["id INTEGER PRIMARY KEY @VERSION"])

    def test_invalid_table_name(self) -> None:
        with pytest.raises(SchemaValidationError):
            build_table("bad name", ["id INTEGER PRIMARY KEY", "optlock INTEGER @VERSION"])

    def test_code_built_table_may_skip_version(self) -> None:
        """Tables declared in code only need a key to be buffered."""
        table = TableSpec("Notes", (ColumnSpec.primary_key("id"), ColumnSpec("text", ColumnType.TEXT)))

        assert table.version_column is None
        assert DDLGenerator().version_trigger(table) is None


@pytest.mark.unit
class TestBuildSchema:
    """Tests for whole-schema construction."""

    def test_flybook_schema(self) -> None:
        diagnostics: list[SchemaParseError] = []

        schema = flybook_schema(diagnostics)

        assert [t.name for t in schema] == ["Users", "FlightEntries", "Airports", "Aircrafts"]
        assert diagnostics == []
        for table in schema:
            assert table.primary_key is not None
            assert table.version_column.name == "optlock"
            assert table.version_column.constraints == ("DEFAULT", "0")

    def test_duplicate_table_names(self) -> None:
        descriptors = ["id INTEGER PRIMARY KEY", "optlock INTEGER @VERSION"]

        with pytest.raises(SchemaValidationError, match="Duplicate"):
            build_schema([("Users", descriptors), ("users", descriptors)])

    def test_diagnostics_collected_across_tables(self) -> None:
        diagnostics: list[SchemaParseError] = []

        build_schema(
            [
                ("A", ["id INTEGER PRIMARY KEY", "x TEXT KEY", "optlock INTEGER @VERSION"]),
                ("B", ["id INTEGER PRIMARY KEY", "y TEXT KEY", "optlock INTEGER @VERSION"]),
            ],
            diagnostics,
        )

        assert [d.column for d in diagnostics] == ["x", "y"]
