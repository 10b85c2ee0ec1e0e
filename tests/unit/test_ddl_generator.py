"""Unit tests for DDL and trigger generation."""

from __future__ import annotations

import sqlite3

import pytest

from flybook_db.application.flybook_schema import flybook_schema
from flybook_db.domain.entities import TableSpec
from flybook_db.domain.services import DDLGenerator, Naming
from flybook_db.domain.value_objects import SqlLiteral


@pytest.fixture
def ddl() -> DDLGenerator:
    return DDLGenerator()


@pytest.mark.unit
class TestNaming:
    """Tests for physical name prefixes."""

    def test_default_prefixes(self, accounts: TableSpec) -> None:
        naming = Naming()

        assert naming.table(accounts) == "Accounts"
        assert naming.column("balance") == "c_balance"

    def test_custom_prefixes(self, accounts: TableSpec) -> None:
        naming = Naming(table_prefix="fb_", column_prefix="")

        assert naming.table(accounts) == "fb_Accounts"
        assert naming.column(accounts.primary_key) == "id"

    def test_declared_column_accepts_both_forms(self, accounts: TableSpec) -> None:
        naming = Naming()

        assert naming.declared_column(accounts, "balance").name == "balance"
        assert naming.declared_column(accounts, "c_balance").name == "balance"
        assert naming.declared_column(accounts, "missing") is None


@pytest.mark.unit
class TestCreateStatements:
    """Tests for DROP/CREATE TABLE generation."""

    def test_create_statement(self, ddl: DDLGenerator, accounts: TableSpec) -> None:
        assert ddl.create_statement(accounts) == (
            "CREATE TABLE Accounts (c_id INTEGER PRIMARY KEY, c_owner TEXT, "
            "c_balance INTEGER, c_optlock INTEGER DEFAULT 0)"
        )

    def test_drop_statement(self, ddl: DDLGenerator, accounts: TableSpec) -> None:
        assert ddl.drop_statement(accounts) == "DROP TABLE IF EXISTS Accounts"

    def test_version_token_never_emitted(self, ddl: DDLGenerator) -> None:
        for table in flybook_schema():
            assert "@VERSION" not in ddl.create_statement(table)

    def test_char_length_rendered(self, ddl: DDLGenerator) -> None:
        airports = flybook_schema()[2]

        assert "c_code CHAR(4)" in ddl.create_statement(airports)

    def test_recreate_yields_identical_columns(self, ddl: DDLGenerator) -> None:
        """create, drop, create leaves the same column order and types."""
        conn = sqlite3.connect(":memory:")
        try:
            for table in flybook_schema():
                conn.execute(ddl.create_statement(table))
                first = conn.execute(f"PRAGMA table_info({table.name})").fetchall()
                conn.execute(ddl.drop_statement(table))
                conn.execute(ddl.create_statement(table))
                second = conn.execute(f"PRAGMA table_info({table.name})").fetchall()

                assert first == second
                assert [row[1] for row in first] == [f"c_{n}" for n in table.column_names]
        finally:
            conn.close()


@pytest.mark.unit
class TestVersionTrigger:
    """Tests for the optimistic-lock trigger."""

    def test_trigger_statement(self, ddl: DDLGenerator, accounts: TableSpec) -> None:
        assert ddl.version_trigger(accounts) == (
            "CREATE TRIGGER trigger_version_Accounts AFTER UPDATE ON Accounts "
            "FOR EACH ROW BEGIN "
            "UPDATE Accounts SET c_optlock = c_optlock + 1 WHERE c_id = OLD.c_id; "
            "END"
        )

    def test_drop_trigger_statement(self, ddl: DDLGenerator, accounts: TableSpec) -> None:
        assert ddl.drop_trigger_statement(accounts) == (
            "DROP TRIGGER IF EXISTS trigger_version_Accounts"
        )

    def test_trigger_bumps_version_once(self, ddl: DDLGenerator, accounts: TableSpec) -> None:
        """An UPDATE through any path increments the version by exactly one."""
        conn = sqlite3.connect(":memory:")
        try:
            conn.execute(ddl.create_statement(accounts))
            conn.execute(ddl.version_trigger(accounts))
            conn.execute("INSERT INTO Accounts (c_id, c_balance) VALUES (1, 100)")

            conn.execute("UPDATE Accounts SET c_balance = 110 WHERE c_id = 1")
            conn.execute("UPDATE Accounts SET c_balance = 120 WHERE c_id = 1")

            row = conn.execute("SELECT c_balance, c_optlock FROM Accounts").fetchone()
            assert row == (120, 2)
        finally:
            conn.close()


@pytest.mark.unit
class TestInsertStatement:
    """Tests for INSERT generation."""

    def test_unset_columns_omitted(self, ddl: DDLGenerator, accounts: TableSpec) -> None:
        sql = ddl.insert_statement(
            accounts,
            {"owner": SqlLiteral.of_string("ann"), "balance": SqlLiteral.null()},
        )

        assert sql == "INSERT INTO Accounts (c_owner) VALUES ('ann')"

    def test_follows_column_order(self, ddl: DDLGenerator, accounts: TableSpec) -> None:
        sql = ddl.insert_statement(
            accounts,
            {"balance": SqlLiteral.of_int(5), "id": SqlLiteral.of_int(7)},
        )

        assert sql == "INSERT INTO Accounts (c_id, c_balance) VALUES (7, 5)"

    def test_skip_integer_key(self, ddl: DDLGenerator, accounts: TableSpec) -> None:
        sql = ddl.insert_statement(
            accounts,
            {"id": SqlLiteral.of_int(7), "balance": SqlLiteral.of_int(5)},
            skip_integer_key=True,
        )

        assert sql == "INSERT INTO Accounts (c_balance) VALUES (5)"

    def test_default_values(self, ddl: DDLGenerator, accounts: TableSpec) -> None:
        assert ddl.insert_statement(accounts, {}) == "INSERT INTO Accounts DEFAULT VALUES"

    def test_expression_values_inlined(self, ddl: DDLGenerator, accounts: TableSpec) -> None:
        sql = ddl.insert_statement(accounts, {"owner": SqlLiteral.expression("lower('ANN')")})

        assert sql == "INSERT INTO Accounts (c_owner) VALUES (lower('ANN'))"
