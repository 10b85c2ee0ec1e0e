"""DDL and trigger generation.

Statements are plain SQLite text. Table names receive ``Naming.table_prefix``
and column names ``Naming.column_prefix`` (``c_`` by default), so a declared
column ``username`` is stored as ``c_username``.

The version trigger is what makes optimistic locking transparent: every
UPDATE of a row, whichever code path issues it, increments the row's
version column by exactly one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from flybook_db.domain.entities.schema import ColumnSpec, TableSpec
from flybook_db.domain.value_objects.sql_literal import SqlLiteral

TRIGGER_PREFIX = "trigger_version_"


@dataclass(frozen=True)
class Naming:
    """Prefixes applied to physical table and column names."""

    table_prefix: str = ""
    column_prefix: str = "c_"

    def table(self, table: TableSpec | str) -> str:
        name = table if isinstance(table, str) else table.name
        return f"{self.table_prefix}{name}"

    def column(self, column: ColumnSpec | str) -> str:
        name = column if isinstance(column, str) else column.name
        return f"{self.column_prefix}{name}"

    def declared_column(self, table: TableSpec, name: str) -> ColumnSpec | None:
        """Resolve a declared or prefixed column name to its ColumnSpec."""
        column = table.column(name)
        if column is None and self.column_prefix and name.startswith(self.column_prefix):
            column = table.column(name[len(self.column_prefix):])
        return column


class DDLGenerator:
    """Generates schema statements for ``TableSpec`` objects.

    Example:
        >>> gen = DDLGenerator()
        >>> gen.drop_statement(accounts)
        'DROP TABLE IF EXISTS Accounts'
    """

    def __init__(self, naming: Naming | None = None) -> None:
        self._naming = naming or Naming()

    @property
    def naming(self) -> Naming:
        return self._naming

    def column_definition(self, column: ColumnSpec) -> str:
        parts = [self._naming.column(column), column.type_sql, *column.constraints]
        return " ".join(parts)

    def drop_statement(self, table: TableSpec) -> str:
        return f"DROP TABLE IF EXISTS {self._naming.table(table)}"

    def create_statement(self, table: TableSpec) -> str:
        columns = ", ".join(self.column_definition(c) for c in table.columns)
        return f"CREATE TABLE {self._naming.table(table)} ({columns})"

    def trigger_name(self, table: TableSpec) -> str:
        return f"{TRIGGER_PREFIX}{self._naming.table(table)}"

    def version_trigger(self, table: TableSpec) -> str | None:
        """Build the AFTER UPDATE trigger bumping the version column.

        Returns:
            The CREATE TRIGGER statement, or None when the table has no
            primary key or no version column.
        """
        key = table.primary_key
        version = table.version_column
        if key is None or version is None:
            return None

        name = self._naming.table(table)
        k = self._naming.column(key)
        v = self._naming.column(version)
        return (
            f"CREATE TRIGGER {self.trigger_name(table)} AFTER UPDATE ON {name} "
            f"FOR EACH ROW BEGIN "
            f"UPDATE {name} SET {v} = {v} + 1 WHERE {k} = OLD.{k}; "
            f"END"
        )

    def drop_trigger_statement(self, table: TableSpec) -> str:
        return f"DROP TRIGGER IF EXISTS {self.trigger_name(table)}"

    def insert_statement(
        self,
        table: TableSpec,
        values: Mapping[str, SqlLiteral | None],
        skip_integer_key: bool = False,
    ) -> str:
        """Build an INSERT using only the columns that carry a value.

        Unset and NULL columns are omitted so storage applies their
        defaults: 0 for the version column, a fresh rowid for an INTEGER
        primary key.

        Args:
            table: Target table.
            values: Literals by declared column name.
            skip_integer_key: Also omit an INTEGER primary key that is set.
        """
        names: list[str] = []
        literals: list[str] = []
        for column in table.columns:
            literal = values.get(column.name)
            if literal is None or literal.is_null:
                continue
            if skip_integer_key and column.is_integer_primary_key:
                continue
            names.append(self._naming.column(column))
            literals.append(literal.sql)

        target = self._naming.table(table)
        if not names:
            return f"INSERT INTO {target} DEFAULT VALUES"
        return f"INSERT INTO {target} ({', '.join(names)}) VALUES ({', '.join(literals)})"
