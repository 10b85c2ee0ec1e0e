"""Optimistic lock enforcement.

Every UPDATE and DELETE issued for a buffered row carries the version the
row had when it was read::

    UPDATE t SET ... WHERE c_id = 7 AND c_optlock = 3

The check and the write are one atomic statement, so two sessions
committing the same row cannot both pass the check. If the statement
affects no row, the row was changed (or deleted) by someone else and an
``OptimisticLockConflictError`` is raised instead of overwriting it.

Version bumping:
    With ``bump_version=False`` (default) the AFTER UPDATE trigger installed
    by the generator increments the version. With ``bump_version=True``,
    for storage without that trigger, the UPDATE increments it itself.
    Either way a successful update adds exactly one to the version.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Mapping

from flybook_db.domain.entities.schema import TableSpec
from flybook_db.domain.services.ddl_generator import Naming
from flybook_db.domain.value_objects import SqlLiteral
from flybook_db.infrastructure.logging import get_logger
from flybook_db.ports.inbound.row_container import OptimisticLockConflictError

logger = get_logger(__name__)


class OptimisticLockEnforcer:
    """Builds and executes version-checked writes for one table.

    Args:
        table: The table; must have a primary key.
        naming: Physical name prefixes.
        bump_version: Increment the version column in the UPDATE itself.
    """

    def __init__(
        self,
        table: TableSpec,
        naming: Naming | None = None,
        bump_version: bool = False,
    ) -> None:
        if table.primary_key is None:
            raise ValueError(f"Table {table.name} has no primary key")
        self._table = table
        self._naming = naming or Naming()
        self._bump_version = bump_version
        self._key_column = self._naming.column(table.primary_key)
        version = table.version_column
        self._version_column = self._naming.column(version) if version else None

    @property
    def versioned(self) -> bool:
        return self._version_column is not None

    def _where(self, key: Any, expected_version: int | None) -> str:
        clause = f"{self._key_column} = {SqlLiteral.from_value(key).sql}"
        if self._version_column is not None:
            if expected_version is None:
                clause += f" AND {self._version_column} IS NULL"
            else:
                clause += f" AND {self._version_column} = {int(expected_version)}"
        return clause

    def update_statement(
        self,
        key: Any,
        expected_version: int | None,
        values: Mapping[str, SqlLiteral],
    ) -> str:
        """Build the conditional UPDATE for a row.

        Args:
            key: Primary-key value of the row.
            expected_version: Version read with the row.
            values: Changed literals by declared column name.
        """
        assignments = [
            f"{self._naming.column(name)} = {literal.sql}" for name, literal in values.items()
        ]
        if self._bump_version and self._version_column is not None:
            v = self._version_column
            assignments.append(f"{v} = {v} + 1")
        if not assignments:
            raise ValueError("UPDATE needs at least one assignment")

        return (
            f"UPDATE {self._naming.table(self._table)} SET {', '.join(assignments)} "
            f"WHERE {self._where(key, expected_version)}"
        )

    def delete_statement(self, key: Any, expected_version: int | None) -> str:
        """Build the conditional DELETE for a row."""
        return (
            f"DELETE FROM {self._naming.table(self._table)} "
            f"WHERE {self._where(key, expected_version)}"
        )

    def update(
        self,
        conn: sqlite3.Connection,
        key: Any,
        expected_version: int | None,
        values: Mapping[str, SqlLiteral],
    ) -> None:
        """Execute a conditional UPDATE.

        Raises:
            OptimisticLockConflictError: If no row matched key and version.
        """
        self._execute(conn, self.update_statement(key, expected_version, values), key, expected_version)

    def delete(self, conn: sqlite3.Connection, key: Any, expected_version: int | None) -> None:
        """Execute a conditional DELETE.

        Raises:
            OptimisticLockConflictError: If no row matched key and version.
        """
        self._execute(conn, self.delete_statement(key, expected_version), key, expected_version)

    def _execute(
        self,
        conn: sqlite3.Connection,
        sql: str,
        key: Any,
        expected_version: int | None,
    ) -> None:
        logger.debug("conditional_write", table=self._table.name, sql=sql)
        cursor = conn.execute(sql)
        # rowcount excludes rows touched by the version trigger
        if cursor.rowcount == 0:
            logger.info(
                "optimistic_lock_conflict",
                table=self._table.name,
                key=key,
                expected_version=expected_version,
            )
            raise OptimisticLockConflictError(self._table.name, key, expected_version)
