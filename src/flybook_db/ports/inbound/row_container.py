"""Row container port.

This inbound port is the surface application glue (forms, managers,
seeders) uses to read and write table rows. Changes are buffered and
reach storage only on commit.

Key responsibilities:
- Stage inserts, updates and deletions per row
- Filter the rows visible through iteration
- Commit staged changes as one transaction with optimistic-lock checks
- Discard staged changes on rollback without touching storage
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, Iterator, Protocol

from flybook_db.domain.entities import Row
from flybook_db.domain.value_objects import Filter, RowId, RowKey, TemporaryRowId


class RowContainer(Protocol):
    """Protocol for buffered table access.

    Row lifecycle:
        add_row() creates an UNBOUND row with a temporary id. commit()
        inserts it and rebinds it to its primary key. set_column() on a
        stored row makes it MODIFIED; remove_row() makes it REMOVED.
        rollback() reverts every row to its last stored state.

    Thread Safety:
        One writer per container. Separate sessions use separate
        containers over a shared connection provider.
    """

    @abstractmethod
    def add_row(self) -> TemporaryRowId:
        """Create an empty pending row and return its temporary id."""
        ...

    @abstractmethod
    def set_column(self, row_id: RowKey, name: str, value: Any) -> None:
        """Stage a column value.

        Raises:
            UnknownColumnError: If the table has no such column.
            UnknownRowError: If the row is unknown.
        """
        ...

    @abstractmethod
    def get_column_value(self, row_id: RowKey, name: str) -> Any:
        """Return a column value, ignoring filters.

        Raises:
            UnknownColumnError: If the table has no such column.
            UnknownRowError: If the row is unknown.
        """
        ...

    @abstractmethod
    def remove_row(self, row_id: RowKey) -> bool:
        """Mark a row for deletion. Returns False if the row is unknown."""
        ...

    @abstractmethod
    def get_row(self, row_id: RowKey) -> Row | None:
        """Return a row if it is visible through the active filters."""
        ...

    @abstractmethod
    def get_row_unfiltered(self, row_id: RowKey) -> Row | None:
        """Return a row regardless of the active filters."""
        ...

    @abstractmethod
    def apply_filter(self, row_filter: Filter) -> None:
        """Add a filter; active filters are combined with AND."""
        ...

    @abstractmethod
    def clear_filter(self) -> None:
        """Remove all filters."""
        ...

    @abstractmethod
    def row_ids(self) -> Iterator[RowKey]:
        """Iterate identities of visible rows."""
        ...

    @abstractmethod
    def commit(self) -> dict[TemporaryRowId, RowId]:
        """Write staged changes in one transaction.

        Returns:
            Mapping from temporary ids to the ids assigned by storage.

        Raises:
            OptimisticLockConflictError: If a row changed since it was read.
            StorageUnavailableError: On storage failure.
        """
        ...

    @abstractmethod
    def rollback(self) -> None:
        """Discard staged changes. Makes no storage calls."""
        ...


class UnknownColumnError(Exception):
    """Raised when a column name is not declared on the table."""

    def __init__(self, table: str, column: str):
        super().__init__(f"Table {table} has no column {column!r}")
        self.table = table
        self.column = column


class UnknownRowError(KeyError):
    """Raised when a row id is neither pending nor found in storage."""

    def __init__(self, table: str, row_id: Any):
        super().__init__(f"Unknown row {row_id!r} in {table}")
        self.table = table
        self.row_id = row_id

    def __str__(self) -> str:
        return str(self.args[0])


class OptimisticLockConflictError(Exception):
    """Raised when a conditional write finds a different stored version.

    The row was modified or deleted by another session since it was read.
    The caller should reload and retry, or roll back.
    """

    def __init__(self, table: str, key: Any, expected_version: int | None):
        super().__init__(
            f"Row {key!r} of {table} changed since it was read "
            f"(expected version {expected_version})"
        )
        self.table = table
        self.key = key
        self.expected_version = expected_version


class MissingPrimaryKeyError(Exception):
    """Raised when a row without an auto-assigned key is inserted keyless."""

    def __init__(self, table: str, column: str):
        super().__init__(f"Row for {table} needs a value for primary key {column}")
        self.table = table
        self.column = column
