"""Row entity held by a row buffer.

A row keeps the values it was loaded with next to the values staged on it,
so a rollback can restore it without touching storage. Values are stored
as ``SqlLiteral`` objects keyed by declared column name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from flybook_db.domain.value_objects import RowId, RowKey, RowState, SqlLiteral, TemporaryRowId


@dataclass
class Row:
    """A buffered row.

    Attributes:
        row_id: Temporary identity until committed, then the storage key.
        state: Lifecycle state (see ``RowState``).
        values: Current values by declared column name.
        expected_version: Version the row had when it was read, or None
            for unbound rows and tables without a version column.
    """

    row_id: RowKey
    state: RowState
    values: dict[str, SqlLiteral] = field(default_factory=dict)
    expected_version: int | None = None
    _loaded: dict[str, SqlLiteral] = field(default_factory=dict, repr=False)
    _dirty: set[str] = field(default_factory=set, repr=False)

    @classmethod
    def unbound(cls, temp_id: TemporaryRowId) -> Row:
        """Create an empty row for a pending insert."""
        return cls(row_id=temp_id, state=RowState.UNBOUND)

    @classmethod
    def loaded(
        cls,
        row_id: RowId,
        values: Mapping[str, SqlLiteral],
        version: int | None = None,
    ) -> Row:
        """Create a row mirroring stored values."""
        row = cls(row_id=row_id, state=RowState.BOUND)
        row.bind(row_id, values, version)
        return row

    @property
    def is_persistent(self) -> bool:
        return isinstance(self.row_id, RowId)

    @property
    def dirty_columns(self) -> frozenset[str]:
        return frozenset(self._dirty)

    def get(self, name: str) -> Any:
        """Return the Python value of a column (None if unset or NULL)."""
        literal = self.values.get(name)
        return None if literal is None else literal.value

    def literal(self, name: str) -> SqlLiteral | None:
        return self.values.get(name)

    def stage(self, name: str, literal: SqlLiteral) -> None:
        """Stage a new value for a column.

        Raises:
            ValueError: If the row is marked for removal.
        """
        if self.state is RowState.REMOVED:
            raise ValueError(f"Row {self.row_id!r} is marked for removal")
        self.values[name] = literal
        if self.state is not RowState.UNBOUND:
            self._dirty.add(name)
            self.state = RowState.MODIFIED

    def changed_values(self) -> dict[str, SqlLiteral]:
        """Values staged since the row was loaded, in staging order."""
        return {name: self.values[name] for name in self.values if name in self._dirty}

    def mark_removed(self) -> None:
        if self.state is RowState.UNBOUND:
            raise ValueError("Unbound rows are discarded, not marked for removal")
        self.state = RowState.REMOVED

    def restore(self) -> None:
        """Revert staged changes of a persistent row."""
        if not self.is_persistent:
            raise ValueError("Unbound rows have no stored values to restore")
        self.values = dict(self._loaded)
        self._dirty.clear()
        self.state = RowState.BOUND

    def bind(
        self,
        row_id: RowId,
        values: Mapping[str, SqlLiteral],
        version: int | None,
    ) -> None:
        """Make the row mirror freshly read storage values."""
        self.row_id = row_id
        self.values = dict(values)
        self._loaded = dict(values)
        self._dirty.clear()
        self.expected_version = version
        self.state = RowState.BOUND
