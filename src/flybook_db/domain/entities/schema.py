"""Declarative table model.

A ``TableSpec`` is an ordered sequence of ``ColumnSpec`` objects. Column
order is significant: generated CREATE TABLE and INSERT statements follow
it. Both types are immutable and are shared read-only by the DDL generator,
the optimistic lock enforcer and row buffers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator

from flybook_db.domain.value_objects.schema_types import ColumnType

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

VERSION_DEFAULT: tuple[str, ...] = ("DEFAULT", "0")
"""Constraint tokens carried by every version column."""


class SchemaValidationError(Exception):
    """Raised when a table or column description violates a schema invariant."""


def _check_identifier(kind: str, name: str) -> None:
    if not _IDENTIFIER.match(name):
        raise SchemaValidationError(f"Invalid {kind} name: {name!r}")


@dataclass(frozen=True)
class ColumnSpec:
    """A single column of a table.

    Attributes:
        name: Column name without prefix, unique within the table.
        type: Declared column type.
        constraints: Raw constraint tokens emitted after the type, in order.
        is_primary_key: Column is the table's primary key.
        is_version: Column is the optimistic-lock version column.
        has_default: Constraints declare a DEFAULT value.
        length: Optional type length, e.g. 4 for ``CHAR(4)``.
    """

    name: str
    type: ColumnType
    constraints: tuple[str, ...] = ()
    is_primary_key: bool = False
    is_version: bool = False
    has_default: bool = False
    length: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "constraints", tuple(self.constraints))
        _check_identifier("column", self.name)
        if self.length is not None and self.length < 1:
            raise SchemaValidationError(f"Column {self.name}: length must be positive")
        if self.is_version:
            if self.is_primary_key:
                raise SchemaValidationError(
                    f"Column {self.name} cannot be both primary key and version"
                )
            if not _contains(self.constraints, VERSION_DEFAULT):
                raise SchemaValidationError(
                    f"Version column {self.name} must default to 0"
                )

    @classmethod
    def primary_key(cls, name: str, type: ColumnType = ColumnType.INTEGER) -> ColumnSpec:
        """Build a primary-key column."""
        return cls(name, type, ("PRIMARY", "KEY"), is_primary_key=True)

    @classmethod
    def version_column(cls, name: str = "optlock") -> ColumnSpec:
        """Build an INTEGER version column defaulting to 0."""
        return cls(
            name, ColumnType.INTEGER, VERSION_DEFAULT, is_version=True, has_default=True
        )

    @property
    def is_integer_primary_key(self) -> bool:
        """INTEGER primary keys are assigned by SQLite when left unset."""
        return self.is_primary_key and self.type is ColumnType.INTEGER

    @property
    def type_sql(self) -> str:
        return self.type.render(self.length)


def _contains(tokens: tuple[str, ...], needle: tuple[str, ...]) -> bool:
    width = len(needle)
    return any(
        tuple(t.upper() for t in tokens[i:i + width]) == needle
        for i in range(len(tokens) - width + 1)
    )


@dataclass(frozen=True)
class TableSpec:
    """A table: a name and an ordered sequence of columns.

    Invariants:
        - column names are unique
        - at most one primary-key column (composite keys are not supported)
        - at most one version column

    Example:
        >>> accounts = TableSpec("Accounts", (
        ...     ColumnSpec.primary_key("id"),
        ...     ColumnSpec("balance", ColumnType.INTEGER),
        ...     ColumnSpec.version_column("optlock"),
        ... ))
        >>> accounts.primary_key.name
        'id'
    """

    name: str
    columns: tuple[ColumnSpec, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", tuple(self.columns))
        _check_identifier("table", self.name)
        if not self.columns:
            raise SchemaValidationError(f"Table {self.name} has no columns")

        seen: set[str] = set()
        for column in self.columns:
            if column.name in seen:
                raise SchemaValidationError(
                    f"Table {self.name}: duplicate column {column.name}"
                )
            seen.add(column.name)

        keys = [c.name for c in self.columns if c.is_primary_key]
        if len(keys) > 1:
            raise SchemaValidationError(
                f"Table {self.name}: composite primary keys are not supported ({', '.join(keys)})"
            )
        versions = [c.name for c in self.columns if c.is_version]
        if len(versions) > 1:
            raise SchemaValidationError(
                f"Table {self.name}: multiple version columns ({', '.join(versions)})"
            )

    @property
    def primary_key(self) -> ColumnSpec | None:
        return next((c for c in self.columns if c.is_primary_key), None)

    @property
    def version_column(self) -> ColumnSpec | None:
        return next((c for c in self.columns if c.is_version), None)

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def column(self, name: str) -> ColumnSpec | None:
        """Look up a column by its declared (unprefixed) name."""
        return next((c for c in self.columns if c.name == name), None)

    def __iter__(self) -> Iterator[ColumnSpec]:
        return iter(self.columns)

    def __len__(self) -> int:
        return len(self.columns)
