"""Row identities used by the row buffer.

A row that exists in storage is addressed by a ``RowId`` wrapping its
primary-key value. A row created in a buffer but not yet inserted is
addressed by a ``TemporaryRowId``. The two types never compare equal, so a
temporary id can never collide with a real key.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True, slots=True)
class RowId:
    """Persistent identity of a stored row.

    Attributes:
        key: The primary-key value of the row.

    Example:
        >>> RowId(42)
        RowId(42)
    """

    key: Any

    def __post_init__(self) -> None:
        if self.key is None:
            raise ValueError("RowId key must not be None")

    def __repr__(self) -> str:
        return f"RowId({self.key!r})"


@dataclass(frozen=True, slots=True)
class TemporaryRowId:
    """Buffer-local identity of a row that has not been committed yet."""

    serial: int

    def __post_init__(self) -> None:
        if self.serial < 1:
            raise ValueError(f"serial must be positive, got {self.serial}")

    def __repr__(self) -> str:
        return f"TemporaryRowId({self.serial})"


RowKey = Union[RowId, TemporaryRowId]
"""Any identity a row buffer accepts."""
