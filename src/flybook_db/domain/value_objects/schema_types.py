"""Column types and row lifecycle states."""

from __future__ import annotations

from enum import Enum, auto


class ColumnType(Enum):
    """Declared SQLite column types understood by the schema descriptor."""

    TEXT = "TEXT"
    INTEGER = "INTEGER"
    TINYINT = "TINYINT"
    REAL = "REAL"
    CHAR = "CHAR"
    DATETIME = "DATETIME"

    def render(self, length: int | None = None) -> str:
        """Render the type for DDL, e.g. ``CHAR(4)``."""
        if length is not None:
            return f"{self.value}({length})"
        return self.value


class RowState(Enum):
    """Row lifecycle inside a row buffer.

    State machine:

        add_row() ──> UNBOUND ──commit()──> BOUND <──load── storage
                         │                  │   ^
                     rollback()      set_column │ rollback()/commit()
                         │                  v   │
                         v               MODIFIED
                      (gone)                │
                                       remove_row()
                                            v
                        BOUND ──remove──> REMOVED ──commit()──> (gone)
                                            │
                                        rollback() ──> BOUND
    """

    UNBOUND = auto()
    """Created by add_row(); only exists in the buffer."""

    BOUND = auto()
    """Mirrors a stored row with no staged changes."""

    MODIFIED = auto()
    """Stored row with staged column changes."""

    REMOVED = auto()
    """Stored row marked for deletion at the next commit."""

    def is_pending(self) -> bool:
        """Check if the row carries uncommitted changes."""
        return self is not RowState.BOUND
