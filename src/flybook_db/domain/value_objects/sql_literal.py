"""SQL literal values for the SQLite dialect.

Row values are rendered to SQL text when they are staged, so a staged
string is already quote-escaped. The original Python value is kept next to
the rendered text for reads and filter evaluation.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, ClassVar


def quote_string(value: str) -> str:
    """Quote a string for SQL, doubling embedded single quotes.

    Example:
        >>> quote_string("O'Hare")
        "'O''Hare'"
    """
    return "'" + value.replace("'", "''") + "'"


@dataclass(frozen=True, slots=True)
class SqlLiteral:
    """A value rendered for inclusion in a SQL statement.

    Attributes:
        sql: SQL text of the value.
        value: Python value, or None for NULL and raw expressions.
        is_expression: True for raw SQL expressions evaluated by storage.
    """

    sql: str
    value: Any = None
    is_expression: bool = False

    NULL_SQL: ClassVar[str] = "NULL"

    @property
    def is_null(self) -> bool:
        """Check if this literal is SQL NULL."""
        return self.sql == self.NULL_SQL and not self.is_expression

    @classmethod
    def null(cls) -> SqlLiteral:
        return cls(cls.NULL_SQL)

    @classmethod
    def of_string(cls, value: str) -> SqlLiteral:
        return cls(quote_string(value), value)

    @classmethod
    def of_int(cls, value: int) -> SqlLiteral:
        return cls(str(int(value)), int(value))

    @classmethod
    def of_float(cls, value: float) -> SqlLiteral:
        """Render a finite float.

        Raises:
            ValueError: For infinity and NaN, which SQLite has no literal for.
        """
        value = float(value)
        if not math.isfinite(value):
            raise ValueError(f"Cannot render non-finite float {value!r} as a SQL literal")
        return cls(repr(value), value)

    @classmethod
    def expression(cls, sql: str) -> SqlLiteral:
        """Wrap raw SQL, e.g. ``strftime('%s','now')``, evaluated by storage."""
        if not sql.strip():
            raise ValueError("SQL expression must not be empty")
        return cls(sql, None, is_expression=True)

    @classmethod
    def from_value(cls, value: Any) -> SqlLiteral:
        """Render any supported Python value.

        Raises:
            TypeError: If the value has no SQL rendering.
        """
        if value is None:
            return cls.null()
        if isinstance(value, SqlLiteral):
            return value
        if isinstance(value, bool):
            return cls.of_int(int(value))
        if isinstance(value, int):
            return cls.of_int(value)
        if isinstance(value, float):
            return cls.of_float(value)
        if isinstance(value, str):
            return cls.of_string(value)
        if isinstance(value, (datetime, date)):
            return cls(quote_string(value.isoformat()), value.isoformat())
        if isinstance(value, (bytes, bytearray)):
            return cls(f"X'{bytes(value).hex()}'", bytes(value))
        raise TypeError(f"Cannot render {type(value).__name__} as a SQL literal")

    def __str__(self) -> str:
        return self.sql
