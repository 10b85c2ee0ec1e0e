"""Value objects for the Flybook data layer.

Exports:
    Identifiers:
        - RowId: Persistent identity wrapping a primary-key value
        - TemporaryRowId: Buffer-local identity of an uncommitted row
        - RowKey: Either of the above

    Schema types:
        - ColumnType: Declared column types
        - RowState: Row lifecycle states inside a row buffer

    Literals:
        - SqlLiteral: Value rendered for the SQLite dialect
        - quote_string: Quote-escape a string literal

    Filters:
        - Filter, Compare, Equal, NotEqual, Less, LessOrEqual, Greater,
          GreaterOrEqual, IsNull, And, Or, Not
"""

from flybook_db.domain.value_objects.filters import (
    And,
    Compare,
    ComparisonOp,
    Equal,
    Filter,
    Greater,
    GreaterOrEqual,
    IsNull,
    Less,
    LessOrEqual,
    Not,
    NotEqual,
    Or,
)
from flybook_db.domain.value_objects.identifiers import RowId, RowKey, TemporaryRowId
from flybook_db.domain.value_objects.schema_types import ColumnType, RowState
from flybook_db.domain.value_objects.sql_literal import SqlLiteral, quote_string

__all__ = [
    # Identifiers
    "RowId",
    "RowKey",
    "TemporaryRowId",
    # Schema types
    "ColumnType",
    "RowState",
    # Literals
    "SqlLiteral",
    "quote_string",
    # Filters
    "And",
    "Compare",
    "ComparisonOp",
    "Equal",
    "Filter",
    "Greater",
    "GreaterOrEqual",
    "IsNull",
    "Less",
    "LessOrEqual",
    "Not",
    "NotEqual",
    "Or",
]
