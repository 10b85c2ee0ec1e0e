"""Domain entities for the Flybook data layer.

Exports:
    Schema:
        - ColumnSpec: A declared column
        - TableSpec: An ordered set of columns
        - SchemaValidationError: Schema invariant violated

    Rows:
        - Row: A buffered row with staged values
        - PendingChangeSet: A row buffer's uncommitted changes
"""

from flybook_db.domain.entities.change_set import PendingChangeSet
from flybook_db.domain.entities.row import Row
from flybook_db.domain.entities.schema import (
    VERSION_DEFAULT,
    ColumnSpec,
    SchemaValidationError,
    TableSpec,
)

__all__ = [
    "ColumnSpec",
    "TableSpec",
    "SchemaValidationError",
    "VERSION_DEFAULT",
    "Row",
    "PendingChangeSet",
]
