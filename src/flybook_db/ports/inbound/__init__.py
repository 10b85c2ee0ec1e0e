"""Inbound ports - API contracts for application glue."""

from flybook_db.ports.inbound.row_container import (
    MissingPrimaryKeyError,
    OptimisticLockConflictError,
    RowContainer,
    UnknownColumnError,
    UnknownRowError,
)

__all__ = [
    "MissingPrimaryKeyError",
    "OptimisticLockConflictError",
    "RowContainer",
    "UnknownColumnError",
    "UnknownRowError",
]
