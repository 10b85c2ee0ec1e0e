"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts:
- Inbound ports: APIs offered to application glue (RowContainer)
- Outbound ports: Dependencies on storage (ConnectionProvider)

Adapters implement these ports with concrete functionality.
"""

from flybook_db.ports.inbound import (
    MissingPrimaryKeyError,
    OptimisticLockConflictError,
    RowContainer,
    UnknownColumnError,
    UnknownRowError,
)
from flybook_db.ports.outbound import (
    ConnectionProvider,
    ConstraintViolationError,
    StorageError,
    StorageUnavailableError,
)

__all__ = [
    # Inbound ports
    "MissingPrimaryKeyError",
    "OptimisticLockConflictError",
    "RowContainer",
    "UnknownColumnError",
    "UnknownRowError",
    # Outbound ports
    "ConnectionProvider",
    "ConstraintViolationError",
    "StorageError",
    "StorageUnavailableError",
]
