"""Outbound ports - dependencies on storage."""

from flybook_db.ports.outbound.connection_provider import (
    ConnectionProvider,
    ConstraintViolationError,
    StorageError,
    StorageUnavailableError,
)

__all__ = [
    "ConnectionProvider",
    "ConstraintViolationError",
    "StorageError",
    "StorageUnavailableError",
]
