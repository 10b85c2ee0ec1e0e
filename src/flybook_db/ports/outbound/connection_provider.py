"""Connection provider port.

Row buffers and the generator reach storage only through this port. A
provider hands out DB-API connections in autocommit mode for reads and
wraps write batches in a database transaction.

Key responsibilities:
- Yield usable connections (shared across row buffers)
- Run each batch as one all-or-nothing transaction
- Apply the statement timeout to every connection
- Translate driver failures into storage errors
"""

from __future__ import annotations

import sqlite3
from abc import abstractmethod
from contextlib import AbstractContextManager
from typing import Protocol


class ConnectionProvider(Protocol):
    """Protocol for obtaining database connections."""

    @abstractmethod
    def connection(self) -> AbstractContextManager[sqlite3.Connection]:
        """Yield a connection in autocommit mode.

        Raises:
            StorageUnavailableError: If storage cannot be reached.
        """
        ...

    @abstractmethod
    def transaction(self) -> AbstractContextManager[sqlite3.Connection]:
        """Yield a connection inside a database transaction.

        The transaction commits when the block exits normally and rolls
        back when it raises. Autocommit is restored afterwards.

        Raises:
            StorageUnavailableError: On driver or connection failure.
            ConstraintViolationError: On integrity failure.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Close all connections held by the provider."""
        ...


class StorageError(Exception):
    """Base class for storage failures."""


class StorageUnavailableError(StorageError):
    """Raised when the database cannot be reached or a statement fails.

    Fatal for one-time setup such as schema generation; recoverable for
    interactive use, where the batch is rolled back and reported.
    """


class ConstraintViolationError(StorageError):
    """Raised when a statement violates a database constraint."""
