"""SQLite connection provider.

Connections are opened lazily, one per thread, and shared by every row
buffer running on that thread. They run in autocommit mode; write batches
are wrapped in ``BEGIN IMMEDIATE`` ... ``COMMIT`` so autocommit is
suspended only for the duration of a batch.

The statement timeout is applied as SQLite's busy timeout: a statement
waiting on another connection's lock gives up after that many seconds.

Note:
    ``":memory:"`` databases are private to one connection, so with this
    provider each thread would see its own empty database. Use a file.
"""

from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from flybook_db.infrastructure.logging import get_logger
from flybook_db.ports.outbound.connection_provider import (
    ConstraintViolationError,
    StorageError,
    StorageUnavailableError,
)

logger = get_logger(__name__)


def translate_error(exc: sqlite3.Error) -> StorageError:
    """Map a sqlite3 error onto the storage error taxonomy."""
    if isinstance(exc, sqlite3.IntegrityError):
        return ConstraintViolationError(str(exc))
    return StorageUnavailableError(str(exc))


class SQLiteConnectionProvider:
    """Thread-local SQLite connections for a database file.

    Usage:
        provider = SQLiteConnectionProvider("flybook.db")
        with provider.transaction() as conn:
            conn.execute("UPDATE ...")
        provider.close()
    """

    def __init__(self, database: str | Path, timeout_seconds: float = 30.0) -> None:
        """Initialize the provider.

        Args:
            database: Path of the SQLite database file.
            timeout_seconds: Statement (busy) timeout for every connection.
        """
        self._database = str(database)
        self._timeout = timeout_seconds
        self._local = threading.local()
        self._lock = threading.Lock()
        self._connections: list[sqlite3.Connection] = []

    @property
    def database(self) -> str:
        return self._database

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    def _connect(self) -> sqlite3.Connection:
        conn: sqlite3.Connection | None = getattr(self._local, "conn", None)
        if conn is not None:
            return conn

        try:
            conn = sqlite3.connect(
                self._database,
                timeout=self._timeout,
                isolation_level=None,
                check_same_thread=False,
            )
        except sqlite3.Error as e:
            logger.error("sqlite_connect_failed", database=self._database, error=str(e))
            raise StorageUnavailableError(
                f"Cannot open database {self._database}: {e}"
            ) from e

        conn.row_factory = sqlite3.Row
        self._local.conn = conn
        with self._lock:
            self._connections.append(conn)
        logger.debug("sqlite_connection_opened", database=self._database)
        return conn

    @contextmanager
    def connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Yield this thread's connection in autocommit mode."""
        conn = self._connect()
        try:
            yield conn
        except sqlite3.Error as e:
            raise translate_error(e) from e

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """Yield this thread's connection inside one database transaction.

        Raises:
            RuntimeError: If a transaction is already open on this thread.
        """
        conn = self._connect()
        if conn.in_transaction:
            raise RuntimeError("A transaction is already open on this connection")

        try:
            conn.execute("BEGIN IMMEDIATE")
        except sqlite3.Error as e:
            raise translate_error(e) from e

        try:
            yield conn
        except BaseException as exc:
            if conn.in_transaction:
                try:
                    conn.execute("ROLLBACK")
                except sqlite3.Error as rollback_error:
                    logger.error("sqlite_rollback_failed", error=str(rollback_error))
            if isinstance(exc, sqlite3.Error):
                raise translate_error(exc) from exc
            raise

        try:
            conn.execute("COMMIT")
        except sqlite3.Error as e:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise translate_error(e) from e

    def close(self) -> None:
        """Close every connection opened by this provider."""
        with self._lock:
            connections, self._connections = self._connections, []
        for conn in connections:
            conn.close()
        self._local = threading.local()

    def __enter__(self) -> SQLiteConnectionProvider:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
