"""Row buffer - buffered, version-checked access to one table.

The row buffer stages row changes in memory and writes them on commit:

    buffer = RowBuffer(flights, provider)
    temp_id = buffer.add_row()
    buffer.set_column(temp_id, "username", "andkon")
    ids = buffer.commit()          # {temp_id: RowId(17)}

Rows are addressed by stable keys: ``TemporaryRowId`` for rows that only
exist in the buffer and ``RowId`` (the primary-key value) for stored rows.
Stored rows are read lazily and cached together with the version they had
when read; that version is the expected version of any later UPDATE or
DELETE (see ``OptimisticLockEnforcer``).

Commit:
    1. Conditional DELETE of each removed row
    2. Conditional UPDATE of each modified row's changed columns
    3. INSERT each added row (unset columns omitted, storage defaults apply)
    A key removed in a batch may be re-added in the same batch.
    All statements run in one database transaction. A version conflict or
    storage error rolls the transaction back and leaves the pending changes
    untouched, so the caller can retry or roll back. On success the written
    rows are re-read (new version, defaults, evaluated expressions) and
    temporary ids are replaced by storage keys.

Filters:
    Filters narrow iteration (``row_ids()``, ``rows()``, ``len()``) and
    ``get_row()``. ``get_row_unfiltered()`` and ``get_column_value()``
    ignore them, so rows added under an active filter stay addressable.
"""

from __future__ import annotations

import sqlite3
import threading
import time
from typing import Any, Iterator, Literal

import sqlglot
from sqlglot import exp

from flybook_db.domain.entities import PendingChangeSet, Row, SchemaValidationError, TableSpec
from flybook_db.domain.entities.schema import ColumnSpec
from flybook_db.domain.services.ddl_generator import DDLGenerator, Naming
from flybook_db.domain.services.optimistic_lock import OptimisticLockEnforcer
from flybook_db.domain.value_objects import (
    Filter,
    RowId,
    RowKey,
    RowState,
    SqlLiteral,
    TemporaryRowId,
)
from flybook_db.infrastructure.logging import get_logger
from flybook_db.infrastructure.metrics import MetricsRegistry, get_metrics
from flybook_db.infrastructure.tracing import trace_span
from flybook_db.ports.inbound.row_container import (
    MissingPrimaryKeyError,
    OptimisticLockConflictError,
    UnknownColumnError,
    UnknownRowError,
)
from flybook_db.ports.outbound.connection_provider import (
    ConnectionProvider,
    StorageUnavailableError,
)

VersioningMode = Literal["trigger", "explicit"]


class RowBuffer:
    """Buffered container over one table.

    Thread Safety:
        Methods are serialized with a re-entrant lock, but a buffer is
        meant for a single writer. Concurrent sessions use one buffer each
        over a shared connection provider.

    Caching:
        Every row read through the buffer (iteration or lookup) stays
        cached with its expected version until ``refresh()``, which drops
        rows without pending changes. Iteration re-reads clean cached
        rows; a row that is only looked up keeps the version it had when
        first read. Long-lived buffers over large tables should call
        ``refresh()`` after commits to bound memory.
    """

    def __init__(
        self,
        table: TableSpec,
        connections: ConnectionProvider,
        naming: Naming | None = None,
        versioning: VersioningMode = "trigger",
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the row buffer.

        Args:
            table: The table to buffer; must have a primary key.
            connections: Provider of storage connections.
            naming: Physical name prefixes (defaults to ``c_`` columns).
            versioning: 'trigger' when storage bumps versions through the
                generated trigger, 'explicit' to bump them in the UPDATE.
            metrics: Optional metrics registry.

        Raises:
            SchemaValidationError: If the table has no primary key.
        """
        if table.primary_key is None:
            raise SchemaValidationError(f"Table {table.name} has no primary key")
        if versioning not in ("trigger", "explicit"):
            raise ValueError(f"Unknown versioning mode: {versioning}")

        self._table = table
        self._connections = connections
        self._naming = naming or Naming()
        self._ddl = DDLGenerator(self._naming)
        self._enforcer = OptimisticLockEnforcer(
            table, self._naming, bump_version=versioning == "explicit"
        )
        self._metrics = metrics or get_metrics()
        self._log = get_logger(__name__, table=table.name)

        self._key: ColumnSpec = table.primary_key
        self._version: ColumnSpec | None = table.version_column

        self._lock = threading.RLock()
        self._rows: dict[RowId, Row] = {}
        self._pending = PendingChangeSet()
        self._filters: list[Filter] = []
        self._next_temp = 1

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def table(self) -> TableSpec:
        return self._table

    @property
    def naming(self) -> Naming:
        return self._naming

    @property
    def filters(self) -> tuple[Filter, ...]:
        return tuple(self._filters)

    @property
    def pending(self) -> PendingChangeSet:
        """The uncommitted changes. Treat as read-only."""
        return self._pending

    def is_modified(self) -> bool:
        return not self._pending.is_empty()

    # ------------------------------------------------------------------
    # Row staging
    # ------------------------------------------------------------------

    def add_row(self) -> TemporaryRowId:
        """Create an empty pending row.

        Returns:
            The row's temporary id, valid until commit or rollback.
        """
        with self._lock:
            temp_id = TemporaryRowId(self._next_temp)
            self._next_temp += 1
            self._pending.added[temp_id] = Row.unbound(temp_id)
            self._update_pending_gauge()
            return temp_id

    def set_column(self, row_id: RowKey | Any, name: str, value: Any) -> None:
        """Stage a column value.

        Strings are quote-escaped when staged. ``SqlLiteral`` values are
        staged as given, which allows raw SQL expressions.

        Args:
            row_id: Temporary id, RowId, or raw primary-key value.
            name: Declared (``username``) or physical (``c_username``) name.
            value: The new value; None stages NULL.

        Raises:
            UnknownColumnError: If the table has no such column.
            UnknownRowError: If the row is unknown.
            ValueError: If the row is removed, or the column is the key or
                version of a stored row.
        """
        column = self._resolve_column(name)
        literal = SqlLiteral.from_value(value)
        with self._lock:
            row = self._require(row_id)
            if row.is_persistent and column.is_version:
                raise ValueError(
                    f"{self._table.name}.{column.name} is a version column managed by storage"
                )
            if row.is_persistent and column.is_primary_key:
                raise ValueError(f"Primary key of stored row {row.row_id!r} cannot change")

            row.stage(column.name, literal)
            if row.state is RowState.MODIFIED:
                self._pending.modified.setdefault(row.row_id, row)
            self._update_pending_gauge()

    def set_string(self, row_id: RowKey | Any, name: str, value: str | None) -> None:
        self.set_column(row_id, name, None if value is None else SqlLiteral.of_string(str(value)))

    def set_int(self, row_id: RowKey | Any, name: str, value: int | None) -> None:
        self.set_column(row_id, name, None if value is None else SqlLiteral.of_int(value))

    def set_float(self, row_id: RowKey | Any, name: str, value: float | None) -> None:
        self.set_column(row_id, name, None if value is None else SqlLiteral.of_float(value))

    def set_expression(self, row_id: RowKey | Any, name: str, sql: str) -> None:
        """Stage a raw SQL expression, e.g. ``strftime('%s','now')``."""
        self.set_column(row_id, name, SqlLiteral.expression(sql))

    def set_null(self, row_id: RowKey | Any, name: str) -> None:
        self.set_column(row_id, name, None)

    def get_column_value(self, row_id: RowKey | Any, name: str) -> Any:
        """Return the staged or stored value of a column, ignoring filters.

        Raw expressions read as None until committed.

        Raises:
            UnknownColumnError: If the table has no such column.
            UnknownRowError: If the row is unknown.
        """
        column = self._resolve_column(name)
        with self._lock:
            return self._require(row_id).get(column.name)

    def remove_row(self, row_id: RowKey | Any) -> bool:
        """Mark a row for deletion.

        Unbound rows are discarded immediately; stored rows are deleted at
        the next commit.

        Returns:
            False if the row is unknown or already removed.
        """
        with self._lock:
            row = self._lookup(row_id)
            if row is None or row.state is RowState.REMOVED:
                return False

            if row.state is RowState.UNBOUND:
                del self._pending.added[row.row_id]
            else:
                self._pending.modified.pop(row.row_id, None)
                row.mark_removed()
                self._pending.removed[row.row_id] = row

            self._update_pending_gauge()
            return True

    # ------------------------------------------------------------------
    # Lookup and iteration
    # ------------------------------------------------------------------

    def get_row(self, row_id: RowKey | Any) -> Row | None:
        """Return a row if it exists and passes the active filters."""
        with self._lock:
            row = self.get_row_unfiltered(row_id)
            if row is None or not self._matches(row):
                return None
            return row

    def get_row_unfiltered(self, row_id: RowKey | Any) -> Row | None:
        """Return a row regardless of filters; None if unknown or removed."""
        with self._lock:
            row = self._lookup(row_id)
            if row is None or row.state is RowState.REMOVED:
                return None
            return row

    def contains_row(self, row_id: RowKey | Any) -> bool:
        return self.get_row_unfiltered(row_id) is not None

    def row_ids(self) -> Iterator[RowKey]:
        """Iterate ids of visible rows: stored rows first, in key order,
        then rows added since the last commit.
        """
        with self._lock:
            visible: list[RowKey] = []
            stored: set[RowId] = set()

            condition = self._filter_condition()
            with self._connections.connection() as conn:
                records = conn.execute(self._select_sql(condition)).fetchall()
            self._count_statement("select")

            for record in records:
                fresh = self._row_from_record(record)
                stored.add(fresh.row_id)
                row = self._rows.get(fresh.row_id)
                if row is None:
                    self._rows[fresh.row_id] = fresh
                    row = fresh
                elif row.state is RowState.BOUND:
                    row.bind(fresh.row_id, fresh.values, fresh.expected_version)

                if row.state is RowState.BOUND or (
                    row.state is RowState.MODIFIED and self._matches(row)
                ):
                    visible.append(row.row_id)

            for row_id, row in self._pending.modified.items():
                if row_id not in stored and self._matches(row):
                    visible.append(row_id)

            for temp_id, row in self._pending.added.items():
                if self._matches(row):
                    visible.append(temp_id)

            return iter(visible)

    def rows(self) -> list[Row]:
        """Return the visible rows."""
        with self._lock:
            return [row for row in map(self._lookup, self.row_ids()) if row is not None]

    def first_row_id(self) -> RowKey | None:
        return next(self.row_ids(), None)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows())

    def __len__(self) -> int:
        return sum(1 for _ in self.row_ids())

    def count(self) -> int:
        """Number of rows in storage, ignoring filters and pending changes."""
        sql = sqlglot.select(exp.Count(this=exp.Star())).from_(
            self._naming.table(self._table)
        ).sql(dialect="sqlite")
        with self._connections.connection() as conn:
            (total,) = conn.execute(sql).fetchone()
        self._count_statement("select")
        return int(total)

    def refresh(self) -> None:
        """Forget cached rows without pending changes so they are re-read.

        This is the only operation that shrinks the row cache.
        """
        with self._lock:
            self._rows = {
                row_id: row for row_id, row in self._rows.items() if row.state.is_pending()
            }

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def apply_filter(self, row_filter: Filter) -> None:
        """Add a filter. Active filters are combined with AND.

        Raises:
            UnknownColumnError: If the filter names an unknown column.
        """
        for name in row_filter.columns():
            self._resolve_column(name)
        with self._lock:
            self._filters.append(row_filter)

    def remove_filter(self, row_filter: Filter) -> bool:
        with self._lock:
            if row_filter in self._filters:
                self._filters.remove(row_filter)
                return True
            return False

    def clear_filter(self) -> None:
        with self._lock:
            self._filters.clear()

    # ------------------------------------------------------------------
    # Commit / rollback
    # ------------------------------------------------------------------

    def commit(self) -> dict[TemporaryRowId, RowId]:
        """Write all pending changes in one database transaction.

        Returns:
            Mapping from each committed temporary id to its storage id.

        Raises:
            OptimisticLockConflictError: If a row changed since it was read.
            MissingPrimaryKeyError: If a row needs an explicit key.
            StorageError: On storage failure.
        """
        with self._lock:
            if self._pending.is_empty():
                return {}

            added = list(self._pending.added.values())
            modified = list(self._pending.modified.values())
            removed = list(self._pending.removed.values())
            attributes = {
                "table": self._table.name,
                "inserts": len(added),
                "updates": len(modified),
                "deletes": len(removed),
            }

            start = time.perf_counter()
            try:
                with trace_span("row_buffer.commit", attributes):
                    with self._connections.transaction() as conn:
                        for row in removed:
                            self._delete(conn, row)
                        updated = [(row, self._update(conn, row)) for row in modified]
                        inserted = [(row, self._insert(conn, row)) for row in added]
            except OptimisticLockConflictError as e:
                self._metrics.optimistic_lock_conflicts_total.labels(table=self._table.name).inc()
                self._metrics.commits_total.labels(table=self._table.name, status="conflict").inc()
                self._log.warning("commit_conflict", key=e.key, expected_version=e.expected_version)
                raise
            except Exception as e:
                self._metrics.commits_total.labels(table=self._table.name, status="error").inc()
                self._log.error("commit_failed", error=str(e), error_type=type(e).__name__)
                raise

            for row in removed:
                self._rows.pop(row.row_id, None)  # type: ignore[arg-type]
            id_map: dict[TemporaryRowId, RowId] = {}
            for row, fresh in inserted:
                temp_id = row.row_id
                row.bind(fresh.row_id, fresh.values, fresh.expected_version)
                self._rows[fresh.row_id] = row
                id_map[temp_id] = fresh.row_id  # type: ignore[index]
            for row, fresh in updated:
                row.bind(fresh.row_id, fresh.values, fresh.expected_version)
            self._pending.clear()

            self._metrics.commits_total.labels(table=self._table.name, status="success").inc()
            self._metrics.commit_latency_seconds.labels(table=self._table.name).observe(
                time.perf_counter() - start
            )
            self._update_pending_gauge()
            self._log.info(
                "commit_succeeded",
                inserts=len(added),
                updates=len(modified),
                deletes=len(removed),
            )
            return id_map

    def rollback(self) -> None:
        """Discard all pending changes without touching storage."""
        with self._lock:
            for row in self._pending.modified.values():
                row.restore()
            for row in self._pending.removed.values():
                row.restore()
            discarded = len(self._pending)
            self._pending.clear()

            self._metrics.rollbacks_total.labels(table=self._table.name).inc()
            self._update_pending_gauge()
            self._log.debug("rollback", discarded=discarded)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _insert(self, conn: sqlite3.Connection, row: Row) -> Row:
        key_literal = row.literal(self._key.name)
        if (key_literal is None or key_literal.is_null) and not self._key.is_integer_primary_key:
            raise MissingPrimaryKeyError(self._table.name, self._key.name)

        cursor = conn.execute(self._ddl.insert_statement(self._table, row.values))
        self._count_statement("insert")
        # Read back through rowid: covers autoincrement keys and expression values
        rowid = exp.EQ(this=exp.column("rowid"), expression=exp.convert(cursor.lastrowid))
        return self._select_one(conn, rowid)

    def _update(self, conn: sqlite3.Connection, row: Row) -> Row:
        key = row.row_id.key  # type: ignore[union-attr]
        self._enforcer.update(conn, key, row.expected_version, row.changed_values())
        self._count_statement("update")
        return self._select_one(conn, self._key_condition(key))

    def _delete(self, conn: sqlite3.Connection, row: Row) -> None:
        self._enforcer.delete(conn, row.row_id.key, row.expected_version)  # type: ignore[union-attr]
        self._count_statement("delete")

    def _resolve_column(self, name: str) -> ColumnSpec:
        column = self._naming.declared_column(self._table, name)
        if column is None:
            raise UnknownColumnError(self._table.name, name)
        return column

    def _lookup(self, row_id: RowKey | Any) -> Row | None:
        if isinstance(row_id, TemporaryRowId):
            return self._pending.added.get(row_id)
        if not isinstance(row_id, RowId):
            row_id = RowId(row_id)

        row = self._rows.get(row_id)
        if row is None:
            row = self._load(row_id.key)
            if row is not None:
                self._rows[row.row_id] = row
        return row

    def _require(self, row_id: RowKey | Any) -> Row:
        row = self._lookup(row_id)
        if row is None:
            raise UnknownRowError(self._table.name, row_id)
        return row

    def _load(self, key: Any) -> Row | None:
        with self._connections.connection() as conn:
            record = conn.execute(self._select_sql(self._key_condition(key))).fetchone()
        self._count_statement("select")
        return None if record is None else self._row_from_record(record)

    def _select_one(self, conn: sqlite3.Connection, condition: exp.Expression) -> Row:
        record = conn.execute(self._select_sql(condition)).fetchone()
        self._count_statement("select")
        if record is None:
            raise StorageUnavailableError(
                f"Row written to {self._table.name} could not be read back"
            )
        return self._row_from_record(record)

    def _select_sql(self, condition: exp.Expression | None) -> str:
        query = sqlglot.select(
            *(exp.column(self._naming.column(c)) for c in self._table.columns)
        ).from_(self._naming.table(self._table))
        if condition is not None:
            query = query.where(condition)
        query = query.order_by(exp.column(self._naming.column(self._key)))
        return query.sql(dialect="sqlite")

    def _key_condition(self, key: Any) -> exp.Expression:
        return exp.EQ(
            this=exp.column(self._naming.column(self._key)),
            expression=exp.convert(key),
        )

    def _filter_condition(self) -> exp.Expression | None:
        if not self._filters:
            return None
        resolve = lambda name: self._naming.column(self._resolve_column(name))  # noqa: E731
        return exp.and_(*(f.to_expression(resolve) for f in self._filters))

    def _matches(self, row: Row) -> bool:
        lookup = lambda name: row.get(self._resolve_column(name).name)  # noqa: E731
        return all(f.matches(lookup) for f in self._filters)

    def _row_from_record(self, record: sqlite3.Row) -> Row:
        values = {
            c.name: SqlLiteral.from_value(record[self._naming.column(c)])
            for c in self._table.columns
        }
        key = record[self._naming.column(self._key)]
        version = None
        if self._version is not None:
            version = record[self._naming.column(self._version)]
        return Row.loaded(RowId(key), values, version)

    def _count_statement(self, statement_type: str) -> None:
        self._metrics.statements_total.labels(statement_type=statement_type).inc()

    def _update_pending_gauge(self) -> None:
        self._metrics.pending_changes.labels(table=self._table.name).set(len(self._pending))
