"""Unit tests for the Row entity and PendingChangeSet."""

from __future__ import annotations

import pytest

from flybook_db.domain.entities import PendingChangeSet, Row
from flybook_db.domain.value_objects import RowId, RowState, SqlLiteral, TemporaryRowId


@pytest.fixture
def stored_row() -> Row:
    return Row.loaded(
        RowId(1),
        {"id": SqlLiteral.of_int(1), "balance": SqlLiteral.of_int(100)},
        version=0,
    )


@pytest.mark.unit
class TestRow:
    """Tests for row state transitions."""

    def test_unbound_row(self) -> None:
        row = Row.unbound(TemporaryRowId(1))

        assert row.state is RowState.UNBOUND
        assert not row.is_persistent
        assert row.expected_version is None

    def test_staging_unbound_keeps_state(self) -> None:
        row = Row.unbound(TemporaryRowId(1))

        row.stage("balance", SqlLiteral.of_int(5))

        assert row.state is RowState.UNBOUND
        assert row.get("balance") == 5
        assert row.dirty_columns == frozenset()

    def test_staging_stored_row_marks_modified(self, stored_row: Row) -> None:
        stored_row.stage("balance", SqlLiteral.of_int(150))

        assert stored_row.state is RowState.MODIFIED
        assert stored_row.changed_values() == {"balance": SqlLiteral.of_int(150)}
        assert stored_row.expected_version == 0

    def test_restore(self, stored_row: Row) -> None:
        stored_row.stage("balance", SqlLiteral.of_int(150))

        stored_row.restore()

        assert stored_row.state is RowState.BOUND
        assert stored_row.get("balance") == 100
        assert stored_row.changed_values() == {}

    def test_removed_row_rejects_staging(self, stored_row: Row) -> None:
        stored_row.mark_removed()

        with pytest.raises(ValueError):
            stored_row.stage("balance", SqlLiteral.of_int(1))

    def test_unbound_row_cannot_be_marked_removed(self) -> None:
        with pytest.raises(ValueError):
            Row.unbound(TemporaryRowId(1)).mark_removed()

    def test_unbound_row_cannot_restore(self) -> None:
        with pytest.raises(ValueError):
            Row.unbound(TemporaryRowId(1)).restore()

    def test_bind_after_commit(self) -> None:
        row = Row.unbound(TemporaryRowId(3))
        row.stage("balance", SqlLiteral.of_int(5))

        row.bind(RowId(9), {"id": SqlLiteral.of_int(9), "balance": SqlLiteral.of_int(5)}, 0)

        assert row.row_id == RowId(9)
        assert row.state is RowState.BOUND
        assert row.expected_version == 0


@pytest.mark.unit
class TestPendingChangeSet:
    """Tests for PendingChangeSet."""

    def test_empty(self) -> None:
        changes = PendingChangeSet()

        assert changes.is_empty()
        assert len(changes) == 0

    def test_rows_in_statement_order(self, stored_row: Row) -> None:
        changes = PendingChangeSet()
        added = Row.unbound(TemporaryRowId(1))
        changes.modified[RowId(1)] = stored_row
        changes.added[TemporaryRowId(1)] = added

        assert list(changes.rows()) == [added, stored_row]
        assert len(changes) == 2

        changes.clear()
        assert changes.is_empty()
