"""Uncommitted changes of a row buffer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from flybook_db.domain.entities.row import Row
from flybook_db.domain.value_objects import RowId, TemporaryRowId


@dataclass
class PendingChangeSet:
    """Rows staged for insert, update and delete.

    Owned exclusively by one row buffer. Insertion order is preserved in
    each group and is the order statements are issued at commit.
    """

    added: dict[TemporaryRowId, Row] = field(default_factory=dict)
    modified: dict[RowId, Row] = field(default_factory=dict)
    removed: dict[RowId, Row] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not (self.added or self.modified or self.removed)

    def __len__(self) -> int:
        return len(self.added) + len(self.modified) + len(self.removed)

    def rows(self) -> Iterator[Row]:
        yield from self.added.values()
        yield from self.modified.values()
        yield from self.removed.values()

    def clear(self) -> None:
        self.added.clear()
        self.modified.clear()
        self.removed.clear()
