"""Container filters.

Filters narrow the rows a row buffer exposes through iteration. Each filter
renders to a sqlglot expression for the storage query and can also be
evaluated against staged values, so buffered rows are filtered the same way
stored ones are.

Column names in filters are resolved by the row buffer, so both declared
names (``username``) and prefixed names (``c_username``) are accepted.
"""

from __future__ import annotations

import operator
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, ClassVar

from sqlglot import exp

ColumnResolver = Callable[[str], str]
"""Maps a filter column name to the physical column name."""

ValueLookup = Callable[[str], Any]
"""Returns the current value of a column by filter column name."""


class ComparisonOp(Enum):
    """Comparison operators for filters."""

    EQ = "="
    NE = "<>"
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="


_SQL_NODES: dict[ComparisonOp, type[exp.Binary]] = {
    ComparisonOp.EQ: exp.EQ,
    ComparisonOp.NE: exp.NEQ,
    ComparisonOp.LT: exp.LT,
    ComparisonOp.LE: exp.LTE,
    ComparisonOp.GT: exp.GT,
    ComparisonOp.GE: exp.GTE,
}

_PY_OPS: dict[ComparisonOp, Callable[[Any, Any], bool]] = {
    ComparisonOp.EQ: operator.eq,
    ComparisonOp.NE: operator.ne,
    ComparisonOp.LT: operator.lt,
    ComparisonOp.LE: operator.le,
    ComparisonOp.GT: operator.gt,
    ComparisonOp.GE: operator.ge,
}


class Filter(ABC):
    """Base class for row filters."""

    @abstractmethod
    def to_expression(self, resolve: ColumnResolver) -> exp.Expression:
        """Render the filter as a SQL condition."""

    @abstractmethod
    def matches(self, lookup: ValueLookup) -> bool:
        """Evaluate the filter against in-memory values."""

    @abstractmethod
    def columns(self) -> frozenset[str]:
        """Column names referenced by this filter."""


@dataclass(frozen=True)
class Compare(Filter):
    """Compare a column against a constant.

    NULL on either side never matches, as in SQL.
    """

    column: str
    value: Any
    op: ClassVar[ComparisonOp]

    def to_expression(self, resolve: ColumnResolver) -> exp.Expression:
        node = _SQL_NODES[self.op]
        return node(this=exp.column(resolve(self.column)), expression=exp.convert(self.value))

    def matches(self, lookup: ValueLookup) -> bool:
        actual = lookup(self.column)
        if actual is None or self.value is None:
            return False
        try:
            return bool(_PY_OPS[self.op](actual, self.value))
        except TypeError:
            return False

    def columns(self) -> frozenset[str]:
        return frozenset({self.column})


class Equal(Compare):
    op = ComparisonOp.EQ


class NotEqual(Compare):
    op = ComparisonOp.NE


class Less(Compare):
    op = ComparisonOp.LT


class LessOrEqual(Compare):
    op = ComparisonOp.LE


class Greater(Compare):
    op = ComparisonOp.GT


class GreaterOrEqual(Compare):
    op = ComparisonOp.GE


@dataclass(frozen=True)
class IsNull(Filter):
    """Match rows where the column is NULL."""

    column: str

    def to_expression(self, resolve: ColumnResolver) -> exp.Expression:
        return exp.Is(this=exp.column(resolve(self.column)), expression=exp.Null())

    def matches(self, lookup: ValueLookup) -> bool:
        return lookup(self.column) is None

    def columns(self) -> frozenset[str]:
        return frozenset({self.column})


@dataclass(frozen=True, init=False)
class And(Filter):
    """All child filters must match."""

    filters: tuple[Filter, ...]

    def __init__(self, *filters: Filter) -> None:
        if not filters:
            raise ValueError("And requires at least one filter")
        object.__setattr__(self, "filters", tuple(filters))

    def to_expression(self, resolve: ColumnResolver) -> exp.Expression:
        return exp.and_(*(f.to_expression(resolve) for f in self.filters))

    def matches(self, lookup: ValueLookup) -> bool:
        return all(f.matches(lookup) for f in self.filters)

    def columns(self) -> frozenset[str]:
        return frozenset().union(*(f.columns() for f in self.filters))


@dataclass(frozen=True, init=False)
class Or(Filter):
    """At least one child filter must match."""

    filters: tuple[Filter, ...]

    def __init__(self, *filters: Filter) -> None:
        if not filters:
            raise ValueError("Or requires at least one filter")
        object.__setattr__(self, "filters", tuple(filters))

    def to_expression(self, resolve: ColumnResolver) -> exp.Expression:
        return exp.or_(*(f.to_expression(resolve) for f in self.filters))

    def matches(self, lookup: ValueLookup) -> bool:
        return any(f.matches(lookup) for f in self.filters)

    def columns(self) -> frozenset[str]:
        return frozenset().union(*(f.columns() for f in self.filters))


@dataclass(frozen=True)
class Not(Filter):
    """Negate a filter.

    In-memory evaluation treats the negation of a NULL comparison as a
    match; storage evaluation follows SQL three-valued logic. Prefer
    explicit operators such as ``NotEqual`` where NULLs are expected.
    """

    filter: Filter

    def to_expression(self, resolve: ColumnResolver) -> exp.Expression:
        return exp.not_(self.filter.to_expression(resolve))

    def matches(self, lookup: ValueLookup) -> bool:
        return not self.filter.matches(lookup)

    def columns(self) -> frozenset[str]:
        return self.filter.columns()
