"""Schema descriptor parsing.

Tables are described as ordered lists of column descriptor strings::

    "username   TEXT      PRIMARY KEY"
    "code       CHAR(4)"
    "optlock    INTEGER   @VERSION"

The first token is the column name, the second its type, and the rest are
constraint tokens:

    - ``KEY`` directly after ``PRIMARY`` marks the primary key.
    - ``@VERSION`` marks the optimistic-lock column. It is a pseudo
      constraint: it is replaced by ``DEFAULT 0`` and never emitted.
    - ``DEFAULT`` marks a column with a default value.
    - Anything else is passed through verbatim.

A ``KEY`` token without ``PRIMARY`` before it is reported as a
``SchemaParseError`` diagnostic and dropped; parsing continues. Structural
problems (unknown type, missing or duplicate key/version column) raise
``SchemaValidationError``.
"""

from __future__ import annotations

import re
from typing import Iterable, Sequence

from flybook_db.domain.entities.schema import (
    VERSION_DEFAULT,
    ColumnSpec,
    SchemaValidationError,
    TableSpec,
)
from flybook_db.domain.value_objects.schema_types import ColumnType
from flybook_db.infrastructure.logging import get_logger

logger = get_logger(__name__)

VERSION_TOKEN = "@VERSION"

_TYPE_PATTERN = re.compile(r"^([A-Z]+)(?:\((\d+)\))?$")


class SchemaParseError(Exception):
    """Non-fatal problem found while parsing a column descriptor."""

    def __init__(self, message: str, column: str | None = None, token: str | None = None):
        super().__init__(message)
        self.column = column
        self.token = token


def _parse_type(column: str, token: str) -> tuple[ColumnType, int | None]:
    match = _TYPE_PATTERN.match(token.upper())
    if match is None or match.group(1) not in ColumnType.__members__:
        raise SchemaValidationError(f"Column {column}: unknown type {token!r}")
    length = int(match.group(2)) if match.group(2) else None
    return ColumnType[match.group(1)], length


def parse_column(
    descriptor: str,
    diagnostics: list[SchemaParseError] | None = None,
) -> ColumnSpec:
    """Parse one ``"<name> <TYPE> <constraints...>"`` descriptor.

    Args:
        descriptor: The column descriptor string.
        diagnostics: Optional list collecting non-fatal parse errors.

    Returns:
        The parsed column.

    Raises:
        SchemaValidationError: If the name or type is missing or invalid.
    """
    tokens = descriptor.split()
    if len(tokens) < 2:
        raise SchemaValidationError(f"Column descriptor needs a name and a type: {descriptor!r}")

    name = tokens[0]
    column_type, length = _parse_type(name, tokens[1])

    constraints: list[str] = []
    is_primary_key = False
    is_version = False
    has_default = False
    primary_pos = -1

    for pos, token in enumerate(tokens[2:]):
        keyword = token.upper()
        if keyword == "KEY":
            if primary_pos == pos - 1 and primary_pos >= 0:
                is_primary_key = True
                constraints.append(token)
            else:
                error = SchemaParseError(
                    f"Column {name}: KEY without PRIMARY ignored", column=name, token=token
                )
                logger.warning("schema_parse_diagnostic", column=name, token=token, error=str(error))
                if diagnostics is not None:
                    diagnostics.append(error)
        elif keyword == VERSION_TOKEN:
            is_version = True
            has_default = True
            constraints.extend(VERSION_DEFAULT)
        elif keyword == "PRIMARY":
            primary_pos = pos
            constraints.append(token)
        else:
            if keyword == "DEFAULT":
                has_default = True
            constraints.append(token)

    return ColumnSpec(
        name=name,
        type=column_type,
        constraints=tuple(constraints),
        is_primary_key=is_primary_key,
        is_version=is_version,
        has_default=has_default,
        length=length,
    )


def build_table(
    name: str,
    descriptors: Sequence[str],
    diagnostics: list[SchemaParseError] | None = None,
) -> TableSpec:
    """Build a table from column descriptors.

    Tables built from descriptors must declare exactly one primary key and
    exactly one ``@VERSION`` column, so every generated table gets a version
    trigger.

    Raises:
        SchemaValidationError: On structural problems.
    """
    columns = tuple(parse_column(d, diagnostics) for d in descriptors)
    table = TableSpec(name, columns)

    if table.primary_key is None:
        raise SchemaValidationError(f"Table {name} has no primary key")
    if table.version_column is None:
        raise SchemaValidationError(f"Table {name} has no {VERSION_TOKEN} column")
    return table


def build_schema(
    tables: Iterable[tuple[str, Sequence[str]]],
    diagnostics: list[SchemaParseError] | None = None,
) -> list[TableSpec]:
    """Build an ordered schema from ``(table name, descriptors)`` pairs.

    Raises:
        SchemaValidationError: On structural problems or duplicate table names.
    """
    schema: list[TableSpec] = []
    seen: set[str] = set()
    for name, descriptors in tables:
        if name.lower() in seen:
            raise SchemaValidationError(f"Duplicate table {name}")
        seen.add(name.lower())
        schema.append(build_table(name, descriptors, diagnostics))

    logger.debug("schema_built", tables=[t.name for t in schema])
    return schema
