"""Domain services for the Flybook data layer.

Exports:
    - parse_column, build_table, build_schema: Schema descriptor parsing
    - Naming, DDLGenerator: Physical names and schema statements
    - ConstantsGenerator: Name constants module generation
    - OptimisticLockEnforcer: Version-checked UPDATE/DELETE
    - RowBuffer: Buffered table access (implements RowContainer)
"""

from flybook_db.domain.services.constants_generator import ConstantsGenerator
from flybook_db.domain.services.ddl_generator import TRIGGER_PREFIX, DDLGenerator, Naming
from flybook_db.domain.services.optimistic_lock import OptimisticLockEnforcer
from flybook_db.domain.services.row_buffer import RowBuffer
from flybook_db.domain.services.schema_descriptor import (
    VERSION_TOKEN,
    SchemaParseError,
    build_schema,
    build_table,
    parse_column,
)

__all__ = [
    "ConstantsGenerator",
    "DDLGenerator",
    "Naming",
    "TRIGGER_PREFIX",
    "OptimisticLockEnforcer",
    "RowBuffer",
    "SchemaParseError",
    "VERSION_TOKEN",
    "build_schema",
    "build_table",
    "parse_column",
]
