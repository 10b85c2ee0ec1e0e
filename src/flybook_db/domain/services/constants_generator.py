"""Constants module generation.

Application code refers to tables and columns through generated constants
(``TABLE_USERS``, ``USERS_USERNAME``) instead of hard-coded names, so
changing a prefix only requires regenerating the module.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from flybook_db.domain.entities.schema import TableSpec
from flybook_db.domain.services.ddl_generator import Naming

_ALIGNMENT = 40


class ConstantsGenerator:
    """Builds the name constants for a schema.

    Args:
        naming: Prefixes applied to table and column names.
        filename: Database file name exported as ``FILENAME``.
    """

    def __init__(self, naming: Naming | None = None, filename: str = "flybook.db") -> None:
        self._naming = naming or Naming()
        self._filename = filename

    def constants(self, schema: Sequence[TableSpec]) -> dict[str, str]:
        """Return the constants in emission order."""
        result: dict[str, str] = {
            "FILENAME": self._filename,
            "TBLPREFIX": self._naming.table_prefix,
            "COLPREFIX": self._naming.column_prefix,
        }
        for table in schema:
            result[f"TABLE_{table.name.upper()}"] = self._naming.table(table)
        for table in schema:
            for column in table.columns:
                key = f"{table.name.upper()}_{column.name.upper()}"
                if key in result:
                    raise ValueError(f"Constant name collision: {key}")
                result[key] = self._naming.column(column)
        return result

    def render_module(self, schema: Sequence[TableSpec]) -> str:
        """Render the constants as Python source."""
        self.constants(schema)  # collision check

        lines = [
            '"""Table and column name constants.',
            "",
            "Generated by flybook-db-generate. Do not edit.",
            '"""',
            "",
            f'FILENAME = "{self._filename}"',
            "",
            f'TBLPREFIX = "{self._naming.table_prefix}"',
            f'COLPREFIX = "{self._naming.column_prefix}"',
            "",
        ]
        for table in schema:
            name = f"TABLE_{table.name.upper()}"
            lines.append(f'{name:<{_ALIGNMENT}} = TBLPREFIX + "{table.name}"')
        lines.append("")

        for table in schema:
            for column in table.columns:
                name = f"{table.name.upper()}_{column.name.upper()}"
                lines.append(f'{name:<{_ALIGNMENT}} = COLPREFIX + "{column.name}"')
            lines.append("")

        return "\n".join(lines)

    def write(self, schema: Sequence[TableSpec], path: Path) -> Path:
        """Write the rendered module to ``path``."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render_module(schema), encoding="utf-8")
        return path
