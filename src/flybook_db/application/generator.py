"""Database generator - builds a ready-to-use Flybook database.

Usage:
    from flybook_db.application import DatabaseGenerator

    result = DatabaseGenerator(get_config()).run()

Steps, in order:
    1. Drop and re-create every table (one transaction)
    2. Seed sample data (users, airports, aircraft, flights)
    3. Install the version triggers ('trigger' versioning only)
    4. Write the name constants module

Any storage failure aborts the run; the CLI turns it into exit status 1.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from flybook_db.adapters.outbound.sqlite_connection_provider import SQLiteConnectionProvider
from flybook_db.application.flybook_schema import flybook_schema
from flybook_db.application.seed_data import SampleDataSeeder, SeedSummary
from flybook_db.domain.entities import TableSpec
from flybook_db.domain.services.constants_generator import ConstantsGenerator
from flybook_db.domain.services.ddl_generator import DDLGenerator, Naming
from flybook_db.domain.services.schema_descriptor import SchemaParseError
from flybook_db.infrastructure.config import Config
from flybook_db.infrastructure.logging import get_logger
from flybook_db.infrastructure.metrics import MetricsRegistry
from flybook_db.infrastructure.tracing import trace_span

logger = get_logger(__name__)


@dataclass
class GenerationResult:
    """Outcome of a generator run."""

    database: Path
    constants_path: Path
    tables: list[str]
    seeded: SeedSummary | None = None
    triggers: list[str] = field(default_factory=list)
    diagnostics: list[SchemaParseError] = field(default_factory=list)


class DatabaseGenerator:
    """Creates, seeds and instruments a Flybook database."""

    def __init__(
        self,
        config: Config,
        schema: Sequence[TableSpec] | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            config: Configuration (database path, naming, versioning, seeding).
            schema: Tables to generate; the Flybook schema if None.
            metrics: Optional metrics registry for the seeding buffers.
        """
        self._config = config
        self._diagnostics: list[SchemaParseError] = []
        self._schema = list(schema) if schema is not None else flybook_schema(self._diagnostics)
        self._naming = Naming(
            table_prefix=config.naming.table_prefix,
            column_prefix=config.naming.column_prefix,
        )
        self._ddl = DDLGenerator(self._naming)
        self._metrics = metrics

    @property
    def schema(self) -> list[TableSpec]:
        return list(self._schema)

    def run(self) -> GenerationResult:
        """Run all generation steps.

        Raises:
            StorageError: If any statement fails.
        """
        self._config.ensure_directories()
        database = self._config.database
        result = GenerationResult(
            database=database.path,
            constants_path=self._config.generator.constants_path,
            tables=[self._naming.table(t) for t in self._schema],
            diagnostics=list(self._diagnostics),
        )
        logger.info(
            "generation_started",
            database=database.path,
            versioning=self._config.versioning.mode,
        )

        provider = SQLiteConnectionProvider(database.path, database.statement_timeout_seconds)
        try:
            with trace_span("generator.run", {"database": database.path}):
                self.create_schema(provider)
                if self._config.generator.populate:
                    result.seeded = self.populate(provider)
                if self._config.versioning.mode == "trigger":
                    result.triggers = self.create_triggers(provider)
                self.write_constants(result.constants_path)
        finally:
            provider.close()

        logger.info("generation_completed", tables=result.tables, triggers=result.triggers)
        return result

    def create_schema(self, provider: SQLiteConnectionProvider) -> None:
        """Drop and re-create all tables in one transaction."""
        with trace_span("generator.create_schema"):
            with provider.transaction() as conn:
                for table in self._schema:
                    create = self._ddl.create_statement(table)
                    logger.debug("create_table", table=table.name, sql=create)
                    conn.execute(self._ddl.drop_statement(table))
                    conn.execute(create)

    def populate(self, provider: SQLiteConnectionProvider) -> SeedSummary:
        with trace_span("generator.populate"):
            seeder = SampleDataSeeder(
                self._schema,
                provider,
                random.Random(self._config.generator.random_seed),
                naming=self._naming,
                versioning=self._config.versioning.mode,
                metrics=self._metrics,
            )
            return seeder.seed()

    def create_triggers(self, provider: SQLiteConnectionProvider) -> list[str]:
        """Install the version trigger on every versioned table."""
        installed: list[str] = []
        with trace_span("generator.create_triggers"):
            with provider.transaction() as conn:
                for table in self._schema:
                    trigger = self._ddl.version_trigger(table)
                    if trigger is None:
                        continue
                    conn.execute(self._ddl.drop_trigger_statement(table))
                    conn.execute(trigger)
                    installed.append(self._ddl.trigger_name(table))
                    logger.debug("create_trigger", table=table.name, sql=trigger)
        return installed

    def write_constants(self, path: Path) -> Path:
        generator = ConstantsGenerator(self._naming, filename=self._config.database.path.name)
        written = generator.write(self._schema, path)
        logger.info("constants_written", path=written)
        return written
