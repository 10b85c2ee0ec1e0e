"""Command line entry point of the database generator.

Settings come from ``FLYBOOK_DB_*`` environment variables; command line
flags override them for a single run.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from flybook_db.application.generator import DatabaseGenerator
from flybook_db.domain.entities import SchemaValidationError
from flybook_db.infrastructure.config import Config
from flybook_db.infrastructure.logging import get_logger, setup_logging
from flybook_db.infrastructure.metrics import setup_metrics
from flybook_db.infrastructure.tracing import setup_tracing
from flybook_db.ports.outbound.connection_provider import StorageError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_parser() -> argparse.ArgumentParser:
    """Build the generator CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="flybook-db-generate",
        description="Create, seed and instrument a Flybook SQLite database",
    )
    parser.add_argument("--database", type=Path, help="SQLite database file to (re)create")
    parser.add_argument(
        "--constants-out", type=Path, help="Output path of the generated constants module"
    )
    parser.add_argument(
        "--no-seed", action="store_true", help="Create the schema without sample data"
    )
    parser.add_argument("--random-seed", type=int, help="Seed for sample data generation")
    parser.add_argument(
        "--versioning",
        choices=("trigger", "explicit"),
        help="How row versions are incremented on update",
    )
    parser.add_argument("--log-level", choices=LOG_LEVELS, help="Log level")
    parser.add_argument("--log-format", choices=("json", "console"), help="Log format")
    return parser


def build_config(args: argparse.Namespace) -> Config:
    """Apply command line overrides on top of the environment configuration."""
    config = Config()
    if args.database is not None:
        config.database = config.database.model_copy(update={"path": args.database})
    if args.constants_out is not None:
        config.generator = config.generator.model_copy(
            update={"constants_path": args.constants_out}
        )
    if args.no_seed:
        config.generator = config.generator.model_copy(update={"populate": False})
    if args.random_seed is not None:
        config.generator = config.generator.model_copy(update={"random_seed": args.random_seed})
    if args.versioning is not None:
        config.versioning = config.versioning.model_copy(update={"mode": args.versioning})
    if args.log_level is not None:
        config.observability = config.observability.model_copy(
            update={"log_level": args.log_level}
        )
    if args.log_format is not None:
        config.observability = config.observability.model_copy(
            update={"log_format": args.log_format}
        )
    config.ensure_directories()
    return config


def main(argv: Sequence[str] | None = None) -> int:
    """Run the generator.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code: 0 on success, 1 on schema or storage failure.
    """
    args = build_parser().parse_args(argv)
    config = build_config(args)

    observability = config.observability
    setup_logging(observability)
    if observability.otel_endpoint:
        setup_tracing(observability)
    if observability.metrics_port is not None:
        setup_metrics(observability.metrics_port)

    logger = get_logger(__name__)
    try:
        result = DatabaseGenerator(config).run()
    except SchemaValidationError as e:
        logger.error("schema_invalid", error=str(e))
        return 1
    except StorageError as e:
        logger.error("storage_failed", error=str(e), error_type=type(e).__name__)
        return 1

    for diagnostic in result.diagnostics:
        logger.warning("schema_diagnostic", column=diagnostic.column, error=str(diagnostic))
    return 0
