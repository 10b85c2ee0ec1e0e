"""Pytest configuration and fixtures for flybook_db tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest
from prometheus_client import CollectorRegistry

from flybook_db.adapters.outbound import SQLiteConnectionProvider
from flybook_db.domain.entities import TableSpec
from flybook_db.domain.services import DDLGenerator, RowBuffer, build_table
from flybook_db.infrastructure.config import (
    Config,
    DatabaseConfig,
    GeneratorConfig,
)
from flybook_db.infrastructure.metrics import MetricsRegistry

ACCOUNTS_DESCRIPTORS = [
    "id         INTEGER     PRIMARY KEY",
    "owner      TEXT",
    "balance    INTEGER",
    "optlock    INTEGER     @VERSION",
]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config(temp_dir: Path) -> Config:
    """Provide a test configuration writing into a temporary directory."""
    return Config(
        database=DatabaseConfig(path=temp_dir / "data" / "flybook.db"),
        generator=GeneratorConfig(constants_path=temp_dir / "out" / "db_constants.py"),
    )


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def provider(temp_dir: Path) -> Generator[SQLiteConnectionProvider, None, None]:
    """Provide a connection provider over an empty database file."""
    p = SQLiteConnectionProvider(temp_dir / "test.db", timeout_seconds=5.0)
    yield p
    p.close()


@pytest.fixture
def accounts() -> TableSpec:
    """The Accounts table: INTEGER key, owner, balance and optlock."""
    return build_table("Accounts", ACCOUNTS_DESCRIPTORS)


def _create_table(
    provider: SQLiteConnectionProvider, table: TableSpec, with_trigger: bool = True
) -> None:
    """Create a table (and its version trigger) through the DDL generator."""
    ddl = DDLGenerator()
    with provider.transaction() as conn:
        conn.execute(ddl.drop_statement(table))
        conn.execute(ddl.create_statement(table))
        trigger = ddl.version_trigger(table)
        if with_trigger and trigger is not None:
            conn.execute(trigger)


@pytest.fixture
def accounts_db(
    provider: SQLiteConnectionProvider, accounts: TableSpec
) -> SQLiteConnectionProvider:
    """Provider whose database holds an empty Accounts table with trigger."""
    _create_table(provider, accounts)
    return provider


@pytest.fixture
def make_buffer(
    accounts_db: SQLiteConnectionProvider,
    accounts: TableSpec,
    metrics_registry: MetricsRegistry,
):
    """Factory for Accounts row buffers sharing one database."""

    def factory(**kwargs) -> RowBuffer:
        kwargs.setdefault("metrics", metrics_registry)
        return RowBuffer(accounts, accounts_db, **kwargs)

    return factory


@pytest.fixture
def create_table():
    """Provide the table creation helper."""
    return _create_table


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")
