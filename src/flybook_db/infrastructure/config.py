"""Configuration management for the Flybook data layer."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseModel):
    """SQLite database configuration."""

    path: Path = Field(default=Path("flybook.db"), description="SQLite database file")
    statement_timeout_seconds: float = Field(
        default=30.0, gt=0, description="Timeout applied to every connection-bound statement"
    )


class NamingConfig(BaseModel):
    """Prefixes applied to generated table and column names."""

    table_prefix: str = Field(default="", description="Prefix for table names")
    column_prefix: str = Field(default="c_", description="Prefix for column names")


class VersioningConfig(BaseModel):
    """Optimistic-lock version handling."""

    mode: Literal["trigger", "explicit"] = Field(
        default="trigger",
        description="'trigger' bumps versions in an AFTER UPDATE trigger, "
        "'explicit' bumps them inside the conditional UPDATE",
    )


class GeneratorConfig(BaseModel):
    """Database generator configuration."""

    constants_path: Path = Field(
        default=Path("db_constants.py"), description="Output path of the constants module"
    )
    random_seed: int = Field(default=0, description="Seed for sample data generation")
    populate: bool = Field(default=True, description="Seed the database with sample data")


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="flybook_db", description="Service name for tracing")
    metrics_port: int | None = Field(
        default=None, ge=1, le=65535, description="Prometheus metrics port (disabled if unset)"
    )


class Config(BaseSettings):
    """Main configuration for the Flybook data layer."""

    model_config = SettingsConfigDict(
        env_prefix="FLYBOOK_DB_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    naming: NamingConfig = Field(default_factory=NamingConfig)
    versioning: VersioningConfig = Field(default_factory=VersioningConfig)
    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    def ensure_directories(self) -> None:
        """Ensure the database directory exists."""
        self.database.path.parent.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    config = Config()
    config.ensure_directories()
    return config
