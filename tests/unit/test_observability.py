"""Unit tests for logging and tracing helpers."""

from __future__ import annotations

from pathlib import Path

import pytest
from structlog.testing import capture_logs

from flybook_db.domain.value_objects import RowId
from flybook_db.infrastructure.config import ObservabilityConfig
from flybook_db.infrastructure.logging import (
    add_service_context,
    get_logger,
    render_paths,
    setup_logging,
)
from flybook_db.infrastructure.tracing import span_attributes, trace_span


@pytest.mark.unit
class TestLogging:
    """Tests for the structlog setup."""

    def test_render_paths(self) -> None:
        event = render_paths(None, "info", {"database": Path("data/flybook.db"), "rows": 3})

        assert event == {"database": "data/flybook.db", "rows": 3}

    def test_service_context_does_not_override(self) -> None:
        stamp = add_service_context("flybook_db")

        assert stamp(None, "info", {})["service"] == "flybook_db"
        assert stamp(None, "info", {"service": "other"})["service"] == "other"

    def test_logger_binds_table(self) -> None:
        setup_logging(ObservabilityConfig(log_level="DEBUG", log_format="console"))

        with capture_logs() as logs:
            get_logger(__name__, table="Users", database="flybook.db").info("commit_succeeded")

        assert logs[0]["event"] == "commit_succeeded"
        assert logs[0]["table"] == "Users"
        assert logs[0]["database"] == "flybook.db"

    def test_logger_without_context(self) -> None:
        setup_logging(ObservabilityConfig(log_level="DEBUG", log_format="json"))

        with capture_logs() as logs:
            get_logger(__name__).warning("schema_diagnostic", column="KEY")

        assert "table" not in logs[0]
        assert logs[0]["log_level"] == "warning"


@pytest.mark.unit
class TestTracing:
    """Tests for span attribute handling."""

    def test_span_attributes_coerced(self) -> None:
        attributes = span_attributes(
            {"database": Path("flybook.db"), "key": RowId("andkon"), "inserts": 2, "user": None}
        )

        assert attributes == {
            "db.system": "sqlite",
            "database": "flybook.db",
            "key": "RowId('andkon')",
            "inserts": 2,
        }

    def test_trace_span_without_provider(self) -> None:
        with trace_span("row_buffer.commit", {"table": "Users"}) as span:
            assert span is not None

    def test_trace_span_propagates_errors(self) -> None:
        with pytest.raises(RuntimeError):
            with trace_span("generator.run"):
                raise RuntimeError("boom")
