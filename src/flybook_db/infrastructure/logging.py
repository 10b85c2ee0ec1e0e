"""Structured logging for the Flybook data layer.

Events are keyword-only and name the table or database they concern:

    log = get_logger(__name__, table="Users")
    log.info("commit_succeeded", inserts=1, updates=0, deletes=0)

Paths may be passed as-is; they are rendered as strings.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from flybook_db.infrastructure.config import ObservabilityConfig


def add_service_context(service: str) -> Processor:
    """Build a processor stamping every event with the service name."""

    def processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service)
        return event_dict

    return processor


def render_paths(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Render path-like values (database files, constants modules) as strings."""
    for key, value in event_dict.items():
        if isinstance(value, os.PathLike):
            event_dict[key] = os.fspath(value)
    return event_dict


def setup_logging(observability: ObservabilityConfig | None = None) -> None:
    """Configure structlog from the observability settings.

    Events are written to stderr.
    """
    observability = observability or ObservabilityConfig()
    level = logging.getLevelName(observability.log_level)

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        add_service_context(observability.otel_service_name),
        render_paths,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]
    if observability.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(
    name: str | None = None,
    *,
    table: str | None = None,
    **context: Any,
) -> structlog.BoundLogger:
    """Get a logger, optionally bound to a table and extra context."""
    logger = structlog.get_logger(name)
    if table is not None:
        context["table"] = table
    return logger.bind(**context) if context else logger
