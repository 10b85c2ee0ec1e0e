"""Infrastructure layer - cross-cutting concerns."""

from flybook_db.infrastructure.config import Config, get_config
from flybook_db.infrastructure.logging import setup_logging, get_logger
from flybook_db.infrastructure.metrics import setup_metrics, get_metrics, MetricsRegistry
from flybook_db.infrastructure.tracing import setup_tracing, get_tracer, trace_span

__all__ = [
    "Config",
    "get_config",
    "setup_logging",
    "get_logger",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "trace_span",
]
