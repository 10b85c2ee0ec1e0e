"""OpenTelemetry tracing for commits and generator steps.

Spans carry ``db.system = sqlite`` plus caller attributes. Without
``setup_tracing`` the global no-op tracer is used.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Any, Generator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.util.types import AttributeValue

from flybook_db.infrastructure.config import ObservabilityConfig

DB_SYSTEM = "sqlite"

_tracer: trace.Tracer | None = None


def setup_tracing(
    observability: ObservabilityConfig,
    console_export: bool = False,
) -> trace.Tracer:
    """
    Install a tracer provider exporting to the configured OTLP endpoint.

    Args:
        observability: Service name and collector endpoint.
        console_export: Also print finished spans (for debugging).

    Returns:
        The tracer used by ``trace_span``.
    """
    global _tracer

    from flybook_db import __version__

    resource = Resource.create(
        {
            "service.name": observability.otel_service_name,
            "service.version": __version__,
            "db.system": DB_SYSTEM,
        }
    )
    provider = TracerProvider(resource=resource)

    if observability.otel_endpoint:
        exporter = OTLPSpanExporter(endpoint=observability.otel_endpoint, insecure=True)
        provider.add_span_processor(BatchSpanProcessor(exporter))
    if console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer(observability.otel_service_name)
    return _tracer


def get_tracer() -> trace.Tracer:
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer("flybook_db")
    return _tracer


def span_attributes(attributes: dict[str, Any] | None) -> dict[str, AttributeValue]:
    """Coerce attributes to OpenTelemetry values.

    None values are dropped, paths become strings and anything else that
    is not a primitive is rendered with ``str``.
    """
    result: dict[str, AttributeValue] = {"db.system": DB_SYSTEM}
    for key, value in (attributes or {}).items():
        if value is None:
            continue
        if isinstance(value, os.PathLike):
            value = os.fspath(value)
        elif not isinstance(value, (str, bool, int, float)):
            value = str(value)
        result[key] = value
    return result


@contextmanager
def trace_span(
    name: str,
    attributes: dict[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """Run the block inside a span; exceptions are recorded on the span."""
    with get_tracer().start_as_current_span(name, attributes=span_attributes(attributes)) as span:
        yield span
