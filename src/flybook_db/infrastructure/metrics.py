"""Prometheus metrics for the Flybook data layer."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)


class MetricsRegistry:
    """Registry of all data layer metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Row buffer commit metrics
        self.commits_total = Counter(
            "flybook_commits_total",
            "Total number of row buffer commits",
            ["table", "status"],  # success, conflict, error
            registry=self._registry,
        )

        self.rollbacks_total = Counter(
            "flybook_rollbacks_total",
            "Total number of row buffer rollbacks",
            ["table"],
            registry=self._registry,
        )

        self.optimistic_lock_conflicts_total = Counter(
            "flybook_optimistic_lock_conflicts_total",
            "Conditional writes that found a different stored version",
            ["table"],
            registry=self._registry,
        )

        self.commit_latency_seconds = Histogram(
            "flybook_commit_latency_seconds",
            "Commit latency in seconds",
            ["table"],
            buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
            registry=self._registry,
        )

        self.pending_changes = Gauge(
            "flybook_pending_changes",
            "Uncommitted row changes held by row buffers",
            ["table"],
            registry=self._registry,
        )

        # Statement metrics
        self.statements_total = Counter(
            "flybook_statements_total",
            "Total number of statements executed",
            ["statement_type"],  # insert, update, delete, select, ddl
            registry=self._registry,
        )

        self.info = Info(
            "flybook_db",
            "Flybook data layer information",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 8001, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up Prometheus metrics server.

    Args:
        port: Port for the metrics HTTP server
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    from flybook_db import __version__
    _metrics.info.info({
        "version": __version__,
    })

    start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
