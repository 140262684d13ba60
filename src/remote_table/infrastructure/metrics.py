"""Prometheus metrics for the remote table handler."""

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
    """Registry of all remote table handler metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Connection metrics
        self.connections_opened_total = Counter(
            "remote_table_connections_opened_total",
            "Total connections opened to the row store",
            registry=self._registry,
        )

        self.connect_failures_total = Counter(
            "remote_table_connect_failures_total",
            "Total failed connection attempts",
            registry=self._registry,
        )

        self.connections_open = Gauge(
            "remote_table_connections_open",
            "Connections currently open to the row store",
            registry=self._registry,
        )

        # Request metrics
        self.request_latency_seconds = Histogram(
            "remote_table_request_latency_seconds",
            "Round-trip latency of one request frame in seconds",
            ["opcode"],  # write, next
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 5.0),
            registry=self._registry,
        )

        # Write path metrics
        self.inserts_total = Counter(
            "remote_table_inserts_total",
            "Total insert attempts",
            ["status"],  # success, rejected, error
            registry=self._registry,
        )

        # Scan path metrics
        self.scans_total = Counter(
            "remote_table_scans_total",
            "Total table scans",
            ["status"],  # exhausted, failed, abandoned
            registry=self._registry,
        )

        self.rows_scanned_total = Counter(
            "remote_table_rows_scanned_total",
            "Total rows received from scans",
            registry=self._registry,
        )

        # Handler info
        self.info = Info(
            "remote_table",
            "Remote table handler information",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        """Return the collector registry the metrics are registered with."""
        return self._registry


def setup_metrics(port: int = 8001, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up Prometheus metrics server.

    Args:
        port: Port for the metrics HTTP server
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    metrics = MetricsRegistry(registry)

    from remote_table import __version__
    metrics.info.info({
        "version": __version__,
    })

    start_http_server(port, registry=registry or REGISTRY)

    return metrics
