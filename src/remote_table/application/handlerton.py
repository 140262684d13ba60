"""Handlerton - plugin entry point for the remote table handler.

The host registers the plugin once, then asks it for a fresh handler
every time it opens a table handle. All handlers created by one
Handlerton share its connection manager and table-share registry; they
never share a connection.

Usage:
    from remote_table.application import Handlerton

    hton = Handlerton.init_plugin()
    handler = hton.create_handler("orders")
    handler.open(record_length=64)
    handler.write_row(row_bytes)
    handler.close()
"""

from __future__ import annotations

from remote_table.adapters.outbound import TcpConnectionManager
from remote_table.application.handler import RemoteTableHandler
from remote_table.application.table_share import TableShareRegistry
from remote_table.infrastructure.config import Config, get_config
from remote_table.infrastructure.logging import get_logger, setup_logging
from remote_table.infrastructure.metrics import MetricsRegistry, setup_metrics
from remote_table.infrastructure.tracing import setup_tracing
from remote_table.ports.outbound import ConnectionFactory

logger = get_logger(__name__)


class Handlerton:
    """Factory for table handlers bound to one configured row store."""

    def __init__(
        self,
        config: Config | None = None,
        metrics: MetricsRegistry | None = None,
        connections: ConnectionFactory | None = None,
    ) -> None:
        """Initialize the handlerton.

        Args:
            config: Configuration (default: global config).
            metrics: Optional metrics registry shared by all handlers.
            connections: Transport override; defaults to TCP against the
                configured row store endpoint.
        """
        self._config = config or get_config()
        self._metrics = metrics
        self._connections = connections or TcpConnectionManager(
            self._config.row_store.endpoint(), metrics
        )
        self._shares = TableShareRegistry()

    @classmethod
    def init_plugin(cls, config: Config | None = None) -> Handlerton:
        """Set up logging, tracing and metrics, then build the handlerton."""
        config = config or get_config()
        observability = config.observability

        setup_logging(level=observability.log_level, log_format=observability.log_format)

        if observability.otel_endpoint:
            setup_tracing(
                service_name=observability.otel_service_name,
                otlp_endpoint=observability.otel_endpoint,
            )

        metrics = None
        if observability.metrics_enabled:
            metrics = setup_metrics(port=observability.metrics_port)

        hton = cls(config=config, metrics=metrics)
        logger.info(
            "plugin_initialized",
            endpoint=str(hton.connections.endpoint),
            metrics_enabled=metrics is not None,
        )
        return hton

    @property
    def config(self) -> Config:
        return self._config

    @property
    def connections(self) -> ConnectionFactory:
        return self._connections

    @property
    def shares(self) -> TableShareRegistry:
        return self._shares

    def create_handler(self, table_name: str) -> RemoteTableHandler:
        """Create a handler for one table handle."""
        return RemoteTableHandler(
            table_name=table_name,
            connections=self._connections,
            shares=self._shares,
            metrics=self._metrics,
        )
