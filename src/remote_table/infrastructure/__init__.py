"""Infrastructure layer - cross-cutting concerns."""

from remote_table.infrastructure.config import (
    Config,
    ObservabilityConfig,
    RowStoreConfig,
    get_config,
)
from remote_table.infrastructure.logging import setup_logging, get_logger
from remote_table.infrastructure.metrics import setup_metrics, MetricsRegistry
from remote_table.infrastructure.tracing import setup_tracing, get_tracer, trace_span

__all__ = [
    "Config",
    "ObservabilityConfig",
    "RowStoreConfig",
    "get_config",
    "setup_logging",
    "get_logger",
    "setup_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "trace_span",
]
