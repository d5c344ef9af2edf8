"""Infrastructure layer - cross-cutting concerns."""

from boltview.infrastructure.config import Config, get_config
from boltview.infrastructure.logging import setup_logging, get_logger
from boltview.infrastructure.metrics import setup_metrics, get_metrics, MetricsRegistry
from boltview.infrastructure.tracing import (
    command_span,
    get_tracer,
    setup_tracing,
    trace_span,
    transaction_span,
)

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
    "command_span",
    "transaction_span",
]
