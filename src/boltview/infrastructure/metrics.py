"""Prometheus metrics for boltview.

boltview runs one command per process, so metrics are not scraped over
HTTP. They are written in the text exposition format to a file picked up
by the node exporter textfile collector.
"""

from __future__ import annotations

from pathlib import Path

from prometheus_client import (
    Counter,
    Histogram,
    Info,
    REGISTRY,
    CollectorRegistry,
    write_to_textfile,
)


class MetricsRegistry:
    """Registry of all boltview metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Command metrics
        self.commands_total = Counter(
            "boltview_commands_total",
            "Total number of commands executed",
            ["command", "status"],  # status: success, error
            registry=self._registry,
        )

        self.command_duration_seconds = Histogram(
            "boltview_command_duration_seconds",
            "Command duration in seconds",
            ["command"],
            buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
            registry=self._registry,
        )

        # Transaction metrics
        self.transactions_total = Counter(
            "boltview_transactions_total",
            "Total number of engine transactions",
            ["mode", "status"],  # mode: read, write; status: commit, abort
            registry=self._registry,
        )

        # Mutation metrics
        self.keys_written_total = Counter(
            "boltview_keys_written_total",
            "Total keys inserted or overwritten",
            registry=self._registry,
        )

        self.keys_deleted_total = Counter(
            "boltview_keys_deleted_total",
            "Total keys removed",
            registry=self._registry,
        )

        self.info = Info(
            "boltview",
            "boltview build information",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        """The collector registry the metrics are registered with."""
        return self._registry

    def export(self, path: str | Path) -> None:
        """Write all metrics to ``path`` in Prometheus text format.

        The file is replaced atomically.
        """
        write_to_textfile(str(path), self._registry)


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up the global metrics registry.

    Args:
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    from boltview import __version__
    _metrics.info.info({
        "version": __version__,
    })

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
