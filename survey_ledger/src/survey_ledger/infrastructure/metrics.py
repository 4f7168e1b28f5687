"""Prometheus metrics for the survey ledger."""

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
    """Registry of all survey ledger metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        self.operations_total = Counter(
            "ledger_operations_total",
            "Total number of dispatched ledger operations",
            ["operation", "status"],  # status: success, error kind
            registry=self._registry,
        )

        self.operation_latency_seconds = Histogram(
            "ledger_operation_latency_seconds",
            "Ledger operation latency in seconds",
            ["operation"],
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
            registry=self._registry,
        )

        self.index_entries = Gauge(
            "ledger_index_entries",
            "Number of identifiers in the record index when last read in full",
            registry=self._registry,
        )

        self.records_total = Counter(
            "ledger_records_total",
            "Records created and deleted through the indexed path",
            ["action"],  # created, deleted
            registry=self._registry,
        )

        self.duplicate_rejections_total = Counter(
            "ledger_duplicate_rejections_total",
            "Create attempts rejected because the record already exists",
            registry=self._registry,
        )

        self.index_inconsistencies_total = Counter(
            "ledger_index_inconsistencies_total",
            "Record/index divergences left by a failed multi-step operation",
            ["kind"],  # orphan_record, dangling_id
            registry=self._registry,
        )

        self.reconciliations_total = Counter(
            "ledger_reconciliations_total",
            "Index reconciliation passes",
            registry=self._registry,
        )

        self.info = Info(
            "survey_ledger",
            "Survey ledger information",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        """The collector registry the metrics are registered in."""
        return self._registry


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 8007, metrics: MetricsRegistry | None = None) -> MetricsRegistry:
    """
    Publish the ledger metrics over HTTP.

    Args:
        port: Port for the metrics HTTP server
        metrics: Registry to export; the global one if None

    Returns:
        The exported metrics registry
    """
    global _metrics
    if metrics is not None:
        _metrics = metrics
    metrics = get_metrics()

    from survey_ledger import __version__
    metrics.info.info({"version": __version__})

    start_http_server(port, registry=metrics.registry)

    return metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
