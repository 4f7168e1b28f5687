"""Infrastructure layer - cross-cutting concerns."""

from survey_ledger.infrastructure.config import Config, get_config
from survey_ledger.infrastructure.logging import setup_logging, bound_operation
from survey_ledger.infrastructure.metrics import setup_metrics, MetricsRegistry
from survey_ledger.infrastructure.tracing import setup_tracing, get_tracer, operation_span

__all__ = [
    "Config",
    "get_config",
    "setup_logging",
    "bound_operation",
    "setup_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "operation_span",
]
