"""OpenTelemetry tracing for ledger operations.

Each dispatched operation becomes one span named ``ledger.<function>``.
Failures raised as ``LedgerError`` mark the span as errored and carry the
error class, so rejected creates and storage faults can be told apart in
a trace view without reading logs.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import Status, StatusCode

from survey_ledger.domain.errors import LedgerError

TRACER_NAME = "survey_ledger"

_tracer: trace.Tracer | None = None


def _build_provider(
    service_name: str, otlp_endpoint: str | None, console_export: bool
) -> TracerProvider:
    from survey_ledger import __version__

    provider = TracerProvider(
        resource=Resource.create({"service.name": service_name, "service.version": __version__})
    )
    exporters = []
    if otlp_endpoint:
        exporters.append(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
    if console_export:
        exporters.append(ConsoleSpanExporter())
    for exporter in exporters:
        provider.add_span_processor(BatchSpanProcessor(exporter))
    return provider


def setup_tracing(
    service_name: str = TRACER_NAME,
    otlp_endpoint: str | None = None,
    console_export: bool = False,
) -> trace.Tracer:
    """
    Install a tracer provider and return the ledger tracer.

    Without an endpoint and without console export, spans are still created
    (so attributes can be inspected in tests) but nothing is exported.

    Args:
        service_name: ``service.name`` resource attribute
        otlp_endpoint: OTLP gRPC collector endpoint, e.g. "http://localhost:4317"
        console_export: Also print finished spans to stdout

    Returns:
        The tracer used for ledger operations
    """
    global _tracer
    trace.set_tracer_provider(_build_provider(service_name, otlp_endpoint, console_export))
    _tracer = trace.get_tracer(TRACER_NAME)
    return _tracer


def get_tracer() -> trace.Tracer:
    """Return the ledger tracer, falling back to the global provider."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(TRACER_NAME)
    return _tracer


@contextmanager
def operation_span(function: str, entry_point: str, arg_count: int) -> Iterator[trace.Span]:
    """Span around one dispatched ledger operation.

    Args:
        function: Operation name, e.g. "init_survey"
        entry_point: "invocation" or "query"
        arg_count: Number of positional arguments (values are not recorded)

    Yields:
        The active span
    """
    with get_tracer().start_as_current_span(
        f"ledger.{function}",
        attributes={
            "ledger.operation": function,
            "ledger.entry_point": entry_point,
            "ledger.args": arg_count,
        },
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            yield span
        except LedgerError as e:
            span.set_attribute("ledger.error", type(e).__name__)
            span.set_status(Status(StatusCode.ERROR, str(e)))
            raise
