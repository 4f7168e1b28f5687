"""Dependency injection container for the survey ledger."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import structlog
from opentelemetry import trace

from survey_ledger.adapters.inbound import OperationDispatcher, run_server
from survey_ledger.adapters.outbound import FileLedgerState, InMemoryLedgerState
from survey_ledger.application import SurveyLedger
from survey_ledger.infrastructure.config import Config, get_config
from survey_ledger.infrastructure.logging import setup_logging
from survey_ledger.infrastructure.metrics import MetricsRegistry, get_metrics, setup_metrics
from survey_ledger.infrastructure.tracing import setup_tracing
from survey_ledger.ports.outbound import LedgerStatePort


def create_state(config: Config) -> LedgerStatePort:
    """Build the substrate adapter selected by ``storage.backend``."""
    if config.storage.backend == "file":
        return FileLedgerState(config.storage.data_dir)
    return InMemoryLedgerState()


@dataclass
class Container:
    """Dependency injection container for survey ledger components."""

    config: Config
    logger: structlog.BoundLogger
    tracer: trace.Tracer
    metrics: MetricsRegistry
    state: LedgerStatePort
    ledger: SurveyLedger
    dispatcher: OperationDispatcher

    _instance: ClassVar[Container | None] = None

    @classmethod
    def create(
        cls,
        config: Config | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> Container:
        """Create and initialize the container with all dependencies."""
        if cls._instance is not None:
            return cls._instance

        config = config or get_config()
        observability = config.observability
        logger = setup_logging(observability.log_level, observability.log_format)
        tracer = setup_tracing(observability.otel_service_name, observability.otel_endpoint)
        metrics = metrics or get_metrics()

        state = create_state(config)
        ledger = SurveyLedger(
            state,
            index_key=config.ledger.index_key,
            probe_key=config.ledger.probe_key,
            metrics=metrics,
        )
        dispatcher = OperationDispatcher(ledger, metrics=metrics)

        cls._instance = cls(
            config=config,
            logger=logger,
            tracer=tracer,
            metrics=metrics,
            state=state,
            ledger=ledger,
            dispatcher=dispatcher,
        )

        logger.info(
            "survey_ledger_container_initialized",
            backend=config.storage.backend,
            index_key=config.ledger.index_key,
        )

        return cls._instance

    def serve(self) -> None:
        """Export metrics and serve the REST API until interrupted."""
        server = self.config.server
        setup_metrics(server.metrics_port, self.metrics)
        self.logger.info(
            "survey_ledger_serving",
            host=server.host,
            port=server.port,
            metrics_port=server.metrics_port,
        )
        run_server(self.dispatcher, host=server.host, port=server.port)

    @classmethod
    def get(cls) -> Container:
        """Get the singleton container instance."""
        if cls._instance is None:
            return cls.create()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the container (useful for testing)."""
        cls._instance = None


def get_container() -> Container:
    """Get the dependency injection container."""
    return Container.get()
