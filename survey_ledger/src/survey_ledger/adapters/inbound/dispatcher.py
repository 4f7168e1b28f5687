"""Operation dispatcher for the survey ledger.

Maps an operation name and a list of string arguments onto the ledger
service, the way a ledger host invokes its contract:

    invoke("init", ["100"])                       reset store, write probe
    invoke("write", [key, value])                 raw overwrite
    invoke("read", [key])                         raw read
    invoke("init_survey", [id, survey, subject,   create and index a record
                           score, feedback, date])
    invoke("delete", [id])                        delete and de-index
    query("read", [key])                          read-only entry point

``init_marble`` is accepted as an alias of ``init_survey`` and ``run`` as
the legacy name of ``invoke``. Every call runs inside one substrate
transaction, is traced, timed and counted.
"""

from __future__ import annotations

import time
from typing import Callable, Sequence

import structlog

from survey_ledger.domain.errors import LedgerError, UnknownOperationError
from survey_ledger.domain.services import require_arity, require_utf8, validate_init_args
from survey_ledger.domain.value_objects import RecordId
from survey_ledger.infrastructure.metrics import MetricsRegistry, get_metrics
from survey_ledger.infrastructure.logging import bound_operation
from survey_ledger.infrastructure.tracing import operation_span
from survey_ledger.ports.inbound import SurveyLedgerPort

logger = structlog.get_logger(__name__)

Handler = Callable[[Sequence[str]], bytes]


class OperationDispatcher:
    """Route named operations to the survey ledger."""

    def __init__(
        self,
        ledger: SurveyLedgerPort,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            ledger: The ledger service operations are routed to.
            metrics: Metrics registry (global registry if None).
        """
        self._ledger = ledger
        self._metrics = metrics or get_metrics()
        self._invoke_handlers: dict[str, Handler] = {
            "init": self._init,
            "write": self._write,
            "read": self._read,
            "init_survey": self._create,
            "init_marble": self._create,
            "delete": self._delete,
        }
        self._query_handlers: dict[str, Handler] = {
            "read": self._read,
        }

    @property
    def ledger(self) -> SurveyLedgerPort:
        """The ledger service behind this dispatcher."""
        return self._ledger

    def invoke(self, function: str, args: Sequence[str]) -> bytes:
        """Run a state-changing (or reading) operation.

        Returns:
            The read value for ``read``, ``b""`` for every other operation.

        Raises:
            UnknownOperationError: If ``function`` is not an invoke operation.
            LedgerError: Whatever the operation itself raises.
        """
        logger.info("invoke_running", function=function)
        return self._dispatch(self._invoke_handlers, "invocation", function, args)

    def query(self, function: str, args: Sequence[str]) -> bytes:
        """Run a read-only operation. Only ``read`` is accepted."""
        logger.info("query_running", function=function)
        return self._dispatch(self._query_handlers, "query", function, args)

    def run(self, function: str, args: Sequence[str]) -> bytes:
        """Legacy entry point, forwarded to ``invoke``."""
        logger.info("run_running", function=function)
        return self.invoke(function, args)

    def _dispatch(
        self,
        handlers: dict[str, Handler],
        entry_point: str,
        function: str,
        args: Sequence[str],
    ) -> bytes:
        handler = handlers.get(function)
        if handler is None:
            logger.warning("unknown_function", function=function, entry_point=entry_point)
            self._metrics.operations_total.labels(
                operation="unknown", status="UnknownOperationError"
            ).inc()
            raise UnknownOperationError(function, entry_point)

        args = list(args)
        start = time.perf_counter()
        status = "success"
        with bound_operation(function, entry_point), operation_span(
            function, entry_point, len(args)
        ):
            try:
                with self._ledger.transaction():
                    return handler(args)
            except LedgerError as e:
                status = type(e).__name__
                logger.info("operation_failed", error=str(e), kind=status)
                raise
            finally:
                self._metrics.operations_total.labels(operation=function, status=status).inc()
                self._metrics.operation_latency_seconds.labels(operation=function).observe(
                    time.perf_counter() - start
                )

    def _init(self, args: Sequence[str]) -> bytes:
        self._ledger.initialize(validate_init_args(args))
        return b""

    def _write(self, args: Sequence[str]) -> bytes:
        require_arity(args, 2, "Expecting 2. key of the variable and value to set")
        require_utf8(args, ("key", "value"))
        self._ledger.write_raw(args[0], args[1].encode("utf-8"))
        return b""

    def _read(self, args: Sequence[str]) -> bytes:
        require_arity(args, 1, "Expecting key of the var to query")
        require_utf8(args, ("key",))
        return self._ledger.read(args[0])

    def _create(self, args: Sequence[str]) -> bytes:
        self._ledger.create_record(args)
        return b""

    def _delete(self, args: Sequence[str]) -> bytes:
        require_arity(args, 1, "Expecting 1")
        require_utf8(args, ("id",))
        self._ledger.delete_record(RecordId(args[0]))
        return b""
