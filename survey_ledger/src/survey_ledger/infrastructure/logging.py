"""Structured logging for the survey ledger.

Modules log through ``structlog.get_logger(__name__)`` with event-style
names (``record_created``, ``index_reset``). While an operation is being
dispatched its name is bound into the context, so store-level entries
such as ``orphan_record_left_unindexed`` say which call produced them.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

SERVICE_NAME = "survey_ledger"

_RENDERERS: dict[str, Processor] = {
    "json": structlog.processors.JSONRenderer(),
    "console": structlog.dev.ConsoleRenderer(colors=True),
}


def add_service_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Tag every entry with the service name."""
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def setup_logging(level: str = "INFO", log_format: str = "json") -> structlog.BoundLogger:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_format: 'json' for one object per line, 'console' for humans

    Returns:
        A logger bound to the service name
    """
    numeric_level = getattr(logging, level.upper())
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            add_service_context,
            _RENDERERS[log_format],
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger(SERVICE_NAME)


@contextmanager
def bound_operation(function: str, entry_point: str, **context: Any) -> Iterator[None]:
    """Bind the dispatched operation into every log entry made inside."""
    with structlog.contextvars.bound_contextvars(
        operation=function, entry_point=entry_point, **context
    ):
        yield
