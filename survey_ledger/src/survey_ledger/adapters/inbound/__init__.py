"""Inbound adapters - entry points into the survey ledger.

Inbound adapters translate external calls (named operations, HTTP
requests) into ledger service calls.
"""

from survey_ledger.adapters.inbound.dispatcher import OperationDispatcher
from survey_ledger.adapters.inbound.rest_api import create_app, run_server

__all__ = ["OperationDispatcher", "create_app", "run_server"]
