"""Ports layer - interfaces for adapters.

Ports define contracts that adapters implement:
- Inbound ports: interfaces for external callers (dispatcher, REST API)
- Outbound ports: interfaces for external dependencies (ledger substrate)
"""

from survey_ledger.ports.inbound import SurveyLedgerPort
from survey_ledger.ports.outbound import LedgerStatePort

__all__ = [
    "SurveyLedgerPort",
    "LedgerStatePort",
]
