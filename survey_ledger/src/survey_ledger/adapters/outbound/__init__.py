"""Outbound adapters - implementations for external dependencies.

Outbound adapters implement the ledger substrate interface.
"""

from survey_ledger.adapters.outbound.file_ledger import FileLedgerState
from survey_ledger.adapters.outbound.memory_ledger import InMemoryLedgerState

__all__ = ["FileLedgerState", "InMemoryLedgerState"]
