"""Outbound ports - interfaces for external dependencies.

The survey ledger depends on a single external system: the key/value
ledger substrate.
"""

from survey_ledger.ports.outbound.ledger_state import LedgerStatePort

__all__ = ["LedgerStatePort"]
