"""Typed failures raised by ledger operations.

Every error carries a human-readable message naming the offending key or
field. Validation and duplicate errors are always raised before the ledger
is touched; storage errors may follow a partial multi-step write.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for all survey ledger failures."""

    pass


class ValidationError(LedgerError):
    """Raised when operation arguments are malformed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class DuplicateError(LedgerError):
    """Raised when creating a record whose id is already present."""

    def __init__(self, record_id: str) -> None:
        super().__init__(f"Record already exists: {record_id}")
        self.key = record_id


class NotFoundError(LedgerError):
    """Raised when reading a key that is absent from the ledger."""

    def __init__(self, key: str) -> None:
        super().__init__(f"No state found for {key}")
        self.key = key


class StorageError(LedgerError):
    """Raised when the ledger substrate fails a get, put or delete."""

    def __init__(self, message: str, key: str) -> None:
        super().__init__(message)
        self.key = key


class UnknownOperationError(LedgerError):
    """Raised by the dispatcher for an unrecognized operation name."""

    def __init__(self, function: str, entry_point: str = "invocation") -> None:
        super().__init__(f"Received unknown function {entry_point}: {function}")
        self.function = function
