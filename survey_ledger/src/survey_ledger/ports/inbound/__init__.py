"""Inbound ports - API contracts for the survey ledger.

Inbound ports define the interface that the dispatcher and the REST
adapter use to drive record creation, raw reads and writes, deletion
and index maintenance.
"""

from __future__ import annotations

from abc import abstractmethod
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import Protocol, Sequence, runtime_checkable

from survey_ledger.domain.entities import SurveyRecord
from survey_ledger.domain.value_objects import RecordId
from survey_ledger.domain.errors import (
    DuplicateError,
    LedgerError,
    NotFoundError,
    StorageError,
    UnknownOperationError,
    ValidationError,
)


@dataclass
class ReconcileReport:
    """Outcome of rebuilding the index from a full key scan."""

    index: list[RecordId] = field(default_factory=list)
    added: list[RecordId] = field(default_factory=list)
    removed: list[RecordId] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        """Whether the rebuilt index differs from the stored one."""
        return bool(self.added or self.removed)


@runtime_checkable
class SurveyLedgerPort(Protocol):
    """Protocol for survey ledger operations.

    Every method is one top-level operation. Callers that need operations to
    be serialized against each other wrap them in ``transaction()``.
    """

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Serialize the enclosed operations against all others."""
        ...

    @abstractmethod
    def initialize(self, probe_value: int) -> None:
        """Write the probe value and reset the index to empty."""
        ...

    @abstractmethod
    def write_raw(self, key: str, value: bytes) -> None:
        """Overwrite any key, bypassing validation and the index."""
        ...

    @abstractmethod
    def read(self, key: str) -> bytes:
        """Read the raw value of a key.

        Raises:
            NotFoundError: If the key is absent.
            StorageError: If the substrate read fails.
        """
        ...

    @abstractmethod
    def create_record(self, args: Sequence[str]) -> SurveyRecord:
        """Validate, store and index a new record.

        Raises:
            ValidationError: If the arguments are malformed.
            DuplicateError: If a record already exists under the id.
            StorageError: If the substrate fails.
        """
        ...

    @abstractmethod
    def delete_record(self, record_id: RecordId) -> None:
        """Delete a key and remove it from the index."""
        ...

    @abstractmethod
    def get_record(self, record_id: RecordId) -> SurveyRecord:
        """Read and decode one record."""
        ...

    @abstractmethod
    def list_record_ids(self) -> list[RecordId]:
        """Return the index in insertion order."""
        ...

    @abstractmethod
    def list_records(self) -> list[SurveyRecord]:
        """Return every indexed record in index order."""
        ...

    @abstractmethod
    def reconcile_index(self) -> ReconcileReport:
        """Rebuild the index from the records actually stored."""
        ...


__all__ = [
    "SurveyLedgerPort",
    "ReconcileReport",
    "LedgerError",
    "ValidationError",
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    "UnknownOperationError",
]
