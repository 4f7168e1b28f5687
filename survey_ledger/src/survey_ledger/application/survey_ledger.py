"""SurveyLedger application service.

This is the main entry point for the survey ledger, composing the record
store and the index store over one injected substrate and providing a
unified interface to the dispatcher and the REST adapter.

Usage:
    from survey_ledger.adapters.outbound import InMemoryLedgerState
    from survey_ledger.application import SurveyLedger

    ledger = SurveyLedger(InMemoryLedgerState())
    ledger.initialize(100)
    ledger.create_record(["m1", "SurveyA", "cust1", "7", "great", "2024-01-01"])
    ledger.list_record_ids()  # ["m1"]
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Sequence

import structlog

from survey_ledger.domain.entities import SurveyRecord
from survey_ledger.domain.errors import DuplicateError, NotFoundError, StorageError
from survey_ledger.domain.services import IndexStore, RecordStore, decode_record
from survey_ledger.domain.value_objects import DEFAULT_INDEX_KEY, DEFAULT_PROBE_KEY, RecordId
from survey_ledger.infrastructure.metrics import MetricsRegistry, get_metrics
from survey_ledger.ports.inbound import ReconcileReport
from survey_ledger.ports.outbound import LedgerStatePort

logger = structlog.get_logger(__name__)


class SurveyLedger:
    """Survey record ledger with a maintained id index.

    The service holds no data of its own: every call reads what it needs
    from the substrate and writes its changes straight back.

    Attributes:
        index_key: Key of the index entry
        probe_key: Key written by ``initialize``
    """

    def __init__(
        self,
        state: LedgerStatePort,
        index_key: str = DEFAULT_INDEX_KEY,
        probe_key: str = DEFAULT_PROBE_KEY,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the ledger service.

        Args:
            state: Ledger substrate
            index_key: Key of the index entry
            probe_key: Key written by ``initialize``
            metrics: Metrics registry (global registry if None)
        """
        self._state = state
        self._index = IndexStore(state, index_key)
        self._records = RecordStore(state, self._index)
        self._probe_key = probe_key
        self._metrics = metrics or get_metrics()

    @property
    def index_key(self) -> str:
        """Key of the index entry."""
        return self._index.index_key

    @property
    def probe_key(self) -> str:
        """Key written by ``initialize``."""
        return self._probe_key

    def transaction(self) -> AbstractContextManager[None]:
        """Serialize the enclosed operations through the substrate."""
        return self._state.transaction()

    def initialize(self, probe_value: int) -> None:
        """Write the probe value and reset the index to empty."""
        self._records.write_raw(self._probe_key, str(probe_value).encode("utf-8"))
        self._index.reset()
        logger.info("ledger_initialized", probe_key=self._probe_key, probe_value=probe_value)

    def write_raw(self, key: str, value: bytes) -> None:
        """Overwrite any key, bypassing validation and the index."""
        self._records.write_raw(key, value)

    def read(self, key: str) -> bytes:
        """Read the raw value of a key."""
        return self._records.read(key)

    def create_record(self, args: Sequence[str]) -> SurveyRecord:
        """Validate, store and index a new record."""
        try:
            record = self._records.create(args)
        except DuplicateError:
            self._metrics.duplicate_rejections_total.inc()
            raise
        except StorageError as e:
            if e.key == self.index_key:
                self._metrics.index_inconsistencies_total.labels(kind="orphan_record").inc()
            raise
        self._metrics.records_total.labels(action="created").inc()
        return record

    def delete_record(self, record_id: RecordId) -> None:
        """Delete a key and remove it from the index."""
        try:
            self._records.delete(record_id)
        except StorageError as e:
            if e.key == self.index_key:
                self._metrics.index_inconsistencies_total.labels(kind="dangling_id").inc()
            raise
        self._metrics.records_total.labels(action="deleted").inc()

    def get_record(self, record_id: RecordId) -> SurveyRecord:
        """Read and decode one record."""
        return self._records.get(record_id)

    def list_record_ids(self) -> list[RecordId]:
        """Return the index in insertion order."""
        record_ids = self._index.load()
        self._metrics.index_entries.set(len(record_ids))
        return record_ids

    def list_records(self) -> list[SurveyRecord]:
        """Return every indexed record in index order.

        Ids whose record is gone or unreadable are skipped and logged.
        """
        records = []
        for record_id in self.list_record_ids():
            try:
                records.append(self._records.get(record_id))
            except NotFoundError:
                logger.warning("dangling_index_entry", record_id=record_id)
        return records

    def reconcile_index(self) -> ReconcileReport:
        """Rebuild the index from a full scan of the substrate.

        A key belongs in the index when its value decodes to a record whose
        id equals the key. Surviving ids keep their position; ids found only
        by the scan are appended in key order. Duplicate entries collapse to
        their first occurrence.

        Returns:
            The written index and the ids added to and removed from it.
        """
        try:
            keys = self._state.keys()
        except OSError as e:
            raise StorageError(f"Failed to list ledger keys: {e}", key="*") from e

        live: set[str] = set()
        for key in keys:
            if key == self.index_key:
                continue
            if decode_record(self._records.read(key)).is_record_for(key):
                live.add(key)

        current = self._index.load()
        rebuilt: list[RecordId] = []
        removed: list[RecordId] = []
        for record_id in current:
            if record_id in live and record_id not in rebuilt:
                rebuilt.append(record_id)
            else:
                removed.append(record_id)
        added = sorted(live.difference(rebuilt))
        rebuilt.extend(added)

        self._index.save(rebuilt)
        self._metrics.reconciliations_total.inc()
        self._metrics.index_entries.set(len(rebuilt))
        logger.info(
            "index_reconciled",
            size=len(rebuilt),
            added=len(added),
            removed=len(removed),
        )
        return ReconcileReport(index=rebuilt, added=added, removed=removed)
