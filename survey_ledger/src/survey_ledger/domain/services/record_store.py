"""Per-record ledger entries kept in step with the record index.

Create writes the record and then appends its id to the index; delete
removes the key and then removes the id from the index. Neither sequence
is rolled back if its second step fails:

- a failed append leaves an orphan record that the index does not list
- a failed removal leaves a dangling id whose record is gone

Both cases are logged and surfaced as ``StorageError``; the index can be
rebuilt afterwards with a reconciliation pass.
"""

from __future__ import annotations

from typing import Sequence

import structlog

from survey_ledger.domain.entities import SurveyRecord
from survey_ledger.domain.errors import (
    DuplicateError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from survey_ledger.domain.services.index_store import IndexStore
from survey_ledger.domain.services.record_codec import decode_record, encode_record
from survey_ledger.domain.services.validation import validate_record_args
from survey_ledger.domain.value_objects import RecordId
from survey_ledger.ports.outbound import LedgerStatePort

logger = structlog.get_logger(__name__)


class RecordStore:
    """Create, read, overwrite and delete ledger entries."""

    def __init__(self, state: LedgerStatePort, index: IndexStore) -> None:
        """Initialize the record store.

        Args:
            state: Ledger substrate holding the record entries.
            index: Index store kept in sync on create and delete.
        """
        self._state = state
        self._index = index

    def _get(self, key: str) -> bytes | None:
        try:
            return self._state.get(key)
        except OSError as e:
            raise StorageError(f"Failed to get state for {key}: {e}", key=key) from e

    def _put(self, key: str, value: bytes) -> None:
        try:
            self._state.put(key, value)
        except OSError as e:
            raise StorageError(f"Failed to put state for {key}: {e}", key=key) from e

    def create(self, args: Sequence[str]) -> SurveyRecord:
        """Create and index a new record.

        Args:
            args: id, surveyId, subjectId, score, feedback, submittedDate

        Returns:
            The record as stored (text fields lowercased).

        Raises:
            ValidationError: Malformed arguments, or an id equal to the index
                key; the ledger is not touched.
            DuplicateError: A record already exists under the id; nothing is written.
            StorageError: The substrate failed. If the index append failed,
                the record has already been written.
        """
        fields = validate_record_args(args)
        record_id = fields.record_id
        if record_id == self._index.index_key:
            raise ValidationError(
                f"1st argument must not be the index key {record_id}", field="id"
            )

        existing = decode_record(self._get(record_id))
        if existing.is_record_for(record_id):
            logger.info("record_already_exists", record_id=record_id)
            raise DuplicateError(record_id)

        record = SurveyRecord.new(
            record_id,
            fields.survey_id,
            fields.subject_id,
            fields.score,
            fields.feedback,
            fields.submitted_date,
        )
        self._put(record_id, encode_record(record))

        try:
            self._index.append(record_id)
        except StorageError:
            logger.warning("orphan_record_left_unindexed", record_id=record_id)
            raise

        logger.info("record_created", record_id=record_id)
        return record

    def read(self, key: str) -> bytes:
        """Read the raw value of any key.

        Raises:
            NotFoundError: If the key is absent.
            StorageError: If the substrate read fails.
        """
        value = self._get(key)
        if value is None:
            raise NotFoundError(key)
        return value

    def get(self, record_id: RecordId) -> SurveyRecord:
        """Read and decode the record stored under ``record_id``.

        Raises:
            NotFoundError: If no record with that id is stored.
        """
        record = decode_record(self.read(record_id))
        if not record.is_record_for(record_id):
            raise NotFoundError(record_id)
        return record

    def write_raw(self, key: str, value: bytes) -> None:
        """Overwrite ``key`` with ``value``; no validation, no indexing."""
        self._put(key, value)
        logger.debug("raw_value_written", key=key, size=len(value))

    def delete(self, record_id: RecordId) -> None:
        """Delete ``record_id`` and remove it from the index.

        Deleting an absent key is not an error, and the index removal runs
        whether or not the key existed.

        Raises:
            StorageError: The substrate failed. If the index removal failed,
                the key has already been deleted.
        """
        try:
            self._state.delete(record_id)
        except OSError as e:
            raise StorageError(
                f"Failed to delete state for {record_id}: {e}", key=record_id
            ) from e

        try:
            self._index.remove(record_id)
        except StorageError:
            logger.warning("dangling_id_left_in_index", record_id=record_id)
            raise

        logger.info("record_deleted", record_id=record_id)
