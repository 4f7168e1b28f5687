"""Record index kept in a single ledger entry.

The index is the ordered list of every live record id. It is stored as one
serialized blob under a well-known key and maintained by read-modify-write:
each operation loads the blob, changes a local copy and writes the whole
list back. Nothing is cached between calls.

The read-modify-write is not atomic on its own. Two mutations interleaved
inside one substrate transition can lose an update (both load the same
list, the second write wins). Callers serialize top-level operations with
``LedgerStatePort.transaction()``.
"""

from __future__ import annotations

import structlog

from survey_ledger.domain.errors import StorageError
from survey_ledger.domain.services.record_codec import decode_index, encode_index
from survey_ledger.domain.value_objects import DEFAULT_INDEX_KEY, RecordId
from survey_ledger.ports.outbound import LedgerStatePort

logger = structlog.get_logger(__name__)


class IndexStore:
    """Load, append to, remove from and reset the record index.

    Duplicate prevention is not done here: ``append`` trusts its caller to
    have rejected an existing id first.
    """

    def __init__(self, state: LedgerStatePort, index_key: str = DEFAULT_INDEX_KEY) -> None:
        """Initialize the index store.

        Args:
            state: Ledger substrate holding the index entry.
            index_key: Key of the index entry.
        """
        self._state = state
        self._index_key = index_key

    @property
    def index_key(self) -> str:
        """Key of the index entry."""
        return self._index_key

    def load(self) -> list[RecordId]:
        """Read the index. A missing or empty entry is an empty index."""
        try:
            data = self._state.get(self._index_key)
        except OSError as e:
            raise StorageError(
                f"Failed to get record index {self._index_key}: {e}", key=self._index_key
            ) from e
        return decode_index(data)

    def save(self, record_ids: list[RecordId]) -> None:
        """Replace the stored index with ``record_ids``."""
        try:
            self._state.put(self._index_key, encode_index(record_ids))
        except OSError as e:
            raise StorageError(
                f"Failed to write record index {self._index_key}: {e}", key=self._index_key
            ) from e

    def append(self, record_id: RecordId) -> list[RecordId]:
        """Add ``record_id`` at the end of the index.

        Returns:
            The index as written.
        """
        record_ids = self.load()
        record_ids.append(record_id)
        self.save(record_ids)
        logger.debug("index_appended", record_id=record_id, size=len(record_ids))
        return record_ids

    def remove(self, record_id: RecordId) -> bool:
        """Remove the first occurrence of ``record_id``.

        Only one entry is removed even if the id appears more than once.
        The index is written back whether or not the id was found.

        Returns:
            True if an entry was removed.
        """
        record_ids = self.load()
        removed = False
        for position, value in enumerate(record_ids):
            if value == record_id:
                del record_ids[position]
                removed = True
                break
        self.save(record_ids)
        logger.debug("index_removed", record_id=record_id, found=removed, size=len(record_ids))
        return removed

    def reset(self) -> None:
        """Write an empty index."""
        self.save([])
        logger.info("index_reset", index_key=self._index_key)
