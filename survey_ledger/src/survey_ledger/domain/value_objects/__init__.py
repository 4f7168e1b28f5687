"""Value objects for the survey ledger domain.

Exports:
    - RecordId: Type-safe record identifier
    - DEFAULT_INDEX_KEY, DEFAULT_PROBE_KEY: Well-known ledger keys
    - RECORD_FIELD_COUNT: Arity of record creation
"""

from survey_ledger.domain.value_objects.identifiers import (
    DEFAULT_INDEX_KEY,
    DEFAULT_PROBE_KEY,
    RECORD_FIELD_COUNT,
    RecordId,
)

__all__ = [
    "RecordId",
    "DEFAULT_INDEX_KEY",
    "DEFAULT_PROBE_KEY",
    "RECORD_FIELD_COUNT",
]
