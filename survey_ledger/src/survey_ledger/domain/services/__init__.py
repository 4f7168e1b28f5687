"""Domain services for the survey ledger.

Exports:
    - record_codec: encode/decode of records and the index
    - validation: argument checks run before any mutation
    - IndexStore: the single-entry record index
    - RecordStore: per-record entries kept in step with the index
"""

from survey_ledger.domain.services.index_store import IndexStore
from survey_ledger.domain.services.record_codec import (
    decode_index,
    decode_record,
    encode_index,
    encode_record,
)
from survey_ledger.domain.services.record_store import RecordStore
from survey_ledger.domain.services.validation import (
    RecordArgs,
    parse_integer,
    require_arity,
    require_utf8,
    validate_init_args,
    validate_record_args,
)

__all__ = [
    "IndexStore",
    "RecordStore",
    "RecordArgs",
    "encode_record",
    "decode_record",
    "encode_index",
    "decode_index",
    "parse_integer",
    "require_arity",
    "require_utf8",
    "validate_init_args",
    "validate_record_args",
]
