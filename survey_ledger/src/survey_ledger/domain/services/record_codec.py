"""Byte encoding for survey records and the record index.

Records are stored as compact JSON objects with a fixed key order:

    {"id":"m1","surveyId":"surveya","subjectId":"cust1","score":7,
     "feedback":"great","submittedDate":"2024-01-01"}

The index is a JSON array of record ids. Decoding never raises: a missing,
empty or unreadable value decodes to the zero-value record or the empty
index, which is the state a fresh ledger starts from.
"""

from __future__ import annotations

import json
from typing import Any, Iterable

from survey_ledger.domain.entities import SurveyRecord

# entity attribute -> stored JSON key, in stored order
RECORD_FIELDS: dict[str, str] = {
    "id": "id",
    "survey_id": "surveyId",
    "subject_id": "subjectId",
    "score": "score",
    "feedback": "feedback",
    "submitted_date": "submittedDate",
}

_FIELD_TYPES: dict[str, type] = {
    "id": str,
    "survey_id": str,
    "subject_id": str,
    "score": int,
    "feedback": str,
    "submitted_date": str,
}


def _loads(data: bytes | None) -> Any:
    if not data:
        return None
    try:
        return json.loads(data)
    except (ValueError, UnicodeDecodeError):
        return None


def encode_record(record: SurveyRecord) -> bytes:
    """Serialize a record to its stored form."""
    payload = {key: getattr(record, attr) for attr, key in RECORD_FIELDS.items()}
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def decode_record(data: bytes | None) -> SurveyRecord:
    """Deserialize a stored record.

    Fields are read one by one; a field that is missing or has the wrong
    JSON type keeps its zero value. Anything that is not a JSON object
    decodes to ``SurveyRecord.absent()``.
    """
    payload = _loads(data)
    if not isinstance(payload, dict):
        return SurveyRecord.absent()

    values: dict[str, Any] = {}
    for attr, key in RECORD_FIELDS.items():
        value = payload.get(key)
        expected = _FIELD_TYPES[attr]
        # bool is an int subclass but never a valid score
        if isinstance(value, expected) and not isinstance(value, bool):
            values[attr] = value
    values.setdefault("id", "")
    return SurveyRecord(**values)


def encode_index(record_ids: Iterable[str]) -> bytes:
    """Serialize the ordered list of record ids."""
    return json.dumps(list(record_ids), separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def decode_index(data: bytes | None) -> list[str]:
    """Deserialize the record index; unreadable blobs decode to ``[]``."""
    payload = _loads(data)
    if not isinstance(payload, list) or not all(isinstance(item, str) for item in payload):
        return []
    return payload
