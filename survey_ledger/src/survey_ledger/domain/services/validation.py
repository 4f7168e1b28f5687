"""Argument validation for ledger operations.

Validation runs before any ledger read or write, so a rejected call never
leaves a trace in the substrate. Checks are made on the raw strings
exactly as received: nothing is trimmed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence

from survey_ledger.domain.errors import ValidationError
from survey_ledger.domain.value_objects import RECORD_FIELD_COUNT, RecordId

RECORD_FIELD_NAMES: tuple[str, ...] = (
    "id",
    "surveyId",
    "subjectId",
    "score",
    "feedback",
    "submittedDate",
)

_ORDINALS = ("1st", "2nd", "3rd", "4th", "5th", "6th")

# optional sign then ASCII digits, nothing else
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


@dataclass(frozen=True)
class RecordArgs:
    """Validated, not yet normalized, record creation arguments."""

    record_id: RecordId
    survey_id: str
    subject_id: str
    score: int
    feedback: str
    submitted_date: str


def parse_integer(value: str) -> int | None:
    """Parse a signed base-10 integer, or return None.

    Accepts the same inputs as a strict ``atoi``: no surrounding
    whitespace, no underscores, no decimal point, 64-bit range.
    """
    if not _INTEGER_RE.fullmatch(value):
        return None
    number = int(value)
    if number < _INT64_MIN or number > _INT64_MAX:
        return None
    return number


def _is_utf8(value: str) -> bool:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def require_utf8(args: Sequence[str], names: Sequence[str]) -> None:
    """Reject arguments that cannot be stored as UTF-8 (lone surrogates).

    Args:
        args: Positional arguments, already arity-checked.
        names: Field name reported for each position.
    """
    for ordinal, name, value in zip(_ORDINALS, names, args):
        if not _is_utf8(value):
            raise ValidationError(f"{ordinal} argument must be valid UTF-8 text", field=name)


def require_arity(args: Sequence[str], expected: int, message: str) -> None:
    """Reject an argument list whose length is not exactly ``expected``."""
    if len(args) != expected:
        raise ValidationError(f"Incorrect number of arguments. {message}")


def validate_record_args(args: Sequence[str]) -> RecordArgs:
    """Validate the six positional fields of record creation.

    Args:
        args: id, surveyId, subjectId, score, feedback, submittedDate

    Returns:
        The fields with the score parsed.

    Raises:
        ValidationError: On wrong arity, an empty or non-UTF-8 field, or a
            non-numeric score.
    """
    require_arity(args, RECORD_FIELD_COUNT, f"Expecting {RECORD_FIELD_COUNT}")

    for ordinal, name, value in zip(_ORDINALS, RECORD_FIELD_NAMES, args):
        if len(value) <= 0:
            raise ValidationError(f"{ordinal} argument must be a non-empty string", field=name)
    require_utf8(args, RECORD_FIELD_NAMES)

    score = parse_integer(args[3])
    if score is None:
        raise ValidationError("4th argument must be a numeric string", field="score")

    return RecordArgs(
        record_id=RecordId(args[0]),
        survey_id=args[1],
        subject_id=args[2],
        score=score,
        feedback=args[4],
        submitted_date=args[5],
    )


def validate_init_args(args: Sequence[str]) -> int:
    """Validate the single integer argument of store initialization."""
    require_arity(args, 1, "Expecting 1")
    value = parse_integer(args[0])
    if value is None:
        raise ValidationError("Expecting integer value for asset holding", field="value")
    return value
