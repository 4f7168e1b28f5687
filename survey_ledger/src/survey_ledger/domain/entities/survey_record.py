"""Survey record entity.

A survey record is one scored response, keyed by a caller-supplied id.
Text fields other than the id are stored lowercased; the score is an
integer; the submitted date is kept as the caller wrote it (lowercased,
never parsed).
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SurveyRecord:
    """A survey response stored under its own ledger key.

    The zero value (empty strings, score 0) stands for "no record". Decoding
    a missing or unreadable ledger value yields it, so presence is decided
    by comparing ``id`` with the key that was read, never by decode failure.

    Example:
        >>> record = SurveyRecord.new("m1", "SurveyA", "Cust1", 7, "Great", "2024-01-01")
        >>> record.survey_id
        'surveya'
        >>> SurveyRecord.absent().is_record_for("m1")
        False
    """

    id: str
    survey_id: str = ""
    subject_id: str = ""
    score: int = 0
    feedback: str = ""
    submitted_date: str = ""

    @classmethod
    def new(
        cls,
        record_id: str,
        survey_id: str,
        subject_id: str,
        score: int,
        feedback: str,
        submitted_date: str,
    ) -> SurveyRecord:
        """Build a record with text fields normalized to lowercase.

        The id and the score are stored unmodified.
        """
        return cls(
            id=record_id,
            survey_id=survey_id.lower(),
            subject_id=subject_id.lower(),
            score=score,
            feedback=feedback.lower(),
            submitted_date=submitted_date.lower(),
        )

    @classmethod
    def absent(cls) -> SurveyRecord:
        """The zero-value record."""
        return cls(id="")

    def is_record_for(self, record_id: str) -> bool:
        """Check whether this decoded value is the record stored at ``record_id``."""
        return self.id == record_id
