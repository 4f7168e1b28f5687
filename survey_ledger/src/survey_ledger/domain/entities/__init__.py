"""Domain entities for the survey ledger."""

from survey_ledger.domain.entities.survey_record import SurveyRecord

__all__ = ["SurveyRecord"]
