"""Application layer - the survey ledger service."""

from survey_ledger.application.survey_ledger import SurveyLedger

__all__ = ["SurveyLedger"]
