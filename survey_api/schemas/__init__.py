"""Pydantic schemas for request and response bodies.

All schemas speak camelCase JSON; see ``survey_api.schemas.base``.
"""

from survey_api.schemas.auth import TokenClaims, UserSummary
from survey_api.schemas.base import CamelModel, MessageResponse
from survey_api.schemas.company import CompanyDetail, CompanyListItem, CompanyOut
from survey_api.schemas.response import (
    ActivityOut,
    ResponseOut,
    ResponseSubmit,
    SurveyStatistics,
    parse_answer_value,
)
from survey_api.schemas.survey import QuestionOut, SurveyDetail, SurveyListItem

__all__ = [
    "CamelModel",
    "MessageResponse",
    "TokenClaims",
    "UserSummary",
    "CompanyOut",
    "CompanyListItem",
    "CompanyDetail",
    "SurveyListItem",
    "SurveyDetail",
    "QuestionOut",
    "ResponseSubmit",
    "ResponseOut",
    "SurveyStatistics",
    "ActivityOut",
    "parse_answer_value",
]
