"""Database models and session management.

This package contains all SQLAlchemy ORM models and database utilities.
"""

from survey_api.models.database import Base, engine, SessionLocal, get_db
from survey_api.models.enums import QuestionType, SurveyStatus, UserRole
from survey_api.models.company import Company
from survey_api.models.user import User
from survey_api.models.survey import Survey, Question, QuestionOption
from survey_api.models.response import Response, Answer

__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "get_db",
    "QuestionType",
    "SurveyStatus",
    "UserRole",
    "Company",
    "User",
    "Survey",
    "Question",
    "QuestionOption",
    "Response",
    "Answer",
]
