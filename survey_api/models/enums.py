"""Enumerations shared by the ORM models, schemas and services."""

from enum import Enum


class UserRole(str, Enum):
    """Roles a user can hold, from most to least privileged."""
    SUPER_ADMIN = "super_admin"
    COMPANY_ADMIN = "company_admin"
    EDITOR = "editor"
    VIEWER = "viewer"


class SurveyStatus(str, Enum):
    """Lifecycle status of a survey."""
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class QuestionType(str, Enum):
    """Valid question types."""
    TEXT = "text"
    NUMBER = "number"
    SINGLE_CHOICE = "single_choice"
    MULTIPLE_CHOICE = "multiple_choice"
    RATING = "rating"
    DATE = "date"

    @property
    def has_options(self) -> bool:
        """Only choice questions carry options."""
        return self in (QuestionType.SINGLE_CHOICE, QuestionType.MULTIPLE_CHOICE)
