"""Pydantic schemas for surveys, questions and options.

Request schemas leave required fields optional where the service reports a
missing value with its own message; everything that can be checked
structurally (types, ranges, regex syntax) is checked here.
"""

import re
from datetime import datetime
from typing import Optional, Union

from pydantic import AliasChoices, Field, field_validator, model_validator

from survey_api.models.database import as_utc
from survey_api.models.enums import QuestionType, SurveyStatus
from survey_api.schemas.base import CamelModel


class ValidationRules(CamelModel):
    """Validation rules for answers to a question.

    Different question types use different fields:
    - text: min_length, max_length, pattern
    - number / rating: min, max
    """
    min_length: Optional[int] = Field(None, ge=0, description="Minimum text length")
    max_length: Optional[int] = Field(None, ge=1, description="Maximum text length")
    min: Optional[float] = Field(None, description="Minimum numeric value")
    max: Optional[float] = Field(None, description="Maximum numeric value")
    pattern: Optional[str] = Field(None, description="Regex the text must match")

    @field_validator("max_length")
    @classmethod
    def max_length_greater_than_min(cls, v, info):
        """Ensure max_length >= min_length if both are set."""
        if v is not None and info.data.get("min_length") is not None:
            if v < info.data["min_length"]:
                raise ValueError("maxLength must be >= minLength")
        return v

    @field_validator("max")
    @classmethod
    def max_greater_than_min(cls, v, info):
        """Ensure max >= min if both are set."""
        if v is not None and info.data.get("min") is not None:
            if v < info.data["min"]:
                raise ValueError("max must be >= min")
        return v

    @field_validator("pattern")
    @classmethod
    def pattern_compiles(cls, v):
        """Reject patterns that are not valid regular expressions."""
        if v is not None:
            try:
                re.compile(v)
            except re.error as e:
                raise ValueError(f"Invalid pattern: {e}")
        return v

    def to_storage(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class OptionMetadata(CamelModel):
    """Presentation metadata of an option."""
    value: Optional[Union[int, float, str]] = None
    color: Optional[str] = None
    icon: Optional[str] = None


class OptionIn(CamelModel):
    """An option as submitted when creating or updating a question."""
    text: str = Field(..., min_length=1, description="Option text")
    meta: Optional[OptionMetadata] = Field(None, alias="metadata")


class QuestionCreate(CamelModel):
    """Body of ``POST /surveys/{id}/questions``."""
    text: Optional[str] = None
    type: Optional[QuestionType] = None
    is_required: Optional[bool] = None
    order: Optional[int] = None
    validations: Optional[ValidationRules] = None
    options: Optional[list[OptionIn]] = None


class QuestionUpdate(CamelModel):
    """Body of ``PUT /surveys/{id}/questions/{questionId}``; all fields optional."""
    text: Optional[str] = None
    type: Optional[QuestionType] = None
    is_required: Optional[bool] = None
    order: Optional[int] = None
    validations: Optional[ValidationRules] = None
    options: Optional[list[OptionIn]] = None


class QuestionOrder(CamelModel):
    """One (questionId, order) pair of a reorder request."""
    id: str
    order: int


class ReorderRequest(CamelModel):
    """Body of ``POST /surveys/{id}/questions/reorder``."""
    question_orders: list[QuestionOrder]


class SurveySettingsIn(CamelModel):
    """Access settings of a survey."""
    is_password_protected: Optional[bool] = None
    password: Optional[str] = None
    allow_anonymous: Optional[bool] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @model_validator(mode="after")
    def validate_window(self):
        """End of the availability window cannot precede its start."""
        if self.start_date and self.end_date and as_utc(self.end_date) < as_utc(self.start_date):
            raise ValueError("endDate must be after startDate")
        return self


class SurveyCreate(CamelModel):
    """Body of ``POST /surveys``."""
    title: Optional[str] = None
    description: Optional[str] = None
    settings: Optional[SurveySettingsIn] = None


class SurveyUpdate(CamelModel):
    """Body of ``PUT /surveys/{id}``; absent or empty fields keep their value."""
    title: Optional[str] = None
    description: Optional[str] = None
    settings: Optional[SurveySettingsIn] = None


class OptionOut(CamelModel):
    """An option as returned by the API."""
    id: str
    text: str
    order: int
    meta: Optional[dict] = Field(
        None,
        validation_alias=AliasChoices("option_metadata", "meta", "metadata"),
        serialization_alias="metadata",
    )


class QuestionOut(CamelModel):
    """A question with its options."""
    id: str
    survey_id: str
    text: str
    type: QuestionType
    is_required: bool
    order: int
    validations: Optional[dict] = None
    options: list[OptionOut] = Field(default_factory=list)
    created_at: datetime


class SurveyOut(CamelModel):
    """A survey without its questions."""
    id: str
    title: str
    description: Optional[str] = None
    is_published: bool
    status: SurveyStatus
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_password_protected: bool
    allow_anonymous: bool
    creator_id: str
    created_at: datetime
    updated_at: datetime


class SurveyListItem(SurveyOut):
    """A survey annotated with its number of questions."""
    question_count: int = 0


class SurveyDetail(SurveyOut):
    """A survey with its questions and their options."""
    questions: list[QuestionOut] = Field(default_factory=list)


class SurveyMessage(CamelModel):
    """Acknowledgement carrying the affected survey."""
    message: str
    survey: SurveyListItem


class QuestionMessage(CamelModel):
    """Acknowledgement carrying the affected question."""
    message: str
    question: QuestionOut
