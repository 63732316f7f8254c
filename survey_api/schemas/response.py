"""Pydantic schemas for response submission, listing and statistics.

Answer values are a tagged union keyed by the type of the question they
answer. Each variant forbids extra fields, so a stored value always carries
exactly the one field its question type calls for.
"""

from datetime import date as date_type
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import AliasChoices, ConfigDict, Field

from survey_api.models.enums import QuestionType, UserRole
from survey_api.schemas.base import CamelModel


class _AnswerValue(CamelModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=False)

    def to_storage(self) -> dict:
        """JSON-ready dict for the ``answers.value`` column."""
        return self.model_dump(mode="json", by_alias=True)


class TextAnswer(_AnswerValue):
    text: str


class NumberAnswer(_AnswerValue):
    number: float = Field(..., allow_inf_nan=False)


class ChoiceAnswer(_AnswerValue):
    choice: str = Field(..., min_length=1)


class ChoicesAnswer(_AnswerValue):
    choices: list[str] = Field(..., min_length=1)


class RatingAnswer(_AnswerValue):
    """Rating answer; ``{"scale": n}`` is accepted and stored as ``rating``."""
    rating: int = Field(..., validation_alias=AliasChoices("rating", "scale"))


class DateAnswer(_AnswerValue):
    date: date_type


AnswerValue = Union[TextAnswer, NumberAnswer, ChoiceAnswer, ChoicesAnswer, RatingAnswer, DateAnswer]

ANSWER_VALUE_TYPES: dict[QuestionType, type[_AnswerValue]] = {
    QuestionType.TEXT: TextAnswer,
    QuestionType.NUMBER: NumberAnswer,
    QuestionType.SINGLE_CHOICE: ChoiceAnswer,
    QuestionType.MULTIPLE_CHOICE: ChoicesAnswer,
    QuestionType.RATING: RatingAnswer,
    QuestionType.DATE: DateAnswer,
}


def parse_answer_value(question_type: QuestionType, raw: Optional[dict]) -> AnswerValue:
    """Validate a submitted value against the variant for ``question_type``.

    Keys whose value is null are dropped first, so clients may send the
    full shape with unused fields set to null.

    Raises:
        pydantic.ValidationError: If the value does not match the variant
    """
    cleaned = {key: value for key, value in (raw or {}).items() if value is not None}
    return ANSWER_VALUE_TYPES[QuestionType(question_type)].model_validate(cleaned)


class AnswerIn(CamelModel):
    """One submitted answer. ``value`` is validated once the question is known."""
    question_id: str
    value: Optional[dict[str, Any]] = None


class ResponseSubmit(CamelModel):
    """Body of ``POST /responses/{surveyId}``.

    Attributes:
        answers: Submitted answers
        completion_time: Milliseconds the respondent spent on the survey
        password: Respondent password for password-protected surveys
    """
    answers: list[AnswerIn] = Field(default_factory=list)
    completion_time: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    password: Optional[str] = None


class SubmitResponseOut(CamelModel):
    message: str
    response_id: str


class AnswerQuestionOut(CamelModel):
    id: str
    text: str
    type: QuestionType


class AnswerOut(CamelModel):
    id: str
    question_id: str
    question: Optional[AnswerQuestionOut] = None
    value: dict
    answered_at: datetime


class RespondentOut(CamelModel):
    id: str
    email: str
    first_name: str
    last_name: str
    role: UserRole


class ResponseOut(CamelModel):
    """A stored response with its answers."""
    id: str
    survey_id: str
    respondent: Optional[RespondentOut] = None
    anonymous_id: Optional[str] = None
    meta: Optional[dict] = Field(
        None,
        validation_alias=AliasChoices("response_metadata", "meta", "metadata"),
        serialization_alias="metadata",
    )
    is_completed: bool
    created_at: datetime
    answers: list[AnswerOut] = Field(default_factory=list)


class QuestionStats(CamelModel):
    """Aggregates for one question. Only the fields relevant to the question
    type are populated; the rest stay None and are omitted from JSON."""
    total_answers: int
    type: QuestionType
    choices: Optional[dict[str, int]] = None
    average: Optional[float] = None
    distribution: Optional[dict[int, int]] = None
    responses: Optional[list[str]] = None
    min: Optional[float] = None
    max: Optional[float] = None
    earliest: Optional[str] = None
    latest: Optional[str] = None


class SurveyStatistics(CamelModel):
    """Aggregates over all responses of a survey."""
    total_responses: int
    completion_rate: float
    average_completion_time: float
    question_stats: dict[str, QuestionStats] = Field(default_factory=dict)


class ActivityOut(CamelModel):
    """One entry of an activity feed."""
    id: str
    type: str
    message: str
    created_at: datetime
