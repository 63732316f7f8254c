"""Survey and question authoring.

Every operation is scoped by owner and tenant: a survey that was not created
by the caller, or whose creator belongs to another company, is reported as
not found. A published survey is frozen; structural changes are rejected
with a conflict until it is unpublished again.
"""

from typing import Optional

from survey_api.errors import ConflictError, NotFoundError, ValidationError
from survey_api.logging_config import get_logger
from survey_api.models.enums import SurveyStatus
from survey_api.models.survey import Question, QuestionOption, Survey
from survey_api.repositories import Repositories
from survey_api.schemas.auth import TokenClaims
from survey_api.schemas.survey import (
    OptionIn,
    QuestionCreate,
    QuestionOrder,
    QuestionUpdate,
    SurveyCreate,
    SurveySettingsIn,
    SurveyUpdate,
)
from survey_api.services.password_hasher import PasswordHasher

logger = get_logger(__name__)

SURVEY_NOT_FOUND = "Survey not found"
QUESTION_NOT_FOUND = "Question not found"
PUBLISHED_LOCKED = "Published surveys cannot be modified"


def _build_options(options: Optional[list[OptionIn]]) -> list[QuestionOption]:
    """Options ordered by their position in the submitted list."""
    return [
        QuestionOption(
            text=option.text,
            order=index,
            option_metadata=option.meta.model_dump(exclude_none=True) if option.meta else None,
        )
        for index, option in enumerate(options or [])
    ]


def _apply_settings(survey: Survey, settings: Optional[SurveySettingsIn]) -> None:
    """Apply access settings; absent values keep what the survey has."""
    if settings is None:
        return

    if settings.is_password_protected is not None:
        survey.is_password_protected = settings.is_password_protected
        if not settings.is_password_protected:
            survey.password_hash = None
    if settings.password:
        survey.password_hash = PasswordHasher.hash_password(settings.password)
    if settings.allow_anonymous is not None:
        survey.allow_anonymous = settings.allow_anonymous
    survey.start_date = settings.start_date or survey.start_date
    survey.end_date = settings.end_date or survey.end_date

    if survey.is_password_protected and not survey.password_hash:
        raise ValidationError("A password is required for password-protected surveys")


class SurveyService:
    """Authoring operations on behalf of one caller."""

    def __init__(self, repos: Repositories, claims: TokenClaims):
        self.repos = repos
        self.owner_id = claims.user_id
        self.tenant_id = claims.tenant_id

    def _get_owned(self, survey_id: str, with_questions: bool = False) -> Survey:
        survey = self.repos.surveys.get_owned(
            survey_id, self.owner_id, self.tenant_id, with_questions=with_questions
        )
        if survey is None:
            raise NotFoundError(SURVEY_NOT_FOUND)
        return survey

    def _get_editable(self, survey_id: str, with_questions: bool = False) -> Survey:
        survey = self._get_owned(survey_id, with_questions=with_questions)
        if survey.is_published:
            raise ConflictError(PUBLISHED_LOCKED)
        return survey

    def _get_question(self, survey: Survey, question_id: str) -> Question:
        question = self.repos.questions.get_in_survey(question_id, survey.id)
        if question is None:
            raise NotFoundError(QUESTION_NOT_FOUND)
        return question

    # Surveys

    def create(self, payload: SurveyCreate) -> Survey:
        """Create a draft, unpublished survey owned by the caller."""
        if not payload.title:
            raise ValidationError("Title is required")

        survey = Survey(
            title=payload.title,
            description=payload.description,
            is_published=False,
            status=SurveyStatus.DRAFT,
            is_password_protected=False,
            allow_anonymous=True,
            creator_id=self.owner_id,
        )
        _apply_settings(survey, payload.settings)
        self.repos.surveys.add(survey)
        self.repos.commit()

        logger.info(f"Created survey {survey.id}", extra={"user_id": self.owner_id})
        return survey

    def list_surveys(self) -> list[tuple[Survey, int]]:
        """Caller's surveys, newest first, with their question counts."""
        return self.repos.surveys.list_owned_with_question_counts(self.owner_id, self.tenant_id)

    def get_details(self, survey_id: str) -> Survey:
        return self._get_owned(survey_id, with_questions=True)

    def update(self, survey_id: str, payload: SurveyUpdate) -> Survey:
        survey = self._get_editable(survey_id, with_questions=True)

        survey.title = payload.title or survey.title
        survey.description = payload.description or survey.description
        _apply_settings(survey, payload.settings)
        self.repos.commit()
        return survey

    def toggle_publish(self, survey_id: str) -> Survey:
        """Publish a draft or revert a published survey to draft.

        Raises:
            ConflictError: If publishing a survey without questions
        """
        survey = self._get_owned(survey_id, with_questions=True)

        if survey.is_published:
            survey.is_published = False
            survey.status = SurveyStatus.DRAFT
        else:
            if not survey.questions:
                raise ConflictError("Cannot publish a survey without questions")
            survey.is_published = True
            survey.status = SurveyStatus.ACTIVE
        self.repos.commit()

        logger.info(
            f"Survey {survey.id} {'published' if survey.is_published else 'unpublished'}",
            extra={"user_id": self.owner_id}
        )
        return survey

    def delete(self, survey_id: str) -> None:
        """Hard delete, cascading to questions, options, responses and answers."""
        survey = self._get_editable(survey_id)
        self.repos.surveys.delete(survey)
        self.repos.commit()
        logger.info(f"Deleted survey {survey_id}", extra={"user_id": self.owner_id})

    # Questions

    def list_questions(self, survey_id: str) -> list[Question]:
        survey = self._get_owned(survey_id)
        return self.repos.questions.list_for_survey(survey.id)

    def create_question(self, survey_id: str, payload: QuestionCreate) -> Question:
        if not payload.text or payload.type is None:
            raise ValidationError("Question text and type are required")
        survey = self._get_editable(survey_id)

        order = payload.order
        if order is None:
            order = self.repos.questions.count_for_survey(survey.id)

        question = Question(
            survey_id=survey.id,
            text=payload.text,
            type=payload.type,
            is_required=bool(payload.is_required),
            order=order,
            validations=payload.validations.to_storage() if payload.validations else None,
            options=_build_options(payload.options) if payload.type.has_options else [],
        )
        self.repos.questions.add(question)
        self.repos.commit()
        return question

    def update_question(self, survey_id: str, question_id: str, payload: QuestionUpdate) -> Question:
        survey = self._get_editable(survey_id)
        question = self._get_question(survey, question_id)

        question.text = payload.text or question.text
        if payload.type is not None:
            question.type = payload.type
        if payload.is_required is not None:
            question.is_required = payload.is_required
        if payload.order is not None:
            question.order = payload.order
        if payload.validations is not None:
            question.validations = payload.validations.to_storage() or None

        if not question.type.has_options:
            question.options.clear()
        elif payload.options is not None:
            question.options.clear()
            question.options.extend(_build_options(payload.options))

        self.repos.commit()
        return question

    def delete_question(self, survey_id: str, question_id: str) -> None:
        survey = self._get_editable(survey_id)
        question = self._get_question(survey, question_id)
        self.repos.questions.delete(question)
        self.repos.commit()

    def reorder_questions(self, survey_id: str, question_orders: list[QuestionOrder]) -> int:
        """Apply (questionId, order) pairs; ids outside the survey are ignored.

        Returns:
            Number of questions whose order was updated
        """
        survey = self._get_editable(survey_id)
        updated = sum(
            self.repos.questions.set_order(survey.id, item.id, item.order)
            for item in question_orders
        )
        self.repos.commit()
        return updated
