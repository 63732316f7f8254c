"""Response collection and aggregation.

Submissions are public: anyone holding a survey id may respond, subject to
the survey's access settings. Reading responses and statistics is limited
to authenticated users of the survey's tenant.
"""

import secrets
import time
from dataclasses import dataclass
from typing import Optional

from survey_api.errors import AuthenticationError, AuthorizationError, ConflictError, NotFoundError, ValidationError
from survey_api.logging_config import get_logger
from survey_api.models.database import as_utc, utcnow
from survey_api.models.response import Answer, Response
from survey_api.models.survey import Survey
from survey_api.repositories import Repositories
from survey_api.schemas.auth import TokenClaims
from survey_api.schemas.response import ResponseSubmit, SurveyStatistics
from survey_api.services.password_hasher import PasswordHasher
from survey_api.services.statistics import compute_survey_statistics
from survey_api.services.validation import AnswerValidator

logger = get_logger(__name__)


@dataclass
class RequestContext:
    """Client details recorded in a response's metadata."""
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None


def generate_anonymous_id() -> str:
    """Identifier for a respondent without an account: ``anon_<epoch-ms>_<hex>``."""
    return f"anon_{int(time.time() * 1000)}_{secrets.token_hex(6)}"


class ResponseService:
    """Submission, listing and statistics of survey responses."""

    def __init__(self, repos: Repositories):
        self.repos = repos

    def _check_access(
        self,
        survey: Survey,
        claims: Optional[TokenClaims],
        password: Optional[str],
    ) -> None:
        """Enforce the survey's access settings for a submission."""
        if not survey.allow_anonymous and claims is None:
            raise AuthenticationError("Authentication is required to respond to this survey")

        if survey.is_password_protected:
            if not password or not PasswordHasher.verify_password(password, survey.password_hash or ""):
                logger.info(f"Rejected submission with wrong password for survey {survey.id}")
                raise AuthorizationError("Invalid survey password")

        now = utcnow()
        if survey.start_date and now < as_utc(survey.start_date):
            raise ConflictError("This survey is not open yet")
        if survey.end_date and now > as_utc(survey.end_date):
            raise ConflictError("This survey is closed")

    def submit(
        self,
        survey_id: str,
        payload: ResponseSubmit,
        claims: Optional[TokenClaims] = None,
        context: Optional[RequestContext] = None,
    ) -> Response:
        """Store one response with its answers in a single transaction.

        Answers whose question does not belong to the survey are skipped.
        Any other answer must be valid for its question, otherwise nothing
        is stored.

        Raises:
            NotFoundError: If the survey does not exist
            AuthenticationError: Anonymous caller on a survey that disallows it
            AuthorizationError: Wrong password on a protected survey
            ConflictError: Submission outside the survey's availability window
            ValidationError: Invalid value for a resolved question
        """
        survey = self.repos.surveys.get(survey_id, with_questions=True)
        if survey is None:
            raise NotFoundError("Survey not found")

        self._check_access(survey, claims, payload.password)
        context = context or RequestContext()

        questions = {question.id: question for question in survey.questions}
        answers = []
        for submitted in payload.answers:
            question = questions.get(submitted.question_id)
            if question is None:
                logger.debug(f"Skipping answer to unknown question {submitted.question_id}")
                continue

            result = AnswerValidator.validate(question, submitted.value)
            if not result.is_valid:
                raise ValidationError(result.error_message)
            answers.append(Answer(question_id=question.id, value=result.value))

        answered = {answer.question_id for answer in answers}
        required = {question.id for question in survey.questions if question.is_required}

        metadata = {
            "userAgent": context.user_agent,
            "ipAddress": context.ip_address,
            "submittedAt": utcnow().isoformat(),
        }
        if payload.completion_time is not None:
            metadata["completionTime"] = payload.completion_time

        response = Response(
            survey_id=survey.id,
            respondent_id=claims.user_id if claims else None,
            anonymous_id=None if claims else generate_anonymous_id(),
            response_metadata=metadata,
            is_completed=required <= answered,
            answers=answers,
        )
        self.repos.responses.add(response)
        self.repos.commit()

        logger.info(
            f"Stored response {response.id} for survey {survey.id} "
            f"with {len(answers)} of {len(payload.answers)} answers",
            extra={"survey_id": survey.id}
        )
        return response

    def _get_readable(self, survey_id: str, claims: TokenClaims) -> Survey:
        survey = self.repos.surveys.get_in_tenant(survey_id, claims.tenant_id, with_questions=True)
        if survey is None:
            raise NotFoundError("Survey not found")
        return survey

    def list_responses(self, survey_id: str, claims: TokenClaims) -> list[Response]:
        """Responses of a survey in the caller's tenant, newest first."""
        survey = self._get_readable(survey_id, claims)
        return self.repos.responses.list_for_survey(survey.id)

    def statistics(self, survey_id: str, claims: TokenClaims) -> SurveyStatistics:
        survey = self._get_readable(survey_id, claims)
        responses = self.repos.responses.list_for_survey(survey.id)
        return compute_survey_statistics(survey.questions, responses)
