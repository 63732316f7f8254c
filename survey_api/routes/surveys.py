"""Survey and question authoring endpoints for editors and company admins."""

from fastapi import APIRouter, Depends, status

from survey_api.middleware.auth import require_roles
from survey_api.models.enums import UserRole
from survey_api.models.survey import Survey
from survey_api.repositories import Repositories, get_repositories
from survey_api.schemas.auth import TokenClaims
from survey_api.schemas.base import MessageResponse
from survey_api.schemas.response import ActivityOut
from survey_api.schemas.survey import (
    QuestionCreate,
    QuestionMessage,
    QuestionOut,
    QuestionUpdate,
    ReorderRequest,
    SurveyCreate,
    SurveyDetail,
    SurveyListItem,
    SurveyMessage,
    SurveyUpdate,
)
from survey_api.services.activity import ActivityFeedService
from survey_api.services.survey_service import SurveyService

router = APIRouter(prefix="/surveys")

author = require_roles(UserRole.EDITOR, UserRole.COMPANY_ADMIN)


def _list_item(survey: Survey, question_count: int) -> SurveyListItem:
    return SurveyListItem.model_validate(survey).model_copy(update={"question_count": question_count})


@router.post("", status_code=status.HTTP_201_CREATED, response_model=SurveyMessage)
def create_survey(
    payload: SurveyCreate,
    claims: TokenClaims = Depends(author),
    repos: Repositories = Depends(get_repositories),
):
    survey = SurveyService(repos, claims).create(payload)
    return SurveyMessage(message="Survey created successfully", survey=_list_item(survey, 0))


@router.get("", response_model=list[SurveyListItem])
def list_surveys(
    claims: TokenClaims = Depends(author),
    repos: Repositories = Depends(get_repositories),
):
    """Caller's surveys, newest first, without question bodies."""
    return [
        _list_item(survey, question_count)
        for survey, question_count in SurveyService(repos, claims).list_surveys()
    ]


# Declared before /{survey_id} so "activities" is not taken for an id
@router.get("/activities", response_model=list[ActivityOut])
def author_activities(
    claims: TokenClaims = Depends(author),
    repos: Repositories = Depends(get_repositories),
):
    feed = ActivityFeedService(repos).author_feed(claims.user_id, claims.tenant_id)
    return [ActivityOut.model_validate(activity) for activity in feed]


@router.get("/{survey_id}", response_model=SurveyDetail)
def get_survey(
    survey_id: str,
    claims: TokenClaims = Depends(author),
    repos: Repositories = Depends(get_repositories),
):
    return SurveyDetail.model_validate(SurveyService(repos, claims).get_details(survey_id))


@router.put("/{survey_id}", response_model=SurveyMessage)
def update_survey(
    survey_id: str,
    payload: SurveyUpdate,
    claims: TokenClaims = Depends(author),
    repos: Repositories = Depends(get_repositories),
):
    survey = SurveyService(repos, claims).update(survey_id, payload)
    return SurveyMessage(
        message="Survey updated successfully",
        survey=_list_item(survey, len(survey.questions)),
    )


@router.post("/{survey_id}/toggle-publish", response_model=SurveyMessage)
def toggle_publish(
    survey_id: str,
    claims: TokenClaims = Depends(author),
    repos: Repositories = Depends(get_repositories),
):
    survey = SurveyService(repos, claims).toggle_publish(survey_id)
    action = "published" if survey.is_published else "unpublished"
    return SurveyMessage(
        message=f"Survey {action} successfully",
        survey=_list_item(survey, len(survey.questions)),
    )


@router.delete("/{survey_id}", response_model=MessageResponse)
def delete_survey(
    survey_id: str,
    claims: TokenClaims = Depends(author),
    repos: Repositories = Depends(get_repositories),
):
    SurveyService(repos, claims).delete(survey_id)
    return MessageResponse(message="Survey deleted successfully")


@router.get("/{survey_id}/questions", response_model=list[QuestionOut])
def list_questions(
    survey_id: str,
    claims: TokenClaims = Depends(author),
    repos: Repositories = Depends(get_repositories),
):
    return [
        QuestionOut.model_validate(question)
        for question in SurveyService(repos, claims).list_questions(survey_id)
    ]


@router.post(
    "/{survey_id}/questions",
    status_code=status.HTTP_201_CREATED,
    response_model=QuestionMessage,
)
def create_question(
    survey_id: str,
    payload: QuestionCreate,
    claims: TokenClaims = Depends(author),
    repos: Repositories = Depends(get_repositories),
):
    question = SurveyService(repos, claims).create_question(survey_id, payload)
    return QuestionMessage(message="Question created successfully", question=QuestionOut.model_validate(question))


@router.post("/{survey_id}/questions/reorder", response_model=MessageResponse)
def reorder_questions(
    survey_id: str,
    payload: ReorderRequest,
    claims: TokenClaims = Depends(author),
    repos: Repositories = Depends(get_repositories),
):
    SurveyService(repos, claims).reorder_questions(survey_id, payload.question_orders)
    return MessageResponse(message="Questions reordered successfully")


@router.put("/{survey_id}/questions/{question_id}", response_model=QuestionMessage)
def update_question(
    survey_id: str,
    question_id: str,
    payload: QuestionUpdate,
    claims: TokenClaims = Depends(author),
    repos: Repositories = Depends(get_repositories),
):
    question = SurveyService(repos, claims).update_question(survey_id, question_id, payload)
    return QuestionMessage(message="Question updated successfully", question=QuestionOut.model_validate(question))


@router.delete("/{survey_id}/questions/{question_id}", response_model=MessageResponse)
def delete_question(
    survey_id: str,
    question_id: str,
    claims: TokenClaims = Depends(author),
    repos: Repositories = Depends(get_repositories),
):
    SurveyService(repos, claims).delete_question(survey_id, question_id)
    return MessageResponse(message="Question deleted successfully")
