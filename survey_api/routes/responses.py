"""Response submission (public) and response reporting (authenticated)."""

from typing import Optional

from fastapi import APIRouter, Depends, Request, status

from survey_api.middleware.auth import get_current_claims, get_optional_claims
from survey_api.repositories import Repositories, get_repositories
from survey_api.schemas.auth import TokenClaims
from survey_api.schemas.response import (
    ResponseOut,
    ResponseSubmit,
    SubmitResponseOut,
    SurveyStatistics,
)
from survey_api.services.response_service import RequestContext, ResponseService

router = APIRouter(prefix="/responses")


@router.post("/{survey_id}", status_code=status.HTTP_201_CREATED, response_model=SubmitResponseOut)
def submit_response(
    survey_id: str,
    payload: ResponseSubmit,
    request: Request,
    claims: Optional[TokenClaims] = Depends(get_optional_claims),
    repos: Repositories = Depends(get_repositories),
):
    """Submit answers to a survey, anonymously or as the logged-in user."""
    context = RequestContext(
        user_agent=request.headers.get("User-Agent"),
        ip_address=request.client.host if request.client else None,
    )
    response = ResponseService(repos).submit(survey_id, payload, claims=claims, context=context)
    return SubmitResponseOut(message="Response submitted successfully", response_id=response.id)


@router.get("/{survey_id}", response_model=list[ResponseOut])
def list_responses(
    survey_id: str,
    claims: TokenClaims = Depends(get_current_claims),
    repos: Repositories = Depends(get_repositories),
):
    return [
        ResponseOut.model_validate(response)
        for response in ResponseService(repos).list_responses(survey_id, claims)
    ]


@router.get("/{survey_id}/statistics", response_model=SurveyStatistics, response_model_exclude_none=True)
def response_statistics(
    survey_id: str,
    claims: TokenClaims = Depends(get_current_claims),
    repos: Repositories = Depends(get_repositories),
):
    return ResponseService(repos).statistics(survey_id, claims)
