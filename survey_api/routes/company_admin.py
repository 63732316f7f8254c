"""Tenant administration endpoints for company admins.

Every handler resolves the caller's company from the token claims; super
admins pass the role gate but carry no company and are turned away by
``require_tenant``.
"""

from fastapi import APIRouter, Depends, status

from survey_api.middleware.auth import require_roles
from survey_api.models.enums import UserRole
from survey_api.repositories import Repositories, get_repositories
from survey_api.schemas.auth import TokenClaims, UserCreatedResponse, UserSummary
from survey_api.schemas.company import (
    CompanyDetail,
    CompanyMessage,
    CompanyOut,
    CompanyProfileUpdate,
    CompanyStats,
    UserCreate,
)
from survey_api.schemas.response import ActivityOut
from survey_api.services.activity import ActivityFeedService
from survey_api.services.company_service import CompanyService, require_tenant

router = APIRouter(prefix="/company-admin")

company_admin = require_roles(UserRole.COMPANY_ADMIN)


@router.get("/profile", response_model=CompanyDetail)
def get_profile(
    claims: TokenClaims = Depends(company_admin),
    repos: Repositories = Depends(get_repositories),
):
    return CompanyDetail.model_validate(CompanyService(repos).get_profile(require_tenant(claims)))


@router.put("/profile", response_model=CompanyMessage)
def update_profile(
    payload: CompanyProfileUpdate,
    claims: TokenClaims = Depends(company_admin),
    repos: Repositories = Depends(get_repositories),
):
    company = CompanyService(repos).update_profile(require_tenant(claims), payload)
    return CompanyMessage(message="Profile updated successfully", company=CompanyOut.model_validate(company))


@router.post("/users", status_code=status.HTTP_201_CREATED, response_model=UserCreatedResponse)
def create_user(
    payload: UserCreate,
    claims: TokenClaims = Depends(company_admin),
    repos: Repositories = Depends(get_repositories),
):
    """Add an editor or viewer to the caller's company."""
    user = CompanyService(repos).create_user(require_tenant(claims), payload)
    return UserCreatedResponse(message="User created successfully", user=UserSummary.model_validate(user))


@router.get("/users", response_model=list[UserSummary])
def list_users(
    claims: TokenClaims = Depends(company_admin),
    repos: Repositories = Depends(get_repositories),
):
    return [
        UserSummary.model_validate(user)
        for user in CompanyService(repos).list_users(require_tenant(claims))
    ]


@router.get("/stats", response_model=CompanyStats)
def company_stats(
    claims: TokenClaims = Depends(company_admin),
    repos: Repositories = Depends(get_repositories),
):
    return CompanyService(repos).company_stats(require_tenant(claims))


@router.get("/activities", response_model=list[ActivityOut])
def company_activities(
    claims: TokenClaims = Depends(company_admin),
    repos: Repositories = Depends(get_repositories),
):
    feed = ActivityFeedService(repos).company_feed(require_tenant(claims))
    return [ActivityOut.model_validate(activity) for activity in feed]
