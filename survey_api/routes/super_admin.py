"""Platform administration endpoints, restricted to super admins."""

from fastapi import APIRouter, Depends, status

from survey_api.middleware.auth import require_roles
from survey_api.models.enums import UserRole
from survey_api.repositories import Repositories, get_repositories
from survey_api.schemas.auth import UserCreatedResponse, UserSummary
from survey_api.schemas.company import (
    CompanyAdminCreate,
    CompanyCreate,
    CompanyDeactivated,
    CompanyDetail,
    CompanyListItem,
    CompanyMessage,
    CompanyOut,
    CompanyUpdate,
    SystemStats,
)
from survey_api.schemas.response import ActivityOut
from survey_api.services.activity import ActivityFeedService
from survey_api.services.company_service import CompanyService

router = APIRouter(
    prefix="/super-admin",
    dependencies=[Depends(require_roles(UserRole.SUPER_ADMIN))],
)


@router.post("/companies", status_code=status.HTTP_201_CREATED, response_model=CompanyMessage)
def create_company(payload: CompanyCreate, repos: Repositories = Depends(get_repositories)):
    company = CompanyService(repos).create_company(payload)
    return CompanyMessage(message="Company created successfully", company=CompanyOut.model_validate(company))


@router.get("/companies", response_model=list[CompanyListItem])
def list_companies(repos: Repositories = Depends(get_repositories)):
    """All companies, newest first, with their number of users."""
    return [
        CompanyListItem.model_validate(company).model_copy(update={"user_count": user_count})
        for company, user_count in CompanyService(repos).list_companies()
    ]


@router.get("/companies/{company_id}", response_model=CompanyDetail)
def get_company(company_id: str, repos: Repositories = Depends(get_repositories)):
    return CompanyDetail.model_validate(CompanyService(repos).get_company(company_id))


@router.put("/companies/{company_id}", response_model=CompanyMessage)
def update_company(
    company_id: str,
    payload: CompanyUpdate,
    repos: Repositories = Depends(get_repositories),
):
    company = CompanyService(repos).update_company(company_id, payload)
    return CompanyMessage(message="Company updated successfully", company=CompanyOut.model_validate(company))


@router.delete("/companies/{company_id}", response_model=CompanyDeactivated)
def deactivate_company(company_id: str, repos: Repositories = Depends(get_repositories)):
    """Deactivate a company together with all of its users."""
    affected = CompanyService(repos).deactivate_company(company_id)
    return CompanyDeactivated(message="Company deactivated successfully", deactivated_users=affected)


@router.post("/company-admins", status_code=status.HTTP_201_CREATED, response_model=UserCreatedResponse)
def create_company_admin(payload: CompanyAdminCreate, repos: Repositories = Depends(get_repositories)):
    user = CompanyService(repos).create_company_admin(payload)
    return UserCreatedResponse(
        message="Company admin created successfully",
        user=UserSummary.model_validate(user),
    )


@router.get("/stats", response_model=SystemStats)
def system_stats(repos: Repositories = Depends(get_repositories)):
    return CompanyService(repos).system_stats()


@router.get("/activities", response_model=list[ActivityOut])
def system_activities(repos: Repositories = Depends(get_repositories)):
    return [ActivityOut.model_validate(activity) for activity in ActivityFeedService(repos).system_feed()]
