"""Company and user administration for super admins and company admins."""

from survey_api.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from survey_api.logging_config import get_logger
from survey_api.models.company import Company
from survey_api.models.enums import UserRole
from survey_api.models.user import User
from survey_api.repositories import Repositories
from survey_api.schemas.auth import TokenClaims
from survey_api.schemas.company import (
    CompanyAdminCreate,
    CompanyCreate,
    CompanyProfileUpdate,
    CompanyStats,
    CompanyUpdate,
    CountSummary,
    SurveyCountSummary,
    SystemStats,
    UserCreate,
)
from survey_api.services.auth_service import create_account

logger = get_logger(__name__)

# Roles a company admin may hand out
ASSIGNABLE_ROLES = {UserRole.EDITOR.value, UserRole.VIEWER.value}


def require_tenant(claims: TokenClaims) -> str:
    """Company id of the caller.

    Raises:
        AuthenticationError: If the claims carry no company (e.g. a super
            admin calling a company-admin endpoint)
    """
    if not claims.company_id:
        raise AuthenticationError("Company information not found")
    return claims.company_id


class CompanyService:
    """Company CRUD, user management and per-tier statistics."""

    def __init__(self, repos: Repositories):
        self.repos = repos

    # Super admin

    def create_company(self, payload: CompanyCreate) -> Company:
        if not payload.name or not payload.slug:
            raise ValidationError("Company name and slug are required")
        if self.repos.companies.get_by_slug(payload.slug) is not None:
            raise ConflictError("This slug is already in use")

        company = Company(
            name=payload.name,
            slug=payload.slug,
            settings=payload.settings.to_storage() if payload.settings else None,
            is_active=True,
        )
        self.repos.companies.add(company)
        self.repos.commit()
        logger.info(f"Created company {company.slug}", extra={"company_id": company.id})
        return company

    def list_companies(self) -> list[tuple[Company, int]]:
        return self.repos.companies.list_with_user_counts()

    def get_company(self, company_id: str) -> Company:
        company = self.repos.companies.get(company_id, with_users=True)
        if company is None:
            raise NotFoundError("Company not found")
        return company

    def update_company(self, company_id: str, payload: CompanyUpdate) -> Company:
        company = self.repos.companies.get(company_id)
        if company is None:
            raise NotFoundError("Company not found")

        company.name = payload.name or company.name
        if payload.settings:
            company.settings = payload.settings.to_storage() or company.settings
        self.repos.commit()
        return company

    def deactivate_company(self, company_id: str) -> int:
        """Deactivate a company and all of its users in one transaction.

        Returns:
            Number of users deactivated
        """
        company = self.repos.companies.get(company_id)
        if company is None:
            raise NotFoundError("Company not found")

        company.is_active = False
        affected = self.repos.users.deactivate_company_users(company_id)
        self.repos.commit()

        logger.info(
            f"Deactivated company {company.slug} and {affected} users",
            extra={"company_id": company_id}
        )
        return affected

    def create_company_admin(self, payload: CompanyAdminCreate) -> User:
        if not payload.company_id:
            raise ValidationError("All fields are required")
        user = create_account(
            self.repos,
            payload.first_name,
            payload.last_name,
            payload.email,
            payload.password,
            UserRole.COMPANY_ADMIN,
            payload.company_id,
        )
        self.repos.commit()
        return user

    def system_stats(self) -> SystemStats:
        total_companies = self.repos.companies.count()
        active_companies = self.repos.companies.count(is_active=True)
        total_users = self.repos.users.count()
        active_users = self.repos.users.count(is_active=True)

        return SystemStats(
            companies=CountSummary(
                total=total_companies,
                active=active_companies,
                inactive=total_companies - active_companies,
            ),
            users=CountSummary(
                total=total_users,
                active=active_users,
                inactive=total_users - active_users,
            ),
        )

    # Company admin

    def get_profile(self, tenant_id: str) -> Company:
        company = self.repos.companies.get(tenant_id, with_users=True)
        if company is None:
            raise NotFoundError("Company not found")
        return company

    def update_profile(self, tenant_id: str, payload: CompanyProfileUpdate) -> Company:
        company = self.repos.companies.get(tenant_id)
        if company is None:
            raise NotFoundError("Company not found")

        company.name = payload.name or company.name
        company.website = payload.website or company.website
        company.phone = payload.phone or company.phone
        company.address = payload.address or company.address
        if payload.settings:
            company.settings = payload.settings.to_storage() or company.settings
        self.repos.commit()
        return company

    def create_user(self, tenant_id: str, payload: UserCreate) -> User:
        if not all([payload.first_name, payload.last_name, payload.email, payload.password, payload.role]):
            raise ValidationError("All fields are required")
        if payload.role not in ASSIGNABLE_ROLES:
            raise ValidationError("Invalid role")
        if self.repos.companies.get(tenant_id) is None:
            raise NotFoundError("Company not found")

        user = create_account(
            self.repos,
            payload.first_name,
            payload.last_name,
            payload.email,
            payload.password,
            UserRole(payload.role),
            tenant_id,
        )
        self.repos.commit()
        return user

    def list_users(self, tenant_id: str) -> list[User]:
        return self.repos.users.list_for_company(tenant_id)

    def company_stats(self, tenant_id: str) -> CompanyStats:
        total_users = self.repos.users.count(tenant_id)
        active_users = self.repos.users.count(tenant_id, is_active=True)
        total_surveys = self.repos.surveys.count(tenant_id)
        published_surveys = self.repos.surveys.count(tenant_id, is_published=True)

        return CompanyStats(
            users=CountSummary(
                total=total_users,
                active=active_users,
                inactive=total_users - active_users,
            ),
            surveys=SurveyCountSummary(
                total=total_surveys,
                active=published_surveys,
                draft=total_surveys - published_surveys,
            ),
        )
