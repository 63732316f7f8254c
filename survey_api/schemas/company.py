"""Pydantic schemas for companies, user management and statistics."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from survey_api.schemas.auth import UserSummary
from survey_api.schemas.base import CamelModel


class ThemeSettings(CamelModel):
    """Brand colours."""
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None


class FeatureSettings(CamelModel):
    """Feature limits of a company's plan."""
    max_surveys: Optional[int] = Field(None, ge=0)
    max_questions_per_survey: Optional[int] = Field(None, ge=0)
    allow_file_upload: Optional[bool] = None
    allow_custom_domain: Optional[bool] = None


class CompanySettings(CamelModel):
    """Nested company settings stored as JSON."""
    theme: Optional[ThemeSettings] = None
    features: Optional[FeatureSettings] = None

    def to_storage(self) -> dict:
        """camelCase dict for the JSON column, without unset keys."""
        return self.model_dump(by_alias=True, exclude_none=True)


class CompanyCreate(CamelModel):
    """Body of ``POST /super-admin/companies``."""
    name: Optional[str] = None
    slug: Optional[str] = Field(None, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    settings: Optional[CompanySettings] = None


class CompanyUpdate(CamelModel):
    """Body of ``PUT /super-admin/companies/{id}``."""
    name: Optional[str] = None
    settings: Optional[CompanySettings] = None


class CompanyProfileUpdate(CamelModel):
    """Body of ``PUT /company-admin/profile``."""
    name: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    settings: Optional[CompanySettings] = None


class CompanyOut(CamelModel):
    """A company as returned by the API."""
    id: str
    name: str
    slug: str
    logo: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    settings: Optional[dict] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class CompanyListItem(CompanyOut):
    """Company with its user count, without user bodies."""
    user_count: int = 0


class CompanyDetail(CompanyOut):
    """Company with its users."""
    users: list[UserSummary] = Field(default_factory=list)


class CompanyMessage(CamelModel):
    """Acknowledgement carrying the affected company."""
    message: str
    company: CompanyOut


class CompanyAdminCreate(CamelModel):
    """Body of ``POST /super-admin/company-admins``."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    company_id: Optional[str] = None


class UserCreate(CamelModel):
    """Body of ``POST /company-admin/users``."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class CountSummary(CamelModel):
    """Total/active/inactive breakdown."""
    total: int
    active: int
    inactive: int


class SurveyCountSummary(CamelModel):
    """Total/active(published)/draft breakdown."""
    total: int
    active: int
    draft: int


class SystemStats(CamelModel):
    """Platform-wide statistics for super admins."""
    companies: CountSummary
    users: CountSummary


class CompanyStats(CamelModel):
    """Tenant statistics for company admins."""
    users: CountSummary
    surveys: SurveyCountSummary


class CompanyDeactivated(CamelModel):
    """Acknowledgement of a company deactivation."""
    message: str
    deactivated_users: int
