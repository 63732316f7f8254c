"""Pydantic schemas for authentication requests, responses and token claims."""

from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from survey_api.models.enums import UserRole
from survey_api.schemas.base import CamelModel


class TokenClaims(CamelModel):
    """Decoded payload of a bearer token.

    Attributes:
        user_id: Subject user id
        email: Subject email at issuance time
        role: Subject role at issuance time
        company_id: Tenant id (absent for super admins)
        type: ``access`` or ``refresh``
    """
    user_id: str
    email: str
    role: UserRole
    company_id: Optional[str] = None
    type: str = "access"

    @model_validator(mode="after")
    def tenant_required(self):
        """Only super admins may act without a company."""
        if self.role != UserRole.SUPER_ADMIN and not self.company_id:
            raise ValueError("companyId is required for this role")
        return self

    @property
    def tenant_id(self) -> Optional[str]:
        """Tenant filter for queries; None means global (super admin)."""
        if self.role == UserRole.SUPER_ADMIN:
            return None
        return self.company_id


class LoginRequest(CamelModel):
    """Credentials for ``POST /auth/login``.

    Fields are optional at the schema level so that missing values surface
    as a domain validation error with a readable message.
    """
    email: Optional[str] = None
    password: Optional[str] = None


class RegisterRequest(CamelModel):
    """New company admin registration."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    company_id: Optional[str] = None


class RefreshRequest(CamelModel):
    """Body of ``POST /auth/refresh-token``."""
    refresh_token: Optional[str] = None


class UserSummary(CamelModel):
    """Public view of a user, without credentials."""
    id: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    company_id: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


class TokenPair(CamelModel):
    """Access and refresh token pair."""
    access_token: str
    refresh_token: str


class LoginResponse(TokenPair):
    """Tokens plus the authenticated user."""
    user: UserSummary


class UserCreatedResponse(CamelModel):
    """Acknowledgement for user creation endpoints."""
    message: str
    user: UserSummary = Field(..., description="Created user")
