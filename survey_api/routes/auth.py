"""Authentication endpoints: login, registration, token refresh and logout."""

from fastapi import APIRouter, Depends, status

from survey_api.middleware.auth import get_current_claims
from survey_api.repositories import Repositories, get_repositories
from survey_api.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RegisterRequest,
    TokenClaims,
    TokenPair,
    UserCreatedResponse,
    UserSummary,
)
from survey_api.schemas.base import MessageResponse
from survey_api.services.auth_service import AuthService

router = APIRouter(prefix="/auth")


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, repos: Repositories = Depends(get_repositories)):
    """Exchange email and password for an access/refresh token pair."""
    tokens = AuthService(repos).login(payload.email, payload.password)
    return LoginResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        user=UserSummary.model_validate(tokens.user),
    )


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=UserCreatedResponse)
def register(payload: RegisterRequest, repos: Repositories = Depends(get_repositories)):
    """Register a company admin for an existing company."""
    user = AuthService(repos).register(
        payload.first_name,
        payload.last_name,
        payload.email,
        payload.password,
        payload.company_id,
    )
    return UserCreatedResponse(
        message="User registered successfully",
        user=UserSummary.model_validate(user),
    )


@router.post("/refresh-token", response_model=TokenPair)
def refresh_token(payload: RefreshRequest, repos: Repositories = Depends(get_repositories)):
    """Rotate a refresh token into a new token pair."""
    tokens = AuthService(repos).refresh(payload.refresh_token)
    return TokenPair(access_token=tokens.access_token, refresh_token=tokens.refresh_token)


@router.post("/logout", response_model=MessageResponse)
def logout(
    claims: TokenClaims = Depends(get_current_claims),
    repos: Repositories = Depends(get_repositories),
):
    AuthService(repos).logout(claims.user_id)
    return MessageResponse(message="Logged out successfully")
