"""Bearer token authentication and role gating for FastAPI routes.

This module provides FastAPI dependencies that verify the ``Authorization``
header and enforce role requirements before any route handler runs.

Security: every non-public endpoint MUST depend on ``get_current_claims`` or
``require_roles``. Role checks are pure functions of the verified claims.
"""

from typing import Callable, Optional

from fastapi import Depends, Request

from survey_api.errors import AuthenticationError, AuthorizationError
from survey_api.logging_config import get_logger
from survey_api.models.enums import UserRole
from survey_api.schemas.auth import TokenClaims
from survey_api.services.authorization import is_permitted
from survey_api.services.token_service import TokenService

logger = get_logger(__name__)

BEARER_PREFIX = "bearer "


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Pull the token out of an ``Authorization: Bearer <token>`` header.

    Args:
        authorization: Raw header value

    Returns:
        The token, or None if the header is absent or not a bearer credential
    """
    if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


def get_current_claims(request: Request) -> TokenClaims:
    """FastAPI dependency returning verified claims of the caller.

    Raises:
        AuthenticationError(401): If the credential is missing, malformed,
            expired or fails signature verification
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        client_ip = request.client.host if request.client else "unknown"
        logger.info(
            f"Missing bearer credential from IP: {client_ip}",
            extra={"client_ip": client_ip, "path": request.url.path}
        )
        raise AuthenticationError("Authentication required")

    return TokenService.decode_access_token(token)


def get_optional_claims(request: Request) -> Optional[TokenClaims]:
    """FastAPI dependency for public endpoints that personalise when logged in.

    A missing header yields None. A header that is present but invalid is
    ignored as well, so a stale token never blocks a public submission.
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        return None
    try:
        return TokenService.decode_access_token(token)
    except AuthenticationError:
        logger.debug("Ignoring invalid bearer credential on public endpoint")
        return None


def require_roles(*roles: UserRole) -> Callable[..., TokenClaims]:
    """Build a dependency that admits only the given roles (plus super admins).

    Usage:
        router = APIRouter(dependencies=[Depends(require_roles(UserRole.COMPANY_ADMIN))])

        @router.get("/stats")
        def stats(claims: TokenClaims = Depends(require_roles(UserRole.COMPANY_ADMIN))):
            ...

    Raises:
        AuthenticationError(401): Via ``get_current_claims``
        AuthorizationError(403): If the caller's role is not admitted
    """
    required = frozenset(roles)

    def dependency(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
        if not is_permitted(claims.role, required):
            logger.warning(
                f"Role {claims.role.value} denied, requires one of "
                f"{sorted(role.value for role in required)}",
                extra={"user_id": claims.user_id}
            )
            raise AuthorizationError("You are not allowed to perform this action")
        return claims

    return dependency
