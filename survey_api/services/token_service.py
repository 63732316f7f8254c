"""Access and refresh token issuance and verification using PyJWT.

Both token kinds carry the same claims (userId, email, role, companyId) plus
a ``type`` marker so a refresh token can never be used as an access token,
even when both are signed with the same secret.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt

from survey_api.config import get_settings
from survey_api.errors import AuthenticationError
from survey_api.logging_config import get_logger
from survey_api.models.user import User
from survey_api.schemas.auth import TokenClaims

logger = get_logger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class TokenService:
    """Issues and verifies HMAC-signed JWTs."""

    @staticmethod
    def _build_payload(user: User, token_type: str, lifetime: timedelta) -> Dict[str, Any]:
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "userId": user.id,
            "email": user.email,
            "role": user.role.value,
            "type": token_type,
            "iat": now,
            "exp": now + lifetime,
            "jti": uuid.uuid4().hex,
        }
        if user.company_id:
            payload["companyId"] = user.company_id
        return payload

    @staticmethod
    def create_access_token(user: User) -> str:
        """Issue a short-lived access token for ``user``."""
        settings = get_settings()
        payload = TokenService._build_payload(
            user,
            ACCESS_TOKEN_TYPE,
            timedelta(minutes=settings.access_token_expire_minutes),
        )
        return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)

    @staticmethod
    def create_refresh_token(user: User) -> str:
        """Issue a long-lived refresh token for ``user``."""
        settings = get_settings()
        payload = TokenService._build_payload(
            user,
            REFRESH_TOKEN_TYPE,
            timedelta(days=settings.refresh_token_expire_days),
        )
        return jwt.encode(payload, settings.refresh_secret, algorithm=settings.jwt_algorithm)

    @staticmethod
    def _decode(token: str, secret: str, expected_type: str) -> TokenClaims:
        settings = get_settings()
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[settings.jwt_algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            logger.info(f"Rejected expired {expected_type} token")
            raise AuthenticationError("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.info(f"Rejected invalid {expected_type} token: {type(e).__name__}")
            raise AuthenticationError("Invalid token")

        if payload.get("type") != expected_type:
            raise AuthenticationError("Invalid token")

        try:
            return TokenClaims.model_validate(payload)
        except ValueError:
            raise AuthenticationError("Invalid token")

    @staticmethod
    def decode_access_token(token: str) -> TokenClaims:
        """Verify an access token and return its claims.

        Raises:
            AuthenticationError: If the token is malformed, expired, signed
                with another key, or is not an access token
        """
        settings = get_settings()
        return TokenService._decode(token, settings.jwt_secret, ACCESS_TOKEN_TYPE)

    @staticmethod
    def decode_refresh_token(token: str) -> TokenClaims:
        """Verify a refresh token and return its claims.

        Raises:
            AuthenticationError: If the token is not a valid refresh token
        """
        settings = get_settings()
        return TokenService._decode(token, settings.refresh_secret, REFRESH_TOKEN_TYPE)
