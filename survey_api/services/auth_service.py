"""Authentication flows: login, registration, token refresh and logout.

Also home to ``create_account``, the single place where user rows are
created, shared by registration and the admin user-management endpoints.
"""

from dataclasses import dataclass
from typing import Optional

from email_validator import EmailNotValidError, validate_email

from survey_api.errors import (
    AuthenticationError,
    ConflictError,
    ValidationError,
)
from survey_api.logging_config import get_logger
from survey_api.models.database import utcnow
from survey_api.models.enums import UserRole
from survey_api.models.user import User
from survey_api.repositories import Repositories
from survey_api.services.password_hasher import PasswordHasher
from survey_api.services.token_service import TokenService

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


@dataclass
class IssuedTokens:
    """Token pair handed to a client, with the user it was issued for."""
    user: User
    access_token: str
    refresh_token: str


def normalize_email(email: str) -> str:
    """Validate email syntax and return it normalized (lower-cased domain).

    Raises:
        ValidationError: If the address is not syntactically valid
    """
    try:
        return validate_email(email, check_deliverability=False).normalized
    except EmailNotValidError as e:
        raise ValidationError(f"Invalid email address: {e}")


def create_account(
    repos: Repositories,
    first_name: Optional[str],
    last_name: Optional[str],
    email: Optional[str],
    password: Optional[str],
    role: UserRole,
    company_id: Optional[str],
) -> User:
    """Create an active user; the caller commits.

    Raises:
        ValidationError: If a field is missing, the email is malformed or
            the company does not exist
        ConflictError: If the email is already in use
    """
    if not first_name or not last_name or not email or not password:
        raise ValidationError("All fields are required")
    if role != UserRole.SUPER_ADMIN and not company_id:
        raise ValidationError("All fields are required")

    email = normalize_email(email)
    if repos.users.get_by_email(email) is not None:
        raise ConflictError("This email is already in use")

    if company_id is not None and repos.companies.get(company_id) is None:
        raise ValidationError("Invalid company")

    user = User(
        first_name=first_name,
        last_name=last_name,
        email=email,
        password_hash=PasswordHasher.hash_password(password),
        role=role,
        company_id=company_id,
        is_active=True,
    )
    repos.users.add(user)
    logger.info(
        f"Created {role.value} account {user.id}",
        extra={"user_id": user.id, "company_id": company_id}
    )
    return user


class AuthService:
    """Login, registration, refresh and logout."""

    def __init__(self, repos: Repositories):
        self.repos = repos

    def _issue(self, user: User) -> IssuedTokens:
        tokens = IssuedTokens(
            user=user,
            access_token=TokenService.create_access_token(user),
            refresh_token=TokenService.create_refresh_token(user),
        )
        user.refresh_token = tokens.refresh_token
        return tokens

    @staticmethod
    def _can_sign_in(user: Optional[User]) -> bool:
        if user is None or not user.is_active:
            return False
        if user.company is not None and not user.company.is_active:
            return False
        return True

    def login(self, email: Optional[str], password: Optional[str]) -> IssuedTokens:
        """Verify credentials and issue a token pair.

        Raises:
            ValidationError: If email or password is missing
            AuthenticationError: If the credentials are wrong or the account
                (or its company) is inactive
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = self.repos.users.get_by_email(email)
        if not self._can_sign_in(user):
            logger.warning("Login rejected: unknown or inactive account")
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not PasswordHasher.verify_password(password, user.password_hash):
            logger.warning("Login rejected: wrong password", extra={"user_id": user.id})
            raise AuthenticationError(INVALID_CREDENTIALS)

        tokens = self._issue(user)
        user.last_login = utcnow()
        self.repos.commit()

        logger.info("Login succeeded", extra={"user_id": user.id})
        return tokens

    def register(
        self,
        first_name: Optional[str],
        last_name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        company_id: Optional[str],
    ) -> User:
        """Register a company admin for an existing company."""
        user = create_account(
            self.repos,
            first_name,
            last_name,
            email,
            password,
            UserRole.COMPANY_ADMIN,
            company_id,
        )
        self.repos.commit()
        return user

    def refresh(self, refresh_token: Optional[str]) -> IssuedTokens:
        """Exchange a refresh token for a new pair, invalidating the old one.

        Raises:
            ValidationError: If no token is supplied
            AuthenticationError: If the token is invalid, expired, not the
                one currently stored for the user, or the user is inactive
        """
        if not refresh_token:
            raise ValidationError("Refresh token is required")

        claims = TokenService.decode_refresh_token(refresh_token)
        user = self.repos.users.get(claims.user_id)
        if not self._can_sign_in(user) or user.refresh_token != refresh_token:
            logger.warning("Refresh rejected", extra={"user_id": claims.user_id})
            raise AuthenticationError("Invalid refresh token")

        tokens = self._issue(user)
        self.repos.commit()
        return tokens

    def logout(self, user_id: str) -> None:
        """Forget the stored refresh token of ``user_id``."""
        user = self.repos.users.get(user_id)
        if user is not None:
            user.refresh_token = None
            self.repos.commit()
            logger.info("Logged out", extra={"user_id": user_id})
