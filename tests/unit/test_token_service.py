"""Unit tests for JWT issuance and verification."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from survey_api.config import get_settings
from survey_api.errors import AuthenticationError
from survey_api.models.enums import UserRole
from survey_api.models.user import User
from survey_api.services.token_service import TokenService


@pytest.fixture
def user():
    return User(
        id="user-42",
        email="editor@acme.io",
        first_name="Edgar",
        last_name="Editor",
        role=UserRole.EDITOR,
        company_id="company-7",
    )


@pytest.fixture
def super_admin():
    return User(
        id="root-1",
        email="root@platform.io",
        first_name="Ada",
        last_name="Root",
        role=UserRole.SUPER_ADMIN,
        company_id=None,
    )


class TestTokenService:
    """Tests for TokenService."""

    def test_access_token_round_trip(self, user):
        claims = TokenService.decode_access_token(TokenService.create_access_token(user))

        assert claims.user_id == "user-42"
        assert claims.email == "editor@acme.io"
        assert claims.role == UserRole.EDITOR
        assert claims.company_id == "company-7"
        assert claims.type == "access"
        assert claims.tenant_id == "company-7"

    def test_super_admin_token_has_no_company(self, super_admin):
        token = TokenService.create_access_token(super_admin)
        payload = jwt.decode(token, options={"verify_signature": False})

        assert "companyId" not in payload
        assert TokenService.decode_access_token(token).tenant_id is None

    def test_access_token_expiry_matches_settings(self, user):
        token = TokenService.create_access_token(user)
        payload = jwt.decode(token, options={"verify_signature": False})

        lifetime = payload["exp"] - payload["iat"]
        assert lifetime == get_settings().access_token_expire_minutes * 60

    def test_tokens_issued_together_differ(self, user):
        assert TokenService.create_access_token(user) != TokenService.create_access_token(user)
        assert TokenService.create_refresh_token(user) != TokenService.create_refresh_token(user)

    def test_refresh_token_round_trip(self, user):
        claims = TokenService.decode_refresh_token(TokenService.create_refresh_token(user))

        assert claims.user_id == "user-42"
        assert claims.type == "refresh"

    def test_refresh_token_rejected_as_access_token(self, user):
        with pytest.raises(AuthenticationError):
            TokenService.decode_access_token(TokenService.create_refresh_token(user))

    def test_access_token_rejected_as_refresh_token(self, user):
        with pytest.raises(AuthenticationError):
            TokenService.decode_refresh_token(TokenService.create_access_token(user))

    def test_expired_token_rejected(self):
        settings = get_settings()
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = jwt.encode(
            {
                "userId": "user-42",
                "email": "editor@acme.io",
                "role": "editor",
                "companyId": "company-7",
                "type": "access",
                "iat": past,
                "exp": past + timedelta(minutes=1),
            },
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(AuthenticationError, match="expired"):
            TokenService.decode_access_token(token)

    def test_token_signed_with_other_key_rejected(self, user):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {
                "userId": user.id,
                "email": user.email,
                "role": "editor",
                "companyId": user.company_id,
                "type": "access",
                "iat": now,
                "exp": now + timedelta(minutes=5),
            },
            "some-other-secret",
            algorithm="HS256",
        )

        with pytest.raises(AuthenticationError, match="Invalid token"):
            TokenService.decode_access_token(token)

    def test_garbage_rejected(self):
        with pytest.raises(AuthenticationError):
            TokenService.decode_access_token("not.a.token")

    def test_non_admin_claims_without_company_rejected(self):
        settings = get_settings()
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {
                "userId": "user-42",
                "email": "editor@acme.io",
                "role": "company_admin",
                "type": "access",
                "iat": now,
                "exp": now + timedelta(minutes=5),
            },
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(AuthenticationError):
            TokenService.decode_access_token(token)
