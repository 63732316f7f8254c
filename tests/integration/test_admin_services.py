"""Integration tests for authentication, company administration and activity feeds."""

import pytest

from survey_api.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from survey_api.models.database import as_utc
from survey_api.models.enums import UserRole
from survey_api.models.response import Response
from survey_api.schemas.company import (
    CompanyAdminCreate,
    CompanyCreate,
    CompanyProfileUpdate,
    CompanyUpdate,
    UserCreate,
)
from survey_api.services.activity import ActivityFeedService
from survey_api.services.auth_service import AuthService
from survey_api.services.company_service import CompanyService, require_tenant
from survey_api.services.token_service import TokenService


class TestAuthService:
    """Tests for AuthService."""

    def test_login_issues_tokens_and_records_login(self, repos, user_password, editor):
        tokens = AuthService(repos).login("editor@acme.io", user_password)

        assert tokens.user.id == editor.id
        assert editor.last_login is not None
        assert editor.refresh_token == tokens.refresh_token
        assert TokenService.decode_access_token(tokens.access_token).user_id == editor.id

    def test_login_email_case_insensitive(self, repos, user_password, editor):
        assert AuthService(repos).login("Editor@ACME.io", user_password).user.id == editor.id

    @pytest.mark.parametrize("email,correct_password", [
        ("editor@acme.io", False),
        ("nobody@acme.io", True),
    ])
    def test_login_failures_share_one_message(self, repos, user_password, editor, email, correct_password):
        password = user_password if correct_password else "wrong-password"
        with pytest.raises(AuthenticationError, match="Invalid credentials"):
            AuthService(repos).login(email, password)

    def test_login_requires_both_fields(self, repos):
        with pytest.raises(ValidationError):
            AuthService(repos).login("editor@acme.io", None)

    def test_inactive_user_cannot_login(self, repos, user_password, db_session, editor):
        editor.is_active = False
        db_session.commit()

        with pytest.raises(AuthenticationError):
            AuthService(repos).login("editor@acme.io", user_password)

    def test_inactive_company_blocks_login(self, repos, user_password, db_session, editor, company):
        company.is_active = False
        db_session.commit()

        with pytest.raises(AuthenticationError):
            AuthService(repos).login("editor@acme.io", user_password)

    def test_register_creates_company_admin(self, repos, company):
        user = AuthService(repos).register("New", "Admin", "new.admin@acme.io", "pw-123456", company.id)

        assert user.role == UserRole.COMPANY_ADMIN
        assert user.company_id == company.id
        assert user.is_active is True
        assert user.password_hash != "pw-123456"

    def test_register_duplicate_email(self, repos, editor, company):
        with pytest.raises(ConflictError):
            AuthService(repos).register("Dup", "User", "EDITOR@acme.io", "pw", company.id)

    def test_register_unknown_company(self, repos):
        with pytest.raises(ValidationError, match="Invalid company"):
            AuthService(repos).register("New", "Admin", "new@acme.io", "pw", "no-such-company")

    def test_register_missing_fields(self, repos, company):
        with pytest.raises(ValidationError, match="All fields are required"):
            AuthService(repos).register("New", None, "new@acme.io", "pw", company.id)

    def test_register_invalid_email(self, repos, company):
        with pytest.raises(ValidationError, match="Invalid email"):
            AuthService(repos).register("New", "Admin", "not-an-email", "pw", company.id)

    def test_refresh_rotates_tokens(self, repos, user_password, editor):
        service = AuthService(repos)
        first = service.login("editor@acme.io", user_password)

        second = service.refresh(first.refresh_token)

        assert second.refresh_token != first.refresh_token
        assert editor.refresh_token == second.refresh_token
        with pytest.raises(AuthenticationError):
            service.refresh(first.refresh_token)

    def test_refresh_requires_token(self, repos):
        with pytest.raises(ValidationError):
            AuthService(repos).refresh(None)

    def test_logout_clears_refresh_token(self, repos, user_password, editor):
        service = AuthService(repos)
        tokens = service.login("editor@acme.io", user_password)

        service.logout(editor.id)

        assert editor.refresh_token is None
        with pytest.raises(AuthenticationError):
            service.refresh(tokens.refresh_token)


class TestCompanyService:
    """Tests for CompanyService."""

    def test_create_company(self, repos):
        company = CompanyService(repos).create_company(CompanyCreate.model_validate({
            "name": "Initech",
            "slug": "initech",
            "settings": {"features": {"maxSurveys": 5}},
        }))

        assert company.is_active is True
        assert company.settings == {"features": {"maxSurveys": 5}}

    def test_create_company_requires_name_and_slug(self, repos):
        with pytest.raises(ValidationError):
            CompanyService(repos).create_company(CompanyCreate(name="Initech"))

    def test_duplicate_slug(self, repos, company):
        with pytest.raises(ConflictError):
            CompanyService(repos).create_company(CompanyCreate(name="Again", slug=company.slug))

    def test_update_company_keeps_absent_fields(self, repos, company):
        updated = CompanyService(repos).update_company(company.id, CompanyUpdate(name=""))

        assert updated.name == "Acme Research"

    def test_get_missing_company(self, repos):
        with pytest.raises(NotFoundError):
            CompanyService(repos).get_company("missing")

    def test_deactivate_company_and_users(self, repos, company, company_admin, editor, other_editor):
        affected = CompanyService(repos).deactivate_company(company.id)

        assert affected == 2
        assert company.is_active is False
        assert editor.is_active is False
        assert other_editor.is_active is True

    def test_create_company_admin(self, repos, other_company):
        user = CompanyService(repos).create_company_admin(CompanyAdminCreate(
            first_name="Olga",
            last_name="Admin",
            email="olga@globex.io",
            password="pw-123456",
            company_id=other_company.id,
        ))

        assert user.role == UserRole.COMPANY_ADMIN
        assert user.company_id == other_company.id

    def test_system_stats(self, repos, company, other_company, super_admin, editor, db_session):
        other_company.is_active = False
        db_session.commit()

        stats = CompanyService(repos).system_stats()

        assert (stats.companies.total, stats.companies.active, stats.companies.inactive) == (2, 1, 1)
        assert (stats.users.total, stats.users.active, stats.users.inactive) == (2, 2, 0)

    def test_profile_update(self, repos, company):
        updated = CompanyService(repos).update_profile(company.id, CompanyProfileUpdate(
            website="https://acme.io",
            phone="",
        ))

        assert updated.website == "https://acme.io"
        assert updated.name == "Acme Research"
        assert updated.phone is None

    @pytest.mark.parametrize("role", ["editor", "viewer"])
    def test_create_user_assignable_roles(self, repos, company, role):
        user = CompanyService(repos).create_user(company.id, UserCreate(
            first_name="New",
            last_name="Member",
            email=f"{role}.new@acme.io",
            password="pw-123456",
            role=role,
        ))

        assert user.role == UserRole(role)
        assert user.company_id == company.id

    @pytest.mark.parametrize("role", ["company_admin", "super_admin", "owner"])
    def test_create_user_rejects_other_roles(self, repos, company, role):
        with pytest.raises(ValidationError, match="Invalid role"):
            CompanyService(repos).create_user(company.id, UserCreate(
                first_name="New",
                last_name="Member",
                email="x@acme.io",
                password="pw-123456",
                role=role,
            ))

    def test_list_users_newest_first(self, repos, company, company_admin, editor, other_editor):
        users = CompanyService(repos).list_users(company.id)

        assert [user.id for user in users] == [editor.id, company_admin.id]

    def test_company_stats(self, repos, company, company_admin, published_survey, editor, db_session):
        stats = CompanyService(repos).company_stats(company.id)

        assert (stats.users.total, stats.users.active) == (2, 2)
        assert (stats.surveys.total, stats.surveys.active, stats.surveys.draft) == (1, 1, 0)

    def test_require_tenant(self, super_admin, editor, claims_for):
        assert require_tenant(claims_for(editor)) == editor.company_id
        with pytest.raises(AuthenticationError, match="Company information not found"):
            require_tenant(claims_for(super_admin))


class TestActivityFeeds:
    """Tests for ActivityFeedService."""

    def test_company_feed(self, repos, db_session, published_survey, company_admin, other_editor, company):
        db_session.add(Response(survey_id=published_survey.id, anonymous_id="anon_1_abc"))
        db_session.commit()

        feed = ActivityFeedService(repos).company_feed(company.id)

        types = {activity.type for activity in feed}
        assert types == {"survey_created", "survey_response", "user_created"}
        assert all(activity.id.split("-", 1)[0] in {"survey", "response", "user"} for activity in feed)
        assert not any(activity.id == f"user-{other_editor.id}" for activity in feed)
        timestamps = [as_utc(activity.created_at) for activity in feed]
        assert timestamps == sorted(timestamps, reverse=True)

    def test_system_feed_includes_companies(self, repos, company, other_company, super_admin):
        feed = ActivityFeedService(repos).system_feed()

        assert f"company-{company.id}" in {activity.id for activity in feed}
        assert len(feed) <= 10

    def test_author_feed(self, repos, published_survey, editor, company):
        feed = ActivityFeedService(repos).author_feed(editor.id, company.id)

        assert [activity.message for activity in feed] == ['Survey "Satisfaction Q1" was created']
