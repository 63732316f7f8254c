"""Pytest configuration and shared fixtures.

This module provides fixtures and configuration used across all tests.
"""

import os
from typing import Callable, Generator, Optional

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Set required environment variables for tests BEFORE importing app modules
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test_jwt_secret_for_testing_only")
os.environ.setdefault("JWT_REFRESH_SECRET", "test_jwt_refresh_secret_for_testing_only")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ENVIRONMENT", "development")

from fastapi.testclient import TestClient

from survey_api.main import app
from survey_api.models.company import Company
from survey_api.models.database import Base, get_db
from survey_api.models.enums import QuestionType, SurveyStatus, UserRole
from survey_api.models.survey import Question, QuestionOption, Survey
from survey_api.models.user import User
from survey_api.repositories import Repositories
from survey_api.schemas.auth import TokenClaims
from survey_api.services.password_hasher import PasswordHasher
from survey_api.services.token_service import TokenService

TEST_PASSWORD = "Sup3r-secret!"


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine with SQLite in-memory database.

    Yields:
        Engine: SQLAlchemy engine for testing

    Note:
        StaticPool keeps one connection so the in-memory database is shared
        between the test body and requests served by the TestClient thread.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,  # Set to True for SQL debugging
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Enable foreign key support for SQLite
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    # Create all tables
    Base.metadata.create_all(engine)

    yield engine

    # Drop all tables after test
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(
        bind=db_engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture(scope="function")
def db_session(session_factory) -> Generator[Session, None, None]:
    """Create a test database session.

    Yields:
        Session: SQLAlchemy session for testing
    """
    session = session_factory()

    yield session

    session.rollback()
    session.close()


@pytest.fixture
def repos(db_session) -> Repositories:
    return Repositories(db_session)


@pytest.fixture
def client(session_factory) -> Generator[TestClient, None, None]:
    """TestClient whose requests use the test database."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# Domain fixtures


def _make_company(db_session: Session, name: str, slug: str) -> Company:
    company = Company(name=name, slug=slug, is_active=True)
    db_session.add(company)
    db_session.commit()
    return company


def _make_user(
    db_session: Session,
    email: str,
    role: UserRole,
    company: Optional[Company],
    first_name: str = "Test",
    last_name: str = "User",
) -> User:
    user = User(
        first_name=first_name,
        last_name=last_name,
        email=email,
        password_hash=PasswordHasher.hash_password(TEST_PASSWORD),
        role=role,
        company_id=company.id if company else None,
        is_active=True,
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def user_password() -> str:
    """Plaintext password of every fixture user."""
    return TEST_PASSWORD


@pytest.fixture
def company(db_session) -> Company:
    return _make_company(db_session, "Acme Research", "acme-research")


@pytest.fixture
def other_company(db_session) -> Company:
    return _make_company(db_session, "Globex Insights", "globex-insights")


@pytest.fixture
def super_admin(db_session) -> User:
    return _make_user(db_session, "root@platform.io", UserRole.SUPER_ADMIN, None, "Ada", "Root")


@pytest.fixture
def company_admin(db_session, company) -> User:
    return _make_user(db_session, "admin@acme.io", UserRole.COMPANY_ADMIN, company, "Grace", "Admin")


@pytest.fixture
def editor(db_session, company) -> User:
    return _make_user(db_session, "editor@acme.io", UserRole.EDITOR, company, "Edgar", "Editor")


@pytest.fixture
def viewer(db_session, company) -> User:
    return _make_user(db_session, "viewer@acme.io", UserRole.VIEWER, company, "Vera", "Viewer")


@pytest.fixture
def other_editor(db_session, other_company) -> User:
    return _make_user(db_session, "editor@globex.io", UserRole.EDITOR, other_company, "Otto", "Outsider")


@pytest.fixture
def claims_for() -> Callable[[User], TokenClaims]:
    """Factory for the verified claims a user's access token would carry."""

    def _claims(user: User) -> TokenClaims:
        return TokenClaims(
            user_id=user.id,
            email=user.email,
            role=user.role,
            company_id=user.company_id,
        )

    return _claims


@pytest.fixture
def auth_headers() -> Callable[[User], dict]:
    """Factory for Authorization headers carrying a fresh access token."""

    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {TokenService.create_access_token(user)}"}

    return _headers


@pytest.fixture
def draft_survey(db_session, editor) -> Survey:
    """Unpublished survey by ``editor`` with a required single choice
    question, an optional rating question and an optional text question."""
    survey = Survey(title="Satisfaction Q1", creator_id=editor.id)
    survey.questions = [
        Question(
            text="Would you recommend us?",
            type=QuestionType.SINGLE_CHOICE,
            is_required=True,
            order=0,
            options=[
                QuestionOption(text="yes", order=0),
                QuestionOption(text="no", order=1),
            ],
        ),
        Question(
            text="How satisfied are you?",
            type=QuestionType.RATING,
            is_required=False,
            order=1,
            validations={"min": 1, "max": 5},
        ),
        Question(
            text="Anything else?",
            type=QuestionType.TEXT,
            is_required=False,
            order=2,
            validations={"maxLength": 200},
        ),
    ]
    db_session.add(survey)
    db_session.commit()
    return survey


@pytest.fixture
def published_survey(db_session, draft_survey) -> Survey:
    draft_survey.is_published = True
    draft_survey.status = SurveyStatus.ACTIVE
    db_session.commit()
    return draft_survey
