"""Repositories: explicit, per-entity query objects.

Repositories are built once per request around the request's session and
handed to services, which own the transaction boundary.
"""

from dataclasses import dataclass, field

from fastapi import Depends
from sqlalchemy.orm import Session

from survey_api.models.database import get_db
from survey_api.repositories.companies import CompanyRepository, UserRepository
from survey_api.repositories.responses import ResponseRepository
from survey_api.repositories.surveys import QuestionRepository, SurveyRepository


@dataclass
class Repositories:
    """All repositories bound to one session (one unit of work)."""

    db: Session
    companies: CompanyRepository = field(init=False)
    users: UserRepository = field(init=False)
    surveys: SurveyRepository = field(init=False)
    questions: QuestionRepository = field(init=False)
    responses: ResponseRepository = field(init=False)

    def __post_init__(self) -> None:
        self.companies = CompanyRepository(self.db)
        self.users = UserRepository(self.db)
        self.surveys = SurveyRepository(self.db)
        self.questions = QuestionRepository(self.db)
        self.responses = ResponseRepository(self.db)

    def commit(self) -> None:
        """Commit the unit of work, rolling back if the commit fails."""
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise


def get_repositories(db: Session = Depends(get_db)) -> Repositories:
    """FastAPI dependency providing the request's repositories."""
    return Repositories(db)


__all__ = [
    "Repositories",
    "get_repositories",
    "CompanyRepository",
    "UserRepository",
    "SurveyRepository",
    "QuestionRepository",
    "ResponseRepository",
]
