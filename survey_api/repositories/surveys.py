"""Survey and question persistence.

Every query that can leak data across tenants takes ``tenant_id`` as an
explicit argument. ``tenant_id=None`` is reserved for super admins and
disables the filter.
"""

from typing import Optional

from sqlalchemy import Select, func, select, update
from sqlalchemy.orm import Session, selectinload

from survey_api.models.survey import Question, Survey
from survey_api.models.user import User


def _scope_to_tenant(stmt: Select, tenant_id: Optional[str]) -> Select:
    """Restrict a Survey query to surveys whose creator belongs to the tenant."""
    if tenant_id is None:
        return stmt
    return stmt.join(User, User.id == Survey.creator_id).where(User.company_id == tenant_id)


class SurveyRepository:
    """Queries over surveys."""

    def __init__(self, db: Session):
        self.db = db

    def add(self, survey: Survey) -> Survey:
        self.db.add(survey)
        self.db.flush()
        return survey

    def delete(self, survey: Survey) -> None:
        self.db.delete(survey)
        self.db.flush()

    def get(self, survey_id: str, with_questions: bool = False) -> Optional[Survey]:
        """Unscoped lookup, used by the public submission endpoint only."""
        stmt = select(Survey).where(Survey.id == survey_id)
        if with_questions:
            stmt = stmt.options(selectinload(Survey.questions).selectinload(Question.options))
        return self.db.execute(stmt).scalar_one_or_none()

    def get_owned(
        self,
        survey_id: str,
        owner_id: str,
        tenant_id: Optional[str],
        with_questions: bool = False,
    ) -> Optional[Survey]:
        """Survey by id if created by ``owner_id`` within ``tenant_id``."""
        stmt = select(Survey).where(Survey.id == survey_id, Survey.creator_id == owner_id)
        stmt = _scope_to_tenant(stmt, tenant_id)
        if with_questions:
            stmt = stmt.options(selectinload(Survey.questions).selectinload(Question.options))
        return self.db.execute(stmt).scalar_one_or_none()

    def get_in_tenant(
        self,
        survey_id: str,
        tenant_id: Optional[str],
        with_questions: bool = False,
    ) -> Optional[Survey]:
        """Survey by id if its creator belongs to ``tenant_id``."""
        stmt = _scope_to_tenant(select(Survey).where(Survey.id == survey_id), tenant_id)
        if with_questions:
            stmt = stmt.options(selectinload(Survey.questions).selectinload(Question.options))
        return self.db.execute(stmt).scalar_one_or_none()

    def list_owned_with_question_counts(
        self,
        owner_id: str,
        tenant_id: Optional[str],
    ) -> list[tuple[Survey, int]]:
        """Surveys created by ``owner_id``, newest first, with question counts."""
        question_counts = (
            select(Question.survey_id, func.count(Question.id).label("question_count"))
            .group_by(Question.survey_id)
            .subquery()
        )
        stmt = (
            select(Survey, func.coalesce(question_counts.c.question_count, 0))
            .outerjoin(question_counts, question_counts.c.survey_id == Survey.id)
            .where(Survey.creator_id == owner_id)
        )
        stmt = _scope_to_tenant(stmt, tenant_id).order_by(Survey.created_at.desc())
        return [(survey, count) for survey, count in self.db.execute(stmt).all()]

    def count(self, tenant_id: Optional[str], is_published: Optional[bool] = None) -> int:
        stmt = _scope_to_tenant(select(func.count(Survey.id)), tenant_id)
        if is_published is not None:
            stmt = stmt.where(Survey.is_published.is_(is_published))
        return self.db.execute(stmt).scalar_one()

    def recent(
        self,
        tenant_id: Optional[str],
        limit: int,
        creator_id: Optional[str] = None,
    ) -> list[Survey]:
        stmt = _scope_to_tenant(select(Survey), tenant_id)
        if creator_id is not None:
            stmt = stmt.where(Survey.creator_id == creator_id)
        return list(self.db.execute(
            stmt.order_by(Survey.created_at.desc()).limit(limit)
        ).scalars())


class QuestionRepository:
    """Queries over questions. Callers resolve the parent survey through
    ``SurveyRepository`` first, which carries the tenant check."""

    def __init__(self, db: Session):
        self.db = db

    def add(self, question: Question) -> Question:
        self.db.add(question)
        self.db.flush()
        return question

    def delete(self, question: Question) -> None:
        self.db.delete(question)
        self.db.flush()

    def get_in_survey(self, question_id: str, survey_id: str) -> Optional[Question]:
        return self.db.execute(
            select(Question)
            .options(selectinload(Question.options))
            .where(Question.id == question_id, Question.survey_id == survey_id)
        ).scalar_one_or_none()

    def list_for_survey(self, survey_id: str) -> list[Question]:
        return list(self.db.execute(
            select(Question)
            .options(selectinload(Question.options))
            .where(Question.survey_id == survey_id)
            .order_by(Question.order, Question.created_at)
        ).scalars())

    def count_for_survey(self, survey_id: str) -> int:
        return self.db.execute(
            select(func.count(Question.id)).where(Question.survey_id == survey_id)
        ).scalar_one()

    def set_order(self, survey_id: str, question_id: str, order: int) -> int:
        """Update one question's order; returns rows affected (0 if unknown)."""
        result = self.db.execute(
            update(Question)
            .where(Question.id == question_id, Question.survey_id == survey_id)
            .values(order=order)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount
