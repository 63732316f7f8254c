"""Response and answer persistence."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload, selectinload

from survey_api.models.response import Answer, Response
from survey_api.models.survey import Survey
from survey_api.models.user import User


class ResponseRepository:
    """Queries over responses.

    Responses are append-only: there are no update or delete methods. They
    are removed only by the cascade when their survey is deleted.
    """

    def __init__(self, db: Session):
        self.db = db

    def add(self, response: Response) -> Response:
        self.db.add(response)
        self.db.flush()
        return response

    def list_for_survey(self, survey_id: str) -> list[Response]:
        """Responses of a survey, newest first, with answers, their questions
        and the respondent loaded."""
        return list(self.db.execute(
            select(Response)
            .options(
                selectinload(Response.answers).joinedload(Answer.question),
                joinedload(Response.respondent),
            )
            .where(Response.survey_id == survey_id)
            .order_by(Response.created_at.desc())
        ).unique().scalars())

    def recent(
        self,
        tenant_id: Optional[str],
        limit: int,
        creator_id: Optional[str] = None,
    ) -> list[Response]:
        """Most recent responses to surveys in the tenant (or by one creator)."""
        stmt = (
            select(Response)
            .join(Survey, Survey.id == Response.survey_id)
            .options(joinedload(Response.survey))
        )
        if tenant_id is not None:
            stmt = stmt.join(User, User.id == Survey.creator_id).where(User.company_id == tenant_id)
        if creator_id is not None:
            stmt = stmt.where(Survey.creator_id == creator_id)
        return list(self.db.execute(
            stmt.order_by(Response.created_at.desc()).limit(limit)
        ).unique().scalars())
