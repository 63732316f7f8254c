"""Response and Answer models for collected survey submissions.

This module defines the Response model, one row per submission, and the
Answer model which stores each per-question value of that submission.
Both are written once at submission time and never modified afterwards.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    JSON,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from survey_api.models.database import Base, generate_uuid, utcnow


class Response(Base):
    """A single submission to a survey.

    Answers are automatically deleted when the parent response is deleted
    (CASCADE), and responses go with their survey.

    Attributes:
        id: UUID primary key
        survey_id: Foreign key to surveys table
        respondent_id: Authenticated respondent (NULL for anonymous submissions)
        anonymous_id: Generated identifier for anonymous submissions
        response_metadata: userAgent, ipAddress, completionTime (ms), submittedAt
        is_completed: Whether every required question was answered
        created_at: When the response was submitted
        answers: Relationship to child Answers
    """

    __tablename__ = "responses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)

    survey_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("surveys.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Foreign key to surveys table"
    )
    respondent_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        comment="Authenticated respondent, NULL when anonymous"
    )
    anonymous_id: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        comment="Generated identifier for anonymous respondents"
    )

    response_metadata: Mapped[Optional[dict]] = mapped_column(
        "metadata",
        JSON,
        nullable=True,
        comment="User agent, IP address, completion time"
    )
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        comment="When the response was submitted"
    )

    survey: Mapped["Survey"] = relationship("Survey", back_populates="responses")
    respondent: Mapped[Optional["User"]] = relationship("User")
    answers: Mapped[list["Answer"]] = relationship(
        "Answer",
        back_populates="response",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        # Newest-first listing per survey
        Index("idx_response_survey_created", "survey_id", "created_at"),
    )

    @property
    def completion_time(self) -> float:
        """Completion time in milliseconds, 0 when not reported."""
        value = (self.response_metadata or {}).get("completionTime")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return 0
        return value

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<Response(id={self.id}, "
            f"survey_id={self.survey_id}, "
            f"is_completed={self.is_completed})>"
        )


class Answer(Base):
    """Answer to one question within a response.

    ``value`` holds exactly one field matching the question type, e.g.
    ``{"choice": "yes"}`` for single choice or ``{"rating": 4}`` for rating.
    See ``survey_api.schemas.response`` for the variants.
    """

    __tablename__ = "answers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)

    response_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("responses.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    question_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    value: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    answered_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow
    )

    response: Mapped["Response"] = relationship("Response", back_populates="answers")
    question: Mapped["Question"] = relationship("Question")

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<Answer(id={self.id}, "
            f"response_id={self.response_id}, "
            f"question_id={self.question_id})>"
        )
