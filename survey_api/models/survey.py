"""Survey, Question and QuestionOption models.

A survey is authored as a draft, gets questions with ordered options, and is
then published. Publishing freezes the structure; see the survey service for
the publish-lock rules.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from survey_api.models.database import Base, generate_uuid, utcnow
from survey_api.models.enums import QuestionType, SurveyStatus


def _enum_values(enum) -> list[str]:
    return [member.value for member in enum]


class Survey(Base):
    """A survey authored by a user.

    Attributes:
        id: UUID primary key
        title: Survey title
        description: Optional description
        is_published: Whether the survey is live (structure is then frozen)
        status: One of ``SurveyStatus``
        start_date: Submissions are rejected before this instant
        end_date: Submissions are rejected after this instant
        is_password_protected: Whether respondents must supply a password
        password_hash: bcrypt hash of the respondent password
        allow_anonymous: Whether unauthenticated respondents may submit
        creator_id: Author; the author's company is the survey's tenant
    """

    __tablename__ = "surveys"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)

    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[SurveyStatus] = mapped_column(
        Enum(SurveyStatus, native_enum=False, length=20, values_callable=_enum_values),
        nullable=False,
        default=SurveyStatus.DRAFT
    )

    # Availability window
    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Access settings
    is_password_protected: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    allow_anonymous: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    creator_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
        index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow
    )

    creator: Mapped["User"] = relationship("User", back_populates="surveys")
    questions: Mapped[list["Question"]] = relationship(
        "Question",
        back_populates="survey",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Question.order",
    )
    responses: Mapped[list["Response"]] = relationship(
        "Response",
        back_populates="survey",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<Survey(id={self.id}, "
            f"title={self.title!r}, "
            f"is_published={self.is_published})>"
        )


class Question(Base):
    """A question within a survey.

    Attributes:
        id: UUID primary key
        survey_id: Parent survey
        text: Question text
        type: One of ``QuestionType``
        is_required: Whether a response must answer this question to count as completed
        order: Sort key within the survey (not unique)
        validations: Optional rules (minLength, maxLength, min, max, pattern)
        options: Choices for single/multiple choice questions
    """

    __tablename__ = "questions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)

    survey_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("surveys.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    text: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[QuestionType] = mapped_column(
        Enum(QuestionType, native_enum=False, length=20, values_callable=_enum_values),
        nullable=False,
        default=QuestionType.TEXT
    )
    is_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    validations: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow
    )

    survey: Mapped["Survey"] = relationship("Survey", back_populates="questions")
    options: Mapped[list["QuestionOption"]] = relationship(
        "QuestionOption",
        back_populates="question",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="QuestionOption.order",
    )

    __table_args__ = (
        Index("idx_question_survey_order", "survey_id", "order"),
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<Question(id={self.id}, "
            f"survey_id={self.survey_id}, "
            f"type={self.type.value if self.type else None}, "
            f"order={self.order})>"
        )


class QuestionOption(Base):
    """A selectable option of a choice question.

    ``option_metadata`` is stored in the ``metadata`` column; the attribute
    name differs because ``metadata`` is reserved on declarative classes.
    """

    __tablename__ = "question_options"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)

    question_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    text: Mapped[str] = mapped_column(String(500), nullable=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    option_metadata: Mapped[Optional[dict]] = mapped_column(
        "metadata",
        JSON,
        nullable=True,
        comment="Optional value, color and icon"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow
    )

    question: Mapped["Question"] = relationship("Question", back_populates="options")

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<QuestionOption(id={self.id}, text={self.text!r}, order={self.order})>"
