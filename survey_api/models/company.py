"""Company model: the tenant that owns users and, through them, surveys."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from survey_api.models.database import Base, generate_uuid, utcnow


class Company(Base):
    """A tenant.

    Attributes:
        id: UUID primary key
        name: Display name
        slug: Unique URL-safe identifier
        logo: Logo URL
        description: Free-form description
        website: Company website
        address: Postal address
        phone: Contact phone number
        settings: Nested JSON settings (``theme`` colours, ``features`` limits)
        is_active: Inactive companies and their users cannot log in
        users: Users belonging to this company
    """

    __tablename__ = "companies"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        index=True,
        comment="Unique URL-safe company identifier"
    )

    # Contact fields
    logo: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    website: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    settings: Mapped[Optional[dict]] = mapped_column(
        JSON,
        nullable=True,
        comment="Theme colours and feature limits"
    )

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

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

    users: Mapped[list["User"]] = relationship(
        "User",
        back_populates="company",
        order_by="User.created_at.desc()",
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<Company(id={self.id}, "
            f"slug={self.slug}, "
            f"is_active={self.is_active})>"
        )
