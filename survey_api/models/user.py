"""User model for company members and platform administrators."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from survey_api.models.database import Base, generate_uuid, utcnow
from survey_api.models.enums import UserRole


class User(Base):
    """An account that can authenticate against the API.

    Attributes:
        id: UUID primary key
        first_name: Given name
        last_name: Family name
        email: Unique login email
        password_hash: bcrypt hash of the password (never the plaintext)
        role: One of ``UserRole``
        refresh_token: Currently valid refresh token, cleared on logout
        last_login: Instant of the last successful login
        is_active: Inactive users cannot log in or refresh tokens
        company_id: Tenant the user belongs to (NULL for super admins)
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    role: Mapped[UserRole] = mapped_column(
        Enum(
            UserRole,
            native_enum=False,
            length=20,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=UserRole.EDITOR
    )

    refresh_token: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    company_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("companies.id"),
        nullable=True,
        index=True,
        comment="Tenant; NULL only for super admins"
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

    company: Mapped[Optional["Company"]] = relationship("Company", back_populates="users")
    surveys: Mapped[list["Survey"]] = relationship("Survey", back_populates="creator")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<User(id={self.id}, "
            f"email={self.email}, "
            f"role={self.role.value if self.role else None}, "
            f"company_id={self.company_id})>"
        )
