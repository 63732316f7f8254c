"""Company and user persistence."""

from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, selectinload

from survey_api.models.company import Company
from survey_api.models.user import User


class CompanyRepository:
    """Queries over companies. Companies are global; only super admins
    reach the unscoped methods, company admins go through ``get``
    with their own tenant id."""

    def __init__(self, db: Session):
        self.db = db

    def add(self, company: Company) -> Company:
        self.db.add(company)
        self.db.flush()
        return company

    def get(self, company_id: str, with_users: bool = False) -> Optional[Company]:
        stmt = select(Company).where(Company.id == company_id)
        if with_users:
            stmt = stmt.options(selectinload(Company.users))
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_slug(self, slug: str) -> Optional[Company]:
        return self.db.execute(
            select(Company).where(Company.slug == slug)
        ).scalar_one_or_none()

    def list_with_user_counts(self) -> list[tuple[Company, int]]:
        """All companies, newest first, each paired with its user count."""
        user_counts = (
            select(User.company_id, func.count(User.id).label("user_count"))
            .group_by(User.company_id)
            .subquery()
        )
        stmt = (
            select(Company, func.coalesce(user_counts.c.user_count, 0))
            .outerjoin(user_counts, user_counts.c.company_id == Company.id)
            .order_by(Company.created_at.desc())
        )
        return [(company, count) for company, count in self.db.execute(stmt).all()]

    def count(self, is_active: Optional[bool] = None) -> int:
        stmt = select(func.count(Company.id))
        if is_active is not None:
            stmt = stmt.where(Company.is_active.is_(is_active))
        return self.db.execute(stmt).scalar_one()

    def recent(self, limit: int) -> list[Company]:
        return list(self.db.execute(
            select(Company).order_by(Company.created_at.desc()).limit(limit)
        ).scalars())


class UserRepository:
    """Queries over users. ``tenant_id=None`` means all tenants."""

    def __init__(self, db: Session):
        self.db = db

    def add(self, user: User) -> User:
        self.db.add(user)
        self.db.flush()
        return user

    def get(self, user_id: str) -> Optional[User]:
        return self.db.execute(
            select(User).where(User.id == user_id)
        ).scalar_one_or_none()

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.execute(
            select(User)
            .options(selectinload(User.company))
            .where(func.lower(User.email) == email.lower())
        ).scalar_one_or_none()

    def list_for_company(self, company_id: str) -> list[User]:
        return list(self.db.execute(
            select(User)
            .where(User.company_id == company_id)
            .order_by(User.created_at.desc())
        ).scalars())

    def count(self, tenant_id: Optional[str] = None, is_active: Optional[bool] = None) -> int:
        stmt = select(func.count(User.id))
        if tenant_id is not None:
            stmt = stmt.where(User.company_id == tenant_id)
        if is_active is not None:
            stmt = stmt.where(User.is_active.is_(is_active))
        return self.db.execute(stmt).scalar_one()

    def recent(self, tenant_id: Optional[str], limit: int) -> list[User]:
        stmt = select(User)
        if tenant_id is not None:
            stmt = stmt.where(User.company_id == tenant_id)
        return list(self.db.execute(
            stmt.order_by(User.created_at.desc()).limit(limit)
        ).scalars())

    def deactivate_company_users(self, company_id: str) -> int:
        """Mark every user of a company inactive; returns rows affected."""
        result = self.db.execute(
            update(User)
            .where(User.company_id == company_id)
            .values(is_active=False)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount
