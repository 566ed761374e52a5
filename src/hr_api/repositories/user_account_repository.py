"""Login account repository."""

from uuid import UUID

from sqlalchemy import func, select

from hr_api.models.orm.user_account import UserAccountORM
from hr_api.repositories.base import BaseRepository


class UserAccountRepository(BaseRepository[UserAccountORM]):
    """Repository for login account operations."""

    model = UserAccountORM

    async def get_by_email(self, email: str) -> UserAccountORM | None:
        """Get account by email (case-insensitive)."""
        result = await self.session.execute(
            select(UserAccountORM).where(func.lower(UserAccountORM.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def get_by_employee_id(self, employee_id: UUID) -> UserAccountORM | None:
        """Get the account linked to an employee."""
        result = await self.session.execute(
            select(UserAccountORM).where(UserAccountORM.employee_id == employee_id)
        )
        return result.scalar_one_or_none()

    async def email_exists(self, email: str, exclude_id: UUID | None = None) -> bool:
        """Check if an email is used by a login account (case-insensitive).

        Args:
            email: Email to check
            exclude_id: Optionally exclude an account ID from the check

        Returns:
            True if email exists, False otherwise
        """
        query = select(func.count()).select_from(UserAccountORM).where(
            func.lower(UserAccountORM.email) == email.lower()
        )
        if exclude_id:
            query = query.where(UserAccountORM.id != exclude_id)
        result = await self.session.execute(query)
        return result.scalar_one() > 0
