"""User repository for database operations.

Users belong to the identity provider; this repository only reads them.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.user import User


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID."""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email, ignoring case."""
        stmt = select(User).where(func.lower(User.email) == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_many(self, user_ids: List[UUID]) -> dict:
        """Map of id -> User for the given ids (missing ids are left out)."""
        if not user_ids:
            return {}
        stmt = select(User).where(User.id.in_(set(user_ids)))
        result = await self.session.execute(stmt)
        return {user.id: user for user in result.scalars()}
