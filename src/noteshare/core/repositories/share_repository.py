"""Share repository for database operations."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.share import Share


class ShareRepository:
    """Repository for share database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_share(self, share_data: dict) -> Share:
        """Create new share (flushed, not committed)."""
        share = Share(**share_data)
        self.session.add(share)
        await self.session.flush()
        return share

    async def get_by_id(self, share_id: UUID) -> Optional[Share]:
        """Get share by ID."""
        stmt = select(Share).where(Share.id == share_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_for_note_and_user(self, note_id: UUID, user_id: UUID) -> Optional[Share]:
        """The share granting ``user_id`` access to ``note_id``, if any."""
        stmt = select(Share).where(
            and_(Share.note_id == note_id, Share.shared_with_id == user_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_permission(self, share: Share, permission: str) -> Share:
        share.permission = permission
        await self.session.flush()
        return share

    async def delete_share(self, share: Share) -> None:
        await self.session.delete(share)
        await self.session.flush()

    async def list_for_user(self, user_id: UUID) -> List[Share]:
        """Shares received by a user, newest first."""
        stmt = (
            select(Share)
            .where(Share.shared_with_id == user_id)
            .order_by(desc(Share.created_at))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars())

    async def list_for_note(self, note_id: UUID) -> List[Share]:
        """All grants on a note, oldest first."""
        stmt = select(Share).where(Share.note_id == note_id).order_by(Share.created_at)
        result = await self.session.execute(stmt)
        return list(result.scalars())
