"""Note repository for database operations."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, desc, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.note import Note
from ..models.share import Share
from ..text_match import match_score, query_terms


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class NoteRepository:
    """Repository for note database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_note(self, note_data: dict) -> Note:
        """Create new note (flushed, not committed)."""
        note = Note(**note_data)
        self.session.add(note)
        await self.session.flush()
        return note

    async def get_by_id(self, note_id: UUID) -> Optional[Note]:
        """Get note by ID."""
        stmt = select(Note).where(Note.id == note_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_for_update(self, note_id: UUID) -> Optional[Note]:
        """Get note by ID and lock the row until the transaction ends."""
        stmt = select(Note).where(Note.id == note_id).with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_note(self, note: Note, update_data: dict) -> Note:
        """Apply field updates to an already loaded note."""
        for key, value in update_data.items():
            setattr(note, key, value)
        await self.session.flush()
        return note

    async def delete_note(self, note: Note) -> int:
        """Delete a note and its shares; returns the number of shares removed."""
        result = await self.session.execute(delete(Share).where(Share.note_id == note.id))
        await self.session.delete(note)
        await self.session.flush()
        return result.rowcount or 0

    async def list_by_author(self, author_id: UUID) -> List[Note]:
        """All notes by an author, newest first."""
        stmt = (
            select(Note)
            .where(Note.author_id == author_id)
            .order_by(desc(Note.created_at))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars())

    async def list_public(self, limit: int) -> List[Note]:
        """Newest public notes."""
        stmt = (
            select(Note)
            .where(Note.is_public.is_(True))
            .order_by(desc(Note.created_at))
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars())

    async def get_many(self, note_ids: List[UUID]) -> List[Note]:
        """Load several notes by id (order not preserved)."""
        if not note_ids:
            return []
        stmt = select(Note).where(Note.id.in_(set(note_ids)))
        result = await self.session.execute(stmt)
        return list(result.scalars())

    async def search_notes(
        self,
        query: str,
        is_public: Optional[bool] = None,
        author_id: Optional[UUID] = None,
        limit: int = 10,
        batch_size: int = 100,
    ) -> List[Note]:
        """Newest notes whose content matches any query term (see ``text_match``).

        ILIKE narrows the candidates; the word-prefix rule is then applied to
        each row, so matching is the same as in the Redis index.
        """
        terms = query_terms(query)
        if not terms:
            return []

        stmt = select(Note).where(
            or_(*[Note.content.ilike(_like_pattern(t), escape="\\") for t in terms])
        )
        if is_public is not None:
            stmt = stmt.where(Note.is_public.is_(is_public))
        if author_id is not None:
            stmt = stmt.where(Note.author_id == author_id)
        stmt = stmt.order_by(desc(Note.created_at), Note.id)

        matches: List[Note] = []
        offset = 0
        while len(matches) < limit:
            result = await self.session.execute(stmt.offset(offset).limit(batch_size))
            batch = list(result.scalars())
            matches.extend(note for note in batch if match_score(terms, note.content))
            if len(batch) < batch_size:
                break
            offset += batch_size
        return matches[:limit]
