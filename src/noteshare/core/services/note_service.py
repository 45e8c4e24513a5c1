"""Note service implementation."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...config import get_settings
from ...database import atomic
from ..access import ANONYMOUS, UNKNOWN, AccessResolver, display_name
from ..exceptions import AuthenticationError, AuthorizationError, NotFoundError
from ..models.base import utcnow
from ..models.note import Note
from ..redis_client import get_redis_client
from ..repositories.note_repository import NoteRepository
from ..repositories.share_repository import ShareRepository
from ..repositories.user_repository import UserRepository
from ..schemas.notes import (
    NoteCreate,
    NoteResponse,
    NoteUpdate,
    NoteWithAccess,
    NoteWithAuthor,
    NoteWithShare,
)
from .interfaces import INoteService

logger = logging.getLogger(__name__)


def note_fields(note: Note) -> dict:
    """Plain column values of a note, as accepted by the note schemas."""
    return NoteResponse.model_validate(note).model_dump()


class NoteService(INoteService):
    """Note service implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.settings = get_settings()
        self.note_repo = NoteRepository(session)
        self.share_repo = ShareRepository(session)
        self.user_repo = UserRepository(session)
        self.resolver = AccessResolver(session)
        self.redis_client = get_redis_client()

    async def list_owned(self, requester_id: Optional[UUID]) -> List[NoteResponse]:
        if requester_id is None:
            return []
        notes = await self.note_repo.list_by_author(requester_id)
        return [NoteResponse.model_validate(note) for note in notes]

    async def list_shared(self, requester_id: Optional[UUID]) -> List[NoteWithShare]:
        """Notes shared with the requester, with owner name and permission."""
        if requester_id is None:
            return []

        shares = await self.share_repo.list_for_user(requester_id)
        notes = {note.id: note for note in await self.note_repo.get_many([s.note_id for s in shares])}
        authors = await self.user_repo.get_many([note.author_id for note in notes.values()])

        results = []
        for share in shares:
            note = notes.get(share.note_id)
            if note is None:
                # share outlived its note, skip it
                continue
            results.append(
                NoteWithShare(
                    **note_fields(note),
                    author_name=display_name(authors.get(note.author_id), UNKNOWN),
                    permission=share.permission,
                )
            )
        return results

    async def list_public(self, limit: Optional[int] = None) -> List[NoteWithAuthor]:
        if limit is None:
            limit = self.settings.public_notes_limit
        limit = max(1, min(limit, self.settings.max_page_size))

        notes = await self.note_repo.list_public(limit)
        authors = await self.user_repo.get_many([note.author_id for note in notes])
        return [
            NoteWithAuthor(
                **note_fields(note),
                author_name=display_name(authors.get(note.author_id), ANONYMOUS),
            )
            for note in notes
        ]

    async def get_note(self, requester_id: Optional[UUID], note_id: UUID) -> Optional[NoteWithAccess]:
        """Get a note if the requester may see it.

        Returns None both when the note does not exist and when it is private
        to someone else, so callers cannot probe for private notes.
        """
        note = await self.note_repo.get_by_id(note_id)
        if note is None:
            return None

        access = await self.resolver.resolve(requester_id, note)
        if not access.visible:
            return None

        return NoteWithAccess(
            **note_fields(note),
            author_name=access.author_name,
            can_edit=access.can_edit,
        )

    async def create_note(self, requester_id: Optional[UUID], request: NoteCreate) -> UUID:
        """Create new note owned by the requester."""
        if requester_id is None:
            raise AuthenticationError("Authentication required to create notes")

        note_data = {
            "title": request.title,
            "content": request.content,
            "is_public": request.is_public,
            "author_id": requester_id,
            "last_edited_at": utcnow(),
        }

        async with atomic(self.session):
            note = await self.note_repo.create_note(note_data)

        logger.info("Note created", extra={"note_id": str(note.id), "author_id": str(requester_id)})
        await self._index(note)
        return note.id

    async def update_note(self, requester_id: Optional[UUID], note_id: UUID, request: NoteUpdate) -> None:
        """Partial update by the owner or a write-share holder."""
        if requester_id is None:
            raise AuthenticationError("Authentication required to edit notes")

        async with atomic(self.session):
            note = await self.note_repo.get_for_update(note_id)
            if note is None:
                raise NotFoundError("Note not found")

            access = await self.resolver.resolve(requester_id, note)
            if not access.can_edit:
                raise AuthorizationError("Not authorized to edit this note")

            update_data = request.model_dump(exclude_none=True)
            if not note.is_owned_by(requester_id):
                # visibility is owner-only, dropped silently for editors
                update_data.pop("is_public", None)

            update_data["last_edited_by_id"] = requester_id
            update_data["last_edited_at"] = utcnow()
            await self.note_repo.update_note(note, update_data)

        logger.info(
            "Note updated",
            extra={"note_id": str(note_id), "editor_id": str(requester_id), "fields": sorted(update_data)},
        )
        await self._index(note)

    async def delete_note(self, requester_id: Optional[UUID], note_id: UUID) -> None:
        """Delete note (owner only), shares first."""
        if requester_id is None:
            raise AuthenticationError("Authentication required to delete notes")

        async with atomic(self.session):
            note = await self.note_repo.get_for_update(note_id)
            if note is None:
                raise NotFoundError("Note not found")
            if not note.is_owned_by(requester_id):
                raise AuthorizationError("Only the owner can delete this note")

            removed_shares = await self.note_repo.delete_note(note)

        logger.info(
            "Note deleted",
            extra={"note_id": str(note_id), "author_id": str(requester_id), "shares_removed": removed_shares},
        )
        await self.redis_client.remove_note_from_search(note_id)

    async def _index(self, note: Note) -> None:
        await self.redis_client.index_note_for_search(
            note.id, note.content, note.is_public, note.author_id, note.created_at
        )
