"""
Note access resolution.

Decides, for a requester and a note, whether the note is visible, whether
the requester may edit it, and which author name to show. The rules are
applied in strict precedence order; the first one that matches wins:

1. Public note: visible to everyone, editable only by its author. Author
   name falls back to "Anonymous".
2. Anonymous requester: not visible.
3. Requester is the author: visible, editable, author shown as "You".
4. A share exists for the requester: visible, editable only with write
   permission. Author name falls back to "Unknown".
5. Otherwise: not visible.

Note that rule 1 runs before the owner check, so an owner reading their own
public note sees their real name rather than "You".
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from .models.note import Note
from .models.share import Share
from .models.user import User
from .repositories.share_repository import ShareRepository
from .repositories.user_repository import UserRepository

YOU = "You"
ANONYMOUS = "Anonymous"
UNKNOWN = "Unknown"


@dataclass(frozen=True)
class NoteAccess:
    visible: bool
    can_edit: bool = False
    author_name: Optional[str] = None


DENIED = NoteAccess(visible=False)


def display_name(user: Optional[User], default: str) -> str:
    """Name, else email, else ``default`` (also used when the user is gone)."""
    if user is None:
        return default
    return user.display_name(default)


def resolve_access(
    requester_id: Optional[UUID],
    note: Note,
    share: Optional[Share] = None,
    owner: Optional[User] = None,
) -> NoteAccess:
    """Pure precedence chain; ``share`` and ``owner`` are pre-loaded records."""
    if note.is_public:
        return NoteAccess(
            visible=True,
            can_edit=requester_id is not None and requester_id == note.author_id,
            author_name=display_name(owner, ANONYMOUS),
        )

    if requester_id is None:
        return DENIED

    if requester_id == note.author_id:
        return NoteAccess(visible=True, can_edit=True, author_name=YOU)

    if share is not None:
        return NoteAccess(
            visible=True,
            can_edit=share.can_write,
            author_name=display_name(owner, UNKNOWN),
        )

    return DENIED


class AccessResolver:
    """Loads only the records the precedence chain needs, then resolves."""

    def __init__(self, session: AsyncSession):
        self.share_repo = ShareRepository(session)
        self.user_repo = UserRepository(session)

    async def resolve(self, requester_id: Optional[UUID], note: Note) -> NoteAccess:
        if note.is_public:
            owner = await self.user_repo.get_by_id(note.author_id)
            return resolve_access(requester_id, note, owner=owner)

        if requester_id is None:
            return DENIED
        if requester_id == note.author_id:
            return resolve_access(requester_id, note)

        share = await self.share_repo.get_for_note_and_user(note.id, requester_id)
        if share is None:
            return DENIED
        owner = await self.user_repo.get_by_id(note.author_id)
        return resolve_access(requester_id, note, share=share, owner=owner)
