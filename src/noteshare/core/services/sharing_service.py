"""Sharing service implementation."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import atomic
from ..access import display_name
from ..exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..models.share import Share
from ..repositories.note_repository import NoteRepository
from ..repositories.share_repository import ShareRepository
from ..repositories.user_repository import UserRepository
from ..schemas.sharing import ShareRequest, ShareResponse
from .interfaces import ISharingService

logger = logging.getLogger(__name__)


class SharingService(ISharingService):
    """Owner-managed read/write grants on notes."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.note_repo = NoteRepository(session)
        self.share_repo = ShareRepository(session)
        self.user_repo = UserRepository(session)

    async def share_note(self, requester_id: Optional[UUID], request: ShareRequest) -> ShareResponse:
        """Grant (or change) a user's permission on a note.

        Keyed by (note, recipient): sharing again with the same user updates
        the permission of the existing record instead of adding a second one.
        """
        if requester_id is None:
            raise AuthenticationError("Authentication required to share notes")

        try:
            return await self._upsert_share(requester_id, request)
        except IntegrityError:
            # a concurrent request created the same share first; the retry
            # finds it and updates the permission instead
            logger.info("Share insert collided, retrying as update", extra={"note_id": str(request.note_id)})
            return await self._upsert_share(requester_id, request)

    async def _upsert_share(self, requester_id: UUID, request: ShareRequest) -> ShareResponse:
        permission = request.permission.value
        async with atomic(self.session):
            # row lock serialises concurrent shares of the same note
            note = await self.note_repo.get_for_update(request.note_id)
            if note is None:
                raise NotFoundError("Note not found")
            if not note.is_owned_by(requester_id):
                raise AuthorizationError("Only the owner can share this note")

            target = await self.user_repo.get_by_email(request.email)
            if target is None:
                raise NotFoundError("User not found")
            if target.id == requester_id:
                raise ValidationError("Cannot share note with yourself")

            share = await self.share_repo.get_for_note_and_user(note.id, target.id)
            if share is None:
                share = await self.share_repo.create_share({
                    "note_id": note.id,
                    "shared_with_id": target.id,
                    "shared_by_id": requester_id,
                    "permission": permission,
                })
                action = "created"
            else:
                await self.share_repo.update_permission(share, permission)
                action = "updated"

        logger.info(
            f"Share {action}",
            extra={
                "note_id": str(note.id),
                "shared_with_id": str(target.id),
                "permission": permission,
            },
        )
        return self._share_to_response(share, target)

    async def list_note_shares(self, requester_id: Optional[UUID], note_id: UUID) -> List[ShareResponse]:
        if requester_id is None:
            raise AuthenticationError("Authentication required")

        note = await self.note_repo.get_by_id(note_id)
        if note is None:
            raise NotFoundError("Note not found")
        if not note.is_owned_by(requester_id):
            raise AuthorizationError("Only the owner can view shares of this note")

        shares = await self.share_repo.list_for_note(note_id)
        recipients = await self.user_repo.get_many([share.shared_with_id for share in shares])
        return [
            self._share_to_response(share, recipients.get(share.shared_with_id))
            for share in shares
        ]

    async def revoke_share(self, requester_id: Optional[UUID], share_id: UUID) -> None:
        if requester_id is None:
            raise AuthenticationError("Authentication required")

        async with atomic(self.session):
            share = await self.share_repo.get_by_id(share_id)
            if share is None:
                raise NotFoundError("Share not found")

            note = await self.note_repo.get_for_update(share.note_id)
            if note is None or not note.is_owned_by(requester_id):
                raise AuthorizationError("Only the owner can revoke this share")

            await self.share_repo.delete_share(share)

        logger.info(
            "Share revoked",
            extra={"share_id": str(share_id), "note_id": str(share.note_id)},
        )

    def _share_to_response(self, share: Share, recipient) -> ShareResponse:
        return ShareResponse(
            id=share.id,
            note_id=share.note_id,
            shared_with_id=share.shared_with_id,
            shared_with_name=display_name(recipient, None),
            shared_by_id=share.shared_by_id,
            permission=share.permission,
            created_at=share.created_at,
            updated_at=share.updated_at,
        )
