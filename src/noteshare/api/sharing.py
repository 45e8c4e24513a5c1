"""Sharing API endpoints."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.schemas.sharing import ShareRequest, ShareResponse
from ..core.services import SharingService
from ..database import get_db_session
from ..middleware.auth import get_optional_user_id

router = APIRouter(prefix="/sharing", tags=["sharing"])


@router.post("/", response_model=ShareResponse, status_code=status.HTTP_201_CREATED)
async def share_note(
    request: ShareRequest,
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Share a note with a user by email, or change their permission."""
    sharing_service = SharingService(session)
    return await sharing_service.share_note(current_user_id, request)


@router.get("/notes/{note_id}", response_model=List[ShareResponse])
async def list_note_shares(
    note_id: UUID,
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """List grants on a note (owner only)."""
    sharing_service = SharingService(session)
    return await sharing_service.list_note_shares(current_user_id, note_id)


@router.delete("/{share_id}", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_share(
    share_id: UUID,
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Revoke a note share."""
    sharing_service = SharingService(session)
    await sharing_service.revoke_share(current_user_id, share_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
