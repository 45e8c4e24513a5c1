"""Notes API endpoints."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..core.schemas.notes import (
    NoteCreate,
    NoteCreatedResponse,
    NoteResponse,
    NoteUpdate,
    NoteWithAccess,
    NoteWithAuthor,
    NoteWithShare,
)
from ..core.services import NoteService
from ..database import get_db_session
from ..middleware.auth import get_optional_user_id

router = APIRouter(prefix="/notes", tags=["notes"])
settings = get_settings()


@router.get("/", response_model=List[NoteResponse])
async def list_owned_notes(
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Notes authored by the caller (empty for anonymous callers)."""
    return await NoteService(session).list_owned(current_user_id)


# fixed paths go before /{note_id}
@router.get("/shared", response_model=List[NoteWithShare])
async def list_shared_notes(
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Notes other users shared with the caller."""
    return await NoteService(session).list_shared(current_user_id)


@router.get("/public", response_model=List[NoteWithAuthor])
async def list_public_notes(
    limit: int = Query(settings.public_notes_limit, ge=1, le=settings.max_page_size),
    # unused, but resolving it rejects an invalid token with 401
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Newest public notes."""
    return await NoteService(session).list_public(limit)


@router.get("/{note_id}", response_model=NoteWithAccess)
async def get_note(
    note_id: UUID,
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Get a specific note; 404 whether it is missing or not visible."""
    note = await NoteService(session).get_note(current_user_id, note_id)
    if note is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")
    return note


@router.post("/", response_model=NoteCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_note(
    request: NoteCreate,
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Create a new note."""
    note_id = await NoteService(session).create_note(current_user_id, request)
    return NoteCreatedResponse(id=note_id)


@router.put("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_note(
    note_id: UUID,
    request: NoteUpdate,
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Update a note."""
    await NoteService(session).update_note(current_user_id, note_id, request)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: UUID,
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Delete a note and every share on it."""
    await NoteService(session).delete_note(current_user_id, note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
