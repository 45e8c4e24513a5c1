"""Search API endpoints."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.schemas.notes import NoteWithAuthor
from ..core.services import SearchService
from ..database import get_db_session
from ..middleware.auth import get_optional_user_id

router = APIRouter(prefix="/search", tags=["search"])


@router.get("/notes", response_model=List[NoteWithAuthor])
async def search_notes(
    q: str = Query("", max_length=500, description="Search query"),
    current_user_id: Optional[UUID] = Depends(get_optional_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Search public notes, plus the caller's own notes when signed in."""
    search_service = SearchService(session)
    return await search_service.search_notes(current_user_id, q)
