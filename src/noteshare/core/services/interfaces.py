"""
Service interfaces for NoteShare application.

Every method takes the requester id explicitly; ``None`` means an anonymous
caller.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from uuid import UUID

from ..schemas.common import HealthCheckResponse
from ..schemas.notes import (
    NoteCreate,
    NoteResponse,
    NoteUpdate,
    NoteWithAccess,
    NoteWithAuthor,
    NoteWithShare,
)
from ..schemas.sharing import ShareRequest, ShareResponse


class INoteService(ABC):
    """Note service for CRUD operations."""

    @abstractmethod
    async def list_owned(self, requester_id: Optional[UUID]) -> List[NoteResponse]:
        """Notes authored by the requester, newest first."""
        pass

    @abstractmethod
    async def list_shared(self, requester_id: Optional[UUID]) -> List[NoteWithShare]:
        """Notes shared with the requester."""
        pass

    @abstractmethod
    async def list_public(self, limit: int) -> List[NoteWithAuthor]:
        """Newest public notes."""
        pass

    @abstractmethod
    async def get_note(self, requester_id: Optional[UUID], note_id: UUID) -> Optional[NoteWithAccess]:
        """Get note if visible to the requester."""
        pass

    @abstractmethod
    async def create_note(self, requester_id: Optional[UUID], request: NoteCreate) -> UUID:
        """Create new note."""
        pass

    @abstractmethod
    async def update_note(self, requester_id: Optional[UUID], note_id: UUID, request: NoteUpdate) -> None:
        """Update existing note."""
        pass

    @abstractmethod
    async def delete_note(self, requester_id: Optional[UUID], note_id: UUID) -> None:
        """Delete note and its shares."""
        pass


class ISharingService(ABC):
    """Sharing service for note grants."""

    @abstractmethod
    async def share_note(self, requester_id: Optional[UUID], request: ShareRequest) -> ShareResponse:
        """Create or update a share."""
        pass

    @abstractmethod
    async def list_note_shares(self, requester_id: Optional[UUID], note_id: UUID) -> List[ShareResponse]:
        """Grants on a note (owner only)."""
        pass

    @abstractmethod
    async def revoke_share(self, requester_id: Optional[UUID], share_id: UUID) -> None:
        """Remove a grant (owner only)."""
        pass


class ISearchService(ABC):
    """Search across public and owned notes."""

    @abstractmethod
    async def search_notes(self, requester_id: Optional[UUID], query: str) -> List[NoteWithAuthor]:
        """Search notes."""
        pass


class IHealthService(ABC):
    """Health check service."""

    @abstractmethod
    async def get_health_status(self) -> HealthCheckResponse:
        """Get app health status."""
        pass

    @abstractmethod
    async def check_database_health(self) -> Dict[str, Any]:
        """Check database connectivity."""
        pass

    @abstractmethod
    async def check_redis_health(self) -> Dict[str, Any]:
        """Check Redis connectivity."""
        pass
