"""
Pydantic schemas for validating and documenting API requests and responses.
"""

from .common import ErrorResponse, HealthCheckResponse
from .notes import (
    NoteCreate,
    NoteCreatedResponse,
    NoteResponse,
    NoteUpdate,
    NoteWithAccess,
    NoteWithAuthor,
    NoteWithShare,
)
from .sharing import ShareRequest, ShareResponse

__all__ = [
    # Note schemas
    "NoteCreate",
    "NoteUpdate",
    "NoteResponse",
    "NoteWithAuthor",
    "NoteWithAccess",
    "NoteWithShare",
    "NoteCreatedResponse",
    # Sharing schemas
    "ShareRequest",
    "ShareResponse",
    # Common schemas
    "ErrorResponse",
    "HealthCheckResponse",
]
