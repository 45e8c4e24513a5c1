"""
Database models for NoteShare.

SQLAlchemy ORM models for the three record kinds the service works with:
    - User: identity record (name, email), owned by the identity provider
    - Note: note content, visibility flag and edit metadata
    - Share: per-user read/write grant on a note
"""

from .base import BaseModel
from .note import Note
from .share import Share, SharePermission
from .user import User

__all__ = [
    "BaseModel",
    "User",
    "Note",
    "Share",
    "SharePermission",
]
