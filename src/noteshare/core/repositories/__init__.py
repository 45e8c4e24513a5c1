"""Repository layer for data access."""

from .user_repository import UserRepository
from .note_repository import NoteRepository
from .share_repository import ShareRepository

__all__ = [
    "UserRepository",
    "NoteRepository",
    "ShareRepository",
]
