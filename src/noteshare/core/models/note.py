# Note model for user content
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, utcnow
from .types import GUID


class Note(BaseModel):
    """Short-form note owned by its author."""

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_public: Mapped[bool] = mapped_column(default=True, nullable=False)

    # owner reference, never reassigned
    author_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    last_edited_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    last_edited_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    __table_args__ = (
        Index("idx_notes_author_id", "author_id"),
        Index("idx_notes_is_public", "is_public"),
        Index("idx_notes_created_at", "created_at"),
        Index("idx_notes_author_created", "author_id", "created_at"),
        Index("idx_notes_public_created", "is_public", "created_at"),
        CheckConstraint("length(title) <= 200", name="ck_notes_title_len"),
    )

    def __repr__(self) -> str:
        truncated = self.title if len(self.title) <= 30 else (self.title[:30] + "...")
        return f"<Note(title='{truncated}', author_id={self.author_id})>"

    def is_owned_by(self, user_id: Optional[uuid.UUID]) -> bool:
        """Check if this note is owned by the specified user."""
        return user_id is not None and self.author_id == user_id
