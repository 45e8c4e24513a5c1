# Note sharing between users
import uuid
from enum import Enum

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel
from .types import GUID


class SharePermission(str, Enum):
    """Permission level granted by a share."""

    READ = "read"
    WRITE = "write"


class Share(BaseModel):
    """Grant letting a non-owner read (or write) a note."""

    __tablename__ = "shares"

    note_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False
    )
    shared_with_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    shared_by_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    permission: Mapped[str] = mapped_column(
        String(10), default=SharePermission.READ.value, nullable=False
    )

    __table_args__ = (
        UniqueConstraint("note_id", "shared_with_id", name="uq_shares_note_recipient"),
        CheckConstraint("permission IN ('read', 'write')", name="ck_shares_permission"),
        Index("idx_shares_note_id", "note_id"),
        Index("idx_shares_shared_with", "shared_with_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Share(note_id={self.note_id}, shared_with={self.shared_with_id}, "
            f"permission={self.permission})>"
        )

    @property
    def can_write(self) -> bool:
        return self.permission == SharePermission.WRITE.value
