"""
User model.

Users are provisioned by the external identity provider; this service only
reads them (by id, and by email when sharing).
"""

from typing import Optional

from sqlalchemy import CheckConstraint, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class User(BaseModel):
    """Identity record with optional display name and email."""

    __tablename__ = "users"

    name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(320), unique=True, nullable=True)

    __table_args__ = (
        CheckConstraint("name IS NULL OR length(name) <= 100", name="ck_users_name_len"),
        Index("idx_users_email", "email"),
    )

    def __repr__(self) -> str:
        return f"<User(email='{self.email}')>"

    def display_name(self, default: str) -> str:
        """Name, else email, else the given default."""
        return self.name or self.email or default
