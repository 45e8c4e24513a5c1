"""
Note schemas.

Request bodies for note mutations, plus one response model per query path:
the fields a caller gets back depend on how the note was reached (owned,
shared, public feed, single lookup).
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NoteCreate(BaseModel):
    """Note creation request schema."""

    title: str = Field(min_length=1, max_length=200, description="Note title")
    content: str = Field(default="", description="Note body (plain text)")
    is_public: bool = Field(default=True, description="Whether note is publicly visible")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError("Title cannot be blank")
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Standup",
                "content": "Shipped the search fallback, reviewing shares next.",
                "is_public": False,
            }
        }
    )


class NoteUpdate(BaseModel):
    """Partial update; omitted fields stay unchanged."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None)
    is_public: Optional[bool] = Field(
        default=None, description="Only applied when the requester owns the note"
    )

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Title cannot be blank")
        return v


class NoteResponse(BaseModel):
    """Plain note record."""

    id: uuid.UUID
    title: str
    content: str
    is_public: bool
    author_id: uuid.UUID
    last_edited_by_id: Optional[uuid.UUID] = None
    last_edited_at: datetime
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NoteWithAuthor(NoteResponse):
    """Note plus the display name of its author."""

    author_name: str


class NoteWithAccess(NoteWithAuthor):
    """Single-note lookup result, with the requester's edit right."""

    can_edit: bool


class NoteWithShare(NoteWithAuthor):
    """Note reached through a share, with the granted permission."""

    permission: str


class NoteCreatedResponse(BaseModel):
    id: uuid.UUID
