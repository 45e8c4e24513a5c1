"""
Note sharing schemas.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ..models.share import SharePermission


class ShareRequest(BaseModel):
    """Grant a user access to a note, identified by email."""

    note_id: uuid.UUID = Field(description="Note ID to share")
    email: EmailStr = Field(description="Email address of the recipient")
    permission: SharePermission = Field(
        default=SharePermission.READ, description="Permission level: read or write"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "note_id": "123e4567-e89b-12d3-a456-426614174000",
                "email": "colleague@company.com",
                "permission": "write",
            }
        }
    )


class ShareResponse(BaseModel):
    """A share record as seen by the note owner."""

    id: uuid.UUID
    note_id: uuid.UUID
    shared_with_id: uuid.UUID
    shared_with_name: Optional[str] = Field(
        default=None, description="Recipient name, else email"
    )
    shared_by_id: uuid.UUID
    permission: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
