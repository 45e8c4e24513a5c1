"""Domain errors raised by the service layer.

The API layer maps each of these onto an HTTP status code; services never
raise HTTPException themselves.
"""

from fastapi import status


class NoteShareError(RuntimeError):
    """Base class for errors surfaced to the caller."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationError(NoteShareError):
    """Raised when an operation needs a signed-in requester and there is none."""

    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(NoteShareError):
    """Raised when the requester lacks the permission level an operation needs."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(NoteShareError):
    """Raised when a referenced note, share or user does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ValidationError(NoteShareError):
    """Raised for requests that are well-formed but not allowed (e.g. self-share)."""

    status_code = status.HTTP_400_BAD_REQUEST


__all__ = [
    "NoteShareError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ValidationError",
]
