"""Request identity resolution.

Every route accepts anonymous callers; services decide what an anonymous
requester may do. A token that is present but invalid is still rejected.
"""

from typing import Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..core.exceptions import AuthenticationError
from ..security import get_user_id_from_token


class OptionalJWTBearer(HTTPBearer):
    """JWT Bearer token authentication that lets anonymous requests through."""

    def __init__(self):
        super().__init__(auto_error=False)

    async def __call__(self, request: Request) -> Optional[UUID]:
        credentials: Optional[HTTPAuthorizationCredentials] = await super().__call__(request)
        if credentials is None:
            if request.headers.get("Authorization"):
                raise AuthenticationError("Invalid authentication scheme")
            return None

        user_id = get_user_id_from_token(credentials.credentials)
        if user_id is None:
            raise AuthenticationError("Invalid or expired token")
        return user_id


optional_bearer = OptionalJWTBearer()


async def get_optional_user_id(user_id: Optional[UUID] = Depends(optional_bearer)) -> Optional[UUID]:
    """Requester id from the bearer token, or None for anonymous callers."""
    return user_id
