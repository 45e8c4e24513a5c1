"""Middleware for authentication and other cross-cutting concerns."""

from .auth import OptionalJWTBearer, get_optional_user_id

__all__ = ["get_optional_user_id", "OptionalJWTBearer"]
