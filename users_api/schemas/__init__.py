"""Pydantic schemas."""

from users_api.schemas.common import ErrorResponse, MessageResponse
from users_api.schemas.user import UserCreate, UserResponse, UserUpdate

__all__ = [
    "ErrorResponse",
    "MessageResponse",
    "UserCreate",
    "UserResponse",
    "UserUpdate",
]
