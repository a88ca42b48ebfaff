"""Persistence services."""

from users_api.services.user import (
    StoreError,
    StoreErrorKind,
    UserNotFoundError,
    UserStore,
)

__all__ = [
    "StoreError",
    "StoreErrorKind",
    "UserNotFoundError",
    "UserStore",
]
