"""FastAPI dependencies shared by the routers."""

from typing import Annotated

from fastapi import Depends, Request

from users_api.errors import INVALID_USER_ID, bad_request
from users_api.services.user import UserStore

# Largest id a signed 64-bit primary key column can hold.
MAX_USER_ID = 2**63 - 1


def get_user_store(request: Request) -> UserStore:
    """Get the store attached to the application at startup."""
    return request.app.state.store


def parse_user_id(id: str) -> int:
    """Validate the ``{id}`` path segment.

    Raises:
        APIError: 400 unless the segment is a non-negative decimal integer
            that fits the id column.
    """
    if not (id.isascii() and id.isdigit()):
        raise bad_request(INVALID_USER_ID)
    user_id = int(id)
    if user_id > MAX_USER_ID:
        raise bad_request(INVALID_USER_ID)
    return user_id


UserStoreDep = Annotated[UserStore, Depends(get_user_store)]
UserId = Annotated[int, Depends(parse_user_id)]
