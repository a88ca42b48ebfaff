"""User CRUD endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Body, Request, status
from pydantic import TypeAdapter, ValidationError

from users_api.dependencies import UserId, UserStoreDep
from users_api.errors import INVALID_USER_ID, bad_request, internal_error, not_found
from users_api.models.user import User
from users_api.schemas.common import ErrorResponse, MessageResponse
from users_api.schemas.user import UserCreate, UserResponse, UserUpdate
from users_api.services.user import StoreError, UserNotFoundError, UserStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

# A JSON ``null`` body means no changes, like an empty one.
_optional_update = TypeAdapter(UserUpdate | None)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid user ID or request body"},
    404: {"model": ErrorResponse, "description": "User not found"},
    500: {"model": ErrorResponse, "description": "Storage failure"},
}


async def get_existing_user(store: UserStore, user_id: int) -> User:
    """Load a user or fail the request.

    Raises:
        APIError: 404 if the user does not exist, 500 if the read fails.
    """
    try:
        user = await store.find_by_id(user_id)
    except StoreError:
        raise internal_error("Failed to fetch user")

    if user is None:
        raise not_found()
    return user


@router.get(
    "",
    response_model=list[UserResponse],
    responses={500: ERROR_RESPONSES[500]},
)
async def list_users(store: UserStoreDep) -> list[UserResponse]:
    """List all users."""
    try:
        users = await store.find_all()
    except StoreError:
        raise internal_error("Failed to fetch users")
    return [UserResponse.model_validate(user) for user in users]


@router.get("/{id}", response_model=UserResponse, responses=ERROR_RESPONSES)
async def get_user(user_id: UserId, store: UserStoreDep) -> UserResponse:
    """Get a single user."""
    user = await get_existing_user(store, user_id)
    return UserResponse.model_validate(user)


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: ERROR_RESPONSES[400], 500: ERROR_RESPONSES[500]},
)
async def create_user(
    store: UserStoreDep,
    data: Annotated[UserCreate | None, Body()] = None,
) -> UserResponse:
    """Create a new user. Name and Birthday must both be non-empty."""
    if data is None or not data.name or not data.birthday:
        raise bad_request("Name and Birthday are required")

    try:
        user = await store.insert(data.name, data.birthday)
    except StoreError:
        raise internal_error("Failed to create user")

    logger.info("Created user %s", user.id)
    return UserResponse.model_validate(user)


@router.put(
    "/{id}",
    response_model=UserResponse,
    responses=ERROR_RESPONSES,
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": UserUpdate.model_json_schema()}}
        }
    },
)
async def update_user(
    user_id: UserId,
    store: UserStoreDep,
    request: Request,
) -> UserResponse:
    """Update a user's name and/or birthday.

    The user is loaded before the body is decoded, so a missing user is
    reported even when the body is malformed. Only non-empty fields of the
    body are applied; the rest of the stored record is kept.
    """
    user = await get_existing_user(store, user_id)

    body = await request.body()
    data = None
    if body.strip():
        try:
            data = _optional_update.validate_json(body)
        except ValidationError:
            raise bad_request()

    if data is not None:
        for field, value in data.changes().items():
            setattr(user, field, value)

    try:
        user = await store.save(user)
    except UserNotFoundError:
        raise not_found()
    except StoreError:
        raise internal_error("Failed to update user")

    return UserResponse.model_validate(user)


@router.delete("/{id}", response_model=MessageResponse, responses=ERROR_RESPONSES)
async def delete_user(user_id: UserId, store: UserStoreDep) -> MessageResponse:
    """Hard delete a user."""
    await get_existing_user(store, user_id)

    try:
        await store.delete(user_id)
    except UserNotFoundError:
        raise not_found()
    except StoreError:
        raise internal_error("Failed to delete user")

    logger.info("Deleted user %s", user_id)
    return MessageResponse(message="User deleted successfully")


@router.api_route("/", methods=["GET", "PUT", "DELETE"], include_in_schema=False)
async def empty_user_id() -> None:
    """``/users/`` addresses a user with an empty id."""
    raise bad_request(INVALID_USER_ID)
