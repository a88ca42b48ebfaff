"""Common schemas used across the API."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str
