from __future__ import annotations

from fastapi import HTTPException, status

INVALID_USER_ID = "Invalid user ID"
USER_NOT_FOUND = "User not found"
INVALID_REQUEST = "Invalid request"
INTERNAL_ERROR = "Internal server error"


class APIError(HTTPException):
    def __init__(
        self,
        message: str,
        *,
        status_code: int = status.HTTP_400_BAD_REQUEST,
    ) -> None:
        self.error_message = message
        super().__init__(status_code=status_code, detail=message)


def bad_request(message: str = INVALID_REQUEST) -> APIError:
    return APIError(message, status_code=status.HTTP_400_BAD_REQUEST)


def not_found(message: str = USER_NOT_FOUND) -> APIError:
    return APIError(message, status_code=status.HTTP_404_NOT_FOUND)


def internal_error(message: str = INTERNAL_ERROR) -> APIError:
    return APIError(message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
