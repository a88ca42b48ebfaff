"""API routers."""

from users_api.routers.health import router as health_router
from users_api.routers.users import router as users_router

__all__ = [
    "health_router",
    "users_router",
]
