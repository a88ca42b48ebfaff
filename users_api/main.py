"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from users_api.config import Settings, get_settings
from users_api.middleware import setup_middleware
from users_api.routers import health_router, users_router
from users_api.services.user import StoreError, UserStore

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    store: UserStore | None = None,
) -> FastAPI:
    """Build the application.

    A ready store may be passed in; otherwise one is created from settings
    during startup and owned by the application until shutdown.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler for startup and shutdown."""
        if store is not None:
            yield
            return

        owned_store = UserStore.from_settings(settings)
        try:
            await owned_store.create_schema()
        except StoreError as exc:
            logger.critical("Failed to connect to database: %s", exc.__cause__ or exc)
            await owned_store.close()
            raise
        logger.info("Database connected and migrated successfully.")

        app.state.store = owned_store
        try:
            yield
        finally:
            await owned_store.close()
            logger.info("Database connections closed")

    app = FastAPI(
        title=settings.app_name,
        description="CRUD API for user records",
        version="1.0.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        redirect_slashes=False,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store

    setup_middleware(app)

    app.include_router(health_router)
    app.include_router(users_router)

    return app
