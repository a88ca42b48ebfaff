"""SQLAlchemy engine and declarative base."""

import logging

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from users_api.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the process-wide engine for the configured database."""
    kwargs: dict = {"echo": settings.database_echo}
    if settings.db_type == "postgres":
        kwargs.update(pool_size=5, max_overflow=10, pool_pre_ping=True)

    engine = create_async_engine(settings.sqlalchemy_url, **kwargs)
    logger.info("Database engine created for %s", settings.db_type)
    return engine


async def create_schema(engine: AsyncEngine) -> None:
    """Create missing tables for every registered model."""
    # Import so the models register on Base.metadata
    from users_api import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
