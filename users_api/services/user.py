"""User store: persistence operations for the User entity."""

import logging
from contextlib import asynccontextmanager
from enum import Enum
from typing import AsyncIterator

from sqlalchemy import delete, select, text, update
from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from users_api.config import Settings
from users_api.database import build_engine, create_schema
from users_api.models.user import User

logger = logging.getLogger(__name__)


class StoreErrorKind(str, Enum):
    """Closed set of failure categories reported by the store."""

    NOT_FOUND = "not_found"
    CONSTRAINT_VIOLATION = "constraint_violation"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


class StoreError(Exception):
    """Base store error."""

    def __init__(
        self,
        kind: StoreErrorKind,
        operation: str,
        message: str | None = None,
    ):
        self.kind = kind
        self.operation = operation
        super().__init__(message or f"User store {operation} failed: {kind.value}")


class UserNotFoundError(StoreError):
    """No row matched the given user id."""

    def __init__(self, user_id: int, operation: str):
        self.user_id = user_id
        super().__init__(
            StoreErrorKind.NOT_FOUND,
            operation,
            message=f"User not found: {user_id}",
        )


def classify_error(exc: BaseException) -> StoreErrorKind:
    """Map a driver or SQLAlchemy exception onto a store error kind."""
    if isinstance(exc, IntegrityError):
        return StoreErrorKind.CONSTRAINT_VIOLATION
    if isinstance(
        exc,
        (OperationalError, InterfaceError, DisconnectionError, PoolTimeoutError, OSError),
    ):
        return StoreErrorKind.UNAVAILABLE
    return StoreErrorKind.UNKNOWN


class UserStore:
    """Store for User records backed by one engine/pool."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._session_maker = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "UserStore":
        """Build a store connected to the configured database."""
        return cls(build_engine(settings))

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        """Run one unit of work, translating driver errors into StoreError."""
        try:
            async with self._session_maker() as session:
                async with session.begin():
                    yield session
        except StoreError:
            raise
        except (SQLAlchemyError, OSError) as exc:
            kind = classify_error(exc)
            logger.error("User store %s failed (%s): %s", operation, kind.value, exc)
            raise StoreError(kind, operation) from exc

    async def create_schema(self) -> None:
        """Create the users table if it does not exist."""
        try:
            await create_schema(self.engine)
        except (SQLAlchemyError, OSError) as exc:
            raise StoreError(classify_error(exc), "create_schema") from exc

    async def ping(self) -> None:
        """Round-trip a trivial query."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            raise StoreError(classify_error(exc), "ping") from exc

    async def find_all(self) -> list[User]:
        """Get all users ordered by id."""
        async with self._transaction("find_all") as session:
            result = await session.execute(select(User).order_by(User.id))
            return list(result.scalars().all())

    async def find_by_id(self, user_id: int) -> User | None:
        """Get a user by ID, or None if there is no such user."""
        async with self._transaction("find_by_id") as session:
            return await session.get(User, user_id)

    async def insert(self, name: str, birthday: str) -> User:
        """Create a new user; the store assigns the id."""
        async with self._transaction("insert") as session:
            user = User(name=name, birthday=birthday)
            session.add(user)
            await session.flush()
        return user

    async def save(self, user: User) -> User:
        """Overwrite the stored fields of an existing user."""
        async with self._transaction("save") as session:
            result = await session.execute(
                update(User)
                .where(User.id == user.id)
                .values(name=user.name, birthday=user.birthday)
            )
            if result.rowcount == 0:
                raise UserNotFoundError(user.id, "save")
        return user

    async def delete(self, user_id: int) -> None:
        """Hard delete a user."""
        async with self._transaction("delete") as session:
            result = await session.execute(delete(User).where(User.id == user_id))
            if result.rowcount == 0:
                raise UserNotFoundError(user_id, "delete")

    async def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        await self.engine.dispose()
