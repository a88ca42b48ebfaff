"""Pytest fixtures for testing."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from users_api.config import Settings
from users_api.main import create_app
from users_api.models.user import User
from users_api.services.user import StoreError, StoreErrorKind, UserNotFoundError, UserStore


class InMemoryUserStore:
    """Dict-backed stand-in for UserStore.

    ``failures`` maps an operation name to the exception it should raise,
    so tests can drive the error paths of the endpoints.
    """

    def __init__(self) -> None:
        self._users: dict[int, User] = {}
        self._next_id = 1
        self.failures: dict[str, BaseException] = {}

    def fail(self, operation: str, kind: StoreErrorKind = StoreErrorKind.UNAVAILABLE) -> None:
        self.failures[operation] = StoreError(kind, operation)

    def _check(self, operation: str) -> None:
        if operation in self.failures:
            raise self.failures[operation]

    async def ping(self) -> None:
        self._check("ping")

    async def find_all(self) -> list[User]:
        self._check("find_all")
        return [self._copy(self._users[key]) for key in sorted(self._users)]

    async def find_by_id(self, user_id: int) -> User | None:
        self._check("find_by_id")
        user = self._users.get(user_id)
        return self._copy(user) if user else None

    async def insert(self, name: str, birthday: str) -> User:
        self._check("insert")
        user = User(id=self._next_id, name=name, birthday=birthday)
        self._users[user.id] = user
        self._next_id += 1
        return self._copy(user)

    async def save(self, user: User) -> User:
        self._check("save")
        if user.id not in self._users:
            raise UserNotFoundError(user.id, "save")
        self._users[user.id] = self._copy(user)
        return user

    async def delete(self, user_id: int) -> None:
        self._check("delete")
        if self._users.pop(user_id, None) is None:
            raise UserNotFoundError(user_id, "delete")

    async def close(self) -> None:
        pass

    @staticmethod
    def _copy(user: User) -> User:
        return User(id=user.id, name=user.name, birthday=user.birthday)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """SQLite settings pointing at a per-test database file."""
    return Settings(db_type="sqlite", sqlite_path=str(tmp_path / "users.db"))


@pytest_asyncio.fixture
async def store(settings: Settings) -> AsyncGenerator[UserStore, None]:
    """Real store on a fresh SQLite database."""
    user_store = UserStore.from_settings(settings)
    await user_store.create_schema()
    yield user_store
    await user_store.close()


@pytest_asyncio.fixture
async def client(settings: Settings, store: UserStore) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client backed by the SQLite store."""
    app = create_app(settings, store=store)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def memory_store() -> InMemoryUserStore:
    """Create a fresh in-memory store for each test."""
    return InMemoryUserStore()


@pytest_asyncio.fixture
async def memory_client(
    settings: Settings, memory_store: InMemoryUserStore
) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client backed by the in-memory store."""
    app = create_app(settings, store=memory_store)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def ada() -> dict[str, str]:
    """Sample user payload."""
    return {"Name": "Ada", "Birthday": "1815-12-10"}
