"""Tests for the SQLAlchemy-backed user store."""

from pathlib import Path

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from users_api.config import Settings
from users_api.models.user import User
from users_api.services.user import (
    StoreError,
    StoreErrorKind,
    UserNotFoundError,
    UserStore,
    classify_error,
)


@pytest.mark.asyncio
async def test_insert_assigns_ids(store: UserStore):
    first = await store.insert("Ada", "1815-12-10")
    second = await store.insert("Alan", "1912-06-23")

    assert first.id > 0
    assert second.id > first.id


@pytest.mark.asyncio
async def test_find_all_empty(store: UserStore):
    assert await store.find_all() == []


@pytest.mark.asyncio
async def test_find_all_ordered_by_id(store: UserStore):
    first = await store.insert("Ada", "1815-12-10")
    second = await store.insert("Alan", "1912-06-23")

    users = await store.find_all()

    assert [user.id for user in users] == [first.id, second.id]
    assert [user.name for user in users] == ["Ada", "Alan"]


@pytest.mark.asyncio
async def test_find_by_id(store: UserStore):
    created = await store.insert("Ada", "1815-12-10")

    found = await store.find_by_id(created.id)

    assert found is not None
    assert (found.id, found.name, found.birthday) == (created.id, "Ada", "1815-12-10")


@pytest.mark.asyncio
async def test_find_by_id_missing(store: UserStore):
    assert await store.find_by_id(404) is None


@pytest.mark.asyncio
async def test_save_overwrites_fields(store: UserStore):
    user = await store.insert("Ada", "1815-12-10")
    user.name = "Augusta Ada"
    user.birthday = "1816-01-01"

    await store.save(user)

    stored = await store.find_by_id(user.id)
    assert stored.name == "Augusta Ada"
    assert stored.birthday == "1816-01-01"


@pytest.mark.asyncio
async def test_save_unchanged_record(store: UserStore):
    user = await store.insert("Ada", "1815-12-10")

    saved = await store.save(user)

    assert saved.name == "Ada"


@pytest.mark.asyncio
async def test_save_missing_user(store: UserStore):
    with pytest.raises(UserNotFoundError) as exc_info:
        await store.save(User(id=77, name="Ghost", birthday="1900-01-01"))

    assert exc_info.value.kind is StoreErrorKind.NOT_FOUND
    assert exc_info.value.operation == "save"
    assert await store.find_by_id(77) is None


@pytest.mark.asyncio
async def test_delete(store: UserStore):
    user = await store.insert("Ada", "1815-12-10")

    await store.delete(user.id)

    assert await store.find_by_id(user.id) is None


@pytest.mark.asyncio
async def test_delete_missing_user(store: UserStore):
    with pytest.raises(UserNotFoundError) as exc_info:
        await store.delete(5)

    assert exc_info.value.user_id == 5
    assert exc_info.value.kind is StoreErrorKind.NOT_FOUND


@pytest.mark.asyncio
async def test_constraint_violation(store: UserStore):
    with pytest.raises(StoreError) as exc_info:
        await store.insert(None, "1815-12-10")

    assert exc_info.value.kind is StoreErrorKind.CONSTRAINT_VIOLATION
    assert exc_info.value.operation == "insert"
    assert await store.find_all() == []


@pytest.mark.asyncio
async def test_schema_creation_is_repeatable(store: UserStore):
    await store.insert("Ada", "1815-12-10")

    await store.create_schema()

    assert len(await store.find_all()) == 1


@pytest.mark.asyncio
async def test_ping(store: UserStore):
    await store.ping()


@pytest.mark.asyncio
async def test_unreachable_database(tmp_path: Path):
    settings = Settings(
        db_type="sqlite", sqlite_path=str(tmp_path / "missing" / "users.db")
    )
    unreachable = UserStore.from_settings(settings)
    try:
        with pytest.raises(StoreError) as exc_info:
            await unreachable.find_all()
        assert exc_info.value.kind is StoreErrorKind.UNAVAILABLE

        with pytest.raises(StoreError):
            await unreachable.create_schema()

        with pytest.raises(StoreError):
            await unreachable.ping()
    finally:
        await unreachable.close()


class TestClassifyError:
    def test_integrity_error(self) -> None:
        exc = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))
        assert classify_error(exc) is StoreErrorKind.CONSTRAINT_VIOLATION

    def test_operational_error(self) -> None:
        exc = OperationalError("SELECT 1", {}, Exception("server closed the connection"))
        assert classify_error(exc) is StoreErrorKind.UNAVAILABLE

    def test_pool_timeout(self) -> None:
        assert classify_error(PoolTimeoutError("pool exhausted")) is StoreErrorKind.UNAVAILABLE

    def test_connection_refused(self) -> None:
        assert classify_error(ConnectionRefusedError()) is StoreErrorKind.UNAVAILABLE

    def test_other_database_error(self) -> None:
        exc = ProgrammingError("SELEC 1", {}, Exception("syntax error"))
        assert classify_error(exc) is StoreErrorKind.UNKNOWN
