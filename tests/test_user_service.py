"""
Users API — User Service Tests
===============================

What:  Tests for UserService against a real (SQLite) database.
Why:   Snapshot returns, partial-update merging and error translation are
       the persistence layer's whole job.
How:   Each test gets an empty Users table from the `database` fixture.

What we test:
    ✅ Snapshot returned by create/update/delete
    ✅ get_user returns None for missing rows
    ✅ Partial update keeps omitted fields
    ✅ Store failures (constraint, unreachable) become DatabaseError and are logged
"""

import logging

import pytest

from users_api.exceptions import DatabaseError, NotFoundError
from users_api.schemas.user import UserCreate, UserUpdate
from users_api.services.user_service import UserService


def make_user(name: str, age: int = 30) -> UserCreate:
    return UserCreate(username=name, email=f"{name}@example.com", age=age)


class TestUserServiceReads:
    """Tests for list_users and get_user."""

    @pytest.mark.asyncio
    async def test_list_users_empty(self, user_service):
        assert await user_service.list_users() == []

    @pytest.mark.asyncio
    async def test_get_user_missing_returns_none(self, user_service):
        assert await user_service.get_user(1) is None

    @pytest.mark.asyncio
    async def test_get_user_found(self, user_service):
        snapshot = await user_service.create_user(make_user("alice"))
        user = await user_service.get_user(snapshot[-1].id)
        assert user is not None
        assert user.username == "alice"
        assert user.model_dump().keys() == {"id", "username", "email", "age"}

    @pytest.mark.asyncio
    async def test_list_users_ordered_by_id(self, user_service):
        for name in ("carol", "alice", "bob"):
            await user_service.create_user(make_user(name))
        users = await user_service.list_users()
        assert [u.id for u in users] == sorted(u.id for u in users)
        assert [u.username for u in users] == ["carol", "alice", "bob"]


class TestUserServiceWrites:
    """Tests for create_user, update_user and delete_user."""

    @pytest.mark.asyncio
    async def test_create_returns_full_snapshot(self, user_service):
        first = await user_service.create_user(make_user("alice"))
        second = await user_service.create_user(make_user("bobby"))
        assert len(first) == 1
        assert len(second) == 2
        assert second[-1].username == "bobby"

    @pytest.mark.asyncio
    async def test_update_merges_supplied_fields(self, user_service):
        snapshot = await user_service.create_user(make_user("alice", age=30))
        user_id = snapshot[-1].id

        updated = await user_service.update_user(user_id, UserUpdate(age=31))

        assert len(updated) == 1
        assert updated[-1].age == 31
        assert updated[-1].username == "alice"
        assert updated[-1].email == "alice@example.com"

    @pytest.mark.asyncio
    async def test_update_missing_user_raises_not_found(self, user_service):
        with pytest.raises(NotFoundError):
            await user_service.update_user(404, UserUpdate(age=31))

    @pytest.mark.asyncio
    async def test_delete_returns_remaining_rows(self, user_service):
        await user_service.create_user(make_user("alice"))
        snapshot = await user_service.create_user(make_user("bobby"))
        alice_id = snapshot[0].id

        remaining = await user_service.delete_user(alice_id)

        assert [u.username for u in remaining] == ["bobby"]
        assert await user_service.get_user(alice_id) is None


class TestUserServiceErrors:
    """Store failures must surface as DatabaseError with the detail logged."""

    @pytest.mark.asyncio
    async def test_duplicate_username_raises_database_error(self, user_service, caplog):
        await user_service.create_user(make_user("alice"))
        duplicate = UserCreate(username="alice", email="other@example.com", age=20)

        with caplog.at_level(logging.ERROR, logger="users_api.services.user_service"):
            with pytest.raises(DatabaseError) as exc_info:
                await user_service.create_user(duplicate)

        assert exc_info.value.message == "Database error occurred"
        assert exc_info.value.context["operation"] == "create_user"
        assert "IntegrityError" in caplog.text or "UNIQUE" in caplog.text
        assert len(await user_service.list_users()) == 1

    @pytest.mark.asyncio
    async def test_unreachable_store_raises_database_error(self, unreachable_database, caplog):
        service = UserService(unreachable_database)

        with caplog.at_level(logging.ERROR, logger="users_api.services.user_service"):
            with pytest.raises(DatabaseError):
                await service.list_users()

        assert "Database error during list_users" in caplog.text
