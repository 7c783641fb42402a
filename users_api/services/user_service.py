"""
Users API — User Service (Persistence Layer)
=============================================

What:  The statements run against the Users table.
Why:   Keeps SQL out of the route handlers and gives every store failure one
       place where it is logged and translated.
How:   Each operation is a single SQLAlchemy statement in its own session;
       values are always bound parameters, never formatted into SQL text.
Who:   Called by routes/users.py through the get_user_service dependency.

Write operations return a snapshot:
    create_user / update_user / delete_user run their statement and then
    list_users(), returning the full post-mutation collection so a client can
    refresh its state in one round trip.

Known limitation:
    update_user reads the current row and writes the merged row with two
    separate statements. Two overlapping updates of the same id can lose one
    of the writes. This is deliberately left as is (no locking, no
    transaction spanning both statements).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, List, Optional

from fastapi import Depends
from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from users_api.database import Database, get_database
from users_api.exceptions import DatabaseError, NotFoundError, UsersApiError
from users_api.models.user import User
from users_api.schemas.user import UserCreate, UserResponse, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """
    CRUD operations over the Users relation.

    Stateless apart from the injected Database; cheap to construct per request.

    Error Handling Strategy:
        Any exception raised by the driver or SQLAlchemy is logged with its
        traceback and re-raised as DatabaseError, whose message is the
        generic one clients see. Application errors pass through untouched.
    """

    def __init__(self, database: Database):
        self.database = database

    @asynccontextmanager
    async def _statement(self, operation: str, **context) -> AsyncGenerator[AsyncSession, None]:
        try:
            async with self.database.session() as session:
                yield session
        except UsersApiError:
            raise
        except Exception as e:
            logger.error(
                "Database error during %s %s: %s",
                operation,
                context,
                str(e),
                exc_info=True,
            )
            raise DatabaseError(
                context={"operation": operation, "error_type": type(e).__name__, **context},
            ) from e

    async def list_users(self) -> List[UserResponse]:
        """
        Fetch every row.

        Rows are ordered by id, so the most recently created user is last.
        """
        async with self._statement("list_users") as session:
            result = await session.execute(select(User).order_by(User.id))
            rows = result.scalars().all()
        return [UserResponse.model_validate(row) for row in rows]

    async def get_user(self, user_id: int) -> Optional[UserResponse]:
        """Fetch one row by id; None when no row matches."""
        async with self._statement("get_user", user_id=user_id) as session:
            result = await session.execute(select(User).where(User.id == user_id))
            row = result.scalar_one_or_none()
        if row is None:
            return None
        return UserResponse.model_validate(row)

    async def create_user(self, user: UserCreate) -> List[UserResponse]:
        """
        Insert a row and return the refreshed collection.

        Raises:
            DatabaseError: including unique violations on username/email
        """
        async with self._statement("create_user", username=user.username) as session:
            await session.execute(
                insert(User).values(
                    username=user.username,
                    email=user.email,
                    age=user.age,
                )
            )
        logger.info("Created user '%s'", user.username)
        return await self.list_users()

    async def update_user(self, user_id: int, changes: UserUpdate) -> List[UserResponse]:
        """
        Merge `changes` over the stored row, write all three columns, and
        return the refreshed collection.

        Raises:
            NotFoundError: the row disappeared before the read
            DatabaseError: any store failure
        """
        current = await self.get_user(user_id)
        if current is None:
            raise NotFoundError(resource_id=str(user_id))

        values = {
            "username": changes.username if changes.username is not None else current.username,
            "email": changes.email if changes.email is not None else current.email,
            "age": changes.age if changes.age is not None else current.age,
        }
        async with self._statement("update_user", user_id=user_id) as session:
            await session.execute(
                update(User).where(User.id == user_id).values(**values)
            )
        logger.info("Updated user %s", user_id)
        return await self.list_users()

    async def delete_user(self, user_id: int) -> List[UserResponse]:
        """Delete the row by id and return the remaining collection."""
        async with self._statement("delete_user", user_id=user_id) as session:
            await session.execute(delete(User).where(User.id == user_id))
        logger.info("Deleted user %s", user_id)
        return await self.list_users()


def get_user_service(database: Database = Depends(get_database)) -> UserService:
    """FastAPI dependency binding a UserService to the application's Database."""
    return UserService(database)
