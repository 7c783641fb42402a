"""
Users API — Database Client
============================

What:  Async SQLAlchemy engine, session factory and FastAPI dependency.
Why:   Centralizes all database connection logic in one explicitly owned object.
How:   `Database` wraps an async engine (with its connection pool) and hands
       out short-lived sessions. The application factory constructs it, stores
       it on `app.state.database`, and the lifespan handler disposes it.
Who:   Used by UserService (statements) and the health route (ping).
When:  Constructed once per application; sessions are created per operation.

Lifecycle:
    create_app()  → Database(url)         engine + pool created
    request       → get_database(request) injected into handlers
    shutdown      → await database.dispose()   pooled connections closed

Pool sizing is left to the driver defaults; `pool_pre_ping` only guards
against connections that went stale while idle.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


class Database:
    """
    Owner of the async engine and session factory.

    One instance per application. Each `session()` is an independent unit
    of work that commits on success and rolls back on error; the persistence
    layer opens one per statement, so no transaction ever spans two statements.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(
            url,
            pool_pre_ping=True,
            echo=echo,
        )
        # expire_on_commit=False: rows stay readable after the session commits
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide a session that commits on success and rolls back on error.

        Example:
            async with database.session() as session:
                await session.execute(delete(User).where(User.id == user_id))
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def ping(self) -> None:
        """Run `SELECT 1`; raises whatever the driver raises when unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def create_tables(self) -> None:
        """
        Create every table registered on Base.metadata.

        Schema management is outside the service; this exists for local
        databases and the test suite, which start empty.
        """
        # Registers the users table with Base.metadata
        from users_api.models import user  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close all pooled connections. Called from the lifespan on shutdown."""
        await self.engine.dispose()
        logger.info("Database engine disposed")


def get_database(request: Request) -> Database:
    """
    FastAPI dependency returning the application's Database.

    Example usage in a route:
        @router.get("/health")
        async def health(database: Database = Depends(get_database)): ...
    """
    return request.app.state.database
