"""
Database Connection Module
Wraps the SQLAlchemy async engine and session factory in a single storage
context that the process builds once and hands to every component.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from restaurant_admin.core.config import Settings

logger = logging.getLogger(__name__)


# Base class for all our models
class Base(DeclarativeBase):
    pass


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores ON DELETE CASCADE unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Storage context: one engine, one session factory.

    Example:
        >>> database = Database("sqlite+aiosqlite:///./restaurant.db")
        >>> await database.init_db()
        >>> async with database.session() as session:
        ...     catalog = CatalogStore(session)
    """

    def __init__(self, url: str, echo: bool = False, **engine_kwargs: Any):
        self.url = url
        self.engine = create_async_engine(url, echo=echo, **engine_kwargs)

        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        # Session factory - creates new database sessions
        self.session_maker = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False  # Objects remain accessible after commit
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build the storage context described by application settings."""
        engine_kwargs: dict[str, Any] = {}
        if not settings.is_sqlite:
            engine_kwargs.update(
                pool_size=settings.db_pool_size,  # Connection pool size
                max_overflow=settings.db_max_overflow,  # Extra connections when pool is full
            )
        return cls(settings.database_url, echo=settings.database_echo, **engine_kwargs)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session; it is closed when the block exits."""
        async with self.session_maker() as session:
            yield session

    async def init_db(self) -> None:
        """
        Create all tables in database.
        Called once at application startup.
        """
        # Models must be registered on Base.metadata before create_all
        from restaurant_admin import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created successfully")

    async def ping(self) -> None:
        """Round-trip a trivial statement; raises if the database is unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """
    Dependency injection for FastAPI routes.
    Yields a session from the application's storage context.
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
