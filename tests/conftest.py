"""Shared pytest fixtures and configuration for all tests."""

from decimal import Decimal
from typing import Any, AsyncIterator, Awaitable, Callable

import httpx
import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import StaticPool

from restaurant_admin.core.config import Settings
from restaurant_admin.database import Database
from restaurant_admin.main import create_app
from restaurant_admin.models import MenuItem
from restaurant_admin.services import CatalogStore, OrderEngine

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at an in-memory database."""
    return Settings(
        _env_file=None,
        database_url=TEST_DATABASE_URL,
        env_mode="development",
        debug=False,
    )


@pytest.fixture
async def database() -> AsyncIterator[Database]:
    """Fresh in-memory database with all tables created."""
    db = Database(TEST_DATABASE_URL, poolclass=StaticPool)
    await db.init_db()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database: Database) -> AsyncIterator[AsyncSession]:
    async with database.session() as s:
        yield s


@pytest.fixture
def catalog(session: AsyncSession) -> CatalogStore:
    return CatalogStore(session)


@pytest.fixture
def orders(session: AsyncSession) -> OrderEngine:
    return OrderEngine(session)


@pytest.fixture
def make_menu_item(catalog: CatalogStore) -> Callable[..., Awaitable[MenuItem]]:
    """Factory creating a catalog entry with sensible defaults."""

    async def _make(**overrides: Any) -> MenuItem:
        fields: dict[str, Any] = {
            "name": "Iced Tea",
            "category": "Beverage",
            "price": Decimal("3.49"),
            "ingredients": ["black tea", "lemon", "sugar", "ice"],
            "preparation_time": 5,
        }
        fields.update(overrides)
        return await catalog.create(fields)

    return _make


@pytest.fixture
def count_rows(session: AsyncSession) -> Callable[[type], Awaitable[int]]:
    """Count rows of a model table."""

    async def _count(model: type) -> int:
        return await session.scalar(select(func.count()).select_from(model))

    return _count


@pytest.fixture
async def client(settings: Settings, database: Database) -> AsyncIterator[httpx.AsyncClient]:
    """HTTP client bound to an app sharing the test database."""
    app = create_app(settings=settings, database=database)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
