from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from backoffice.db import get_session
from backoffice.main import app
from backoffice.models import SQLModel
from backoffice.services.notifier import InMemoryNotifier, LoggingNotifier, set_notifier
from backoffice.services.storage import set_file_storage

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

    from sqlalchemy.ext.asyncio import AsyncEngine


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Create a fresh in-memory SQLite database for each test.

    Lifecycle operations commit, so every test gets its own database instead
    of a rolled-back outer transaction.
    """
    _engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield _engine
    await _engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Yield a database session bound to the per-test engine."""
    async with AsyncSession(bind=engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the database session dependency overridden."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_session] = _override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def notifier() -> Iterator[InMemoryNotifier]:
    """Capture operation outcomes for every test."""
    captured = InMemoryNotifier()
    set_notifier(captured)
    yield captured
    set_notifier(LoggingNotifier())


@pytest.fixture(autouse=True)
def _reset_file_storage() -> Iterator[None]:
    set_file_storage(None)
    yield
    set_file_storage(None)
