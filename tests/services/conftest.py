"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database with the default
      containers seeded and three known users registered
    - get_db dependency overridden to use test DB sessions
    - db_manager patched so the readiness probe sees the test engine
    - get_clock overridden by a FakeClock the test can advance

Design Decisions:
    - SQLite in-memory with StaticPool: every session shares one connection,
      so rows committed through the API are visible to test_db and vice versa
    - Partial unique indexes are created with their sqlite_where clauses, so the
      single-active-session rule is enforced here exactly as in PostgreSQL
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from taskboard.api.dependencies import get_clock
from taskboard.db.base import Base
from taskboard.infrastructure.database import get_db, DatabaseSessionManager
from taskboard.models.user import User
from taskboard.services.container_registry import ContainerRegistry
import taskboard.infrastructure.database as db_module
from taskboard.main import app
from tests.services.board_client import ALICE, BOB, CAROL


T0 = datetime(2026, 10, 18, 9, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Deterministic clock: starts at T0, moves only when told."""

    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        await ContainerRegistry(session).seed_defaults()
        session.add_all([
            User(id=ALICE, name="Alice", email="alice@example.com"),
            User(id=BOB, name="Bob", email="bob@example.com"),
            User(id=CAROL, name="Carol", email="carol@example.com"),
        ])
        await session.commit()
        yield session


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
async def client(test_engine, test_session_factory, test_db, clock):
    """FastAPI test client with DB and clock dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
