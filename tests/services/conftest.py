"""Service test fixtures — async DB, services and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB session
    - Services get a private ChangeFeed and a seeded rng

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for the
      conditional-update claim (PostgreSQL-specific features not exercised)
    - client sends the bearer secret by default; auth tests strip it
"""

import random
from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from spinround.config import Settings
from spinround.db.base import Base
import spinround.models  # noqa: F401
from spinround.infrastructure.change_feed import ChangeFeed
from spinround.infrastructure.database import get_db, DatabaseSessionManager
import spinround.infrastructure.database as db_module
from spinround.main import app
from spinround.services.assignment_engine import AssignmentEngine
from spinround.services.event_state_store import EventStateStore
from spinround.services.reveal_gate import RevealGate
from spinround.services.session_resolver import SessionResolver

AUTH = {"Authorization": "Bearer test-secret"}


class FakeClock:
    """Settable clock for countdown tests."""

    def __init__(self, now: datetime | None = None):
        self.now = now or datetime(2026, 5, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
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
        yield session


@pytest.fixture
def settings():
    return Settings(admin_password="admin-pass", api_secret="test-secret")


@pytest.fixture
def feed():
    return ChangeFeed()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine(test_db, settings, feed):
    return AssignmentEngine(test_db, settings, rng=random.Random(7), feed=feed)


@pytest.fixture
def gate(test_db, settings, feed, clock):
    return RevealGate(test_db, settings, feed=feed, clock=clock)


@pytest.fixture
def resolver(test_db, settings):
    return SessionResolver(test_db, settings)


@pytest.fixture
def store(test_db, feed):
    return EventStateStore(test_db, feed=feed)


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    # Readiness probe reads db_manager directly
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test", headers=AUTH,
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def add_questions(engine):
    """Create count questions in a round; returns them in order."""
    async def _add(count: int, round_number: int = 1):
        return [
            await engine.create_question(
                f"Question {round_number}.{i}", f"Details {round_number}.{i}",
                round_number,
            )
            for i in range(1, count + 1)
        ]
    return _add


@pytest.fixture
def add_teams(engine):
    async def _add(*names: str):
        return [await engine.create_team(name) for name in names]
    return _add
