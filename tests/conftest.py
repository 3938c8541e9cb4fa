"""Shared test fixtures: file-backed SQLite, controllable clock, FastAPI test app."""

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from status_monitor.config import Settings
from status_monitor.db.models import Base
from status_monitor.services.status_service import StatusService

T0 = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Stands in for utcnow(); tests move time forward explicitly."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now += timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        create_tables=False,
        sweep_enabled=False,
        offline_threshold_seconds=60,
        sweep_interval_seconds=60,
    )


@pytest.fixture
async def db_engine(test_settings: Settings):
    """SQLite engine on a per-test file so concurrent sessions see one database."""
    engine = create_async_engine(test_settings.database_url, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def service(session_factory, test_settings: Settings, clock: FakeClock) -> StatusService:
    return StatusService(session_factory, test_settings, clock=clock)


@pytest.fixture
async def app(service: StatusService):
    """FastAPI app wired to the test StatusService."""
    from status_monitor.api.app import create_app

    return create_app(service=service)


@pytest.fixture
async def client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Async HTTP client for the test FastAPI app."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
