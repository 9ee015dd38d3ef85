"""
pytest configuration and shared fixtures.
"""

import os

# Settings are read at import time; point the app at SQLite before any
# tanktrack module is imported.
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite:///:memory:")

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tanktrack.api import app
from tanktrack.config import settings
from tanktrack.core.categories import TankDescriptor, resolve_profile
from tanktrack.core.group_service import normalize_tank
from tanktrack.core.progress_service import advance_stage
from tanktrack.core.records import Tank
from tanktrack.core.tank_templates import build_seed_data
from tanktrack.db.models import Base
from tanktrack.db.session import get_session


# ── Record helpers ───────────────────────────────────────────


def make_tank(tank_id: str = "PBF-S2-01", tank_type: str = "SEWAGE WATER") -> Tank:
    """Plain tank with seed progress."""
    return normalize_tank(Tank(id=tank_id, name=tank_id, type=tank_type))


def advance_through(record, profile, stages):
    """Advance each stage in turn."""
    for stage in stages:
        record = advance_stage(record, stage, profile)
    return record


def complete_all(record, profile):
    return advance_through(record, profile, profile.stages)


# ── Fixtures ─────────────────────────────────────────────────


@pytest.fixture
def standard_profile():
    return resolve_profile(TankDescriptor(id="PBF-S2-01", type="SEWAGE WATER"))


@pytest.fixture
def seed_data():
    return build_seed_data()


@pytest.fixture
async def engine():
    """In-memory SQLite engine shared by every connection of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    """HTTP client bound to the API with the test database."""

    async def override_get_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def no_api_key(monkeypatch):
    monkeypatch.setattr(settings, "api_key", "")
