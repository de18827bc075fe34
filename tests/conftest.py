"""
Shared fixtures: a throwaway SQLite database per test, wired services and an
HTTP client bound to an app built on the same database.
"""
import os
from datetime import timedelta

# Point the default engine away from PostgreSQL before scholarlink is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./scholarlink_default.db")
os.environ.setdefault("SCHEDULER_ENABLED", "false")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from scholarlink.database import create_engine, create_session_factory, init_db
from scholarlink.datetime_utils import utc_now
from scholarlink.services.container import ServiceContainer, build_services


@pytest_asyncio.fixture
async def engine(tmp_path):
    """Fresh SQLite database file with all tables created"""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'scholarlink_test.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def services(session_factory) -> ServiceContainer:
    return build_services(session_factory)


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client for an app wired to the test database"""
    from main import create_app

    app = create_app(session_factory)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client


@pytest.fixture
def future_time():
    """A start time safely in the future"""
    return utc_now() + timedelta(days=2)
