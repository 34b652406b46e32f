from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from registry_api.main import app
from registry_api.api.lookup import get_lookup_cache
from registry_api.db.base import Base
from registry_api.db.seed import seed_sample_data
from registry_api.db.session import get_db
from registry_api.db.store import RegistryStore
from registry_api.models import Server
from registry_api.services.lookup_cache import LookupCache

# Use in-memory SQLite for fast integration tests
DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a session on a fresh in-memory database for each test."""
    engine = create_async_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    TestingSessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with TestingSessionLocal() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def seeded_servers(db_session: AsyncSession) -> list[Server]:
    """GitHub (exact github.com) and Jira (*.atlassian.net) sample servers."""
    return await seed_sample_data(db_session)


@pytest.fixture
def lookup_cache(clock) -> LookupCache:
    return LookupCache(ttl_seconds=900, sweep_interval_seconds=300, clock=clock)


@pytest.fixture
def store(db_session: AsyncSession) -> RegistryStore:
    return RegistryStore(db_session)


@pytest_asyncio.fixture
async def client(db_session: AsyncSession, lookup_cache: LookupCache) -> AsyncGenerator[AsyncClient, None]:
    """Provide an AsyncClient for the FastAPI app with DB and cache overrides."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_lookup_cache] = lambda: lookup_cache

    # Use ASGITransport for testing FastAPI apps
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    # Clean up overrides
    app.dependency_overrides.clear()
