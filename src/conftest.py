from contextlib import asynccontextmanager

import pytest
from httpx import ASGITransport, AsyncClient

from src.config.database import async_session_maker, engine
from src.locks import ResourceLocks
from src.main import app
from src.models import registry


@pytest.fixture(autouse=True)
async def database():
    """Fresh schema for every test, built from the ORM metadata."""
    async with engine.begin() as conn:
        await conn.run_sync(registry.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(registry.metadata.drop_all)


@pytest.fixture
async def db_session():
    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def locks():
    # asyncio locks bind to the loop they are first contended on
    return ResourceLocks()


@pytest.fixture
async def client():
    """Create a test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def client_factory():
    """Test client with some FastAPI dependencies replaced, e.g. by in-memory write models."""

    @asynccontextmanager
    async def factory(overrides: dict):
        app.dependency_overrides.update(overrides)
        try:
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                yield ac
        finally:
            app.dependency_overrides.clear()

    return factory
