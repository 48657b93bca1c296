# Set test environment before any application or db imports.
import os

os.environ["TESTING"] = "true"
os.environ["TESTING_DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from db import get_db
from main import app
from models import Base
from models.location import Location
from repositories.location_repository import LocationRepository


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory engine per test with the schema created."""
    eng = create_async_engine(
        os.environ["TESTING_DATABASE_URL"],
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield eng
    finally:
        await eng.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Function-scoped session on the per-test database."""
    factory = async_sessionmaker(engine, autoflush=False, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def repo(db_session: AsyncSession) -> LocationRepository:
    """Location repository bound to the test session."""
    return LocationRepository(db_session)


@pytest.fixture
def seed_location(repo):
    """Return an async helper that stores a location directly through the repository."""
    async def seed(identifier: str, description: str = "", system_type_name: str = "CSW") -> Location:
        return await repo.insert(
            Location(identifier=identifier, description=description, system_type_name=system_type_name)
        )
    return seed


def _override_get_db(session):
    """Return an async generator that yields the given session (for dependency override)."""
    async def override():
        yield session
    return override


@pytest_asyncio.fixture
async def client(db_session):
    """API test client; overrides get_db to use the test db_session, cleared on teardown."""
    app.dependency_overrides[get_db] = _override_get_db(db_session)
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            yield c
    finally:
        app.dependency_overrides.clear()
