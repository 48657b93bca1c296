"""Async database engine and session for SQLite (dev) / PostgreSQL (prod)."""
from collections.abc import AsyncGenerator
import os

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from models import Base
from models.location import Location  # noqa: F401 - register with Base
from utils.config import DATABASE_URL, SQL_ECHO

# Runtime safety: when TESTING=true, never use production DB.
if os.environ.get("TESTING") == "true":
    url = DATABASE_URL
    if "locations.db" in url or (":memory:" not in url and "test" not in url.lower().split("?")[0]):
        raise RuntimeError(
            "Tests must not run against production. Set TESTING_DATABASE_URL to sqlite+aiosqlite:///:memory: "
            "(or another test URL containing :memory: or 'test')."
        )

_engine_kw: dict = {"echo": SQL_ECHO}
# In-memory SQLite: use one connection so all sessions share the same DB.
if "sqlite" in DATABASE_URL and ":memory:" in DATABASE_URL:
    _engine_kw["poolclass"] = StaticPool
    _engine_kw["connect_args"] = {"check_same_thread": False}

engine = create_async_engine(DATABASE_URL, **_engine_kw)

SessionLocal = async_sessionmaker(engine, autoflush=False, expire_on_commit=False)


async def init_models() -> None:
    """Create tables that do not exist yet. No migrations; the schema is a single table."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: yield a DB session and close after request."""
    async with SessionLocal() as session:
        yield session
