"""Engine and per-request sessions for the catalog database.

PostgreSQL (asyncpg) in deployment; an in-memory SQLite URL works for local
runs because a single shared connection is kept for it.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from docrepo.core.config import get_settings


def _engine_options(url: str) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": get_settings().sql_echo}
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        if parsed.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_pre_ping"] = True
    return options


def build_engine(url: str) -> AsyncEngine:
    return create_async_engine(url, **_engine_options(url))


engine = build_engine(get_settings().database_url)

async_session_factory = async_sessionmaker(engine, expire_on_commit=False)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; uncommitted work is rolled back on exit."""
    async with async_session_factory() as session:
        yield session


async def init_db() -> None:
    """Create any missing catalog tables."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def dispose_db() -> None:
    await engine.dispose()
