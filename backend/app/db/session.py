from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import settings


def build_engine(url: str, **overrides: Any) -> AsyncEngine:
    """
    Shared by the API, the admin CLI and Alembic.

    PostgreSQL (asyncpg) gets a pre-pinged, periodically recycled pool. SQLite
    (local runs, tests) keeps SQLAlchemy's defaults.
    """
    kwargs: dict[str, Any] = {"echo": False}
    if make_url(url).get_backend_name() == "postgresql":
        kwargs.update(
            pool_pre_ping=True,  # detects dead connections before using them
            pool_recycle=300,    # recycle connections periodically (seconds)
        )
    kwargs.update(overrides)
    return create_async_engine(url, **kwargs)


# Use CLEAN URL to avoid asyncpg errors with sslmode/channel_binding query params.
engine: AsyncEngine = build_engine(settings.DATABASE_URL_ASYNC_CLEAN)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides one AsyncSession per request.
    Anything left uncommitted by a failed request is rolled back.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
