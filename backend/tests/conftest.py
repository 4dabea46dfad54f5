from __future__ import annotations

import json
import os

# ---------------------------------------------------------
# Environment (must be set before anything under app/ is imported)
# ---------------------------------------------------------
TEST_TENANTS = {
    "preswylfa": {
        "display_name": "Preswylfa",
        "logo_url": "https://example.com/preswylfa.png",
        "admin_email": "owner@example.com",
        "calendar_api_key": "preswylfa-key",
        "read_calendar_ids": ["main@example.com", "airbnb@example.com", "not_configured"],
        "write_calendar_id": "bookings@example.com",
        "email_user": "stay@example.com",
        "email_pass": "mail-secret",
    },
    "piddle-inn": {
        "display_name": "Piddle Inn",
        "admin_email": "piddle@example.com",
        "calendar_api_key": "piddle-key",
        "read_calendar_id": "piddle@example.com",
    },
}

os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL_ASYNC"] = "sqlite+aiosqlite:///./unused-test.db"
os.environ["JWT_SECRET"] = "test-secret-that-is-long-enough-for-hs256"
os.environ["TENANTS"] = json.dumps(TEST_TENANTS)
os.environ["DEFAULT_TENANT"] = "preswylfa"
os.environ["MAIL_USERNAME"] = "noreply@example.com"
os.environ["MAIL_PASSWORD"] = "default-mail-secret"
os.environ["MAIL_SUPPRESS_SEND"] = "true"
os.environ.pop("ADD_EVENT_API_KEY", None)

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from app.core.security import create_access_token  # noqa: E402
from app.crud.admin_user import create_admin_user  # noqa: E402
from app.db.session import build_engine, get_db  # noqa: E402

# Ensure Base + models are registered before create_all
from app.db.base import Base  # noqa: E402
import app.models  # noqa: E402,F401


# ---------------------------------------------------------
# Engine + schema lifecycle (fresh SQLite file per test)
# ---------------------------------------------------------
@pytest_asyncio.fixture()
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture()
def sessionmaker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


# ---------------------------------------------------------
# DB session for assertions / setup
# ---------------------------------------------------------
@pytest_asyncio.fixture()
async def db(sessionmaker):
    """
    Session for test setup & assertions ONLY.
    """
    async with sessionmaker() as session:
        yield session
        await session.rollback()


# ---------------------------------------------------------
# FastAPI app + dependency override
# ---------------------------------------------------------
@pytest.fixture()
def app(sessionmaker):
    from app.main import app as fastapi_app

    async def _override_get_db():
        async with sessionmaker() as session:
            yield session

    fastapi_app.dependency_overrides[get_db] = _override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


# ---------------------------------------------------------
# HTTP client
# ---------------------------------------------------------
@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
    ) as ac:
        yield ac


# ---------------------------------------------------------
# Auth helpers
# ---------------------------------------------------------
def bearer(tenant: str | None = "preswylfa", *, sub: str = "1", username: str = "admin") -> dict:
    token = create_access_token(sub, username=username, tenant=tenant)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def make_headers():
    return bearer


@pytest.fixture()
def admin_headers() -> dict:
    return bearer("preswylfa")


@pytest_asyncio.fixture()
async def admin_user(db):
    return await create_admin_user(
        db,
        username="admin",
        password="correct horse",
        property_id="preswylfa",
        display_name="Preswylfa Admin",
    )
