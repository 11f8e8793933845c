"""
Pytest fixtures: a throwaway SQLite database per test, wired into the app
in place of the PostgreSQL pool.
"""
import os
from datetime import timedelta

# Must be set before catalog.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ADMIN_PASSWORD"] = "test-admin-secret"
os.environ["COOKIE_SECURE"] = "false"
os.environ["OIDC_CLIENT_ID"] = "test-client"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import catalog.models  # noqa: F401
from catalog.config import get_settings
from catalog.database import Base, get_db, utcnow
from catalog.main import app
from catalog.services.sessions import create_session
from catalog.services.storage import DatabaseStorage


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage(db):
    return DatabaseStorage(db)


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def user(storage):
    return await storage.upsert_user(
        {
            "id": "user-1",
            "email": "ada@example.com",
            "first_name": "Ada",
            "last_name": "Lovelace",
            "profile_image_url": None,
        }
    )


@pytest.fixture
async def auth_client(client, session_factory, user):
    """Client carrying a valid session cookie for ``user``."""
    async with session_factory() as session:
        sid = await create_session(session, {"sub": user.id}, utcnow() + timedelta(days=1))
    client.cookies.set(get_settings().session_cookie_name, sid)
    return client
