"""Test fixtures — a fresh app and database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test builds its own app with create_app(Settings(...)), pointed at
   a throwaway SQLite file under pytest's tmp_path (driver: aiosqlite).
2. The schema is created straight from the ORM metadata, so no alembic
   run is needed.
3. Requests go through the real get_db dependency and the real auth
   guard: tests register and log in like any client would.

A file database (instead of :memory:) gives every session its own
connection, so commits and rollbacks behave as they do on PostgreSQL.
"""

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from publisher.config import Settings
from publisher.db.models import Base
from publisher.main import create_app

TEST_PASSWORD = "secret123"

BASE_SETTINGS = {
    "environment": "test",
    "jwt_secret": "test-secret",
    "bcrypt_rounds": 4,
    "log_level": "WARNING",
}


@pytest_asyncio.fixture()
async def app_factory(tmp_path):
    """Build apps sharing one test database; extra kwargs override Settings."""
    apps = []
    db_url = f"sqlite+aiosqlite:///{tmp_path / 'publisher.db'}"

    async def _make(**overrides):
        config = Settings(**{**BASE_SETTINGS, "database_url": db_url, **overrides})
        app = create_app(config)
        async with app.state.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        apps.append(app)
        return app

    yield _make

    for app in apps:
        await app.state.engine.dispose()


@pytest_asyncio.fixture()
async def app(app_factory):
    return await app_factory()


@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture()
async def db(app):
    """Direct session on the test database, for setup and inspection."""
    async with app.state.session_factory() as session:
        yield session


@pytest.fixture()
def register(client):
    """Register an account through the API and return its credentials.

    Usage:
        author = await register("author")
        await client.get("/api/auth/me", headers=author["headers"])
    """

    async def _register(role: str = "author", **fields) -> dict:
        body = {
            "email": f"{role}-{uuid.uuid4().hex[:8]}@inkwell.io",
            "password": TEST_PASSWORD,
            "firstName": "Test",
            "lastName": role.title(),
            "role": role,
            **fields,
        }
        r = await client.post("/api/auth/register", json=body)
        assert r.status_code == 201, r.text
        data = r.json()
        return {
            "id": data["user"]["id"],
            "email": body["email"],
            "password": body["password"],
            "token": data["token"],
            "headers": {"Authorization": f"Bearer {data['token']}"},
        }

    return _register
