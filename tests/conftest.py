from datetime import date

import pytest
import pytest_asyncio
from fakeredis.aioredis import FakeRedis
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from joblinkhub.core.rate_limit import rate_limiter
from joblinkhub.db.base import Base
from joblinkhub.db.session import get_db
from joblinkhub.main import app
from joblinkhub.models import profile, record, user  # noqa: F401


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'joblinkhub-test.db'}",
        connect_args={"timeout": 15},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # SQLAlchemy emits BEGIN itself so SAVEPOINTs nest inside it
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        # Take the write lock up front; concurrent requests queue on the busy timeout
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(autouse=True)
async def fake_redis():
    original = rate_limiter._client
    client = FakeRedis(decode_responses=True)
    rate_limiter.set_client(client)
    try:
        yield client
    finally:
        rate_limiter.set_client(original)
        await client.flushall()


@pytest.fixture(autouse=True)
def override_db(session_factory):
    async def _get_test_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_test_db
    try:
        yield
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def api_client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(api_client):
    """Register a local user; returns (user, token)."""

    async def _register(username: str = "alice", password: str = "s3cret-pass"):
        response = await api_client.post(
            "/users/auth/register",
            json={"username": username, "password": password, "confirmPassword": password},
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return body["user"], body["token"]

    return _register


@pytest.fixture
def record_payload():
    def _payload(**overrides):
        payload = {
            "company": "Acme Corp",
            "employmentType": "fulltime",
            "jobTitle": "Backend Engineer",
            "appliedDate": date(2026, 10, 1).isoformat(),
            "websiteLink": "https://jobs.acme.example/123",
            "comment": "Referred by Dana",
            "click": 0,
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
def create_record(api_client, record_payload):
    async def _create(token: str, **overrides):
        response = await api_client.post("/records", json=record_payload(**overrides), headers=auth_headers(token))
        assert response.status_code == 201, response.text
        return response.json()

    return _create
