"""Shared pytest fixtures configured to use SQLite in-memory for tests."""

import logging
import os
from datetime import datetime, timedelta, timezone

# must be set before the app modules read their settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ["NOTESHARE_SKIP_LIFESPAN_DB"] = "1"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from noteshare.core.models import BaseModel, Note, Share, User
from noteshare.core.redis_client import get_redis_client
from noteshare.database import get_db_session
from noteshare.main import app
from noteshare.security.jwt import create_access_token

# Silence extremely verbose DEBUG logs from aiosqlite to keep test output readable
logging.getLogger("aiosqlite").setLevel(logging.WARNING)


class FakeRedis:
    """In-memory stand-in for the handful of redis.asyncio commands the index uses."""

    def __init__(self):
        self.values = {}
        self.sets = {}
        self.expiries = {}

    async def ping(self):
        return True

    async def get(self, key):
        return self.values.get(key)

    async def set(self, key, value, ex=None):
        self.values[key] = value
        if ex:
            self.expiries[key] = ex
        return True

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            removed += int(self.values.pop(key, None) is not None)
            removed += int(self.sets.pop(key, None) is not None)
        return removed

    async def sadd(self, key, *members):
        bucket = self.sets.setdefault(key, set())
        before = len(bucket)
        bucket.update(members)
        return len(bucket) - before

    async def srem(self, key, *members):
        bucket = self.sets.get(key, set())
        before = len(bucket)
        bucket.difference_update(members)
        return before - len(bucket)

    async def smembers(self, key):
        return set(self.sets.get(key, set()))

    async def expire(self, key, seconds):
        self.expiries[key] = seconds
        return True

    async def aclose(self):
        pass

    def pipeline(self, transaction=True):
        return FakePipeline(self)


class FakePipeline:
    def __init__(self, redis):
        self.redis = redis
        self.calls = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def __getattr__(self, name):
        def queue(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self
        return queue

    async def execute(self):
        results = []
        for name, args, kwargs in self.calls:
            results.append(await getattr(self.redis, name)(*args, **kwargs))
        self.calls = []
        return results


@pytest.fixture(autouse=True)
def search_index_offline(monkeypatch):
    """Keep the shared search index disconnected unless a test wires one up."""
    monkeypatch.setattr(get_redis_client(), "redis", None)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,  # keep the same memory DB across connections
        connect_args={"check_same_thread": False},
    )

    # SQLite only enforces ON DELETE CASCADE with this pragma
    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_user(session):
    async def _make_user(name=None, email=None):
        user = User(name=name, email=email)
        session.add(user)
        await session.commit()
        return user

    return _make_user


@pytest.fixture
def make_note(session):
    """Insert a note directly; ``age_minutes`` pushes created_at into the past."""

    async def _make_note(author, title="Note", content="", is_public=False, age_minutes=0):
        created = datetime.now(timezone.utc) - timedelta(minutes=age_minutes)
        note = Note(
            title=title,
            content=content,
            is_public=is_public,
            author_id=author.id,
            last_edited_at=created,
            created_at=created,
            updated_at=created,
        )
        session.add(note)
        await session.commit()
        return note

    return _make_note


@pytest.fixture
def make_share(session):
    async def _make_share(note, user, permission="read"):
        share = Share(
            note_id=note.id,
            shared_with_id=user.id,
            shared_by_id=note.author_id,
            permission=permission,
        )
        session.add(share)
        await session.commit()
        return share

    return _make_share


@pytest.fixture
async def owner(make_user):
    return await make_user(name="Olivia Owner", email="olivia@example.com")


@pytest.fixture
async def reader(make_user):
    return await make_user(name="Rick Reader", email="rick@example.com")


@pytest.fixture
async def writer(make_user):
    return await make_user(name="Wendy Writer", email="wendy@example.com")


@pytest.fixture
async def stranger(make_user):
    return await make_user(name=None, email="stranger@example.com")


def bearer(user):
    """Authorization header for a user."""
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return bearer


@pytest.fixture
async def client(session_factory):
    """HTTP client against the app, one DB session per request."""

    async def _override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = _override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
