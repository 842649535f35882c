# app/tests/conftest.py
import os

# Must be set before app.core.settings is imported anywhere.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./.pytest-cinema.db")
os.environ.setdefault("AUTH_SECRET", "test-secret-not-for-prod")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.db.models import Base, Movie, Series, User
from app.db.session import get_async_session
from app.domain import Actor, Role
from app.main import app
from app.services.auth import hash_password


@pytest.fixture
async def engine(tmp_path):
    """Fresh SQLite file per test, foreign keys on so ON DELETE CASCADE applies."""
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'cinema.db'}")

    @event.listens_for(eng.sync_engine, "connect")
    def _enable_fks(dbapi_conn, _record):
        cur = dbapi_conn.cursor()
        cur.execute("PRAGMA foreign_keys=ON")
        cur.close()

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield eng
    finally:
        await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


@pytest.fixture
async def client(session_factory):
    async def _override():
        async with session_factory() as s:
            yield s

    app.dependency_overrides[get_async_session] = _override
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(session):
    async def _make(email: str, role: Role = Role.USER, password: str = "secret123") -> User:
        user = User(email=email, password_hash=hash_password(password), role=role)
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user

    return _make


@pytest.fixture
def actor_for():
    def _actor(user: User) -> Actor:
        return Actor(id=user.id, role=user.role)

    return _actor


@pytest.fixture
async def movie(session) -> Movie:
    m = Movie(title="Inception", director="Christopher Nolan", genre="Sci-Fi", release_year=2010)
    session.add(m)
    await session.commit()
    await session.refresh(m)
    return m


@pytest.fixture
async def series(session) -> Series:
    s = Series(title="Dark", genre="Mystery", seasons=3)
    session.add(s)
    await session.commit()
    await session.refresh(s)
    return s
