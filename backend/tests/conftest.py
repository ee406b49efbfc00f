"""
Pytest fixtures for test database, services, client, and authentication.

Every test gets a fresh SQLite database file (or TEST_DATABASE_URL when set)
with tables created from the models, so tests never share state.
"""

import os

# Settings are read once; pin the test environment before the app is imported
os.environ.setdefault("ENVIRONMENT", "test")
os.environ["REDIS_ENABLED"] = "false"
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from turf_booking.main import app
from turf_booking.api.deps import get_admission_service
from turf_booking.core.security import Principal, create_access_token, hash_password
from turf_booking.db.base import Base
from turf_booking.db.session import build_engine, build_session_factory, get_db
from turf_booking.models.turf import Turf
from turf_booking.models.user import Role, User
from turf_booking.services.admission_service import AdmissionService
from turf_booking.services.interfaces.local_slot_lock import LocalSlotLock
from turf_booking.services.interval_store import IntervalStore
from turf_booking.services.turf_service import TurfDirectory

TEST_DATE = "2024-06-01"


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Create tables on a fresh database, then drop them for isolation."""
    url = os.environ.get("TEST_DATABASE_URL") or f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    test_engine = build_engine(url)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_session_factory(engine)


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for seeding and inspecting data directly."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(session_factory) -> IntervalStore:
    return IntervalStore(session_factory, slot_lock=LocalSlotLock())


@pytest.fixture
def admission(store: IntervalStore, session_factory) -> AdmissionService:
    return AdmissionService(store, TurfDirectory(session_factory))


@pytest_asyncio.fixture(scope="function")
async def client(session_factory, admission: AdmissionService) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client wired to the test database and services."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_admission_service] = lambda: admission

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _create_user(db_session: AsyncSession, name: str, email: str, role: Role) -> User:
    user = User(
        name=name,
        email=email,
        hashed_password=hash_password("testpassword123"),
        role=role.value,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


async def _create_turf(db_session: AsyncSession, owner: User, name: str) -> Turf:
    turf = Turf(
        name=name,
        location="Test Location",
        image_url="https://example.com/turf.jpg",
        owner_id=owner.id,
    )
    db_session.add(turf)
    await db_session.commit()
    await db_session.refresh(turf)
    return turf


@pytest_asyncio.fixture
async def owner(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "Olivia Owner", "owner@example.com", Role.OWNER)


@pytest_asyncio.fixture
async def other_owner(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "Oscar Owner", "owner2@example.com", Role.OWNER)


@pytest_asyncio.fixture
async def player(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "Alex Player", "player@example.com", Role.USER)


@pytest_asyncio.fixture
async def other_player(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "Blair Player", "player2@example.com", Role.USER)


@pytest_asyncio.fixture
async def turf(db_session: AsyncSession, owner: User) -> Turf:
    """A turf owned by `owner`."""
    return await _create_turf(db_session, owner, "Downtown Arena")


@pytest_asyncio.fixture
async def other_turf(db_session: AsyncSession, other_owner: User) -> Turf:
    return await _create_turf(db_session, other_owner, "Riverside Pitch")


def principal_for(user: User) -> Principal:
    return Principal(user_id=user.id, role=Role(user.role))


def headers_for(user: User) -> dict:
    token = create_access_token(data={"sub": str(user.id), "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def owner_headers(owner: User) -> dict:
    return headers_for(owner)


@pytest.fixture
def player_headers(player: User) -> dict:
    return headers_for(player)


@pytest.fixture
def other_player_headers(other_player: User) -> dict:
    return headers_for(other_player)
