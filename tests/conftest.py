"""
Shared fixtures for the FitOrbit backend tests.

Strategy:
- The test FastAPI app is built without startup events (no Postgres needed).
- Auth endpoint tests swap UserRepository for an AsyncMock (mock_repo).
- user_client/admin_client override get_current_user with a fixed user and
  get_db with mock_db, for tests that only care about routing and role checks.
- Service tests and live_client run against a fresh in-memory SQLite schema
  per test (aiosqlite + StaticPool, so every session shares one connection).
- JWTs are minted with auth_service.create_access_token() to exercise the
  real bearer-token dependency.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from httpx import AsyncClient, ASGITransport
from fastapi import FastAPI
from datetime import datetime
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.api.router import api_router
from app.core.base import Base
from app.core.errors import register_exception_handlers
from app.models.user import User, RoleEnum
from app.services.auth_service import auth_service
from app.repositories.user_repository import UserRepository
from app.core.dependencies import get_current_user, get_user_repository
from app.core.db import get_db


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def create_test_app() -> FastAPI:
    """Test FastAPI app without startup events."""
    test_app = FastAPI(title="FitOrbit Test App")
    register_exception_handlers(test_app)
    test_app.include_router(api_router, prefix="/api/v1")
    return test_app


def make_auth_headers(user: User) -> dict:
    """Authorization header with a valid JWT for the given user."""
    access_token = auth_service.create_access_token(
        data={"sub": str(user.id), "role": user.role.value}
    )
    return {"Authorization": f"Bearer {access_token}"}


# ---------------------------------------------------------------------------
# User fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def user_fixture() -> User:
    """Regular user with role 'user'."""
    user = User(
        id=1,
        name="Test User",
        email="test@example.com",
        password=auth_service.hash_password("password123"),
        role=RoleEnum.user,
        is_active=True,
        phone="",
        profile_photo="",
        goals="",
        total_workouts=0,
        avg_calories=0,
        created_at=datetime.utcnow(),
    )
    user.set_username("tester")
    return user


@pytest.fixture
def admin_fixture() -> User:
    """Administrator with role 'admin'."""
    user = User(
        id=2,
        name="Admin",
        email="admin@example.com",
        password=auth_service.hash_password("admin123"),
        role=RoleEnum.admin,
        is_active=True,
        phone="",
        profile_photo="",
        goals="",
        total_workouts=0,
        avg_calories=0,
        created_at=datetime.utcnow(),
    )
    user.set_username("admin")
    return user


# ---------------------------------------------------------------------------
# Dependency fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_repo() -> AsyncMock:
    """Mocked UserRepository for the auth endpoints."""
    repo = AsyncMock(spec=UserRepository)
    repo.username_taken.return_value = False
    return repo


@pytest.fixture
def mock_db() -> MagicMock:
    """
    Mocked DB session for endpoints that use get_db directly.
    execute() returns a MagicMock with the common accessors preset.
    """
    session = AsyncMock()
    default_result = MagicMock()
    default_result.scalar_one_or_none.return_value = None
    default_result.scalar_one.return_value = 0
    default_result.scalars.return_value.all.return_value = []
    session.execute.return_value = default_result
    session.get.return_value = None
    session.add = MagicMock()
    return session


# ---------------------------------------------------------------------------
# SQLite database
# ---------------------------------------------------------------------------

@pytest.fixture
async def engine():
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_user(db_session):
    """Factory persisting users: await make_user("Alice", role=RoleEnum.admin)."""
    counter = {"n": 0}

    async def _make(name: str = "User", role: RoleEnum = RoleEnum.user, password: str = "password123") -> User:
        counter["n"] += 1
        slug = f"{name.lower().replace(' ', '')}{counter['n']}"
        user = User(
            name=name,
            email=f"{slug}@example.com",
            password=auth_service.hash_password(password),
            role=role,
            is_active=True,
        )
        user.set_username(slug)
        db_session.add(user)
        await db_session.commit()
        return user

    return _make


# ---------------------------------------------------------------------------
# HTTP clients
# ---------------------------------------------------------------------------

@pytest.fixture
async def client(mock_repo) -> AsyncGenerator[AsyncClient, None]:
    """
    Base client: get_user_repository -> mock_repo.
    Used for the auth endpoints (register, login, refresh, logout, me).
    """
    app = create_test_app()
    app.dependency_overrides[get_user_repository] = lambda: mock_repo
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def user_client(user_fixture, mock_repo, mock_db) -> AsyncGenerator[AsyncClient, None]:
    """
    Client authenticated as a regular user.
    get_current_user -> user_fixture, get_db -> mock_db.
    """
    app = create_test_app()
    app.dependency_overrides[get_user_repository] = lambda: mock_repo
    app.dependency_overrides[get_current_user] = lambda: user_fixture
    app.dependency_overrides[get_db] = lambda: mock_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def admin_client(admin_fixture, mock_repo, mock_db) -> AsyncGenerator[AsyncClient, None]:
    """
    Client authenticated as an administrator.
    get_current_user -> admin_fixture, get_db -> mock_db.
    """
    app = create_test_app()
    app.dependency_overrides[get_user_repository] = lambda: mock_repo
    app.dependency_overrides[get_current_user] = lambda: admin_fixture
    app.dependency_overrides[get_db] = lambda: mock_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def live_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    Client backed by the SQLite database; only get_db is overridden, so
    authentication goes through real JWTs (see make_auth_headers).
    """
    app = create_test_app()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
