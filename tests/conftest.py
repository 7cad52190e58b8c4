"""Shared fixtures: in-memory database, principals and an API client."""

import os

# Settings are read at import time; configure them before importing the app
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret-0123456789abcdefghijklmnopqrstuvwxyz")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "development")

from collections.abc import AsyncGenerator
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from workforce_api.database import enable_sqlite_foreign_keys, get_db
from workforce_api.models.domain.principal import Principal
from workforce_api.models.orm import Base
from workforce_api.security.auth import get_current_principal


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest.fixture
def admin() -> Principal:
    return Principal(id=uuid4(), is_admin=True, can_terminate=False)


@pytest.fixture
def terminator() -> Principal:
    return Principal(id=uuid4(), is_admin=True, can_terminate=True)


@pytest.fixture
def current_principal(admin) -> dict[str, Principal]:
    """Mutable holder for the principal the API client acts as."""
    return {"principal": admin}


@pytest.fixture
async def client(session_maker, current_principal) -> AsyncGenerator[AsyncClient, None]:
    from workforce_api.main import create_app

    app = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as db:
            yield db
            await db.commit()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_principal] = lambda: current_principal["principal"]

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
