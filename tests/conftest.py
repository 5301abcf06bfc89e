"""
Shared fixtures.

Every test gets a fresh SQLite database (aiosqlite) in its own tmp_path; the
API client talks to the ASGI app in-process with get_session overridden.
"""
import os

# --- settings (before imports that read env) ---
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_tjm.db")
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

import app.models  # noqa: F401
from app.core.database import get_session
from app.main import app as fastapi_app
from app.services import project_service


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


@pytest_asyncio.fixture
async def projects(session):
    """Two projects, ProjA and ProjB."""
    proj_a = await project_service.create_project(session, "ProjA")
    proj_b = await project_service.create_project(session, "ProjB")
    return proj_a, proj_b


@pytest_asyncio.fixture
async def client(session_factory):
    async def _get_session():
        async with session_factory() as s:
            yield s

    fastapi_app.dependency_overrides[get_session] = _get_session
    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://test") as c:
        yield c
    fastapi_app.dependency_overrides.clear()
