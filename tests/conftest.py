"""
Test configuration for the role permissions service.

Each test gets its own SQLite file database; the app's ``get_db``
dependency is overridden to use it.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("RATE_LIMIT", "10000/minute")

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.core import config
from app.core.database.base import generate_ulid
from app.core.database.engine import get_db, init_db
from app.features.companies.models import Company
from app.main import app as fastapi_app


@pytest_asyncio.fixture
async def engine(tmp_path):
    """Fresh file-backed database with all tables created and foreign keys enforced."""
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        poolclass=NullPool,
    )

    @event.listens_for(test_engine.sync_engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    await init_db(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the app, bound to the test database."""
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client
    fastapi_app.dependency_overrides = {}


@pytest_asyncio.fixture
async def company_id(db_session) -> str:
    company = Company(name="Blue Lagoon Bistro")
    db_session.add(company)
    await db_session.commit()
    return company.id


@pytest.fixture
def make_token():
    """Mint a signed access token with the given claims."""
    def _make_token(role: str, company_id: str | None, user_id: str | None = None, expires_in: int = 3600) -> str:
        claims = {
            "sub": user_id or generate_ulid(),
            "role": role,
            "email": f"{role}@example.com",
            "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
        }
        if company_id is not None:
            claims["companyId"] = company_id
        return jwt.encode(claims, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)

    return _make_token


@pytest.fixture
def auth_headers(make_token):
    def _auth_headers(role: str, company_id: str | None, **kwargs) -> dict:
        return {"Authorization": f"Bearer {make_token(role, company_id, **kwargs)}"}

    return _auth_headers
