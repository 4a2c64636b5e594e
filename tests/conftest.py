"""Test fixtures — a fresh in-memory database per test.

Each test gets its own SQLite engine (StaticPool keeps the single
in-memory connection alive for the whole test), with the schema created
from the ORM models. The app's get_db is overridden to hand out that one
session, so test setup and HTTP requests see the same data.

bcrypt runs at 4 rounds and tokens are signed with a fixed test secret;
both are injected through the app's dependency providers.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from todoserver.auth.dependencies import (
    CurrentIdentity,
    get_current_user,
    get_password_hasher,
    get_token_service,
)
from todoserver.auth.jwt import TokenService
from todoserver.auth.password import PasswordHasher
from todoserver.db.engine import get_db
from todoserver.db.models import Base
from todoserver.main import app
from todoserver.services.user_service import UserService

TEST_DB_URL = "sqlite+aiosqlite://"
TEST_SECRET = "test-secret-not-for-production"


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(secret=TEST_SECRET, algorithm="HS256", expire_days=7)


@pytest_asyncio.fixture()
async def db_session():
    """Per-test session on a throwaway in-memory database."""
    engine = create_async_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session = AsyncSession(bind=engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()
        await engine.dispose()


def _override_infra(db_session, hasher, tokens):
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_password_hasher] = lambda: hasher
    app.dependency_overrides[get_token_service] = lambda: tokens


@pytest_asyncio.fixture()
async def current_user(db_session, hasher):
    """A persisted user for tests that don't exercise the auth flow."""
    user = await UserService(db_session).create(
        "Fixture User", "fixture@example.com", hasher.hash("fixture-pw")
    )
    await db_session.commit()
    return user


@pytest_asyncio.fixture()
async def client(db_session, hasher, tokens, current_user):
    """HTTP client with get_current_user overridden to current_user.

    Protected routes work without a real token, so task tests don't need
    to register and log in first.
    """
    _override_infra(db_session, hasher, tokens)

    def override_get_current_user():
        return CurrentIdentity(
            user_id=current_user.id,
            email=current_user.email,
            name=current_user.name,
            created_at=current_user.created_at,
        )

    app.dependency_overrides[get_current_user] = override_get_current_user

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def unauthenticated_client(db_session, hasher, tokens):
    """HTTP client WITHOUT the auth override — the real bearer-token gate runs."""
    _override_infra(db_session, hasher, tokens)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
