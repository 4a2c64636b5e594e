"""Async SQLAlchemy engine and session factory.

One engine per process with connection pooling; each request gets its own
AsyncSession through the get_db dependency. Every wait on the store is
bounded by settings.db_timeout_seconds so an unreachable database turns
into an error instead of a hung request.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from todoserver.config import settings
from todoserver.db.models import Base


def build_engine(url: str, timeout: float, echo: bool = False) -> AsyncEngine:
    """Create an async engine with bounded connect/pool/statement timeouts."""
    if url.startswith("sqlite"):
        # SQLite (dev/test) has no server to wait on and no pool sizing
        return create_async_engine(url, echo=echo)
    return create_async_engine(
        url,
        echo=echo,
        pool_size=5,
        max_overflow=15,
        pool_timeout=timeout,
        pool_pre_ping=True,
        connect_args={"timeout": timeout, "command_timeout": timeout},
    )


engine = build_engine(
    settings.database_url, settings.db_timeout_seconds, echo=settings.debug
)

# Session factory — each request gets its own session.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncSession:
    """FastAPI dependency — yields a session per request, auto-closes."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_models(target: AsyncEngine = engine) -> None:
    """Create all tables directly (development shortcut for Alembic)."""
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
