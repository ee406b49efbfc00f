"""
Async engine and session factory.

The engine is built from settings at import time for the request-scoped
`get_db` dependency; services receive the session factory explicitly.
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from turf_booking.core.config import get_settings

settings = get_settings()


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine; pool sizing only applies to server databases."""
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=echo, connect_args={"timeout": 30})
    return create_async_engine(
        url,
        echo=echo,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)
AsyncSessionLocal = build_session_factory(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; commits on success, rolls back on error."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
