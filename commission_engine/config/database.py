"""
Database configuration.

Provides async SQLAlchemy engine and session factory.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from commission_engine.config.settings import Settings


def create_engine_from_settings(
    settings: Settings, null_pool: bool = False
) -> AsyncEngine:
    """
    Create async engine for the configured database.

    Args:
        settings: Application settings
        null_pool: Open a fresh connection per checkout (engines that
            live for a single ``asyncio.run()`` call)

    Returns:
        AsyncEngine
    """
    url = settings.async_database_url
    if null_pool:
        return create_async_engine(
            url, echo=settings.database_echo, poolclass=NullPool
        )
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=settings.database_echo)

    return create_async_engine(
        url,
        echo=settings.database_echo,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_timeout=30,  # Wait max 30 seconds for connection
    )


def create_session_maker(
    engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Create session factory bound to engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
