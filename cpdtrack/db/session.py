"""
Database Session Management
===========================

Async SQLAlchemy engine, session factory and transactional scopes.

Author: cpdtrack Team
Version: 1.0.0
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from cpdtrack.config import settings

logger = logging.getLogger(__name__)

# Create async engine with connection pooling
engine = create_async_engine(
    settings.postgres_async_dsn,
    echo=settings.debug,
    pool_pre_ping=True,
)

# Session factory
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """
    Transactional session: commits on success, rolls back on error.

    Requests get one scope each; batch runs open one per snapshot key
    so keys can be processed concurrently.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """
    Initialize database connection.

    Called during application startup.
    """
    logger.info("Initializing PostgreSQL connection...")

    async with engine.begin() as conn:
        await conn.run_sync(lambda _: None)

    logger.info("PostgreSQL connection established")


async def close_db() -> None:
    """
    Close database connections.

    Called during application shutdown.
    """
    logger.info("Closing PostgreSQL connections...")
    await engine.dispose()
    logger.info("PostgreSQL connections closed")


__all__ = [
    "engine",
    "async_session_factory",
    "session_scope",
    "init_db",
    "close_db",
    "AsyncSession",
]
