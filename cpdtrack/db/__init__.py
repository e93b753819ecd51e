"""
cpdtrack Database Layer
=======================

PostgreSQL database layer using SQLAlchemy 2.0 async.

This module provides:
    - Async database session management
    - Base model class for all database entities
    - Connection lifecycle management

Usage:
    from cpdtrack.db import session_scope

    async with session_scope() as session:
        result = await session.execute(select(CredentialDB))

Author: cpdtrack Team
Version: 1.0.0
"""

from cpdtrack.db.session import (
    engine,
    async_session_factory,
    session_scope,
    init_db,
    close_db,
    AsyncSession,
)
from cpdtrack.db.base import Base

__all__ = [
    "engine",
    "async_session_factory",
    "session_scope",
    "init_db",
    "close_db",
    "AsyncSession",
    "Base",
]
