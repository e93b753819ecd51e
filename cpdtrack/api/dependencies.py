"""
cpdtrack API Dependencies
=========================

FastAPI dependency injection for the compliance store.

The container picks a backend at startup:
    - In-memory store when ``use_in_memory_store`` is set
    - PostgreSQL otherwise, one session per request

If PostgreSQL cannot be reached the container starts in **degraded
mode** and store-backed endpoints return 503.

Author: cpdtrack Team
Version: 1.0.0
"""

import logging
from typing import AsyncGenerator, Optional

from fastapi import Depends, HTTPException

from cpdtrack.benchmarking.engine import BenchmarkEngine
from cpdtrack.config import settings
from cpdtrack.rules.resolver import RuleResolver
from cpdtrack.scoring.firm import FirmComplianceService
from cpdtrack.store.base import ComplianceStore, StoreFactory
from cpdtrack.store.memory import InMemoryComplianceStore


logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Singleton container for the store backend.

    Manages startup and shutdown of the database connection.
    """

    _instance: Optional["ServiceContainer"] = None

    def __init__(self):
        self.memory_store: Optional[InMemoryComplianceStore] = None
        self.postgres_available = False
        self._initialized = False

    @classmethod
    def get_instance(cls) -> "ServiceContainer":
        """Get or create the singleton instance."""
        if cls._instance is None:
            cls._instance = ServiceContainer()
        return cls._instance

    @property
    def backend(self) -> str:
        if self.memory_store is not None:
            return "memory"
        if self.postgres_available:
            return "postgres"
        return "unavailable"

    async def initialize(self) -> None:
        """Initialize the store backend (graceful degradation on failure)."""
        if self._initialized:
            return

        if settings.use_in_memory_store:
            self.memory_store = InMemoryComplianceStore()
            logger.info("Using in-memory compliance store")
        else:
            from cpdtrack.db.session import init_db

            try:
                await init_db()
                self.postgres_available = True
            except Exception as e:
                logger.warning(f"PostgreSQL unavailable, running in DEGRADED mode: {e}")
                self.postgres_available = False

        self._initialized = True

    async def shutdown(self) -> None:
        """Shutdown the store backend."""
        if self.postgres_available:
            from cpdtrack.db.session import close_db

            await close_db()

        self.memory_store = None
        self.postgres_available = False
        self._initialized = False


def _unavailable() -> HTTPException:
    return HTTPException(
        status_code=503,
        detail="Compliance store unavailable (PostgreSQL not connected)",
    )


async def get_store() -> AsyncGenerator[ComplianceStore, None]:
    """
    FastAPI dependency yielding a ComplianceStore.

    Postgres-backed stores get a session that commits when the request
    succeeds and rolls back otherwise.
    """
    container = ServiceContainer.get_instance()

    if container.memory_store is not None:
        yield container.memory_store
        return

    if not container.postgres_available:
        raise _unavailable()

    from cpdtrack.store.postgres import session_store

    async with session_store() as store:
        yield store


async def get_store_factory() -> StoreFactory:
    """FastAPI dependency for batch jobs needing one store per unit of work."""
    container = ServiceContainer.get_instance()

    if container.memory_store is not None:
        return container.memory_store.factory()

    if not container.postgres_available:
        raise _unavailable()

    from cpdtrack.store.postgres import session_store

    return session_store


async def get_rule_resolver(store: ComplianceStore = Depends(get_store)) -> RuleResolver:
    return RuleResolver(store)


async def get_benchmark_engine(store: ComplianceStore = Depends(get_store)) -> BenchmarkEngine:
    return BenchmarkEngine(store)


async def get_firm_service(store: ComplianceStore = Depends(get_store)) -> FirmComplianceService:
    return FirmComplianceService(store)
