"""
Compliance Store Contract
=========================

The read/write operations the compliance core requires from its
persistence collaborator. The core never talks to a database
directly; it is handed a ComplianceStore.

Author: cpdtrack Team
Version: 1.0.0
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import AsyncContextManager, Callable, List, Optional

from shared.schemas.benchmarks import BenchmarkSnapshot
from shared.schemas.credentials import (
    Credential,
    FirmMember,
    RulePack,
    UserCredential,
)


class ComplianceStore(ABC):
    """
    Async data-access contract for the compliance core.

    Implementations:
        - SqlAlchemyComplianceStore: PostgreSQL via SQLAlchemy async
        - InMemoryComplianceStore: dict-backed, for tests and local runs
    """

    # =========================================================================
    # Credentials & Rule Packs
    # =========================================================================

    @abstractmethod
    async def get_credential(self, credential_id: str) -> Optional[Credential]:
        """Get a credential by id."""

    @abstractmethod
    async def list_active_credentials(self) -> List[Credential]:
        """List credentials flagged active."""

    @abstractmethod
    async def list_rule_packs(
        self,
        credential_id: str,
        effective_on_or_before: Optional[date] = None,
    ) -> List[RulePack]:
        """List a credential's packs, optionally only those started by a date."""

    # =========================================================================
    # Holdings
    # =========================================================================

    @abstractmethod
    async def list_user_credentials(
        self,
        credential_id: str,
        jurisdiction: Optional[str] = None,
    ) -> List[UserCredential]:
        """List holders of a credential, optionally within one jurisdiction."""

    @abstractmethod
    async def list_jurisdictions(self, credential_id: str) -> List[str]:
        """Distinct jurisdictions among a credential's holders, sorted."""

    @abstractmethod
    async def get_user_credential(
        self,
        user_id: str,
        credential_id: str,
    ) -> Optional[UserCredential]:
        """Get one user's holding of a credential."""

    @abstractmethod
    async def list_user_credentials_for_user(self, user_id: str) -> List[UserCredential]:
        """List every credential a user holds."""

    # =========================================================================
    # Benchmark Snapshots
    # =========================================================================

    @abstractmethod
    async def get_snapshot(
        self,
        credential_id: str,
        period: str,
        jurisdiction: str,
    ) -> Optional[BenchmarkSnapshot]:
        """Get the snapshot stored for a key."""

    @abstractmethod
    async def upsert_snapshot(self, snapshot: BenchmarkSnapshot) -> BenchmarkSnapshot:
        """Insert or replace the snapshot for its (credential, period, jurisdiction) key."""

    # =========================================================================
    # Firms
    # =========================================================================

    @abstractmethod
    async def list_firm_members(self, firm_id: str) -> List[FirmMember]:
        """List a firm's members with their holdings and last activity date."""


# Opens a store scoped to one unit of work (one DB session per call).
StoreFactory = Callable[[], AsyncContextManager[ComplianceStore]]
