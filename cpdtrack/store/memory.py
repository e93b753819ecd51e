"""
In-Memory Compliance Store
==========================

Dict-backed ComplianceStore used by tests, local runs, and the API
when no database is configured.

Usage:
    store = InMemoryComplianceStore()
    store.add_credential(Credential(id="cfp", name="CFP", hours_required=30))
    store.add_user_credential(UserCredential(...))

Author: cpdtrack Team
Version: 1.0.0
"""

import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncIterator, Dict, List, Optional, Tuple

from shared.schemas.benchmarks import BenchmarkSnapshot
from shared.schemas.credentials import (
    Credential,
    FirmMember,
    RulePack,
    UserCredential,
)
from cpdtrack.store.base import ComplianceStore

logger = logging.getLogger(__name__)


class InMemoryComplianceStore(ComplianceStore):
    """
    ComplianceStore keeping every record in process memory.

    Records are copied on the way in and out so callers cannot
    mutate stored state by accident.
    """

    def __init__(self):
        self._credentials: Dict[str, Credential] = {}
        self._rule_packs: Dict[str, List[RulePack]] = defaultdict(list)
        self._holdings: Dict[Tuple[str, str], UserCredential] = {}
        self._members: Dict[str, FirmMember] = {}
        self._activity: Dict[str, List[date]] = defaultdict(list)
        self._snapshots: Dict[Tuple[str, str, str], BenchmarkSnapshot] = {}

    # =========================================================================
    # Seeding
    # =========================================================================

    def add_credential(self, credential: Credential) -> None:
        self._credentials[credential.id] = credential.model_copy(deep=True)

    def add_rule_pack(self, pack: RulePack) -> None:
        self._rule_packs[pack.credential_id].append(pack.model_copy(deep=True))

    def add_user_credential(self, holding: UserCredential) -> None:
        self._holdings[(holding.user_id, holding.credential_id)] = holding.model_copy(deep=True)

    def add_member(
        self,
        user_id: str,
        firm_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> None:
        self._members[user_id] = FirmMember(
            user_id=user_id, firm_id=firm_id, name=name, email=email
        )

    def log_activity(self, user_id: str, activity_date: date) -> None:
        """Record a completed CPD activity for a user."""
        self._activity[user_id].append(activity_date)

    def factory(self):
        """StoreFactory that hands out this same store."""
        @asynccontextmanager
        async def _scope() -> AsyncIterator["InMemoryComplianceStore"]:
            yield self

        return _scope

    # =========================================================================
    # Credentials & Rule Packs
    # =========================================================================

    async def get_credential(self, credential_id: str) -> Optional[Credential]:
        credential = self._credentials.get(credential_id)
        return credential.model_copy(deep=True) if credential else None

    async def list_active_credentials(self) -> List[Credential]:
        return [
            c.model_copy(deep=True)
            for c in sorted(self._credentials.values(), key=lambda c: c.id)
            if c.active
        ]

    async def list_rule_packs(
        self,
        credential_id: str,
        effective_on_or_before: Optional[date] = None,
    ) -> List[RulePack]:
        return [
            p.model_copy(deep=True)
            for p in self._rule_packs.get(credential_id, [])
            if effective_on_or_before is None or p.effective_from <= effective_on_or_before
        ]

    # =========================================================================
    # Holdings
    # =========================================================================

    def _with_name(self, holding: UserCredential) -> UserCredential:
        copy = holding.model_copy(deep=True)
        credential = self._credentials.get(holding.credential_id)
        if credential and copy.credential_name is None:
            copy.credential_name = credential.name
        return copy

    async def list_user_credentials(
        self,
        credential_id: str,
        jurisdiction: Optional[str] = None,
    ) -> List[UserCredential]:
        return [
            self._with_name(h)
            for (_, cid), h in sorted(self._holdings.items())
            if cid == credential_id
            and (jurisdiction is None or h.jurisdiction == jurisdiction)
        ]

    async def list_jurisdictions(self, credential_id: str) -> List[str]:
        return sorted({
            h.jurisdiction
            for (_, cid), h in self._holdings.items()
            if cid == credential_id
        })

    async def get_user_credential(
        self,
        user_id: str,
        credential_id: str,
    ) -> Optional[UserCredential]:
        holding = self._holdings.get((user_id, credential_id))
        return self._with_name(holding) if holding else None

    async def list_user_credentials_for_user(self, user_id: str) -> List[UserCredential]:
        return [
            self._with_name(h)
            for (uid, _), h in sorted(self._holdings.items())
            if uid == user_id
        ]

    # =========================================================================
    # Benchmark Snapshots
    # =========================================================================

    async def get_snapshot(
        self,
        credential_id: str,
        period: str,
        jurisdiction: str,
    ) -> Optional[BenchmarkSnapshot]:
        snapshot = self._snapshots.get((credential_id, period, jurisdiction))
        return snapshot.model_copy(deep=True) if snapshot else None

    async def upsert_snapshot(self, snapshot: BenchmarkSnapshot) -> BenchmarkSnapshot:
        replaced = snapshot.key in self._snapshots
        self._snapshots[snapshot.key] = snapshot.model_copy(deep=True)
        logger.debug(f"{'Replaced' if replaced else 'Stored'} snapshot {snapshot.key}")
        return snapshot

    @property
    def snapshot_count(self) -> int:
        return len(self._snapshots)

    # =========================================================================
    # Firms
    # =========================================================================

    async def list_firm_members(self, firm_id: str) -> List[FirmMember]:
        members = []
        for user_id in sorted(self._members):
            member = self._members[user_id]
            if member.firm_id != firm_id:
                continue
            activity = self._activity.get(user_id)
            members.append(member.model_copy(update={
                "credentials": await self.list_user_credentials_for_user(user_id),
                "last_activity_date": max(activity) if activity else None,
            }))
        return members
