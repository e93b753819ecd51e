"""
PostgreSQL Compliance Store
===========================

ComplianceStore backed by SQLAlchemy async sessions.

Snapshot writes use a native ``INSERT ... ON CONFLICT DO UPDATE`` on
the (credential_id, period, jurisdiction) key, so concurrent
regenerations of the same key resolve as last-writer-wins without
extra locking.

Usage:
    async with session_scope() as session:
        store = SqlAlchemyComplianceStore(session)
        packs = await store.list_rule_packs("cfp", date(2024, 1, 1))

Author: cpdtrack Team
Version: 1.0.0
"""

import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncIterator, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from shared.schemas.benchmarks import BenchmarkSnapshot
from shared.schemas.credentials import (
    Credential,
    FirmMember,
    RulePack,
    UserCredential,
)
from cpdtrack.db.base import generate_uuid
from cpdtrack.db.models import (
    BenchmarkSnapshotDB,
    CpdActivityDB,
    CredentialDB,
    CredentialRulePackDB,
    MemberDB,
    UserCredentialDB,
)
from cpdtrack.store.base import ComplianceStore

logger = logging.getLogger(__name__)

_SNAPSHOT_FIELDS = (
    "total_peers",
    "avg_hours",
    "median_hours",
    "p25_hours",
    "p75_hours",
    "p90_hours",
    "avg_ethics_hours",
    "avg_structured_hours",
    "calculated_at",
)


class SqlAlchemyComplianceStore(ComplianceStore):
    """
    ComplianceStore over an AsyncSession.

    The session is owned by the caller; this class never commits.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    # =========================================================================
    # Credentials & Rule Packs
    # =========================================================================

    async def get_credential(self, credential_id: str) -> Optional[Credential]:
        stmt = select(CredentialDB).where(CredentialDB.id == credential_id)
        result = await self.db.execute(stmt)
        row = result.scalar_one_or_none()
        return self._credential(row) if row else None

    async def list_active_credentials(self) -> List[Credential]:
        stmt = (
            select(CredentialDB)
            .where(CredentialDB.active.is_(True))
            .order_by(CredentialDB.id)
        )
        result = await self.db.execute(stmt)
        return [self._credential(row) for row in result.scalars().all()]

    async def list_rule_packs(
        self,
        credential_id: str,
        effective_on_or_before: Optional[date] = None,
    ) -> List[RulePack]:
        stmt = select(CredentialRulePackDB).where(
            CredentialRulePackDB.credential_id == credential_id
        )
        if effective_on_or_before is not None:
            stmt = stmt.where(CredentialRulePackDB.effective_from <= effective_on_or_before)
        stmt = stmt.order_by(CredentialRulePackDB.effective_from.desc())

        result = await self.db.execute(stmt)
        return [
            RulePack(
                id=row.id,
                credential_id=row.credential_id,
                name=row.name,
                version=row.version,
                effective_from=row.effective_from,
                effective_to=row.effective_to,
                rules=row.rules or {},
            )
            for row in result.scalars().all()
        ]

    # =========================================================================
    # Holdings
    # =========================================================================

    async def list_user_credentials(
        self,
        credential_id: str,
        jurisdiction: Optional[str] = None,
    ) -> List[UserCredential]:
        stmt = (
            select(UserCredentialDB)
            .options(selectinload(UserCredentialDB.credential))
            .where(UserCredentialDB.credential_id == credential_id)
        )
        if jurisdiction is not None:
            stmt = stmt.where(UserCredentialDB.jurisdiction == jurisdiction)
        stmt = stmt.order_by(UserCredentialDB.user_id)

        result = await self.db.execute(stmt)
        return [self._holding(row) for row in result.scalars().all()]

    async def list_jurisdictions(self, credential_id: str) -> List[str]:
        stmt = (
            select(UserCredentialDB.jurisdiction)
            .where(UserCredentialDB.credential_id == credential_id)
            .distinct()
            .order_by(UserCredentialDB.jurisdiction)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_user_credential(
        self,
        user_id: str,
        credential_id: str,
    ) -> Optional[UserCredential]:
        stmt = (
            select(UserCredentialDB)
            .options(selectinload(UserCredentialDB.credential))
            .where(UserCredentialDB.user_id == user_id)
            .where(UserCredentialDB.credential_id == credential_id)
        )
        result = await self.db.execute(stmt)
        row = result.scalar_one_or_none()
        return self._holding(row) if row else None

    async def list_user_credentials_for_user(self, user_id: str) -> List[UserCredential]:
        stmt = (
            select(UserCredentialDB)
            .options(selectinload(UserCredentialDB.credential))
            .where(UserCredentialDB.user_id == user_id)
            .order_by(UserCredentialDB.credential_id)
        )
        result = await self.db.execute(stmt)
        return [self._holding(row) for row in result.scalars().all()]

    # =========================================================================
    # Benchmark Snapshots
    # =========================================================================

    async def get_snapshot(
        self,
        credential_id: str,
        period: str,
        jurisdiction: str,
    ) -> Optional[BenchmarkSnapshot]:
        stmt = (
            select(BenchmarkSnapshotDB)
            .where(BenchmarkSnapshotDB.credential_id == credential_id)
            .where(BenchmarkSnapshotDB.period == period)
            .where(BenchmarkSnapshotDB.jurisdiction == jurisdiction)
        )
        result = await self.db.execute(stmt)
        row = result.scalar_one_or_none()
        if row is None:
            return None

        return BenchmarkSnapshot(
            credential_id=row.credential_id,
            period=row.period,
            jurisdiction=row.jurisdiction,
            **{name: getattr(row, name) for name in _SNAPSHOT_FIELDS},
        )

    async def upsert_snapshot(self, snapshot: BenchmarkSnapshot) -> BenchmarkSnapshot:
        values = {
            "id": generate_uuid(),
            "credential_id": snapshot.credential_id,
            "period": snapshot.period,
            "jurisdiction": snapshot.jurisdiction,
            **{name: getattr(snapshot, name) for name in _SNAPSHOT_FIELDS},
        }

        # PostgreSQL upsert: INSERT ... ON CONFLICT DO UPDATE
        stmt = pg_insert(BenchmarkSnapshotDB).values(values)
        stmt = stmt.on_conflict_do_update(
            constraint="uq_benchmark_snapshots_key",
            set_={name: getattr(stmt.excluded, name) for name in _SNAPSHOT_FIELDS},
        )
        await self.db.execute(stmt)
        await self.db.flush()

        logger.debug(f"Upserted benchmark snapshot {snapshot.key}")
        return snapshot

    # =========================================================================
    # Firms
    # =========================================================================

    async def list_firm_members(self, firm_id: str) -> List[FirmMember]:
        stmt = (
            select(MemberDB)
            .options(
                selectinload(MemberDB.credentials).selectinload(UserCredentialDB.credential)
            )
            .where(MemberDB.firm_id == firm_id)
            .order_by(MemberDB.id)
        )
        result = await self.db.execute(stmt)
        members = result.scalars().all()
        if not members:
            return []

        last_activity = await self._last_activity_dates([m.id for m in members])

        return [
            FirmMember(
                user_id=m.id,
                firm_id=firm_id,
                name=m.name,
                email=m.email,
                credentials=[
                    self._holding(uc)
                    for uc in sorted(m.credentials, key=lambda uc: uc.credential_id)
                ],
                last_activity_date=last_activity.get(m.id),
            )
            for m in members
        ]

    async def _last_activity_dates(self, user_ids: List[str]) -> Dict[str, date]:
        """Most recent completed activity date per user."""
        stmt = (
            select(CpdActivityDB.user_id, func.max(CpdActivityDB.activity_date))
            .where(CpdActivityDB.user_id.in_(user_ids))
            .where(CpdActivityDB.status == "completed")
            .group_by(CpdActivityDB.user_id)
        )
        result = await self.db.execute(stmt)
        return {user_id: last for user_id, last in result.all()}

    # =========================================================================
    # Row Conversion
    # =========================================================================

    @staticmethod
    def _credential(row: CredentialDB) -> Credential:
        return Credential(
            id=row.id,
            name=row.name,
            body=row.body,
            region=row.region,
            active=row.active,
            hours_required=row.hours_required,
            ethics_hours=row.ethics_hours,
            structured_hours=row.structured_hours,
            cycle_length_years=row.cycle_length_years,
            category_rules=row.category_rules,
        )

    @staticmethod
    def _holding(row: UserCredentialDB) -> UserCredential:
        return UserCredential(
            id=row.id,
            user_id=row.user_id,
            credential_id=row.credential_id,
            jurisdiction=row.jurisdiction,
            hours_completed=row.hours_completed,
            ethics_hours_completed=row.ethics_hours_completed,
            structured_hours_completed=row.structured_hours_completed,
            renewal_deadline=row.renewal_deadline,
            is_primary=row.is_primary,
            credential_name=row.credential.name if row.credential else None,
        )


@asynccontextmanager
async def session_store() -> AsyncIterator[SqlAlchemyComplianceStore]:
    """
    StoreFactory opening a fresh transactional session per call.

    Used by the snapshot batch so each key commits independently.
    """
    from cpdtrack.db.session import session_scope

    async with session_scope() as session:
        yield SqlAlchemyComplianceStore(session)
