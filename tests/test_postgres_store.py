"""
PostgreSQL Store Tests
======================

Unit tests for SqlAlchemyComplianceStore with a mocked AsyncSession.

Author: cpdtrack Team
Version: 1.0.0
"""

from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from shared.schemas.benchmarks import BenchmarkSnapshot
from cpdtrack.db.models import (
    BenchmarkSnapshotDB,
    CredentialDB,
    CredentialRulePackDB,
    UserCredentialDB,
)
from cpdtrack.store.postgres import SqlAlchemyComplianceStore


def _result(scalar=None, scalars=None, rows=None):
    """Build a mocked SQLAlchemy Result."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = scalar
    result.scalars.return_value.all.return_value = scalars or []
    result.all.return_value = rows or []
    return result


@pytest.fixture
def mock_session():
    """Create mock AsyncSession for testing."""
    session = AsyncMock()
    session.execute.return_value = _result()
    return session


def _compiled(session) -> str:
    stmt = session.execute.call_args[0][0]
    return str(stmt.compile(dialect=postgresql.dialect()))


class TestSnapshotPersistence:
    """Tests for snapshot reads and upserts."""

    @pytest.mark.asyncio
    async def test_upsert_uses_on_conflict(self, mock_session):
        """Snapshot writes are a native INSERT ... ON CONFLICT DO UPDATE."""
        store = SqlAlchemyComplianceStore(mock_session)
        snapshot = BenchmarkSnapshot(
            credential_id="cfp",
            period="2026-Q4",
            jurisdiction="NSW",
            total_peers=5,
            avg_hours=30.0,
            median_hours=30.0,
            calculated_at=datetime(2026, 10, 1, tzinfo=timezone.utc),
        )

        await store.upsert_snapshot(snapshot)

        sql = _compiled(mock_session)
        assert sql.startswith("INSERT INTO benchmark_snapshots")
        assert "ON CONFLICT ON CONSTRAINT uq_benchmark_snapshots_key DO UPDATE" in sql
        assert "total_peers = excluded.total_peers" in sql
        assert "median_hours = excluded.median_hours" in sql
        mock_session.flush.assert_awaited_once()
        mock_session.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_get_snapshot_missing(self, mock_session):
        store = SqlAlchemyComplianceStore(mock_session)

        assert await store.get_snapshot("cfp", "2026-Q4", "NSW") is None

    @pytest.mark.asyncio
    async def test_get_snapshot_converts_row(self, mock_session):
        row = BenchmarkSnapshotDB(
            id="s1",
            credential_id="cfp",
            period="2026-Q4",
            jurisdiction="ALL",
            total_peers=0,
            calculated_at=datetime(2026, 10, 1, tzinfo=timezone.utc),
        )
        mock_session.execute.return_value = _result(scalar=row)
        store = SqlAlchemyComplianceStore(mock_session)

        snapshot = await store.get_snapshot("cfp", "2026-Q4", "ALL")

        assert snapshot.key == ("cfp", "2026-Q4", "ALL")
        assert snapshot.is_empty
        assert snapshot.median_hours is None


class TestCredentialQueries:
    """Tests for credential, pack and holding queries."""

    @pytest.mark.asyncio
    async def test_get_credential(self, mock_session):
        mock_session.execute.return_value = _result(scalar=CredentialDB(
            id="cfp", name="CFP", active=True, hours_required=40.0, cycle_length_years=2,
        ))
        store = SqlAlchemyComplianceStore(mock_session)

        credential = await store.get_credential("cfp")

        assert credential.name == "CFP"
        assert credential.default_rules().hours_required == 40.0
        assert credential.cycle_length_years == 2

    @pytest.mark.asyncio
    async def test_rule_packs_query_bounds_start_date(self, mock_session):
        """Only packs started on or before the date are queried."""
        mock_session.execute.return_value = _result(scalars=[CredentialRulePackDB(
            id="p1",
            credential_id="cfp",
            name="CFP 2023",
            version=2,
            effective_from=date(2023, 1, 1),
            effective_to=None,
            rules={"hoursRequired": 50},
        )])
        store = SqlAlchemyComplianceStore(mock_session)

        packs = await store.list_rule_packs("cfp", effective_on_or_before=date(2024, 1, 1))

        sql = _compiled(mock_session)
        assert "credential_rule_packs.effective_from <=" in sql
        assert packs[0].version == 2
        assert packs[0].rules.hours_required == 50

    @pytest.mark.asyncio
    async def test_cohort_query_filters_jurisdiction(self, mock_session):
        row = UserCredentialDB(
            id="uc1",
            user_id="u1",
            credential_id="cfp",
            jurisdiction="NSW",
            hours_completed=12.5,
            ethics_hours_completed=1.0,
            structured_hours_completed=4.0,
            renewal_deadline=date(2027, 6, 30),
            is_primary=True,
        )
        row.credential = CredentialDB(id="cfp", name="CFP")
        mock_session.execute.return_value = _result(scalars=[row])
        store = SqlAlchemyComplianceStore(mock_session)

        rows = await store.list_user_credentials("cfp", jurisdiction="NSW")

        assert "user_credentials.jurisdiction =" in _compiled(mock_session)
        assert rows[0].hours_completed == 12.5
        assert rows[0].credential_name == "CFP"
        assert rows[0].renewal_deadline == date(2027, 6, 30)

    @pytest.mark.asyncio
    async def test_list_jurisdictions(self, mock_session):
        mock_session.execute.return_value = _result(scalars=["NSW", "VIC"])
        store = SqlAlchemyComplianceStore(mock_session)

        assert await store.list_jurisdictions("cfp") == ["NSW", "VIC"]
        assert "DISTINCT" in _compiled(mock_session)

    @pytest.mark.asyncio
    async def test_firm_without_members(self, mock_session):
        store = SqlAlchemyComplianceStore(mock_session)

        assert await store.list_firm_members("f1") == []
        assert mock_session.execute.await_count == 1
