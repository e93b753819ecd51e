"""
Firm Compliance Tests
=====================

Unit tests for the firm risk roster, compliance summary and alerts.

Author: cpdtrack Team
Version: 1.0.0
"""

import pytest

from shared.schemas.credentials import Credential
from shared.schemas.risk import AlertSeverity, AlertType, RiskLevel
from cpdtrack.errors import InvalidInputError
from cpdtrack.scoring.firm import FirmComplianceService

from fixtures import AS_OF, days_from_as_of, holding


@pytest.fixture
def firm_store(store):
    """
    Firm f1 with four members:
        alice: CFP 10/40h, deadline in 20 days, inactive 45 days
        bob:   CFP 40/40h, deadline in 200 days, active today
        carol: CPA 60/120h, deadline 3 days ago, inactive 70 days
        dave:  CFP without a renewal deadline
    and erin in firm f2.
    """
    store.add_credential(Credential(id="cfp", name="CFP", hours_required=40))
    store.add_credential(Credential(id="cpa", name="CPA", hours_required=120))

    store.add_member("alice", "f1", name="Alice", email="alice@example.com")
    store.add_user_credential(holding(
        "alice", hours=10, deadline=days_from_as_of(20), primary=True,
    ))
    store.log_activity("alice", days_from_as_of(-45))
    store.log_activity("alice", days_from_as_of(-90))

    store.add_member("bob", "f1", name="Bob", email="bob@example.com")
    store.add_user_credential(holding(
        "bob", hours=40, deadline=days_from_as_of(200), primary=True,
    ))
    store.log_activity("bob", AS_OF)

    store.add_member("carol", "f1", name="Carol", email="carol@example.com")
    store.add_user_credential(holding(
        "carol", credential_id="cpa", hours=60, deadline=days_from_as_of(-3), primary=True,
    ))
    store.log_activity("carol", days_from_as_of(-70))

    store.add_member("dave", "f1", name="Dave", email="dave@example.com")
    store.add_user_credential(holding("dave", hours=5))

    store.add_member("erin", "f2", name="Erin", email="erin@example.com")
    store.add_user_credential(holding("erin", hours=0, deadline=days_from_as_of(1)))

    return store


@pytest.fixture
def service(firm_store):
    return FirmComplianceService(firm_store)


class TestRiskRoster:
    """Tests for FirmComplianceService.risk_roster."""

    @pytest.mark.asyncio
    async def test_sorted_highest_risk_first(self, service):
        roster = await service.risk_roster("f1", as_of=AS_OF)

        assert roster.firm_id == "f1"
        assert roster.total_members == 4
        assert [p.user_id for p in roster.risk_scores] == ["alice", "carol", "bob"]
        assert [p.risk_score for p in roster.risk_scores] == [84, 75, 0]
        assert roster.risk_scores[0].risk_level == RiskLevel.CRITICAL
        assert roster.risk_scores[2].risk_level == RiskLevel.LOW

    @pytest.mark.asyncio
    async def test_member_without_deadline_excluded(self, service):
        """Unscorable members never appear with an artificial score."""
        roster = await service.risk_roster("f1", as_of=AS_OF)

        assert "dave" not in [p.user_id for p in roster.risk_scores]
        assert roster.excluded_user_ids == ["dave"]

    @pytest.mark.asyncio
    async def test_last_activity_is_most_recent(self, service):
        roster = await service.risk_roster("f1", as_of=AS_OF)

        alice = roster.risk_scores[0]
        assert alice.last_activity_date == days_from_as_of(-45)
        assert alice.name == "Alice"
        assert alice.email == "alice@example.com"

    @pytest.mark.asyncio
    async def test_filter_by_credential_name(self, service):
        """The credential filter is case-insensitive."""
        roster = await service.risk_roster("f1", credential_name="cpa", as_of=AS_OF)

        assert roster.total_members == 1
        assert [p.user_id for p in roster.risk_scores] == ["carol"]

    @pytest.mark.asyncio
    async def test_ties_ordered_by_user_id(self, store):
        store.add_credential(Credential(id="cfp", name="CFP", hours_required=40))
        for user_id in ("zed", "amy"):
            store.add_member(user_id, "f9")
            store.add_user_credential(holding(user_id, deadline=days_from_as_of(-1)))

        roster = await FirmComplianceService(store).risk_roster("f9", as_of=AS_OF)

        assert [p.user_id for p in roster.risk_scores] == ["amy", "zed"]

    @pytest.mark.asyncio
    async def test_unknown_firm_is_empty(self, service):
        roster = await service.risk_roster("nobody", as_of=AS_OF)

        assert roster.total_members == 0
        assert roster.risk_scores == []

    @pytest.mark.asyncio
    async def test_missing_firm_id(self, service):
        with pytest.raises(InvalidInputError):
            await service.risk_roster("")


class TestComplianceSummary:
    """Tests for FirmComplianceService.compliance_summary."""

    @pytest.mark.asyncio
    async def test_counts(self, service):
        summary = await service.compliance_summary("f1", as_of=AS_OF)

        assert summary.total_members == 4
        assert summary.compliant_count == 1
        assert summary.on_track_count == 0
        assert summary.at_risk_count == 1
        assert summary.overdue_count == 1
        # (25 + 100 + 50) / 3
        assert summary.avg_completion_pct == 58

    @pytest.mark.asyncio
    async def test_credential_breakdown(self, service):
        summary = await service.compliance_summary("f1", as_of=AS_OF)
        breakdown = {b.credential_name: b for b in summary.credential_breakdown}

        assert list(breakdown) == ["CFP", "CPA"]
        assert breakdown["CFP"].total_holders == 2
        assert breakdown["CFP"].compliant_count == 1
        assert breakdown["CFP"].at_risk_count == 1
        assert breakdown["CFP"].avg_completion_pct == 63
        assert breakdown["CPA"].total_holders == 1
        assert breakdown["CPA"].overdue_count == 1
        assert breakdown["CPA"].avg_completion_pct == 50


class TestAlerts:
    """Tests for FirmComplianceService.generate_alerts."""

    @pytest.mark.asyncio
    async def test_alert_rules(self, service):
        alerts = await service.generate_alerts("f1", as_of=AS_OF)
        found = [(a.user_id, a.type, a.severity) for a in alerts]

        assert found == [
            ("alice", AlertType.COMPLIANCE_RISK, AlertSeverity.HIGH),
            ("alice", AlertType.MEMBER_INACTIVE, AlertSeverity.MEDIUM),
            ("carol", AlertType.MEMBER_INACTIVE, AlertSeverity.HIGH),
            ("carol", AlertType.DEADLINE_MISSED, AlertSeverity.CRITICAL),
        ]
        assert all(a.firm_id == "f1" for a in alerts)

    @pytest.mark.asyncio
    async def test_alert_content(self, service):
        alerts = await service.generate_alerts("f1", as_of=AS_OF)
        risk = alerts[0]

        assert "Alice" in risk.title
        assert "25%" in risk.message
        assert risk.metadata["credential_id"] == "cfp"
        assert risk.metadata["days_until_deadline"] == 20

    @pytest.mark.asyncio
    async def test_imminent_deadline_is_critical(self, store):
        store.add_credential(Credential(id="cfp", name="CFP", hours_required=40))
        store.add_member("frank", "f3", name="Frank")
        store.add_user_credential(holding("frank", deadline=days_from_as_of(5), primary=True))
        store.log_activity("frank", AS_OF)

        alerts = await FirmComplianceService(store).generate_alerts("f3", as_of=AS_OF)

        assert [(a.type, a.severity) for a in alerts] == [
            (AlertType.COMPLIANCE_RISK, AlertSeverity.CRITICAL),
        ]

    @pytest.mark.asyncio
    async def test_never_active_member(self, store):
        """No activity on record counts as inactive."""
        store.add_credential(Credential(id="cfp", name="CFP", hours_required=40))
        store.add_member("gina", "f4")
        store.add_user_credential(holding(
            "gina", hours=30, deadline=days_from_as_of(100), primary=True,
        ))

        alerts = await FirmComplianceService(store).generate_alerts("f4", as_of=AS_OF)

        assert [(a.type, a.severity) for a in alerts] == [
            (AlertType.MEMBER_INACTIVE, AlertSeverity.HIGH),
        ]
        assert alerts[0].metadata["inactive_days"] is None

    @pytest.mark.asyncio
    async def test_alerts_follow_primary_credential(self, store):
        """The primary credential is evaluated even when another drives the score."""
        store.add_credential(Credential(id="cfp", name="CFP", hours_required=40))
        store.add_credential(Credential(id="cpa", name="CPA", hours_required=120))
        store.add_member("zed", "f5", name="Zed")
        store.add_user_credential(holding("zed", hours=5, primary=True))
        store.add_user_credential(holding(
            "zed", credential_id="cpa", hours=100, deadline=days_from_as_of(300),
        ))
        store.log_activity("zed", days_from_as_of(-90))

        alerts = await FirmComplianceService(store).generate_alerts("f5", as_of=AS_OF)

        assert [(a.type, a.metadata["credential_id"]) for a in alerts] == [
            (AlertType.MEMBER_INACTIVE, "cfp"),
        ]
        assert alerts[0].severity == AlertSeverity.HIGH
        assert alerts[0].metadata["completion_pct"] == 13
        assert alerts[0].metadata["days_until_deadline"] is None

    @pytest.mark.asyncio
    async def test_member_without_primary_is_skipped(self, store):
        store.add_credential(Credential(id="cfp", name="CFP", hours_required=40))
        store.add_member("hal", "f6")
        store.add_user_credential(holding("hal", hours=0, deadline=days_from_as_of(3)))

        alerts = await FirmComplianceService(store).generate_alerts("f6", as_of=AS_OF)

        assert alerts == []
