"""
Firm Compliance Service
=======================

Firm-level views over member risk profiles: the ranked risk roster,
the compliance summary and administrator alerts.

Usage:
    service = FirmComplianceService(store)
    roster = await service.risk_roster("firm-1", credential_name="CFP")
    summary = await service.compliance_summary("firm-1")
    alerts = await service.generate_alerts("firm-1")

Author: cpdtrack Team
Version: 1.0.0
"""

from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional, Tuple

from shared.schemas.credentials import FirmMember
from shared.schemas.risk import (
    ComplianceStatus,
    CredentialBreakdown,
    FirmAlert,
    FirmComplianceSummary,
    FirmRiskRoster,
    MemberRiskProfile,
)
from cpdtrack.benchmarking.statistics import round_half_up
from cpdtrack.errors import require
from cpdtrack.logging import get_logger
from cpdtrack.rules.resolver import RuleResolver
from cpdtrack.scoring.alerts import alerts_for_member, primary_holding
from cpdtrack.scoring.engine import RiskScoringEngine
from cpdtrack.store.base import ComplianceStore


logger = get_logger(__name__)


def _average_pct(values: List[int]) -> int:
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


class FirmComplianceService:
    """
    Compliance views for a firm's members.

    Attributes:
        store: Persistence collaborator
        engine: Risk scoring engine
    """

    def __init__(
        self,
        store: ComplianceStore,
        engine: Optional[RiskScoringEngine] = None,
    ):
        self.store = store
        self.engine = engine or RiskScoringEngine(RuleResolver(store))

    async def _score_members(
        self,
        members: List[FirmMember],
        as_of: date,
    ) -> Tuple[List[Tuple[FirmMember, MemberRiskProfile]], List[str]]:
        scored = []
        excluded = []
        for member in members:
            profile = await self.engine.score_member(member, as_of=as_of)
            if profile is None:
                excluded.append(member.user_id)
            else:
                scored.append((member, profile))
        return scored, excluded

    # =========================================================================
    # Risk Roster
    # =========================================================================

    async def risk_roster(
        self,
        firm_id: str,
        credential_name: Optional[str] = None,
        as_of: Optional[date] = None,
    ) -> FirmRiskRoster:
        """
        Score every member of a firm, highest risk first.

        Args:
            firm_id: Firm identifier
            credential_name: Only include holders of this credential
                (case-insensitive)
            as_of: Scoring date (defaults to today)

        Returns:
            FirmRiskRoster; unscorable members appear only in
            ``excluded_user_ids``
        """
        require(firm_id, "firm_id")
        as_of = as_of or date.today()

        members = await self.store.list_firm_members(firm_id)
        if credential_name:
            wanted = credential_name.strip().lower()
            members = [
                m for m in members
                if any((h.credential_name or "").lower() == wanted for h in m.credentials)
            ]

        scored, excluded = await self._score_members(members, as_of)
        profiles = sorted(
            (profile for _, profile in scored),
            key=lambda p: (-p.risk_score, p.user_id),
        )

        logger.info(
            "risk_roster_computed",
            firm_id=firm_id,
            members=len(members),
            scored=len(profiles),
            excluded=len(excluded),
        )
        return FirmRiskRoster(
            firm_id=firm_id,
            total_members=len(members),
            risk_scores=profiles,
            excluded_user_ids=excluded,
        )

    # =========================================================================
    # Compliance Summary
    # =========================================================================

    async def compliance_summary(
        self,
        firm_id: str,
        as_of: Optional[date] = None,
    ) -> FirmComplianceSummary:
        """
        Count members by compliance status with a per-credential breakdown.

        Args:
            firm_id: Firm identifier
            as_of: Evaluation date (defaults to today)

        Returns:
            FirmComplianceSummary
        """
        require(firm_id, "firm_id")
        as_of = as_of or date.today()

        members = await self.store.list_firm_members(firm_id)
        scored, _ = await self._score_members(members, as_of)
        profiles = [profile for _, profile in scored]

        counts: Dict[ComplianceStatus, int] = defaultdict(int)
        for profile in profiles:
            counts[profile.compliance_status] += 1

        by_credential: Dict[str, list] = defaultdict(list)
        for profile in profiles:
            for status in profile.credential_statuses:
                by_credential[status.credential_name or status.credential_id].append(status)

        breakdown = [
            CredentialBreakdown(
                credential_name=name,
                total_holders=len(statuses),
                compliant_count=sum(
                    1 for s in statuses if s.compliance_status == ComplianceStatus.COMPLIANT
                ),
                at_risk_count=sum(
                    1 for s in statuses if s.compliance_status == ComplianceStatus.AT_RISK
                ),
                overdue_count=sum(
                    1 for s in statuses if s.compliance_status == ComplianceStatus.OVERDUE
                ),
                avg_completion_pct=_average_pct([s.completion_pct for s in statuses]),
            )
            for name, statuses in sorted(by_credential.items())
        ]

        return FirmComplianceSummary(
            firm_id=firm_id,
            total_members=len(members),
            compliant_count=counts[ComplianceStatus.COMPLIANT],
            on_track_count=counts[ComplianceStatus.ON_TRACK],
            at_risk_count=counts[ComplianceStatus.AT_RISK],
            overdue_count=counts[ComplianceStatus.OVERDUE],
            avg_completion_pct=_average_pct([p.completion_pct for p in profiles]),
            credential_breakdown=breakdown,
        )

    # =========================================================================
    # Alerts
    # =========================================================================

    async def generate_alerts(
        self,
        firm_id: str,
        as_of: Optional[date] = None,
    ) -> List[FirmAlert]:
        """
        Evaluate alert rules against each member's primary credential.

        Members without a primary credential are skipped.

        Args:
            firm_id: Firm identifier
            as_of: Evaluation date (defaults to today)

        Returns:
            Alerts in member order
        """
        require(firm_id, "firm_id")
        as_of = as_of or date.today()

        members = await self.store.list_firm_members(firm_id)

        alerts: List[FirmAlert] = []
        for member in members:
            holding = primary_holding(member)
            if holding is None:
                continue
            resolved = await self.engine.resolver.resolve(holding.credential_id, as_of)
            alerts.extend(alerts_for_member(
                firm_id, member, holding, resolved.rules.hours_required, as_of,
            ))

        logger.info("firm_alerts_generated", firm_id=firm_id, alerts=len(alerts))
        return alerts
