"""
Risk Scoring Engine
===================

Scores each credential a member holds and aggregates them into a
member risk profile.

This module coordinates:
    - Rule resolution for the hours each credential requires
    - Factor calculation and scoring through RiskScoringRules
    - Aggregation by maximum across a member's credentials

A credential with no renewal deadline cannot be scored; it is listed
in ``excluded_credentials`` instead of receiving a made-up score.

Usage:
    engine = RiskScoringEngine(RuleResolver(store))
    profile = await engine.score_member(member, as_of=date(2026, 10, 1))
    if profile:
        print(profile.risk_score, profile.risk_level)

Author: cpdtrack Team
Version: 1.0.0
"""

from datetime import date
from typing import List, Optional

from shared.schemas.credentials import FirmMember, UserCredential
from shared.schemas.risk import CredentialRiskStatus, MemberRiskProfile
from cpdtrack.logging import get_logger
from cpdtrack.rules.resolver import RuleResolver
from cpdtrack.scoring.rules import RiskScoringRules, days_between


logger = get_logger(__name__)


def _aggregate_order(status: CredentialRiskStatus):
    # Highest score first, then primary, nearest deadline, credential id
    return (
        -status.risk_score,
        not status.is_primary,
        status.days_until_deadline,
        status.credential_id,
    )


class RiskScoringEngine:
    """
    Risk scoring engine for credential holders.

    Attributes:
        resolver: Rule resolver supplying each credential's requirements
        rules: Risk scoring rules implementation
    """

    def __init__(
        self,
        resolver: RuleResolver,
        rules: Optional[RiskScoringRules] = None,
    ):
        self.resolver = resolver
        self.rules = rules or RiskScoringRules()

    async def score_credential(
        self,
        holding: UserCredential,
        as_of: date,
        last_activity_date: Optional[date] = None,
    ) -> Optional[CredentialRiskStatus]:
        """
        Score one credential held by a member.

        Args:
            holding: The member's credential holding
            as_of: Scoring date
            last_activity_date: Most recent completed CPD activity, if any

        Returns:
            CredentialRiskStatus, or None if the holding has no renewal deadline
        """
        if holding.renewal_deadline is None:
            return None

        resolved = await self.resolver.resolve(holding.credential_id, as_of)
        hours_required = resolved.rules.hours_required

        days_until_deadline = days_between(as_of, holding.renewal_deadline)
        days_since_activity = (
            max(0, days_between(last_activity_date, as_of))
            if last_activity_date is not None
            else None
        )

        factors = self.rules.calculate_factors(
            hours_required=hours_required,
            hours_completed=holding.hours_completed,
            days_until_deadline=days_until_deadline,
            days_since_activity=days_since_activity,
        )
        score = self.rules.calculate_score(factors)
        completion_pct = self.rules.completion_pct(hours_required, holding.hours_completed)

        return CredentialRiskStatus(
            credential_id=holding.credential_id,
            credential_name=holding.credential_name or resolved.credential_name,
            jurisdiction=holding.jurisdiction,
            is_primary=holding.is_primary,
            hours_required=hours_required,
            hours_completed=holding.hours_completed,
            completion_pct=completion_pct,
            renewal_deadline=holding.renewal_deadline,
            days_until_deadline=days_until_deadline,
            rule_source=resolved.source.value,
            rule_version=resolved.version,
            factors=factors,
            risk_score=score,
            risk_level=self.rules.classify_risk_level(score),
            compliance_status=self.rules.compliance_status(
                completion_pct, days_until_deadline
            ),
        )

    async def score_member(
        self,
        member: FirmMember,
        as_of: Optional[date] = None,
    ) -> Optional[MemberRiskProfile]:
        """
        Score every credential a member holds and aggregate by maximum.

        The credential driving the aggregate also supplies the profile's
        completion, deadline and compliance status.

        Args:
            member: Firm member with holdings and last activity date
            as_of: Scoring date (defaults to today)

        Returns:
            MemberRiskProfile, or None if no credential is scorable
        """
        as_of = as_of or date.today()

        statuses: List[CredentialRiskStatus] = []
        excluded: List[str] = []
        for holding in member.credentials:
            status = await self.score_credential(
                holding, as_of, member.last_activity_date
            )
            if status is None:
                excluded.append(holding.credential_id)
            else:
                statuses.append(status)

        if not statuses:
            logger.debug(
                "member_not_scorable",
                user_id=member.user_id,
                excluded=excluded,
            )
            return None

        statuses.sort(key=_aggregate_order)
        driver = statuses[0]

        return MemberRiskProfile(
            user_id=member.user_id,
            name=member.name,
            email=member.email,
            risk_score=driver.risk_score,
            risk_level=driver.risk_level,
            compliance_status=driver.compliance_status,
            completion_pct=driver.completion_pct,
            days_until_deadline=driver.days_until_deadline,
            last_activity_date=member.last_activity_date,
            credential_statuses=statuses,
            excluded_credentials=excluded,
        )
