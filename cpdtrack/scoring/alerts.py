"""
Firm Alert Rules
================

Alerts raised for firm administrators from a member's primary
credential:

    - compliance_risk: deadline within 30 days and under 50% complete
      (critical within 7 days, otherwise high)
    - member_inactive: no completed CPD for 30+ days while incomplete
      (high from 60 days, otherwise medium)
    - deadline_missed: deadline passed while incomplete (critical)

Members without a primary credential raise no alerts. A primary
credential without a renewal deadline still raises inactivity alerts.

Author: cpdtrack Team
Version: 1.0.0
"""

from datetime import date
from typing import List, Optional

from shared.schemas.credentials import FirmMember, UserCredential
from shared.schemas.risk import AlertSeverity, AlertType, FirmAlert
from cpdtrack.scoring.rules import RiskScoringRules, days_between


# Thresholds
RISK_WINDOW_DAYS = 30
RISK_CRITICAL_DAYS = 7
RISK_COMPLETION_PCT = 50
INACTIVE_DAYS = 30
INACTIVE_HIGH_DAYS = 60


def primary_holding(member: FirmMember) -> Optional[UserCredential]:
    """The member's primary credential holding, if any."""
    for holding in member.credentials:
        if holding.is_primary:
            return holding
    return None


def alerts_for_member(
    firm_id: str,
    member: FirmMember,
    holding: UserCredential,
    hours_required: Optional[float],
    as_of: date,
) -> List[FirmAlert]:
    """
    Evaluate the alert rules for one member's primary credential.

    Args:
        firm_id: Firm the alerts belong to
        member: The member (for display label and activity)
        holding: The member's primary credential holding
        hours_required: Resolved hours required for the credential
        as_of: Evaluation date

    Returns:
        Zero or more alerts
    """
    alerts: List[FirmAlert] = []
    label = member.label
    credential = holding.credential_name or holding.credential_id
    days = (
        days_between(as_of, holding.renewal_deadline)
        if holding.renewal_deadline is not None
        else None
    )
    pct = RiskScoringRules.completion_pct(hours_required, holding.hours_completed)
    metadata = {
        "credential_id": holding.credential_id,
        "completion_pct": pct,
        "days_until_deadline": days,
    }

    if days is not None and 0 < days <= RISK_WINDOW_DAYS and pct < RISK_COMPLETION_PCT:
        alerts.append(FirmAlert(
            firm_id=firm_id,
            user_id=member.user_id,
            type=AlertType.COMPLIANCE_RISK,
            severity=(
                AlertSeverity.CRITICAL if days <= RISK_CRITICAL_DAYS
                else AlertSeverity.HIGH
            ),
            title=f"{label} at risk of missing {credential} deadline",
            message=f"{label} has completed {pct}% of required hours with {days} days remaining.",
            metadata=metadata,
        ))

    if pct < 100:
        inactive_days = (
            days_between(member.last_activity_date, as_of)
            if member.last_activity_date is not None
            else None
        )
        if inactive_days is None or inactive_days >= INACTIVE_DAYS:
            alerts.append(FirmAlert(
                firm_id=firm_id,
                user_id=member.user_id,
                type=AlertType.MEMBER_INACTIVE,
                severity=(
                    AlertSeverity.HIGH
                    if inactive_days is None or inactive_days >= INACTIVE_HIGH_DAYS
                    else AlertSeverity.MEDIUM
                ),
                title=f"{label} has no recent CPD activity",
                message=(
                    f"{label} has no completed CPD activity on record."
                    if inactive_days is None
                    else f"{label} has not logged CPD activity in {inactive_days} days."
                ),
                metadata={**metadata, "inactive_days": inactive_days},
            ))

    if days is not None and days < 0 and pct < 100:
        alerts.append(FirmAlert(
            firm_id=firm_id,
            user_id=member.user_id,
            type=AlertType.DEADLINE_MISSED,
            severity=AlertSeverity.CRITICAL,
            title=f"{label} missed {credential} deadline",
            message=(
                f"{label} passed their renewal deadline {abs(days)} days ago "
                f"at {pct}% complete."
            ),
            metadata=metadata,
        ))

    return alerts
