"""
Member Risk Scoring Rules
=========================

Factor calculations and classification for CPD compliance risk.

Three normalized factors feed a weighted average:
    - Hours remaining: share of required hours still outstanding
    - Deadline pressure: how close the renewal deadline is
    - Activity trend: how long since the member last logged CPD

All factors are in the [0, 1] range where:
    - 0.0 = No contribution to risk
    - 1.0 = Maximal contribution to risk

Weights and windows come from settings, so they can be tuned per
deployment without code changes.

Author: cpdtrack Team
Version: 1.0.0
"""

from datetime import date
from typing import Dict, Optional

from shared.schemas.risk import ComplianceStatus, RiskFactors, RiskLevel
from cpdtrack.benchmarking.statistics import round_half_up
from cpdtrack.config import settings


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


class RiskScoringRules:
    """
    Rule-based risk scoring for credential holders.

    Usage:
        rules = RiskScoringRules()
        factors = rules.calculate_factors(
            hours_required=40, hours_completed=10,
            days_until_deadline=30, days_since_activity=45,
        )
        score = rules.calculate_score(factors)
        level = rules.classify_risk_level(score)
    """

    # =========================================================================
    # Thresholds
    # =========================================================================

    # Risk band lower bounds (inclusive)
    CRITICAL_THRESHOLD = 75
    HIGH_THRESHOLD = 50
    MEDIUM_THRESHOLD = 25

    # Compliance status cut-offs
    AT_RISK_COMPLETION_PCT = 50
    AT_RISK_WINDOW_DAYS = 60
    BEHIND_COMPLETION_PCT = 30

    def __init__(
        self,
        weights: Optional[Dict[str, float]] = None,
        deadline_horizon_days: Optional[int] = None,
        activity_staleness_days: Optional[int] = None,
    ):
        """Initialize the scoring rules with configured weights."""
        self.weights = weights or {
            "hours_remaining": settings.risk_weight_hours_remaining,
            "deadline_pressure": settings.risk_weight_deadline_pressure,
            "activity_trend": settings.risk_weight_activity_trend,
        }
        self.deadline_horizon_days = (
            deadline_horizon_days or settings.risk_deadline_horizon_days
        )
        self.activity_staleness_days = (
            activity_staleness_days or settings.risk_activity_staleness_days
        )

    # =========================================================================
    # Factor Calculations
    # =========================================================================

    def calculate_factors(
        self,
        hours_required: Optional[float],
        hours_completed: float,
        days_until_deadline: int,
        days_since_activity: Optional[int],
    ) -> RiskFactors:
        """
        Calculate all factors for one credential.

        Args:
            hours_required: Hours required for the cycle (None if unknown)
            hours_completed: Hours completed so far
            days_until_deadline: Days from the scoring date to the deadline
            days_since_activity: Days since last completed activity (None if never)

        Returns:
            RiskFactors with every factor in [0, 1]
        """
        return RiskFactors(
            hours_remaining=self.hours_remaining_factor(hours_required, hours_completed),
            deadline_pressure=self.deadline_pressure_factor(days_until_deadline),
            activity_trend=self.activity_trend_factor(days_since_activity),
        )

    @staticmethod
    def hours_remaining_factor(
        hours_required: Optional[float],
        hours_completed: float,
    ) -> float:
        """Outstanding share of required hours; 0 when nothing is required."""
        if hours_required is None or hours_required <= 0:
            return 0.0
        return _clamp((hours_required - hours_completed) / hours_required)

    def deadline_pressure_factor(self, days_until_deadline: int) -> float:
        """
        Linear ramp from 0 at the horizon to 1 at the deadline.

        A deadline due today or already past is maximal pressure.
        """
        if days_until_deadline <= 0:
            return 1.0
        if days_until_deadline >= self.deadline_horizon_days:
            return 0.0
        return _clamp(1.0 - days_until_deadline / self.deadline_horizon_days)

    def activity_trend_factor(self, days_since_activity: Optional[int]) -> float:
        """Staleness of the member's activity; maximal with no activity on record."""
        if days_since_activity is None:
            return 1.0
        return _clamp(days_since_activity / self.activity_staleness_days)

    # =========================================================================
    # Score Calculations
    # =========================================================================

    def calculate_score(self, factors: RiskFactors) -> int:
        """
        Weighted average of the factors scaled to an integer in [0, 100].

        Args:
            factors: Calculated risk factors

        Returns:
            Risk score (rounded half-up)
        """
        total_weight = sum(self.weights.values())
        if total_weight <= 0:
            return 0

        weighted_sum = (
            factors.hours_remaining * self.weights["hours_remaining"] +
            factors.deadline_pressure * self.weights["deadline_pressure"] +
            factors.activity_trend * self.weights["activity_trend"]
        )
        score = round_half_up(100 * weighted_sum / total_weight)
        return max(0, min(100, score))

    # =========================================================================
    # Classification
    # =========================================================================

    @classmethod
    def classify_risk_level(cls, score: int) -> RiskLevel:
        """
        Classify a risk score into a band.

        Bands include their lower bound: 25 is medium, 75 is critical.
        """
        if score >= cls.CRITICAL_THRESHOLD:
            return RiskLevel.CRITICAL
        elif score >= cls.HIGH_THRESHOLD:
            return RiskLevel.HIGH
        elif score >= cls.MEDIUM_THRESHOLD:
            return RiskLevel.MEDIUM
        else:
            return RiskLevel.LOW

    @staticmethod
    def completion_pct(hours_required: Optional[float], hours_completed: float) -> int:
        """Completed share of required hours as a percentage, capped at 100."""
        if hours_required is None or hours_required <= 0:
            return 100
        return min(100, round_half_up(hours_completed / hours_required * 100))

    @classmethod
    def compliance_status(
        cls,
        completion_pct: int,
        days_until_deadline: int,
    ) -> ComplianceStatus:
        """
        Classify where a holder stands against the requirement.

        Args:
            completion_pct: Completion percentage (0-100)
            days_until_deadline: Days to the renewal deadline (negative when past)

        Returns:
            ComplianceStatus
        """
        if completion_pct >= 100:
            return ComplianceStatus.COMPLIANT
        if days_until_deadline < 0:
            return ComplianceStatus.OVERDUE
        if (
            completion_pct < cls.AT_RISK_COMPLETION_PCT
            and days_until_deadline <= cls.AT_RISK_WINDOW_DAYS
        ) or completion_pct < cls.BEHIND_COMPLETION_PCT:
            return ComplianceStatus.AT_RISK
        return ComplianceStatus.ON_TRACK


def days_between(start: date, end: date) -> int:
    """Whole days from ``start`` to ``end`` (negative when ``end`` is earlier)."""
    return (end - start).days
