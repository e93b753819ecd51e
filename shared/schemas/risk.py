"""
Member Risk Schemas
===================

Derived, never-persisted risk records for firm triage: per-credential
status, per-member profile, the ranked roster, the firm summary and
generated alerts.

Author: cpdtrack Team
Version: 1.0.0
"""

from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field

from shared.schemas.base import ContractModel


class RiskLevel(str, Enum):
    """Risk score bands."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ComplianceStatus(str, Enum):
    """Where a holder stands against a credential's requirements."""
    COMPLIANT = "compliant"
    ON_TRACK = "on_track"
    AT_RISK = "at_risk"
    OVERDUE = "overdue"


class RiskFactors(ContractModel):
    """Normalized [0, 1] signals feeding a risk score."""
    hours_remaining: float = Field(..., ge=0.0, le=1.0)
    deadline_pressure: float = Field(..., ge=0.0, le=1.0)
    activity_trend: float = Field(..., ge=0.0, le=1.0)


class CredentialRiskStatus(ContractModel):
    """Risk and progress for one credential held by a member."""
    credential_id: str
    credential_name: Optional[str] = None
    jurisdiction: Optional[str] = None
    is_primary: bool = False
    hours_required: Optional[float] = None
    hours_completed: float = 0.0
    completion_pct: int = Field(..., ge=0, le=100)
    renewal_deadline: date
    days_until_deadline: int
    rule_source: Optional[str] = None
    rule_version: Optional[int] = None
    factors: RiskFactors
    risk_score: int = Field(..., ge=0, le=100)
    risk_level: RiskLevel
    compliance_status: ComplianceStatus


class MemberRiskProfile(ContractModel):
    """A member's aggregate risk, driven by their worst credential."""
    user_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    risk_score: int = Field(..., ge=0, le=100)
    risk_level: RiskLevel
    compliance_status: ComplianceStatus
    completion_pct: int = Field(..., ge=0, le=100)
    days_until_deadline: int
    last_activity_date: Optional[date] = None
    credential_statuses: List[CredentialRiskStatus] = Field(default_factory=list)
    excluded_credentials: List[str] = Field(
        default_factory=list,
        description="Credential ids skipped for lack of a renewal deadline"
    )


class FirmRiskRoster(ContractModel):
    """Scored members of a firm, highest risk first."""
    firm_id: str
    total_members: int
    risk_scores: List[MemberRiskProfile] = Field(default_factory=list)
    excluded_user_ids: List[str] = Field(default_factory=list)


class CredentialBreakdown(ContractModel):
    """Per-credential compliance counts across a firm."""
    credential_name: str
    total_holders: int = 0
    compliant_count: int = 0
    at_risk_count: int = 0
    overdue_count: int = 0
    avg_completion_pct: int = 0


class FirmComplianceSummary(ContractModel):
    """Firm-wide compliance counts over scorable members."""
    firm_id: str
    total_members: int = 0
    compliant_count: int = 0
    on_track_count: int = 0
    at_risk_count: int = 0
    overdue_count: int = 0
    avg_completion_pct: int = 0
    credential_breakdown: List[CredentialBreakdown] = Field(default_factory=list)


class AlertType(str, Enum):
    """Alert categories raised from member compliance state."""
    COMPLIANCE_RISK = "compliance_risk"
    MEMBER_INACTIVE = "member_inactive"
    DEADLINE_MISSED = "deadline_missed"


class AlertSeverity(str, Enum):
    """Alert severity levels."""
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class FirmAlert(ContractModel):
    """An alert for a firm administrator about one member."""
    firm_id: str
    user_id: str
    type: AlertType
    severity: AlertSeverity
    title: str
    message: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
