"""
cpdtrack Firm Routes
====================

Firm administrator views over member compliance risk.

Endpoints:
    GET /firms/{firm_id}/risk-scores
    GET /firms/{firm_id}/compliance-summary
    GET /firms/{firm_id}/alerts

Author: cpdtrack Team
Version: 1.0.0
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from shared.schemas.risk import FirmAlert, FirmComplianceSummary, FirmRiskRoster
from cpdtrack.api.dependencies import get_firm_service
from cpdtrack.scoring.firm import FirmComplianceService


router = APIRouter(prefix="/firms", tags=["Firms"])


@router.get(
    "/{firm_id}/risk-scores",
    response_model=FirmRiskRoster,
    summary="Member Risk Scores",
    description="Risk-scored members of a firm, highest risk first.",
)
async def risk_scores(
    firm_id: str,
    credential: Optional[str] = Query(None, description="Filter by credential name"),
    as_of: Optional[date] = Query(None, alias="asOf"),
    service: FirmComplianceService = Depends(get_firm_service),
) -> FirmRiskRoster:
    """
    Score every member of a firm.

    Members with no credential carrying a renewal deadline are listed
    in ``excludedUserIds`` rather than scored.
    """
    return await service.risk_roster(firm_id, credential_name=credential, as_of=as_of)


@router.get(
    "/{firm_id}/compliance-summary",
    response_model=FirmComplianceSummary,
    summary="Compliance Summary",
)
async def compliance_summary(
    firm_id: str,
    as_of: Optional[date] = Query(None, alias="asOf"),
    service: FirmComplianceService = Depends(get_firm_service),
) -> FirmComplianceSummary:
    return await service.compliance_summary(firm_id, as_of=as_of)


@router.get(
    "/{firm_id}/alerts",
    response_model=List[FirmAlert],
    summary="Firm Alerts",
)
async def alerts(
    firm_id: str,
    as_of: Optional[date] = Query(None, alias="asOf"),
    service: FirmComplianceService = Depends(get_firm_service),
) -> List[FirmAlert]:
    return await service.generate_alerts(firm_id, as_of=as_of)
