"""
cpdtrack Rule Pack Routes
=========================

Resolve the rule set in force for a credential on a date.

Endpoints:
    GET /rule-packs/resolve?credentialId=...&date=YYYY-MM-DD

Author: cpdtrack Team
Version: 1.0.0
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from shared.schemas.credentials import ResolvedRules
from cpdtrack.api.dependencies import get_rule_resolver
from cpdtrack.rules.resolver import RuleResolver


router = APIRouter(prefix="/rule-packs", tags=["Rule Packs"])


@router.get(
    "/resolve",
    response_model=ResolvedRules,
    summary="Resolve Rules",
    description="Resolve the rule pack (or credential defaults) in force on a date.",
)
async def resolve_rules(
    credential_id: str = Query(..., alias="credentialId", description="Credential id"),
    target_date: Optional[date] = Query(
        None, alias="date", description="Date to resolve for (defaults to today)"
    ),
    resolver: RuleResolver = Depends(get_rule_resolver),
) -> ResolvedRules:
    """
    Resolve rules for a credential.

    - **source**: ``rule_pack`` or ``credential_defaults``
    - **version**: pack version, null for defaults
    """
    return await resolver.resolve(credential_id, target_date)
