"""
Test Fixtures for the Compliance Core
=====================================

Shared constants and builders for credential holdings and members.

Author: cpdtrack Team
Version: 1.0.0
"""

from datetime import date, timedelta
from typing import Optional

from shared.schemas.credentials import UserCredential


# 2026-10-01 falls in the fourth quarter
AS_OF = date(2026, 10, 1)
PERIOD = "2026-Q4"


def days_from_as_of(days: int) -> date:
    """Date ``days`` after AS_OF (negative for the past)."""
    return AS_OF + timedelta(days=days)


def holding(
    user_id: str,
    credential_id: str = "cfp",
    jurisdiction: str = "NSW",
    hours: float = 0.0,
    ethics: float = 0.0,
    structured: float = 0.0,
    deadline: Optional[date] = None,
    primary: bool = False,
) -> UserCredential:
    """Build a credential holding with an id derived from its key."""
    return UserCredential(
        id=f"uc-{user_id}-{credential_id}",
        user_id=user_id,
        credential_id=credential_id,
        jurisdiction=jurisdiction,
        hours_completed=hours,
        ethics_hours_completed=ethics,
        structured_hours_completed=structured,
        renewal_deadline=deadline,
        is_primary=primary,
    )
