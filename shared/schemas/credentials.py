"""
Credential and Rule Pack Schemas
================================

Records describing credentials, their versioned rule packs, a
holder's enrollment, and the resolved rule set for a date.

Usage:
    from shared.schemas.credentials import RulePack, ResolvedRules

    pack = RulePack(
        id="rp-1",
        credential_id="cfp",
        name="CFP 2023 rules",
        version=2,
        effective_from=date(2023, 1, 1),
        rules={"hoursRequired": 30, "ethicsHours": 2},
    )

Author: cpdtrack Team
Version: 1.0.0
"""

from datetime import date
from enum import Enum
from typing import Any, List, Optional

from pydantic import ConfigDict, Field

from shared.schemas.base import ContractModel


class RuleSource(str, Enum):
    """Where a resolved rule set came from."""
    RULE_PACK = "rule_pack"
    CREDENTIAL_DEFAULTS = "credential_defaults"


class RuleSet(ContractModel):
    """
    Decoded compliance requirements for one credential cycle.

    Unknown payload keys are kept so newer rule pack payloads
    survive a round trip through older code.
    """

    model_config = ConfigDict(extra="allow")

    hours_required: Optional[float] = Field(None, ge=0, description="Total CPD hours per cycle")
    ethics_hours: Optional[float] = Field(None, ge=0, description="Ethics hours per cycle")
    structured_hours: Optional[float] = Field(None, ge=0, description="Structured/verifiable hours per cycle")
    cycle_length_years: int = Field(default=1, ge=1, description="Cycle length in years")
    category_rules: Optional[Any] = Field(None, description="Per-category requirements")


class Credential(ContractModel):
    """A credential with its built-in (default) requirements."""
    id: str
    name: str
    body: Optional[str] = None
    region: Optional[str] = None
    active: bool = True
    hours_required: Optional[float] = None
    ethics_hours: Optional[float] = None
    structured_hours: Optional[float] = None
    cycle_length_years: int = 1
    category_rules: Optional[Any] = None

    def default_rules(self) -> RuleSet:
        """Rule set used when no rule pack covers a date."""
        return RuleSet(
            hours_required=self.hours_required,
            ethics_hours=self.ethics_hours,
            structured_hours=self.structured_hours,
            cycle_length_years=self.cycle_length_years,
            category_rules=self.category_rules,
        )


class RulePack(ContractModel):
    """A versioned, time-bounded rule set for one credential."""
    id: str
    credential_id: str
    name: str
    version: int = Field(..., ge=1)
    effective_from: date
    effective_to: Optional[date] = Field(None, description="Inclusive; None means open-ended")
    rules: RuleSet = Field(default_factory=RuleSet)

    def covers(self, target: date) -> bool:
        """True if ``target`` falls inside this pack's window."""
        if self.effective_from > target:
            return False
        return self.effective_to is None or self.effective_to >= target


class ResolvedRules(ContractModel):
    """The single rule set in force for a credential on a date."""
    source: RuleSource
    credential_id: str
    credential_name: Optional[str] = None
    as_of: date = Field(..., description="Date the rules were resolved for")
    rules: RuleSet
    version: Optional[int] = None
    pack_id: Optional[str] = None
    pack_name: Optional[str] = None
    effective_from: Optional[date] = None
    effective_to: Optional[date] = None


class UserCredential(ContractModel):
    """A holder's enrollment in a credential within a jurisdiction."""
    id: str
    user_id: str
    credential_id: str
    jurisdiction: str
    hours_completed: float = Field(default=0.0, ge=0)
    ethics_hours_completed: float = Field(default=0.0, ge=0)
    structured_hours_completed: float = Field(default=0.0, ge=0)
    renewal_deadline: Optional[date] = None
    is_primary: bool = False
    credential_name: Optional[str] = None


class FirmMember(ContractModel):
    """A firm member with their credential holdings and last activity."""
    user_id: str
    firm_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    credentials: List[UserCredential] = Field(default_factory=list)
    last_activity_date: Optional[date] = None

    @property
    def label(self) -> str:
        """Display label for alerts and messages."""
        return self.name or self.email or self.user_id
