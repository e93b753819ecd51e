"""
Rule Pack Resolver
==================

Resolves the single rule set in force for a credential on a date.

Resolution is a two-step query + filter pipeline:
    1. Query every pack whose ``effective_from`` is on or before the date.
    2. Walk them most-recent-start first and take the first whose
       window is open-ended or still covers the date.

If no pack covers the date, the credential's built-in defaults apply.
Because the walk always prefers the latest start, overlapping windows
left open by mistake still resolve to the newest applicable version.

Usage:
    resolver = RuleResolver(store)
    resolved = await resolver.resolve("cfp", date(2024, 1, 1))
    print(resolved.source, resolved.version, resolved.rules.hours_required)

Author: cpdtrack Team
Version: 1.0.0
"""

from datetime import date, datetime
from typing import Iterable, Optional, Union

from shared.schemas.credentials import ResolvedRules, RulePack, RuleSource
from cpdtrack.errors import NotFoundError, require
from cpdtrack.logging import get_logger
from cpdtrack.store.base import ComplianceStore


logger = get_logger(__name__)


def _as_date(value: Optional[Union[date, datetime]]) -> date:
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    return value


def select_rule_pack(packs: Iterable[RulePack], target: date) -> Optional[RulePack]:
    """
    Pick the pack in force on ``target``.

    Candidates are ordered by ``effective_from`` descending, ties broken
    by higher version, and the first one covering ``target`` wins.
    """
    candidates = sorted(
        (p for p in packs if p.effective_from <= target),
        key=lambda p: (p.effective_from, p.version),
        reverse=True,
    )
    for pack in candidates:
        if pack.covers(target):
            return pack
    return None


class RuleResolver:
    """
    Resolves rule packs against a ComplianceStore.

    Stateless; safe to share between concurrent callers.
    """

    def __init__(self, store: ComplianceStore):
        self.store = store

    async def resolve(
        self,
        credential_id: str,
        target_date: Optional[Union[date, datetime]] = None,
    ) -> ResolvedRules:
        """
        Resolve the rules for a credential on a date.

        Args:
            credential_id: Credential identifier
            target_date: Date to resolve for (defaults to today)

        Returns:
            ResolvedRules tagged ``rule_pack`` or ``credential_defaults``

        Raises:
            InvalidInputError: If credential_id is empty
            NotFoundError: If no pack applies and the credential does not exist
        """
        require(credential_id, "credential_id")
        target = _as_date(target_date)

        packs = await self.store.list_rule_packs(
            credential_id, effective_on_or_before=target
        )
        pack = select_rule_pack(packs, target)

        credential = await self.store.get_credential(credential_id)

        if pack is None:
            if credential is None:
                raise NotFoundError("Credential", credential_id)

            logger.debug(
                "rules_resolved",
                credential_id=credential_id,
                date=target.isoformat(),
                source=RuleSource.CREDENTIAL_DEFAULTS.value,
                candidates=len(packs),
            )
            return ResolvedRules(
                source=RuleSource.CREDENTIAL_DEFAULTS,
                credential_id=credential.id,
                credential_name=credential.name,
                as_of=target,
                rules=credential.default_rules(),
            )

        logger.debug(
            "rules_resolved",
            credential_id=credential_id,
            date=target.isoformat(),
            source=RuleSource.RULE_PACK.value,
            pack_id=pack.id,
            version=pack.version,
        )
        return ResolvedRules(
            source=RuleSource.RULE_PACK,
            credential_id=pack.credential_id,
            credential_name=credential.name if credential else None,
            as_of=target,
            rules=pack.rules,
            version=pack.version,
            pack_id=pack.id,
            pack_name=pack.name,
            effective_from=pack.effective_from,
            effective_to=pack.effective_to,
        )
