"""
Rule Resolver Tests
===================

Unit tests for rule pack resolution.

Author: cpdtrack Team
Version: 1.0.0
"""

from datetime import date, datetime

import pytest

from shared.schemas.credentials import RulePack, RuleSource
from cpdtrack.errors import InvalidInputError, NotFoundError
from cpdtrack.rules.resolver import RuleResolver, select_rule_pack


class TestSelectRulePack:
    """Tests for the in-code filter step."""

    def test_picks_pack_covering_date(self, cfp_rule_packs):
        """A closed window covers dates inside it."""
        pack = select_rule_pack(cfp_rule_packs, date(2021, 6, 1))
        assert pack.version == 1

    def test_end_date_is_inclusive(self, cfp_rule_packs):
        """effective_to itself is still covered."""
        pack = select_rule_pack(cfp_rule_packs, date(2022, 12, 31))
        assert pack.version == 1

    def test_no_pack_before_first_start(self, cfp_rule_packs):
        """Dates before any pack starts select nothing."""
        assert select_rule_pack(cfp_rule_packs, date(2019, 12, 31)) is None

    def test_overlapping_open_windows_prefer_latest_start(self):
        """A later open-ended pack wins over an earlier one left open."""
        packs = [
            RulePack(
                id="a", credential_id="cfp", name="Old", version=1,
                effective_from=date(2020, 1, 1), rules={"hours_required": 30},
            ),
            RulePack(
                id="b", credential_id="cfp", name="New", version=2,
                effective_from=date(2023, 1, 1), rules={"hours_required": 50},
            ),
        ]
        assert select_rule_pack(packs, date(2024, 1, 1)).id == "b"
        assert select_rule_pack(packs, date(2021, 1, 1)).id == "a"

    def test_same_start_prefers_higher_version(self):
        """Ties on effective_from go to the higher version."""
        packs = [
            RulePack(
                id="v3", credential_id="cfp", name="v3", version=3,
                effective_from=date(2024, 1, 1), rules={},
            ),
            RulePack(
                id="v4", credential_id="cfp", name="v4", version=4,
                effective_from=date(2024, 1, 1), rules={},
            ),
        ]
        assert select_rule_pack(packs, date(2024, 6, 1)).id == "v4"

    def test_skips_expired_later_pack(self):
        """An expired later pack falls through to an earlier covering one."""
        packs = [
            RulePack(
                id="base", credential_id="cfp", name="Base", version=1,
                effective_from=date(2020, 1, 1), rules={},
            ),
            RulePack(
                id="promo", credential_id="cfp", name="Promo", version=2,
                effective_from=date(2022, 1, 1), effective_to=date(2022, 3, 31),
                rules={},
            ),
        ]
        assert select_rule_pack(packs, date(2022, 6, 1)).id == "base"


class TestRuleResolver:
    """Tests for RuleResolver against the in-memory store."""

    @pytest.fixture
    def resolver(self, seeded_store, cfp_rule_packs):
        for pack in cfp_rule_packs:
            seeded_store.add_rule_pack(pack)
        return RuleResolver(seeded_store)

    @pytest.mark.asyncio
    async def test_resolves_rule_pack(self, resolver):
        """A covering pack is returned with its metadata."""
        resolved = await resolver.resolve("cfp", date(2024, 1, 1))

        assert resolved.source == RuleSource.RULE_PACK
        assert resolved.version == 2
        assert resolved.pack_id == "pack-v2"
        assert resolved.pack_name == "CFP 2023"
        assert resolved.rules.hours_required == 50
        assert resolved.credential_name == "CFP"
        assert resolved.as_of == date(2024, 1, 1)

    @pytest.mark.asyncio
    async def test_resolves_historical_pack(self, resolver):
        """Past dates resolve to the pack in force at the time."""
        resolved = await resolver.resolve("cfp", date(2021, 1, 1))

        assert resolved.version == 1
        assert resolved.rules.hours_required == 30
        assert resolved.effective_to == date(2022, 12, 31)

    @pytest.mark.asyncio
    async def test_falls_back_to_credential_defaults(self, resolver):
        """Before any pack, the credential's own requirements apply."""
        resolved = await resolver.resolve("cfp", date(2019, 1, 1))

        assert resolved.source == RuleSource.CREDENTIAL_DEFAULTS
        assert resolved.version is None
        assert resolved.pack_id is None
        assert resolved.rules.hours_required == 40
        assert resolved.rules.ethics_hours == 3

    @pytest.mark.asyncio
    async def test_credential_without_packs(self, resolver):
        """Zero packs is not an error."""
        resolved = await resolver.resolve("cpa", date(2024, 1, 1))

        assert resolved.source == RuleSource.CREDENTIAL_DEFAULTS
        assert resolved.rules.hours_required == 120

    @pytest.mark.asyncio
    async def test_datetime_reduced_to_date(self, resolver):
        """Datetimes resolve on their calendar date."""
        resolved = await resolver.resolve("cfp", datetime(2022, 12, 31, 23, 59))
        assert resolved.version == 1

    @pytest.mark.asyncio
    async def test_unknown_credential(self, resolver):
        """Unknown credentials raise NotFoundError."""
        with pytest.raises(NotFoundError) as exc_info:
            await resolver.resolve("nope", date(2024, 1, 1))
        assert exc_info.value.identifier == "nope"

    @pytest.mark.asyncio
    async def test_empty_credential_id(self, resolver):
        """Empty identifiers are rejected."""
        with pytest.raises(InvalidInputError):
            await resolver.resolve("", date(2024, 1, 1))

    @pytest.mark.asyncio
    async def test_defaults_to_today(self, resolver):
        """Without a date, today's rules are resolved."""
        resolved = await resolver.resolve("cfp")
        assert resolved.as_of == date.today()
        assert resolved.version == 2
