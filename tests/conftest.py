"""
pytest configuration and fixtures.

Author: cpdtrack Team
Version: 1.0.0
"""

from datetime import date

import pytest

from shared.schemas.credentials import Credential, RulePack
from cpdtrack.store.memory import InMemoryComplianceStore

from fixtures import holding


@pytest.fixture
def store():
    """Empty in-memory compliance store."""
    return InMemoryComplianceStore()


@pytest.fixture
def seeded_store(store):
    """
    Store with two active credentials and one retired credential.

    CFP cohort:
        NSW: u1..u5 with 10, 20, 30, 40, 50 hours
        VIC: u6 with 25 hours
    """
    store.add_credential(Credential(
        id="cfp", name="CFP", hours_required=40, ethics_hours=3, structured_hours=10,
    ))
    store.add_credential(Credential(id="cpa", name="CPA", hours_required=120))
    store.add_credential(Credential(id="legacy", name="Legacy", active=False))

    for i, hours in enumerate([10, 20, 30, 40, 50], start=1):
        store.add_user_credential(holding(
            f"u{i}", hours=hours, ethics=float(i), structured=hours / 2,
        ))
    store.add_user_credential(holding("u6", jurisdiction="VIC", hours=25, ethics=2, structured=5))

    return store


@pytest.fixture
def cfp_rule_packs():
    """Two successive CFP rule packs: v1 for 2020-2022, v2 open-ended from 2023."""
    return [
        RulePack(
            id="pack-v1",
            credential_id="cfp",
            name="CFP 2020",
            version=1,
            effective_from=date(2020, 1, 1),
            effective_to=date(2022, 12, 31),
            rules={"hours_required": 30, "ethics_hours": 2},
        ),
        RulePack(
            id="pack-v2",
            credential_id="cfp",
            name="CFP 2023",
            version=2,
            effective_from=date(2023, 1, 1),
            rules={"hours_required": 50, "ethics_hours": 4},
        ),
    ]
