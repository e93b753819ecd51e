"""
API Tests
=========

Route tests against the in-memory store via dependency overrides.

Author: cpdtrack Team
Version: 1.0.0
"""

import pytest
from fastapi.testclient import TestClient

from cpdtrack.api.dependencies import get_store, get_store_factory
from cpdtrack.api.main import app

from fixtures import days_from_as_of, holding


@pytest.fixture
def client(seeded_store):
    """Test client wired to the seeded in-memory store."""
    seeded_store.add_member("m1", "f1", name="Ada", email="ada@example.com")
    seeded_store.add_user_credential(holding(
        "m1", credential_id="cpa", hours=0, deadline=days_from_as_of(10), primary=True,
    ))

    app.dependency_overrides[get_store] = lambda: seeded_store
    app.dependency_overrides[get_store_factory] = lambda: seeded_store.factory()
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealthEndpoints:
    """Tests for health endpoints."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "cpdtrack"
        assert data["status"] in ("healthy", "degraded")

    def test_liveness(self, client):
        assert client.get("/health/live").json() == {"status": "ok"}

    def test_correlation_id_header(self, client):
        response = client.get("/health/live", headers={"X-Correlation-ID": "abc-123"})
        assert response.headers["x-correlation-id"] == "abc-123"


class TestRulePackEndpoints:
    """Tests for /rule-packs."""

    def test_resolve_defaults(self, client):
        response = client.get(
            "/rule-packs/resolve", params={"credentialId": "cfp", "date": "2024-01-01"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["source"] == "credential_defaults"
        assert data["rules"]["hoursRequired"] == 40
        assert data["version"] is None

    def test_unknown_credential_is_404(self, client):
        response = client.get("/rule-packs/resolve", params={"credentialId": "nope"})
        assert response.status_code == 404

    def test_empty_credential_is_400(self, client):
        response = client.get("/rule-packs/resolve", params={"credentialId": " "})
        assert response.status_code == 400


class TestBenchmarkingEndpoints:
    """Tests for /benchmarking."""

    def test_generate_snapshot(self, client):
        response = client.post(
            "/benchmarking/snapshot",
            json={"credentialId": "cfp", "period": "2026-Q4", "jurisdiction": "NSW"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["totalPeers"] == 5
        assert data["medianHours"] == 30
        assert data["jurisdiction"] == "NSW"

    def test_user_benchmark(self, client):
        response = client.get(
            "/benchmarking/users/u5/credentials/cfp", params={"asOf": "2026-10-01"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["percentile"] == 100
        assert data["period"] == "2026-Q4"
        assert data["lowConfidence"] is False

    def test_non_holder_is_null(self, client):
        """A missing holding is not an error."""
        response = client.get("/benchmarking/users/u1/credentials/cpa")

        assert response.status_code == 200
        assert response.json() is None

    def test_list_user_benchmarks(self, client):
        response = client.get("/benchmarking/users/u1")

        assert response.status_code == 200
        assert [b["credentialId"] for b in response.json()] == ["cfp"]

    def test_batch(self, client):
        response = client.post("/benchmarking/snapshots/batch", params={"period": "2026-Q4"})

        assert response.status_code == 200
        data = response.json()
        assert data["period"] == "2026-Q4"
        assert data["failures"] == []
        # cfp: NSW, VIC, ALL; cpa: NSW, ALL
        assert data["snapshotsGenerated"] == 5


class TestFirmEndpoints:
    """Tests for /firms."""

    def test_risk_scores(self, client):
        response = client.get("/firms/f1/risk-scores", params={"asOf": "2026-10-01"})

        assert response.status_code == 200
        data = response.json()
        assert data["totalMembers"] == 1
        assert data["riskScores"][0]["userId"] == "m1"
        assert data["riskScores"][0]["riskLevel"] == "critical"

    def test_compliance_summary(self, client):
        response = client.get("/firms/f1/compliance-summary", params={"asOf": "2026-10-01"})

        assert response.status_code == 200
        assert response.json()["atRiskCount"] == 1

    def test_alerts(self, client):
        response = client.get("/firms/f1/alerts", params={"asOf": "2026-10-01"})

        assert response.status_code == 200
        types = [a["type"] for a in response.json()]
        assert types == ["compliance_risk", "member_inactive"]
