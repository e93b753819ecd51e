"""
Benchmark Schemas
=================

Materialized cohort snapshots, a user's standing within a cohort,
and the report produced by a snapshot batch run.

Author: cpdtrack Team
Version: 1.0.0
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import Field

from shared.schemas.base import ContractModel


ALL_JURISDICTIONS = "ALL"


class BenchmarkSnapshot(ContractModel):
    """
    Cohort summary for one (credential, period, jurisdiction) key.

    A zero-peer snapshot carries ``None`` statistics and means
    "no data yet", not an error.
    """
    credential_id: str
    period: str
    jurisdiction: str = Field(default=ALL_JURISDICTIONS, description="Jurisdiction or 'ALL'")
    total_peers: int = Field(default=0, ge=0)
    avg_hours: Optional[float] = None
    median_hours: Optional[float] = None
    p25_hours: Optional[float] = None
    p75_hours: Optional[float] = None
    p90_hours: Optional[float] = None
    avg_ethics_hours: Optional[float] = None
    avg_structured_hours: Optional[float] = None
    calculated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def key(self) -> tuple:
        """Upsert key."""
        return (self.credential_id, self.period, self.jurisdiction)

    @property
    def is_empty(self) -> bool:
        return self.total_peers == 0


class UserBenchmark(ContractModel):
    """A user's percentile standing against peers holding a credential."""
    credential_id: str
    credential_name: str
    jurisdiction: Optional[str] = None
    period: str
    user_hours: float
    user_ethics_hours: float
    user_structured_hours: float
    percentile: Optional[int] = Field(None, ge=0, le=100)
    ethics_percentile: Optional[int] = Field(None, ge=0, le=100)
    structured_percentile: Optional[int] = Field(None, ge=0, le=100)
    avg_hours: Optional[float] = None
    median_hours: Optional[float] = None
    p25: Optional[float] = None
    p75: Optional[float] = None
    p90: Optional[float] = None
    avg_ethics_hours: Optional[float] = None
    avg_structured_hours: Optional[float] = None
    total_peers: int = 0
    snapshot_jurisdiction: Optional[str] = Field(
        None,
        description="Jurisdiction key of the snapshot used; None when computed on the fly"
    )
    low_confidence: bool = False
    message: Optional[str] = None


class SnapshotFailure(ContractModel):
    """One snapshot key that failed during a batch run."""
    credential_id: str
    jurisdiction: str
    error: str


class SnapshotBatchReport(ContractModel):
    """Outcome of regenerating snapshots for every active credential."""
    period: str
    snapshots_generated: int = 0
    credentials_processed: int = 0
    failures: List[SnapshotFailure] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failures
