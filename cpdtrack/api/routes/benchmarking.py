"""
cpdtrack Benchmarking Routes
============================

Per-user cohort benchmarks and snapshot generation.

Endpoints:
    GET  /benchmarking/users/{user_id}
    GET  /benchmarking/users/{user_id}/credentials/{credential_id}
    POST /benchmarking/snapshot
    POST /benchmarking/snapshots/batch

Author: cpdtrack Team
Version: 1.0.0
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import Field

from shared.schemas.base import ContractModel
from shared.schemas.benchmarks import (
    BenchmarkSnapshot,
    SnapshotBatchReport,
    UserBenchmark,
)
from cpdtrack.api.dependencies import get_benchmark_engine, get_store_factory
from cpdtrack.benchmarking.batch import run_snapshot_batch
from cpdtrack.benchmarking.engine import BenchmarkEngine, period_for
from cpdtrack.store.base import StoreFactory


router = APIRouter(prefix="/benchmarking", tags=["Benchmarking"])


# =============================================================================
# Request Models
# =============================================================================

class SnapshotRequest(ContractModel):
    """Request to generate one snapshot."""
    credential_id: str = Field(..., description="Credential to snapshot")
    period: Optional[str] = Field(None, description="Period label (defaults to current quarter)")
    jurisdiction: Optional[str] = Field(None, description="Jurisdiction; omit for ALL")


# =============================================================================
# Benchmark Endpoints
# =============================================================================

@router.get(
    "/users/{user_id}",
    response_model=List[UserBenchmark],
    summary="List User Benchmarks",
    description="Benchmarks for every credential the user holds.",
)
async def list_user_benchmarks(
    user_id: str,
    as_of: Optional[date] = Query(None, alias="asOf"),
    engine: BenchmarkEngine = Depends(get_benchmark_engine),
) -> List[UserBenchmark]:
    return await engine.list_user_benchmarks(user_id, as_of=as_of)


@router.get(
    "/users/{user_id}/credentials/{credential_id}",
    response_model=Optional[UserBenchmark],
    summary="Get User Benchmark",
    description="Compare a user's hours against their credential cohort.",
)
async def get_user_benchmark(
    user_id: str,
    credential_id: str,
    as_of: Optional[date] = Query(None, alias="asOf"),
    engine: BenchmarkEngine = Depends(get_benchmark_engine),
) -> Optional[UserBenchmark]:
    """
    Get a user's benchmark for one credential.

    Small cohorts still return numbers with ``lowConfidence`` set.
    A user who does not hold the credential gets 200 with a null body;
    an unknown credential is not distinguished from a missing holding.
    """
    return await engine.get_user_benchmark(user_id, credential_id, as_of=as_of)


# =============================================================================
# Snapshot Endpoints
# =============================================================================

@router.post(
    "/snapshot",
    response_model=BenchmarkSnapshot,
    summary="Generate Snapshot",
    description="Compute and upsert the cohort snapshot for one key.",
)
async def generate_snapshot(
    request: SnapshotRequest,
    engine: BenchmarkEngine = Depends(get_benchmark_engine),
) -> BenchmarkSnapshot:
    period = request.period or period_for(date.today())
    return await engine.generate_snapshot(
        request.credential_id, period, jurisdiction=request.jurisdiction
    )


@router.post(
    "/snapshots/batch",
    response_model=SnapshotBatchReport,
    summary="Run Snapshot Batch",
    description="Regenerate snapshots for every active credential.",
)
async def run_batch(
    period: Optional[str] = Query(None, description="Period label (defaults to current quarter)"),
    store_factory: StoreFactory = Depends(get_store_factory),
) -> SnapshotBatchReport:
    return await run_snapshot_batch(store_factory, period=period)
