"""
Snapshot Batch
==============

Regenerates benchmark snapshots for every active credential: one key
per distinct jurisdiction among its holders, plus the "ALL" aggregate.

Keys run concurrently under a semaphore, each inside its own store
scope (one database session per key). A failing key is logged and
reported; it never aborts its siblings.

Usage:
    from cpdtrack.store.postgres import session_store

    report = await run_snapshot_batch(session_store, period="2026-Q4")
    if not report.success:
        for failure in report.failures:
            print(failure.credential_id, failure.jurisdiction, failure.error)

Author: cpdtrack Team
Version: 1.0.0
"""

import asyncio
from datetime import date
from typing import List, Optional, Tuple

from shared.schemas.benchmarks import (
    ALL_JURISDICTIONS,
    SnapshotBatchReport,
    SnapshotFailure,
)
from cpdtrack.benchmarking.engine import BenchmarkEngine, period_for
from cpdtrack.config import settings
from cpdtrack.logging import get_logger
from cpdtrack.store.base import StoreFactory


logger = get_logger(__name__)


async def _collect_keys(store_factory: StoreFactory) -> Tuple[List[Tuple[str, Optional[str]]], int]:
    """(credential_id, jurisdiction) keys to generate and the credential count."""
    keys: List[Tuple[str, Optional[str]]] = []
    async with store_factory() as store:
        credentials = await store.list_active_credentials()
        for credential in credentials:
            for jurisdiction in await store.list_jurisdictions(credential.id):
                keys.append((credential.id, jurisdiction))
            keys.append((credential.id, None))
    return keys, len(credentials)


async def run_snapshot_batch(
    store_factory: StoreFactory,
    period: Optional[str] = None,
    concurrency: Optional[int] = None,
) -> SnapshotBatchReport:
    """
    Generate snapshots for all active credentials.

    Args:
        store_factory: Callable returning an async context manager that
            yields a ComplianceStore
        period: Period label (defaults to the current quarter)
        concurrency: Max keys in flight (defaults to settings)

    Returns:
        SnapshotBatchReport with per-key failures
    """
    period = period or period_for(date.today())
    max_concurrency = concurrency or settings.benchmark_batch_concurrency

    keys, credentials_processed = await _collect_keys(store_factory)
    semaphore = asyncio.Semaphore(max_concurrency)

    async def _generate_one(credential_id: str, jurisdiction: Optional[str]):
        async with semaphore:
            async with store_factory() as store:
                engine = BenchmarkEngine(store)
                return await engine.generate_snapshot(
                    credential_id, period, jurisdiction=jurisdiction
                )

    tasks = [_generate_one(credential_id, jurisdiction) for credential_id, jurisdiction in keys]
    results = await asyncio.gather(*tasks, return_exceptions=True)

    report = SnapshotBatchReport(period=period, credentials_processed=credentials_processed)
    for (credential_id, jurisdiction), result in zip(keys, results):
        if isinstance(result, BaseException):
            logger.error(
                "snapshot_failed",
                credential_id=credential_id,
                jurisdiction=jurisdiction or ALL_JURISDICTIONS,
                period=period,
                error=str(result),
            )
            report.failures.append(
                SnapshotFailure(
                    credential_id=credential_id,
                    jurisdiction=jurisdiction or ALL_JURISDICTIONS,
                    error=str(result),
                )
            )
        else:
            report.snapshots_generated += 1

    logger.info(
        "snapshot_batch_completed",
        period=period,
        credentials=credentials_processed,
        generated=report.snapshots_generated,
        failed=len(report.failures),
    )
    return report
