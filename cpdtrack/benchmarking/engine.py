"""
Cohort Benchmark Engine
=======================

Materializes cohort snapshots and reports a user's standing within
the cohort of peers holding the same credential.

Snapshots are keyed by (credential, period, jurisdiction), where the
jurisdiction "ALL" denotes the cross-jurisdiction aggregate. Writing a
snapshot for an existing key replaces it.

Usage:
    engine = BenchmarkEngine(store)

    # Batch side
    await engine.generate_snapshot("cfp", "2026-Q4", jurisdiction="NSW")

    # Read side
    benchmark = await engine.get_user_benchmark("user-1", "cfp")
    print(benchmark.percentile, benchmark.message)

Author: cpdtrack Team
Version: 1.0.0
"""

from datetime import date, datetime, timezone
from typing import List, Optional

from shared.schemas.benchmarks import (
    ALL_JURISDICTIONS,
    BenchmarkSnapshot,
    UserBenchmark,
)
from cpdtrack.benchmarking.statistics import (
    CohortDistribution,
    CohortStatistics,
    percentile_rank,
)
from cpdtrack.config import settings
from cpdtrack.errors import NotFoundError, require
from cpdtrack.logging import get_logger
from cpdtrack.store.base import ComplianceStore


logger = get_logger(__name__)


def period_for(day: date) -> str:
    """Calendar quarter key for a date, e.g. ``2026-Q4``."""
    return f"{day.year}-Q{(day.month - 1) // 3 + 1}"


def standing_message(
    percentile: Optional[int],
    credential_name: str,
    jurisdiction: Optional[str],
    metric: str = "total hours",
) -> Optional[str]:
    """User-facing sentence describing where a percentile sits."""
    if percentile is None:
        return None

    location = f" in {jurisdiction}" if jurisdiction else ""
    holders = f"{credential_name} holders{location}"

    if percentile >= 90:
        return f"You are in the top 10% for {metric} among {holders}"
    if percentile >= 75:
        return f"You are in the top 25% for {metric} among {holders}"
    if percentile >= 50:
        return f"You are above the median for {metric} among {holders}"
    if percentile >= 25:
        return f"You are in the lower half for {metric} among {holders}"
    return f"You are in the bottom 25% for {metric} among {holders}"


def low_confidence_message(total_peers: int, credential_name: str) -> str:
    """Advisory attached when a cohort is too small to be reliable."""
    noun, verb = ("peer", "holds") if total_peers == 1 else ("peers", "hold")
    return (
        f"Only {total_peers} {noun} {verb} {credential_name} in this cohort; "
        f"comparisons are indicative only."
    )


class BenchmarkEngine:
    """
    Cohort benchmark engine.

    Holds no state besides its store; every call re-reads current data.

    Attributes:
        store: Persistence collaborator
        min_cohort_size: Cohorts below this size are flagged low confidence
    """

    def __init__(
        self,
        store: ComplianceStore,
        min_cohort_size: Optional[int] = None,
    ):
        self.store = store
        self.min_cohort_size = (
            min_cohort_size
            if min_cohort_size is not None
            else settings.benchmark_min_cohort_size
        )

    # =========================================================================
    # Snapshot Generation
    # =========================================================================

    async def generate_snapshot(
        self,
        credential_id: str,
        period: str,
        jurisdiction: Optional[str] = None,
    ) -> BenchmarkSnapshot:
        """
        Compute and upsert the snapshot for one key.

        Args:
            credential_id: Credential whose holders form the cohort
            period: Opaque period label used as part of the key
            jurisdiction: Limit the cohort to one jurisdiction; None for "ALL"

        Returns:
            The stored snapshot (``total_peers == 0`` for an empty cohort)

        Raises:
            InvalidInputError: If credential_id or period is empty
            NotFoundError: If the credential does not exist
        """
        require(credential_id, "credential_id")
        require(period, "period")

        credential = await self.store.get_credential(credential_id)
        if credential is None:
            raise NotFoundError("Credential", credential_id)

        rows = await self.store.list_user_credentials(credential_id, jurisdiction=jurisdiction)
        stats = CohortStatistics.from_rows(rows)

        snapshot = BenchmarkSnapshot(
            credential_id=credential_id,
            period=period,
            jurisdiction=jurisdiction or ALL_JURISDICTIONS,
            total_peers=stats.total_peers,
            avg_hours=stats.avg_hours,
            median_hours=stats.median_hours,
            p25_hours=stats.p25_hours,
            p75_hours=stats.p75_hours,
            p90_hours=stats.p90_hours,
            avg_ethics_hours=stats.avg_ethics_hours,
            avg_structured_hours=stats.avg_structured_hours,
            calculated_at=datetime.now(timezone.utc),
        )
        await self.store.upsert_snapshot(snapshot)

        logger.info(
            "snapshot_generated",
            credential_id=credential_id,
            period=period,
            jurisdiction=snapshot.jurisdiction,
            total_peers=snapshot.total_peers,
        )
        return snapshot

    # =========================================================================
    # User Benchmark
    # =========================================================================

    async def _current_snapshot(
        self,
        credential_id: str,
        period: str,
        jurisdiction: str,
    ) -> Optional[BenchmarkSnapshot]:
        # Zero-peer snapshots count as missing.
        for scope in (jurisdiction, ALL_JURISDICTIONS):
            snapshot = await self.store.get_snapshot(credential_id, period, scope)
            if snapshot is not None and not snapshot.is_empty:
                return snapshot
        return None

    async def get_user_benchmark(
        self,
        user_id: str,
        credential_id: str,
        as_of: Optional[date] = None,
    ) -> Optional[UserBenchmark]:
        """
        Compare one user's hours against their cohort.

        Snapshot lookup tries the user's jurisdiction first, then the
        "ALL" aggregate. With neither available, statistics are computed
        on the fly from the jurisdiction cohort and not persisted.
        Peer counts come from the live cohort the percentile is ranked
        against.

        Args:
            user_id: User identifier
            credential_id: Credential identifier
            as_of: Date selecting the current period (defaults to today)

        Returns:
            UserBenchmark, or None if the user does not hold the credential
        """
        require(user_id, "user_id")
        require(credential_id, "credential_id")

        holding = await self.store.get_user_credential(user_id, credential_id)
        if holding is None:
            return None

        period = period_for(as_of or date.today())
        credential_name = holding.credential_name
        if credential_name is None:
            credential = await self.store.get_credential(credential_id)
            credential_name = credential.name if credential else credential_id

        snapshot = await self._current_snapshot(credential_id, period, holding.jurisdiction)

        cohort_scope = (
            None
            if snapshot is not None and snapshot.jurisdiction == ALL_JURISDICTIONS
            else holding.jurisdiction
        )
        rows = await self.store.list_user_credentials(credential_id, jurisdiction=cohort_scope)
        distribution = CohortDistribution.from_rows(rows)

        if snapshot is not None:
            stats = CohortStatistics(
                total_peers=distribution.size,
                avg_hours=snapshot.avg_hours,
                median_hours=snapshot.median_hours,
                p25_hours=snapshot.p25_hours,
                p75_hours=snapshot.p75_hours,
                p90_hours=snapshot.p90_hours,
                avg_ethics_hours=snapshot.avg_ethics_hours,
                avg_structured_hours=snapshot.avg_structured_hours,
            )
        else:
            stats = CohortStatistics.from_values(
                distribution.totals, distribution.ethics, distribution.structured
            )

        percentile = percentile_rank(holding.hours_completed, distribution.totals)
        low_confidence = stats.total_peers < self.min_cohort_size

        if low_confidence:
            message = low_confidence_message(stats.total_peers, credential_name)
        else:
            message = standing_message(percentile, credential_name, holding.jurisdiction)

        logger.debug(
            "user_benchmark_computed",
            user_id=user_id,
            credential_id=credential_id,
            period=period,
            snapshot_jurisdiction=snapshot.jurisdiction if snapshot else None,
            total_peers=stats.total_peers,
        )

        return UserBenchmark(
            credential_id=credential_id,
            credential_name=credential_name,
            jurisdiction=holding.jurisdiction,
            period=period,
            user_hours=holding.hours_completed,
            user_ethics_hours=holding.ethics_hours_completed,
            user_structured_hours=holding.structured_hours_completed,
            percentile=percentile,
            ethics_percentile=percentile_rank(
                holding.ethics_hours_completed, distribution.ethics
            ),
            structured_percentile=percentile_rank(
                holding.structured_hours_completed, distribution.structured
            ),
            avg_hours=stats.avg_hours,
            median_hours=stats.median_hours,
            p25=stats.p25_hours,
            p75=stats.p75_hours,
            p90=stats.p90_hours,
            avg_ethics_hours=stats.avg_ethics_hours,
            avg_structured_hours=stats.avg_structured_hours,
            total_peers=stats.total_peers,
            snapshot_jurisdiction=snapshot.jurisdiction if snapshot else None,
            low_confidence=low_confidence,
            message=message,
        )

    async def list_user_benchmarks(
        self,
        user_id: str,
        as_of: Optional[date] = None,
    ) -> List[UserBenchmark]:
        """Benchmarks for every credential a user holds."""
        require(user_id, "user_id")

        holdings = await self.store.list_user_credentials_for_user(user_id)
        results = []
        for holding in holdings:
            benchmark = await self.get_user_benchmark(
                user_id, holding.credential_id, as_of=as_of
            )
            if benchmark is not None:
                results.append(benchmark)
        return results
