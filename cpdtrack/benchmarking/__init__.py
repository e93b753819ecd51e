"""
cpdtrack Benchmarking Package
=============================

Cohort snapshots and per-user benchmark comparisons.

Author: cpdtrack Team
Version: 1.0.0
"""

from cpdtrack.benchmarking.batch import run_snapshot_batch
from cpdtrack.benchmarking.engine import BenchmarkEngine, period_for
from cpdtrack.benchmarking.statistics import (
    CohortDistribution,
    CohortStatistics,
    median,
    percentile_rank,
    percentile_value,
)

__all__ = [
    "BenchmarkEngine",
    "period_for",
    "run_snapshot_batch",
    "CohortDistribution",
    "CohortStatistics",
    "median",
    "percentile_rank",
    "percentile_value",
]
