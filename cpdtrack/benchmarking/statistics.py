"""
Cohort Statistics
=================

Order statistics over a cohort's CPD hours.

Policy:
    - Percentile values use linear interpolation between 0-indexed
      ranks: rank = p/100 × (n − 1), interpolating between the floor
      and ceiling ranks (numpy's "linear" method).
    - The median is the 50th percentile, i.e. the midpoint of the
      sorted values (mean of the two central values for even n).
    - Percentile rank counts values at or below the given value, so a
      value tied with the cohort maximum ranks 100.
    - Stored statistics are rounded to 2 decimals.

Author: cpdtrack Team
Version: 1.0.0
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import numpy as np

from shared.schemas.credentials import UserCredential


STAT_DECIMALS = 2


def _round(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    return round(float(value), STAT_DECIMALS)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def mean(values: Sequence[float]) -> Optional[float]:
    """Arithmetic mean, or None for an empty sequence."""
    if len(values) == 0:
        return None
    return float(np.mean(np.asarray(values, dtype=float)))


def percentile_value(values: Sequence[float], percentile: float) -> Optional[float]:
    """
    Value at ``percentile`` (0-100) using linear interpolation.

    Returns None for an empty sequence.
    """
    if not 0 <= percentile <= 100:
        raise ValueError(f"percentile must be within [0, 100], got {percentile}")
    if len(values) == 0:
        return None
    return float(np.percentile(np.asarray(values, dtype=float), percentile, method="linear"))


def median(values: Sequence[float]) -> Optional[float]:
    """Median of the values, or None for an empty sequence."""
    return percentile_value(values, 50)


def percentile_rank(value: float, values: Sequence[float]) -> Optional[int]:
    """
    Percentage of ``values`` at or below ``value``, rounded to an integer.

    Ties count in the numerator. Returns None for an empty distribution.
    """
    n = len(values)
    if n == 0:
        return None
    at_or_below = int(np.count_nonzero(np.asarray(values, dtype=float) <= value))
    return round_half_up(at_or_below / n * 100)


@dataclass(frozen=True)
class CohortStatistics:
    """
    Summary of a cohort's hours.

    All statistic fields are None when the cohort is empty.
    """
    total_peers: int
    avg_hours: Optional[float] = None
    median_hours: Optional[float] = None
    p25_hours: Optional[float] = None
    p75_hours: Optional[float] = None
    p90_hours: Optional[float] = None
    avg_ethics_hours: Optional[float] = None
    avg_structured_hours: Optional[float] = None

    @classmethod
    def from_values(
        cls,
        totals: Sequence[float],
        ethics: Sequence[float],
        structured: Sequence[float],
    ) -> "CohortStatistics":
        """Summarize parallel total/ethics/structured hour sequences."""
        if len(totals) == 0:
            return cls(total_peers=0)

        return cls(
            total_peers=len(totals),
            avg_hours=_round(mean(totals)),
            median_hours=_round(median(totals)),
            p25_hours=_round(percentile_value(totals, 25)),
            p75_hours=_round(percentile_value(totals, 75)),
            p90_hours=_round(percentile_value(totals, 90)),
            avg_ethics_hours=_round(mean(ethics)),
            avg_structured_hours=_round(mean(structured)),
        )

    @classmethod
    def from_rows(cls, rows: Iterable[UserCredential]) -> "CohortStatistics":
        """Summarize a cohort of credential holdings."""
        cohort = CohortDistribution.from_rows(rows)
        return cls.from_values(cohort.totals, cohort.ethics, cohort.structured)


@dataclass(frozen=True)
class CohortDistribution:
    """The raw hour values of a cohort, one entry per holder."""
    totals: List[float]
    ethics: List[float]
    structured: List[float]

    @classmethod
    def from_rows(cls, rows: Iterable[UserCredential]) -> "CohortDistribution":
        rows = list(rows)
        return cls(
            totals=[r.hours_completed for r in rows],
            ethics=[r.ethics_hours_completed for r in rows],
            structured=[r.structured_hours_completed for r in rows],
        )

    @property
    def size(self) -> int:
        return len(self.totals)
