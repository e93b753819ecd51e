"""
Cohort Statistics Tests
=======================

Unit tests for percentile, median and percentile-rank policy.

Author: cpdtrack Team
Version: 1.0.0
"""

import pytest

from cpdtrack.benchmarking.statistics import (
    CohortStatistics,
    mean,
    median,
    percentile_rank,
    percentile_value,
    round_half_up,
)


class TestOrderStatistics:
    """Tests for percentile values over a cohort."""

    def test_five_value_cohort(self):
        """[10, 20, 30, 40, 50] gives median 30, p25 20, p75 40."""
        values = [10, 20, 30, 40, 50]

        assert median(values) == 30
        assert percentile_value(values, 25) == 20
        assert percentile_value(values, 75) == 40
        assert percentile_value(values, 90) == pytest.approx(46)

    def test_unsorted_input(self):
        """Order of input does not matter."""
        assert median([50, 10, 40, 20, 30]) == 30

    def test_even_median_is_midpoint(self):
        """Even-sized cohorts take the mean of the two central values."""
        assert median([10, 20, 30, 40]) == 25

    def test_linear_interpolation(self):
        """Ranks between samples interpolate linearly."""
        assert percentile_value([0, 10], 25) == pytest.approx(2.5)

    def test_single_value(self):
        """A single-value cohort returns that value at every percentile."""
        assert percentile_value([7], 10) == 7
        assert percentile_value([7], 90) == 7

    def test_empty_values(self):
        """Empty input yields None, never an error."""
        assert median([]) is None
        assert mean([]) is None
        assert percentile_value([], 50) is None

    def test_percentile_out_of_range(self):
        """Percentiles outside [0, 100] are rejected."""
        with pytest.raises(ValueError):
            percentile_value([1, 2, 3], 101)


class TestPercentileRank:
    """Tests for a value's rank within a cohort."""

    def test_tie_with_maximum_ranks_100(self):
        """Values tied with the cohort maximum rank 100."""
        assert percentile_rank(50, [10, 20, 50, 50]) == 100

    def test_ties_count_in_numerator(self):
        """All values at or below count."""
        assert percentile_rank(20, [10, 20, 20, 40]) == 75

    def test_minimum_value(self):
        """The lone minimum ranks 1/n."""
        assert percentile_rank(10, [10, 20, 30, 40, 50]) == 20

    def test_rounds_half_up(self):
        """Halves round up rather than to even."""
        # 1/8 = 12.5%
        assert percentile_rank(1, [1, 2, 3, 4, 5, 6, 7, 8]) == 13

    def test_empty_distribution(self):
        """Empty cohorts have no rank."""
        assert percentile_rank(10, []) is None

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(2.4999) == 2


class TestCohortStatistics:
    """Tests for cohort summaries."""

    def test_summary_values(self):
        """Statistics are computed and rounded to 2 decimals."""
        stats = CohortStatistics.from_values(
            [10, 20, 30, 40, 50], [1, 2, 3, 4, 5], [1, 1, 1, 1, 2]
        )

        assert stats.total_peers == 5
        assert stats.avg_hours == 30
        assert stats.median_hours == 30
        assert stats.p25_hours == 20
        assert stats.p75_hours == 40
        assert stats.p90_hours == 46
        assert stats.avg_ethics_hours == 3
        assert stats.avg_structured_hours == 1.2

    def test_rounding(self):
        """Averages are rounded so reruns are byte-identical."""
        stats = CohortStatistics.from_values([10, 10, 11], [0, 0, 0], [0, 0, 0])
        assert stats.avg_hours == 10.33

    def test_empty_cohort(self):
        """An empty cohort has zero peers and no statistics."""
        stats = CohortStatistics.from_values([], [], [])

        assert stats.total_peers == 0
        assert stats.avg_hours is None
        assert stats.median_hours is None
        assert stats.p90_hours is None
