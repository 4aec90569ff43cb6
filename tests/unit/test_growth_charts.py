"""
Unit tests for the growth chart lookup service.
"""

import pytest

from synthcohort.domain.enums import Gender
from synthcohort.reference.growth_charts import (
    MAX_PERCENTILE,
    MIN_PERCENTILE,
    GrowthChartLookup,
    bmi,
)


class TestPercentileValue:
    """Tests for percentile_value."""

    def test_median_matches_table(self, growth_charts: GrowthChartLookup):
        """The 50th percentile at a tabulated age is the M parameter."""
        value = growth_charts.percentile_value("weight", Gender.MALE, 120, 0.5)

        assert value == pytest.approx(31.44, rel=1e-6)

    def test_monotonic_in_percentile(self, growth_charts: GrowthChartLookup):
        """Higher percentiles give larger measurements."""
        values = [
            growth_charts.percentile_value("bmi", Gender.FEMALE, 150, p)
            for p in (0.05, 0.25, 0.5, 0.75, 0.85, 0.95)
        ]

        assert values == sorted(values)
        assert len(set(values)) == len(values)

    def test_interpolates_between_tabulated_ages(self, growth_charts: GrowthChartLookup):
        """Values between tabulated ages lie between their neighbours."""
        low = growth_charts.percentile_value("weight", Gender.FEMALE, 120, 0.6)
        mid = growth_charts.percentile_value("weight", Gender.FEMALE, 126, 0.6)
        high = growth_charts.percentile_value("weight", Gender.FEMALE, 132, 0.6)

        assert low < mid < high

    def test_age_above_range_is_clamped(self, growth_charts: GrowthChartLookup):
        """Ages past the table return the last tabulated value."""
        at_edge = growth_charts.percentile_value("weight", Gender.MALE, 240, 0.6)
        beyond = growth_charts.percentile_value("weight", Gender.MALE, 400, 0.6)

        assert beyond == pytest.approx(at_edge)

    def test_age_below_range_is_clamped(self, growth_charts: GrowthChartLookup):
        """BMI curves start at 24 months; younger ages use the first row."""
        at_edge = growth_charts.percentile_value("bmi", Gender.MALE, 24, 0.85)
        below = growth_charts.percentile_value("bmi", Gender.MALE, 6, 0.85)

        assert below == pytest.approx(at_edge)

    def test_percentile_is_clamped(self, growth_charts: GrowthChartLookup):
        """Percentiles of 0 and 1 are clamped to a finite domain."""
        zero = growth_charts.percentile_value("height", Gender.FEMALE, 60, 0.0)
        one = growth_charts.percentile_value("height", Gender.FEMALE, 60, 1.0)

        assert zero == pytest.approx(
            growth_charts.percentile_value("height", Gender.FEMALE, 60, MIN_PERCENTILE)
        )
        assert one == pytest.approx(
            growth_charts.percentile_value("height", Gender.FEMALE, 60, MAX_PERCENTILE)
        )

    def test_accepts_gender_code(self, growth_charts: GrowthChartLookup):
        """Gender may be passed as its code."""
        assert growth_charts.percentile_value("bmi", "F", 120, 0.85) == pytest.approx(
            growth_charts.percentile_value("bmi", Gender.FEMALE, 120, 0.85)
        )

    def test_unknown_metric_raises(self, growth_charts: GrowthChartLookup):
        """Metrics without a table are rejected."""
        with pytest.raises(ValueError):
            growth_charts.percentile_value("head_circumference", Gender.MALE, 12, 0.5)


class TestPercentileOf:
    """Tests for percentile_of."""

    def test_inverse_of_percentile_value(self, growth_charts: GrowthChartLookup):
        """percentile_of recovers the percentile a value was looked up at."""
        value = growth_charts.percentile_value("weight", Gender.FEMALE, 100, 0.7)

        assert growth_charts.percentile_of("weight", Gender.FEMALE, 100, value) == pytest.approx(
            0.7, abs=1e-6
        )

    def test_extreme_values_are_clamped(self, growth_charts: GrowthChartLookup):
        """Very heavy children sit at the top of the domain."""
        pct = growth_charts.percentile_of("weight", Gender.MALE, 60, 200.0)

        assert pct == MAX_PERCENTILE

    def test_non_positive_value_raises(self, growth_charts: GrowthChartLookup):
        """Measurements must be positive."""
        with pytest.raises(ValueError):
            growth_charts.percentile_of("weight", Gender.MALE, 60, 0.0)


class TestBmi:
    """Tests for the BMI helper."""

    def test_bmi(self):
        """BMI is kg over metres squared."""
        assert bmi(170.0, 72.25) == pytest.approx(25.0)
