"""
Tests for forecasting/baseline.py - the daily baseline forecast curve.
"""

import pytest
from datetime import date

from revenue_pacing.config.schema import MonthlyTarget
from revenue_pacing.forecasting.baseline import BaselineCurveBuilder
from revenue_pacing.forecasting.errors import InconsistentMonthlyTargetsError, InvalidRoasError
from revenue_pacing.forecasting.targets import TargetDistributor, month_key


def _cents(value: float) -> int:
    return round(value * 100)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def jan_feb_curve():
    """Baseline for 1,000,000 over Jan 1 - Feb 28 2025 at 2.5 ROAS."""
    start, end = date(2025, 1, 1), date(2025, 2, 28)
    targets = TargetDistributor().distribute_evenly(1_000_000, start, end)
    return targets, BaselineCurveBuilder().build(targets, start, end, roas=2.5)


# =============================================================================
# Test Classes
# =============================================================================

class TestBaselineCurve:
    """Tests for BaselineCurveBuilder.build."""

    def test_one_point_per_day(self, jan_feb_curve):
        _, curve = jan_feb_curve

        assert len(curve) == 59
        assert curve[0].date == date(2025, 1, 1)
        assert curve[-1].date == date(2025, 2, 28)

    def test_month_sums_match_targets_exactly(self, jan_feb_curve):
        """Each month's daily forecast sums to its target to the cent."""
        targets, curve = jan_feb_curve

        for target in targets:
            month_cents = sum(_cents(d.forecast_revenue) for d in curve if month_key(d.date) == target.month)
            assert month_cents == _cents(target.target)

    def test_uniform_within_month_with_residual_on_last_day(self, jan_feb_curve):
        """525,424 / 31 = 16,949.16 for 30 days, residual on Jan 31."""
        _, curve = jan_feb_curve
        january = curve[:31]

        assert all(d.forecast_revenue == 16949.16 for d in january[:-1])
        assert january[-1].forecast_revenue == 16949.20

    def test_cumulative_terminal_equals_target(self, jan_feb_curve):
        _, curve = jan_feb_curve

        assert curve[-1].cumulative_forecast_revenue == 1_000_000

    def test_cumulative_is_running_total(self, jan_feb_curve):
        _, curve = jan_feb_curve

        running = 0
        for d in curve:
            running += _cents(d.forecast_revenue)
            assert _cents(d.cumulative_forecast_revenue) == running

    def test_ad_spend_follows_roas(self, jan_feb_curve):
        _, curve = jan_feb_curve

        for d in curve:
            assert d.forecast_ad_spend == pytest.approx(d.forecast_revenue / 2.5)

    def test_even_split_gives_flat_curve(self):
        """90,000 over Q1 2025 is exactly 1,000 every day."""
        start, end = date(2025, 1, 1), date(2025, 3, 31)
        targets = TargetDistributor().distribute_evenly(90000, start, end)

        curve = BaselineCurveBuilder().build(targets, start, end, roas=2.5)

        assert {d.forecast_revenue for d in curve} == {1000.0}
        assert {d.forecast_ad_spend for d in curve} == {400.0}

    def test_uneven_monthly_targets(self):
        """Explicit targets change the daily rate at month boundaries."""
        start, end = date(2025, 1, 1), date(2025, 3, 31)
        targets = [
            MonthlyTarget(month="2025-01", target=45000.0),
            MonthlyTarget(month="2025-02", target=28000.0),
            MonthlyTarget(month="2025-03", target=17000.0),
        ]

        curve = BaselineCurveBuilder().build(targets, start, end, roas=2.0)

        february = [d for d in curve if d.date.month == 2]
        assert {d.forecast_revenue for d in february} == {1000.0}
        assert curve[-1].cumulative_forecast_revenue == 90000.0

    def test_zero_target(self):
        start, end = date(2025, 1, 1), date(2025, 1, 31)
        targets = [MonthlyTarget(month="2025-01", target=0.0)]

        curve = BaselineCurveBuilder().build(targets, start, end, roas=3.0)

        assert all(d.forecast_revenue == 0 for d in curve)
        assert curve[-1].cumulative_forecast_revenue == 0

    @pytest.mark.parametrize("roas", [0, -1.5])
    def test_non_positive_roas_raises(self, roas):
        targets = [MonthlyTarget(month="2025-01", target=100.0)]

        with pytest.raises(InvalidRoasError):
            BaselineCurveBuilder().build(targets, date(2025, 1, 1), date(2025, 1, 31), roas=roas)

    def test_missing_month_target_raises(self):
        targets = [MonthlyTarget(month="2025-01", target=100.0)]

        with pytest.raises(InconsistentMonthlyTargetsError):
            BaselineCurveBuilder().build(targets, date(2025, 1, 1), date(2025, 2, 28), roas=2.0)

    def test_sub_cent_monthly_target_rounded_half_up(self):
        """A 500.004 target is spread as 500.00 and 500.005 as 500.01."""
        start, end = date(2025, 6, 1), date(2025, 6, 30)

        for target, expected_cents in [(500.004, 50000), (500.005, 50001)]:
            curve = BaselineCurveBuilder().build(
                [MonthlyTarget(month="2025-06", target=target)], start, end, roas=2.0
            )

            assert sum(_cents(d.forecast_revenue) for d in curve) == expected_cents
            assert _cents(curve[-1].cumulative_forecast_revenue) == expected_cents
