"""
Tests for forecasting/pacing.py - pacing status and catch-up planning.
"""

import pytest
from datetime import date, timedelta

from revenue_pacing.config.schema import PacingStatus
from revenue_pacing.forecasting.pacing import (
    CatchUpReplanner,
    PacingClassifier,
    calendar_position,
    compute_delta,
)
from revenue_pacing.forecasting.results import ForecastDataPoint


# =============================================================================
# Pacing status
# =============================================================================

class TestPacingClassifier:
    """Tests for PacingClassifier.classify."""

    def test_behind(self):
        """900 actual vs 1000 forecast is behind by 100 (-10%)."""
        assessment = PacingClassifier().classify(900, 1000)

        assert assessment.status == PacingStatus.BEHIND
        assert assessment.delta == -100
        assert assessment.delta_percent == -10.0

    def test_ahead(self):
        assessment = PacingClassifier().classify(1100, 1000)

        assert assessment.status == PacingStatus.AHEAD
        assert assessment.delta_percent == pytest.approx(10.0)

    def test_exact_equality_is_on_track(self):
        assert PacingClassifier().classify(1000, 1000).status == PacingStatus.ON_TRACK

    def test_no_dead_band_by_default(self):
        assert PacingClassifier().classify(999.99, 1000).status == PacingStatus.BEHIND

    def test_tolerance_band(self):
        """Within +/-1% counts as on track when a tolerance is configured."""
        classifier = PacingClassifier(on_track_tolerance_pct=1.0)

        assert classifier.classify(995, 1000).status == PacingStatus.ON_TRACK
        assert classifier.classify(1010, 1000).status == PacingStatus.ON_TRACK
        assert classifier.classify(980, 1000).status == PacingStatus.BEHIND

    def test_zero_forecast(self):
        """Delta percent is 0 with a zero forecast; sign of delta still decides."""
        assessment = PacingClassifier(on_track_tolerance_pct=5.0).classify(50, 0)

        assert assessment.delta_percent == 0.0
        assert assessment.status == PacingStatus.AHEAD

    def test_negative_tolerance_rejected(self):
        with pytest.raises(ValueError):
            PacingClassifier(on_track_tolerance_pct=-1)

    def test_compute_delta_zero_base(self):
        assert compute_delta(0, 0) == (0, 0.0)


class TestCalendarPosition:
    """Tests for calendar_position."""

    def test_midway(self):
        start = date(2025, 1, 1)
        as_of = start + timedelta(days=49)

        assert calendar_position(start, date(2025, 4, 10), as_of) == (100, 50, 50)

    def test_before_start(self):
        assert calendar_position(date(2025, 1, 1), date(2025, 1, 31), date(2024, 12, 1)) == (31, 0, 31)

    def test_after_end(self):
        assert calendar_position(date(2025, 1, 1), date(2025, 1, 31), date(2025, 6, 1)) == (31, 31, 0)


# =============================================================================
# Catch-up
# =============================================================================

class TestCatchUpReplanner:
    """Tests for CatchUpReplanner.plan and project."""

    def test_plan_example(self):
        """10,000 target, 3,000 in after 50 of 100 days at 2.5 ROAS."""
        plan = CatchUpReplanner.plan(
            revenue_target=10000,
            actual_revenue_to_date=3000,
            total_days=100,
            elapsed_days=50,
            roas=2.5,
        )

        assert plan.remaining_revenue_needed == 7000
        assert plan.remaining_ad_spend_needed == pytest.approx(2800)
        assert plan.days_remaining == 50
        assert plan.catch_up_daily_revenue == pytest.approx(140)
        assert plan.catch_up_daily_ad_spend == pytest.approx(56)

    def test_no_days_remaining_reports_full_amount(self):
        """At the end of the range the daily pace is the whole remaining need."""
        plan = CatchUpReplanner.plan(10000, 9000, 30, 30, 2.0)

        assert plan.days_remaining == 0
        assert plan.catch_up_daily_revenue == 1000
        assert plan.catch_up_daily_ad_spend == 500

    def test_target_already_met(self):
        plan = CatchUpReplanner.plan(1000, 1200, 10, 5, 2.0)

        assert plan.remaining_revenue_needed == 0
        assert plan.catch_up_daily_revenue == 0
        assert plan.catch_up_daily_ad_spend == 0

    def test_project_replaces_future_days_only(self):
        start = date(2025, 1, 1)
        points = [
            ForecastDataPoint(
                date=start + timedelta(days=i),
                actual_revenue=50.0 if i < 2 else None,
                actual_ad_spend=10.0 if i < 2 else None,
                forecast_revenue=100.0,
                forecast_ad_spend=50.0,
                cumulative_actual_revenue=50.0 * min(i + 1, 2),
                cumulative_forecast_revenue=100.0 * (i + 1),
            )
            for i in range(4)
        ]
        plan = CatchUpReplanner.plan(400, 100, 4, 2, 2.0)

        projected = CatchUpReplanner.project(points, plan, as_of_date=start + timedelta(days=1))

        assert projected[:2] == points[:2]
        assert [p.forecast_revenue for p in projected[2:]] == [150.0, 150.0]
        assert [p.forecast_ad_spend for p in projected[2:]] == [75.0, 75.0]
        assert projected[-1].cumulative_forecast_revenue == 400.0
        # Input series is left untouched
        assert points[2].forecast_revenue == 100.0
