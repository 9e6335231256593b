"""
Pacing classification and catch-up planning.

``PacingClassifier`` compares actual revenue to date with the baseline
forecast to date. ``CatchUpReplanner`` works out the daily pace needed
over the remaining days to still hit the original target.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Sequence

from revenue_pacing.config.schema import PacingStatus
from revenue_pacing.forecasting.results import ForecastDataPoint

logger = logging.getLogger(__name__)


def compute_delta(actual: float, forecast: float) -> tuple[float, float]:
    """
    Actual minus forecast, absolute and as a percent of forecast.

    The percent is 0 when the forecast is 0.
    """
    delta = actual - forecast
    delta_percent = delta / forecast * 100 if forecast != 0 else 0.0
    return delta, delta_percent


def calendar_position(start_date: date, end_date: date, as_of_date: date) -> tuple[int, int, int]:
    """
    Where ``as_of_date`` falls in an inclusive range.

    Returns
    -------
    tuple[int, int, int]
        (total_days, elapsed_days, days_remaining). The as-of day itself
        counts as elapsed; elapsed days are clipped to [0, total_days].
    """
    total_days = (end_date - start_date).days + 1
    elapsed = min(max((as_of_date - start_date).days + 1, 0), total_days)
    return total_days, elapsed, total_days - elapsed


@dataclass(frozen=True)
class PacingAssessment:
    """Delta and status of actual vs forecast revenue to date."""
    delta: float
    delta_percent: float
    status: PacingStatus


class PacingClassifier:
    """
    Classify pacing as ahead, behind or on track.

    Parameters
    ----------
    on_track_tolerance_pct : float
        Delta percent (absolute) at or below which pacing is on track.
        The default of 0 makes exact equality the only on-track case.
    """

    def __init__(self, on_track_tolerance_pct: float = 0.0):
        if on_track_tolerance_pct < 0:
            raise ValueError("on_track_tolerance_pct must be >= 0")
        self.on_track_tolerance_pct = on_track_tolerance_pct

    def classify(self, actual_revenue_to_date: float, forecast_revenue_to_date: float) -> PacingAssessment:
        delta, delta_percent = compute_delta(actual_revenue_to_date, forecast_revenue_to_date)

        if delta == 0:
            status = PacingStatus.ON_TRACK
        elif forecast_revenue_to_date != 0 and abs(delta_percent) <= self.on_track_tolerance_pct:
            status = PacingStatus.ON_TRACK
        elif delta > 0:
            status = PacingStatus.AHEAD
        else:
            status = PacingStatus.BEHIND

        return PacingAssessment(delta=delta, delta_percent=delta_percent, status=status)


@dataclass(frozen=True)
class CatchUpPlan:
    """Required pace for the rest of the range."""
    remaining_revenue_needed: float
    remaining_ad_spend_needed: float
    days_remaining: int
    catch_up_daily_revenue: float
    catch_up_daily_ad_spend: float


class CatchUpReplanner:
    """
    Recompute the daily revenue/ad spend pace needed to hit the target.

    The plan is advisory: the baseline curve is never changed. Callers
    opt in to a projected curve through ``project``.
    """

    @staticmethod
    def plan(
        revenue_target: float,
        actual_revenue_to_date: float,
        total_days: int,
        elapsed_days: int,
        roas: float,
    ) -> CatchUpPlan:
        """
        Compute the catch-up plan.

        With no days left, the whole remaining amount is reported as the
        daily pace rather than divided.

        Examples
        --------
        >>> p = CatchUpReplanner.plan(10000, 3000, 100, 50, 2.5)
        >>> p.catch_up_daily_revenue, p.catch_up_daily_ad_spend
        (140.0, 56.0)
        """
        remaining = max(0.0, revenue_target - actual_revenue_to_date)
        days_remaining = total_days - elapsed_days
        daily_revenue = remaining / max(1, days_remaining)

        return CatchUpPlan(
            remaining_revenue_needed=remaining,
            remaining_ad_spend_needed=remaining / roas,
            days_remaining=days_remaining,
            catch_up_daily_revenue=daily_revenue,
            catch_up_daily_ad_spend=daily_revenue / roas,
        )

    @staticmethod
    def project(
        points: Sequence[ForecastDataPoint],
        plan: CatchUpPlan,
        as_of_date: date,
    ) -> list[ForecastDataPoint]:
        """
        Replace the forecast after ``as_of_date`` with the catch-up pace.

        Cumulative forecast for projected days continues from the
        cumulative actual revenue at ``as_of_date``, so it ends at the
        original target.
        """
        projected = []
        running = None
        for point in points:
            if point.date <= as_of_date:
                projected.append(point)
                continue
            if running is None:
                running = projected[-1].cumulative_actual_revenue if projected else 0.0
            running += plan.catch_up_daily_revenue
            projected.append(replace(
                point,
                forecast_revenue=plan.catch_up_daily_revenue,
                forecast_ad_spend=plan.catch_up_daily_ad_spend,
                cumulative_forecast_revenue=running,
            ))

        logger.debug(
            f"Projected catch-up pace {plan.catch_up_daily_revenue:,.2f}/day "
            f"over {sum(1 for p in points if p.date > as_of_date)} days"
        )
        return projected
