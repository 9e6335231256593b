"""
Baseline forecast curve.

Expands monthly revenue targets into a per-day forecast across the full
scenario range: each month's target is spread evenly over its in-range
days, and forecast ad spend follows from the target ROAS.
"""

import logging
import math
from datetime import date
from typing import Optional, Sequence

import numpy as np

from revenue_pacing.config.schema import EngineSettings, MonthlyTarget
from revenue_pacing.forecasting.errors import InconsistentMonthlyTargetsError, InvalidRoasError
from revenue_pacing.forecasting.results import DailyForecast
from revenue_pacing.forecasting.targets import (
    from_minor_units,
    iter_days,
    month_key,
    months_in_range,
    split_minor_units,
    to_minor_units,
)

logger = logging.getLogger(__name__)


def validate_roas(roas: float) -> None:
    """Raise InvalidRoasError unless ROAS is strictly positive and finite."""
    if not (roas > 0 and math.isfinite(roas)):
        raise InvalidRoasError("ROAS must be a positive finite number", str(roas))


class BaselineCurveBuilder:
    """
    Build the daily baseline forecast from monthly targets.

    Daily revenue is rounded to ``curve_precision`` decimals and the
    rounding residual of each month lands on that month's last in-range
    day, so every month sums exactly to its target. A monthly target
    finer than the minor unit (e.g. 500.004 at cent precision) is
    first rounded half-up to it, and that month sums to the rounded
    value. Cumulative forecast is a running total over the whole range.
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or EngineSettings()

    @property
    def minor_precision(self) -> int:
        return max(self.settings.target_precision, self.settings.curve_precision)

    def daily_revenue_minor(
        self,
        monthly_targets: Sequence[MonthlyTarget],
        start_date: date,
        end_date: date,
    ) -> np.ndarray:
        """
        Daily forecast revenue in minor units, one entry per day in range.

        Raises
        ------
        InconsistentMonthlyTargetsError
            If a month of the range has no target.
        """
        precision = self.minor_precision
        step = 10 ** (precision - self.settings.curve_precision)
        targets_by_month = {t.month: t.target for t in monthly_targets}

        daily = []
        for month in months_in_range(start_date, end_date):
            if month.month not in targets_by_month:
                raise InconsistentMonthlyTargetsError(
                    "No target for a month in the date range", month.month
                )
            month_minor = to_minor_units(targets_by_month[month.month], precision)
            daily.extend(
                split_minor_units(month_minor, [1] * month.days_in_range, step=step)
            )

        return np.array(daily, dtype=np.int64)

    def build(
        self,
        monthly_targets: Sequence[MonthlyTarget],
        start_date: date,
        end_date: date,
        roas: float,
    ) -> list[DailyForecast]:
        """
        Build the per-day baseline curve.

        Parameters
        ----------
        monthly_targets : Sequence[MonthlyTarget]
            Targets for every month intersecting the range.
        start_date, end_date : date
            Inclusive scenario range.
        roas : float
            Target ROAS; daily forecast ad spend is revenue / roas.

        Returns
        -------
        list[DailyForecast]
            One entry per calendar day in range.
        """
        validate_roas(roas)

        precision = self.minor_precision
        daily_minor = self.daily_revenue_minor(monthly_targets, start_date, end_date)
        cumulative_minor = np.cumsum(daily_minor)

        curve = []
        for day, revenue_minor, cumulative in zip(
            iter_days(start_date, end_date), daily_minor, cumulative_minor
        ):
            revenue = from_minor_units(int(revenue_minor), precision)
            curve.append(DailyForecast(
                date=day,
                forecast_revenue=revenue,
                forecast_ad_spend=revenue / roas,
                cumulative_forecast_revenue=from_minor_units(int(cumulative), precision),
            ))

        logger.debug(
            f"Built baseline curve: {len(curve)} days, "
            f"{len({month_key(d.date) for d in curve})} months"
        )
        return curve
