"""
Weekly, monthly and quarterly rollups of the daily pacing series.
"""

import calendar
import logging
from datetime import date
from typing import Sequence

import pandas as pd

from revenue_pacing.forecasting.pacing import compute_delta
from revenue_pacing.forecasting.results import (
    ForecastDataPoint,
    MonthlyAggregate,
    QuarterlyAggregate,
    WeeklyAggregate,
)

logger = logging.getLogger(__name__)


class RollupAggregator:
    """
    Fold daily actual/forecast revenue into coarser buckets.

    Weeks are fixed 7-day windows counted from the scenario start date
    (not ISO weeks); the final week may be shorter. Months and quarters
    are calendar periods. Missing actuals count as 0.

    Examples
    --------
    >>> rollups = RollupAggregator()
    >>> weeks = rollups.weekly(result.daily_data, scenario.start_date)
    >>> weeks[0].week_number
    1
    """

    @staticmethod
    def to_frame(points: Sequence[ForecastDataPoint]) -> pd.DataFrame:
        """Daily series as a frame with ``date``, ``actual`` and ``forecast`` columns."""
        df = pd.DataFrame({
            "date": pd.to_datetime([p.date for p in points]),
            "actual": pd.Series([p.actual_revenue for p in points], dtype="float64"),
            "forecast": pd.Series([p.forecast_revenue for p in points], dtype="float64"),
        })
        return df.fillna({"actual": 0.0, "forecast": 0.0})

    def weekly(self, points: Sequence[ForecastDataPoint], start_date: date) -> list[WeeklyAggregate]:
        if not points:
            return []

        df = self.to_frame(points)
        df["week"] = (df["date"] - pd.Timestamp(start_date)).dt.days // 7 + 1
        grouped = df.groupby("week").agg(
            week_start=("date", "min"),
            week_end=("date", "max"),
            actual=("actual", "sum"),
            forecast=("forecast", "sum"),
        )

        weeks = []
        for week_number, row in grouped.iterrows():
            delta, delta_percent = compute_delta(row["actual"], row["forecast"])
            weeks.append(WeeklyAggregate(
                week_number=int(week_number),
                week_start=row["week_start"].date(),
                week_end=row["week_end"].date(),
                actual_revenue=float(row["actual"]),
                forecast_revenue=float(row["forecast"]),
                delta=float(delta),
                delta_percent=float(delta_percent),
            ))
        return weeks

    def monthly(self, points: Sequence[ForecastDataPoint]) -> list[MonthlyAggregate]:
        if not points:
            return []

        df = self.to_frame(points)
        grouped = df.groupby(df["date"].dt.to_period("M"))[["actual", "forecast"]].sum()

        months = []
        for period, row in grouped.iterrows():
            delta, delta_percent = compute_delta(row["actual"], row["forecast"])
            months.append(MonthlyAggregate(
                month=f"{period.year:04d}-{period.month:02d}",
                month_name=f"{calendar.month_name[period.month]} {period.year}",
                actual_revenue=float(row["actual"]),
                forecast_revenue=float(row["forecast"]),
                delta=float(delta),
                delta_percent=float(delta_percent),
            ))
        return months

    def quarterly(self, points: Sequence[ForecastDataPoint]) -> list[QuarterlyAggregate]:
        if not points:
            return []

        df = self.to_frame(points)
        grouped = df.groupby(df["date"].dt.to_period("Q"))[["actual", "forecast"]].sum()

        quarters = []
        for period, row in grouped.iterrows():
            delta, delta_percent = compute_delta(row["actual"], row["forecast"])
            quarters.append(QuarterlyAggregate(
                quarter=f"Q{period.quarter} {period.year}",
                year=int(period.year),
                actual_revenue=float(row["actual"]),
                forecast_revenue=float(row["forecast"]),
                delta=float(delta),
                delta_percent=float(delta_percent),
            ))
        return quarters
