"""
Result dataclasses for revenue forecasting and pacing.

This module defines the immutable value objects returned by the engine:
daily actual-vs-forecast points, scalar pacing metrics, period rollups
and the combined forecast result.
"""

from dataclasses import dataclass, asdict, replace
from datetime import date
from typing import Any, Optional

import pandas as pd

from revenue_pacing.config.schema import ForecastScenario, MonthlyTarget, PacingStatus
from revenue_pacing.metrics.ratios import safe_ratio


def _jsonable(value: Any) -> Any:
    """Convert dates and enums inside an ``asdict`` payload to JSON types."""
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, PacingStatus):
        return value.value
    return value


@dataclass(frozen=True)
class MonthInfo:
    """A calendar month intersecting a date range."""
    month: str  # YYYY-MM
    month_name: str  # e.g. "January 2025"
    days_in_month: int  # calendar length
    days_in_range: int  # days of this month inside the range

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class DailyForecast:
    """Baseline forecast for a single day, before actuals are joined."""
    date: date
    forecast_revenue: float
    forecast_ad_spend: float
    cumulative_forecast_revenue: float


@dataclass(frozen=True)
class ForecastDataPoint:
    """
    Actual vs forecast for one day.

    ``actual_revenue`` / ``actual_ad_spend`` are None when no record was
    supplied for the day or the day is after the as-of date. Cumulative
    fields always count missing records as zero.
    """
    date: date
    actual_revenue: Optional[float]
    actual_ad_spend: Optional[float]
    forecast_revenue: float
    forecast_ad_spend: float
    cumulative_actual_revenue: float
    cumulative_forecast_revenue: float

    def to_dict(self) -> dict:
        return _jsonable(asdict(self))


@dataclass(frozen=True)
class ForecastMetrics:
    """Scalar pacing summary as of a given date."""

    # Plan
    required_ad_spend_total: float
    base_required_daily_ad_spend: float
    base_required_daily_revenue: float

    # Calendar position
    total_days_in_range: int
    elapsed_days: int
    days_remaining: int

    # To-date performance
    actual_revenue_to_date: float
    actual_ad_spend_to_date: float
    forecast_revenue_to_date: float
    delta: float
    delta_percent: float
    status: PacingStatus

    # Catch-up plan
    remaining_revenue_needed: float
    remaining_ad_spend_needed: float
    catch_up_daily_revenue: float
    catch_up_daily_ad_spend: float

    @property
    def actual_roas_to_date(self) -> Optional[float]:
        """Realized ROAS so far (None before any spend)."""
        return safe_ratio(self.actual_revenue_to_date, self.actual_ad_spend_to_date)

    def to_dict(self) -> dict:
        payload = _jsonable(asdict(self))
        payload["actual_roas_to_date"] = self.actual_roas_to_date
        return payload


@dataclass(frozen=True)
class WeeklyAggregate:
    """Fixed 7-day bucket anchored to the scenario start date."""
    week_number: int
    week_start: date
    week_end: date
    actual_revenue: float
    forecast_revenue: float
    delta: float
    delta_percent: float

    def to_dict(self) -> dict:
        return _jsonable(asdict(self))


@dataclass(frozen=True)
class MonthlyAggregate:
    """Calendar month bucket."""
    month: str  # YYYY-MM
    month_name: str
    actual_revenue: float
    forecast_revenue: float
    delta: float
    delta_percent: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class QuarterlyAggregate:
    """Calendar quarter bucket."""
    quarter: str  # e.g. "Q1 2025"
    year: int
    actual_revenue: float
    forecast_revenue: float
    delta: float
    delta_percent: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ForecastPreview:
    """Monthly targets and baseline curve materialized for a scenario."""
    monthly_targets: tuple[MonthlyTarget, ...]
    daily_forecast_curve: tuple[DailyForecast, ...]

    def to_dict(self) -> dict:
        return {
            "monthly_targets": [t.model_dump() for t in self.monthly_targets],
            "daily_forecast_curve": [
                _jsonable(asdict(d)) for d in self.daily_forecast_curve
            ],
        }


@dataclass(frozen=True)
class ForecastResult:
    """
    Complete result of a forecast computation.

    Fully derived from the scenario, the actuals and the as-of date;
    never partially populated.
    """

    scenario: ForecastScenario
    as_of_date: date
    metrics: ForecastMetrics
    daily_data: tuple[ForecastDataPoint, ...]
    weekly_data: tuple[WeeklyAggregate, ...]
    monthly_data: tuple[MonthlyAggregate, ...]
    quarterly_data: tuple[QuarterlyAggregate, ...]

    @property
    def status(self) -> PacingStatus:
        return self.metrics.status

    def with_daily_data(self, daily_data: tuple[ForecastDataPoint, ...]) -> "ForecastResult":
        """Copy of this result with a different daily series."""
        return replace(self, daily_data=tuple(daily_data))

    def to_dataframe(self) -> pd.DataFrame:
        """
        Daily series as a DataFrame.

        Returns:
            DataFrame indexed by date with one column per data point field.
            Missing actuals are NaN.
        """
        df = pd.DataFrame([asdict(p) for p in self.daily_data])
        if df.empty:
            return df
        df["date"] = pd.to_datetime(df["date"])
        return df.set_index("date")

    def to_dict(self) -> dict:
        """JSON-serializable representation of the full result."""
        return {
            "scenario": self.scenario.model_dump(mode="json"),
            "as_of_date": self.as_of_date.isoformat(),
            "metrics": self.metrics.to_dict(),
            "daily_data": [p.to_dict() for p in self.daily_data],
            "weekly_data": [w.to_dict() for w in self.weekly_data],
            "monthly_data": [m.to_dict() for m in self.monthly_data],
            "quarterly_data": [q.to_dict() for q in self.quarterly_data],
        }

    def get_summary_dict(self) -> dict:
        """
        Get a compact JSON-serializable summary.

        Useful for logs and list views.
        """
        m = self.metrics
        return {
            "scenario_id": self.scenario.id,
            "as_of_date": self.as_of_date.isoformat(),
            "status": m.status.value,
            "revenue_target": self.scenario.revenue_target,
            "actual_revenue_to_date": m.actual_revenue_to_date,
            "actual_roas_to_date": m.actual_roas_to_date,
            "forecast_revenue_to_date": m.forecast_revenue_to_date,
            "delta": m.delta,
            "delta_percent": m.delta_percent,
            "days_remaining": m.days_remaining,
            "catch_up_daily_revenue": m.catch_up_daily_revenue,
            "catch_up_daily_ad_spend": m.catch_up_daily_ad_spend,
        }
