"""
Forecasting module for revenue goal pacing.

Provides the pacing engine and its building blocks: monthly target
distribution, the baseline daily curve, the actuals join, pacing
classification, catch-up planning and period rollups.
"""

from revenue_pacing.forecasting.forecast_engine import (
    ForecastEngine,
    compute_forecast,
    distribute_and_build_forecast,
)
from revenue_pacing.forecasting.results import (
    ForecastResult,
    ForecastPreview,
    ForecastMetrics,
    ForecastDataPoint,
    DailyForecast,
    WeeklyAggregate,
    MonthlyAggregate,
    QuarterlyAggregate,
    MonthInfo,
)
from revenue_pacing.forecasting.errors import (
    ForecastError,
    InvalidRangeError,
    InvalidTargetError,
    InvalidRoasError,
    InconsistentMonthlyTargetsError,
)
from revenue_pacing.forecasting.targets import (
    TargetDistributor,
    months_in_range,
    running_year_range,
)
from revenue_pacing.forecasting.baseline import BaselineCurveBuilder
from revenue_pacing.forecasting.actuals import ActualsJoiner, actuals_from_dataframe
from revenue_pacing.forecasting.pacing import (
    PacingClassifier,
    CatchUpReplanner,
    CatchUpPlan,
)
from revenue_pacing.forecasting.rollups import RollupAggregator

__all__ = [
    "ForecastEngine",
    "compute_forecast",
    "distribute_and_build_forecast",
    # Results
    "ForecastResult",
    "ForecastPreview",
    "ForecastMetrics",
    "ForecastDataPoint",
    "DailyForecast",
    "WeeklyAggregate",
    "MonthlyAggregate",
    "QuarterlyAggregate",
    "MonthInfo",
    # Errors
    "ForecastError",
    "InvalidRangeError",
    "InvalidTargetError",
    "InvalidRoasError",
    "InconsistentMonthlyTargetsError",
    # Components
    "TargetDistributor",
    "months_in_range",
    "running_year_range",
    "BaselineCurveBuilder",
    "ActualsJoiner",
    "actuals_from_dataframe",
    "PacingClassifier",
    "CatchUpReplanner",
    "CatchUpPlan",
    "RollupAggregator",
]
