"""Configuration management for the revenue pacing engine."""

from .schema import (
    ForecastScenario,
    MonthlyTarget,
    DailyActual,
    AdCounters,
    DailyCounters,
    EngineSettings,
    RevenueSource,
    PacingStatus,
)
from .loader import ConfigLoader

__all__ = [
    "ForecastScenario",
    "MonthlyTarget",
    "DailyActual",
    "AdCounters",
    "DailyCounters",
    "EngineSettings",
    "RevenueSource",
    "PacingStatus",
    "ConfigLoader",
]
