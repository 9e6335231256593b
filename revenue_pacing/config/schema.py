"""
Pydantic schemas for forecast scenarios and engine settings.

These schemas define the inputs accepted by the pacing engine. Field
names are snake_case; the camelCase names used by the dashboard
(``startDate``, ``revenueTarget``, ...) are accepted as aliases so
payloads load unchanged.
"""

import re
from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


MONTH_KEY_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


# =============================================================================
# Enums
# =============================================================================

class RevenueSource(str, Enum):
    """Storefront whose revenue a scenario is paced against."""
    SHOPIFY = "shopify"
    ETSY = "etsy"
    COMBINED = "combined"


class PacingStatus(str, Enum):
    """Pacing classification of actual revenue against the baseline."""
    ON_TRACK = "on_track"
    AHEAD = "ahead"
    BEHIND = "behind"


# =============================================================================
# Scenario Inputs
# =============================================================================

class _CamelModel(BaseModel):
    """Accept both field names and dashboard aliases."""

    model_config = ConfigDict(populate_by_name=True)


class MonthlyTarget(_CamelModel):
    """Revenue target for a single calendar month."""
    month: str = Field(..., description="Calendar month key, YYYY-MM")
    target: float = Field(..., description="Revenue target for the month")

    @field_validator("month")
    @classmethod
    def validate_month_key(cls, v: str) -> str:
        match = MONTH_KEY_PATTERN.match(v)
        if not match or not 1 <= int(match.group(2)) <= 12:
            raise ValueError(f"month must be formatted YYYY-MM, got '{v}'")
        return v


class ForecastScenario(_CamelModel):
    """
    A revenue goal over an inclusive date range.

    Semantic checks (range order, non-negative target, positive ROAS,
    monthly targets consistent with the total) are performed by the
    engine so that they surface as the engine's own error types.
    """
    id: str = Field(..., description="Scenario identifier")
    name: str = Field("", description="Display name")
    start_date: date = Field(..., alias="startDate", description="First day of the range (inclusive)")
    end_date: date = Field(..., alias="endDate", description="Last day of the range (inclusive)")
    revenue_target: float = Field(..., alias="revenueTarget", description="Total revenue target")
    roas: float = Field(2.5, description="Target return on ad spend")
    auto_catch_up_enabled: bool = Field(
        False, alias="autoCatchUpEnabled",
        description="Apply the catch-up pace to future forecast days when behind",
    )
    revenue_source: RevenueSource = Field(
        RevenueSource.SHOPIFY, alias="revenueSource",
        description="Which storefront's actuals count toward the goal",
    )
    use_monthly_targets: bool = Field(
        False, alias="useMonthlyTargets",
        description="Use monthly_targets instead of an even split",
    )
    monthly_targets: list[MonthlyTarget] = Field(
        default_factory=list, alias="monthlyTargets",
        description="Per-month targets covering every month in the range",
    )
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    @property
    def total_days(self) -> int:
        """Number of calendar days in the range (may be <= 0 if inverted)."""
        return (self.end_date - self.start_date).days + 1


class DailyActual(_CamelModel):
    """Actual revenue and ad spend reported for one day."""
    date: date
    revenue: float = 0.0
    ad_spend: float = Field(0.0, alias="adSpend")
    source: Optional[RevenueSource] = Field(
        None, description="Storefront that reported the revenue (None = applies to all)"
    )

    @field_validator("source")
    @classmethod
    def validate_source(cls, v: Optional[RevenueSource]) -> Optional[RevenueSource]:
        if v == RevenueSource.COMBINED:
            # A single record always belongs to one storefront
            return None
        return v


# =============================================================================
# Ratio Inputs
# =============================================================================

class AdCounters(_CamelModel):
    """Raw advertising counters for one period or one entity."""
    spend: float = 0.0
    impressions: float = 0.0
    clicks: float = 0.0
    purchases: float = 0.0
    revenue: float = 0.0


class DailyCounters(AdCounters):
    """Ad counters tagged with the day they were recorded."""
    day: Optional[date] = Field(None, alias="date")


# =============================================================================
# Engine Settings
# =============================================================================

class EngineSettings(BaseModel):
    """Numeric policy knobs for the pacing engine."""
    target_precision: int = Field(
        0, ge=0, le=4,
        description="Decimals kept when splitting the total into monthly targets",
    )
    curve_precision: int = Field(
        2, ge=0, le=4,
        description="Decimals kept for daily forecast revenue",
    )
    monthly_target_tolerance: float = Field(
        0.01, ge=0,
        description="Allowed |sum(monthly targets) - revenue target|",
    )
    on_track_tolerance_pct: float = Field(
        0.0, ge=0,
        description="|delta %| at or below which pacing counts as on track",
    )
    rolling_window_days: int = Field(7, ge=1, description="Trailing window for aMER")
