"""
Global pytest fixtures for revenue pacing tests.
"""
import pytest
from datetime import date, timedelta

from revenue_pacing.config.schema import (
    ForecastScenario, MonthlyTarget, DailyActual, EngineSettings, RevenueSource
)
from revenue_pacing.forecasting import ForecastEngine


# =============================================================================
# Sample Scenarios
# =============================================================================

@pytest.fixture
def q1_scenario() -> ForecastScenario:
    """90-day Q1 2025 scenario whose even split is exactly 1,000/day."""
    return ForecastScenario(
        id="q1-2025",
        name="Q1 2025",
        start_date=date(2025, 1, 1),
        end_date=date(2025, 3, 31),
        revenue_target=90000.0,
        roas=2.5,
        revenue_source=RevenueSource.SHOPIFY,
    )


@pytest.fixture
def monthly_scenario() -> ForecastScenario:
    """Q1 2025 scenario with an uneven explicit monthly split."""
    return ForecastScenario(
        id="q1-monthly",
        start_date=date(2025, 1, 1),
        end_date=date(2025, 3, 31),
        revenue_target=90000.0,
        roas=2.0,
        use_monthly_targets=True,
        monthly_targets=[
            MonthlyTarget(month="2025-01", target=45000.0),
            MonthlyTarget(month="2025-02", target=28000.0),
            MonthlyTarget(month="2025-03", target=17000.0),
        ],
    )


@pytest.fixture
def hundred_day_scenario() -> ForecastScenario:
    """Jan 1 - Apr 10 2025 (100 days), 10,000 target at 2.5 ROAS."""
    return ForecastScenario(
        id="hundred-days",
        start_date=date(2025, 1, 1),
        end_date=date(2025, 4, 10),
        revenue_target=10000.0,
        roas=2.5,
        auto_catch_up_enabled=True,
        revenue_source=RevenueSource.COMBINED,
    )


# =============================================================================
# Sample Actuals
# =============================================================================

@pytest.fixture
def make_actuals():
    """Factory for consecutive daily actuals."""
    def _create(
        start: date,
        revenues: list,
        ad_spend: float = 300.0,
        source: RevenueSource = None,
    ) -> list[DailyActual]:
        return [
            DailyActual(
                date=start + timedelta(days=i),
                revenue=revenue,
                ad_spend=ad_spend,
                source=source,
            )
            for i, revenue in enumerate(revenues)
            if revenue is not None
        ]
    return _create


@pytest.fixture
def q1_actuals(make_actuals) -> list[DailyActual]:
    """900/day for Jan 1-10 2025 with no record for Jan 5."""
    return make_actuals(date(2025, 1, 1), [900.0] * 4 + [None] + [900.0] * 5)


# =============================================================================
# Engine
# =============================================================================

@pytest.fixture
def settings() -> EngineSettings:
    return EngineSettings()


@pytest.fixture
def engine(settings) -> ForecastEngine:
    return ForecastEngine(settings)
