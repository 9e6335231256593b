"""
Revenue forecast and pacing engine.

Turns a forecast scenario plus actual daily revenue/ad spend into a
baseline trajectory, actual-vs-forecast pacing metrics, a catch-up plan
and period rollups. The engine is pure: it reads no clock, performs no
I/O and keeps no state between calls, so one instance can be shared
freely across threads or requests.
"""

import logging
from datetime import date
from typing import Optional, Sequence

from revenue_pacing.config.schema import (
    DailyActual,
    EngineSettings,
    ForecastScenario,
    PacingStatus,
)
from revenue_pacing.forecasting.actuals import ActualsJoiner
from revenue_pacing.forecasting.baseline import BaselineCurveBuilder, validate_roas
from revenue_pacing.forecasting.pacing import (
    CatchUpReplanner,
    PacingClassifier,
    calendar_position,
)
from revenue_pacing.forecasting.results import (
    ForecastDataPoint,
    ForecastMetrics,
    ForecastPreview,
    ForecastResult,
)
from revenue_pacing.forecasting.rollups import RollupAggregator
from revenue_pacing.forecasting.targets import (
    TargetDistributor,
    validate_date_range,
    validate_revenue_target,
)

logger = logging.getLogger(__name__)


class ForecastEngine:
    """
    Compute revenue pacing for a forecast scenario.

    Parameters
    ----------
    settings : EngineSettings, optional
        Rounding, tolerance and window settings. Defaults apply if omitted.

    Examples
    --------
    >>> engine = ForecastEngine()
    >>> result = engine.compute_forecast(scenario, actuals, as_of_date=date(2025, 2, 14))
    >>> print(f"{result.metrics.status.value}: {result.metrics.delta_percent:+.1f}%")
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or EngineSettings()
        self.distributor = TargetDistributor(self.settings)
        self.curve_builder = BaselineCurveBuilder(self.settings)
        self.joiner = ActualsJoiner()
        self.classifier = PacingClassifier(self.settings.on_track_tolerance_pct)
        self.replanner = CatchUpReplanner()
        self.rollups = RollupAggregator()

    def validate_scenario(self, scenario: ForecastScenario) -> None:
        """
        Check a scenario before any computation.

        Raises
        ------
        InvalidRangeError
            If the end date is before the start date.
        InvalidTargetError
            If the total or a monthly target is negative.
        InvalidRoasError
            If ROAS is not positive.
        InconsistentMonthlyTargetsError
            If monthly targets are enabled but don't match the total or
            the months of the range.
        """
        validate_date_range(scenario.start_date, scenario.end_date)
        validate_revenue_target(scenario.revenue_target)
        validate_roas(scenario.roas)
        if scenario.use_monthly_targets:
            self.distributor.validate_monthly_targets(
                scenario.revenue_target,
                scenario.start_date,
                scenario.end_date,
                scenario.monthly_targets,
            )

    def distribute_and_build_forecast(self, scenario: ForecastScenario) -> ForecastPreview:
        """
        Materialize monthly targets and the baseline daily curve.

        Used to preview a scenario while it is being created or edited.
        """
        self.validate_scenario(scenario)

        monthly_targets = self.distributor.resolve(scenario)
        curve = self.curve_builder.build(
            monthly_targets, scenario.start_date, scenario.end_date, scenario.roas
        )
        return ForecastPreview(
            monthly_targets=tuple(monthly_targets),
            daily_forecast_curve=tuple(curve),
        )

    def compute_forecast(
        self,
        scenario: ForecastScenario,
        actuals: Sequence[DailyActual],
        as_of_date: date,
    ) -> ForecastResult:
        """
        Compute the full pacing result for a scenario.

        Parameters
        ----------
        scenario : ForecastScenario
            Revenue goal and date range. Not modified.
        actuals : Sequence[DailyActual]
            Actual daily revenue/ad spend; may have gaps.
        as_of_date : date
            The date treated as "today". Actuals after it are ignored.

        Returns
        -------
        ForecastResult
            Metrics, daily series and weekly/monthly/quarterly rollups.

        Raises
        ------
        ForecastError
            Any validation failure, before any computation starts.
        """
        preview = self.distribute_and_build_forecast(scenario)
        curve = preview.daily_forecast_curve

        daily = self.joiner.join(curve, actuals, as_of_date, scenario.revenue_source)
        metrics = self._compute_metrics(scenario, daily, as_of_date)

        result = ForecastResult(
            scenario=scenario,
            as_of_date=as_of_date,
            metrics=metrics,
            daily_data=tuple(daily),
            weekly_data=tuple(self.rollups.weekly(daily, scenario.start_date)),
            monthly_data=tuple(self.rollups.monthly(daily)),
            quarterly_data=tuple(self.rollups.quarterly(daily)),
        )

        logger.info(
            f"Forecast '{scenario.id}' as of {as_of_date}: {metrics.status.value}, "
            f"actual {metrics.actual_revenue_to_date:,.2f} vs "
            f"forecast {metrics.forecast_revenue_to_date:,.2f} "
            f"({metrics.delta_percent:+.1f}%)"
        )
        return result

    def project_catch_up(self, result: ForecastResult) -> list[ForecastDataPoint]:
        """
        Daily series with the catch-up pace applied to future days.

        Applied only when the scenario enables auto catch-up and the
        result is behind; otherwise the baseline series is returned.
        """
        if not result.scenario.auto_catch_up_enabled or result.status != PacingStatus.BEHIND:
            return list(result.daily_data)

        m = result.metrics
        plan = self.replanner.plan(
            result.scenario.revenue_target,
            m.actual_revenue_to_date,
            m.total_days_in_range,
            m.elapsed_days,
            result.scenario.roas,
        )
        return self.replanner.project(result.daily_data, plan, result.as_of_date)

    def _compute_metrics(
        self,
        scenario: ForecastScenario,
        daily: Sequence[ForecastDataPoint],
        as_of_date: date,
    ) -> ForecastMetrics:
        total_days, elapsed_days, _ = calendar_position(
            scenario.start_date, scenario.end_date, as_of_date
        )

        to_date = daily[:elapsed_days]
        actual_revenue_to_date = sum((p.actual_revenue for p in to_date if p.actual_revenue is not None), 0.0)
        actual_ad_spend_to_date = sum((p.actual_ad_spend for p in to_date if p.actual_ad_spend is not None), 0.0)
        forecast_revenue_to_date = to_date[-1].cumulative_forecast_revenue if to_date else 0.0

        assessment = self.classifier.classify(actual_revenue_to_date, forecast_revenue_to_date)
        plan = self.replanner.plan(
            scenario.revenue_target,
            actual_revenue_to_date,
            total_days,
            elapsed_days,
            scenario.roas,
        )

        base_daily_revenue = scenario.revenue_target / total_days
        return ForecastMetrics(
            required_ad_spend_total=scenario.revenue_target / scenario.roas,
            base_required_daily_ad_spend=base_daily_revenue / scenario.roas,
            base_required_daily_revenue=base_daily_revenue,
            total_days_in_range=total_days,
            elapsed_days=elapsed_days,
            days_remaining=plan.days_remaining,
            actual_revenue_to_date=actual_revenue_to_date,
            actual_ad_spend_to_date=actual_ad_spend_to_date,
            forecast_revenue_to_date=forecast_revenue_to_date,
            delta=assessment.delta,
            delta_percent=assessment.delta_percent,
            status=assessment.status,
            remaining_revenue_needed=plan.remaining_revenue_needed,
            remaining_ad_spend_needed=plan.remaining_ad_spend_needed,
            catch_up_daily_revenue=plan.catch_up_daily_revenue,
            catch_up_daily_ad_spend=plan.catch_up_daily_ad_spend,
        )


_default_engine = ForecastEngine()


def distribute_and_build_forecast(scenario: ForecastScenario) -> ForecastPreview:
    """Module-level shortcut using default settings."""
    return _default_engine.distribute_and_build_forecast(scenario)


def compute_forecast(
    scenario: ForecastScenario,
    actuals: Sequence[DailyActual],
    as_of_date: date,
) -> ForecastResult:
    """Module-level shortcut using default settings."""
    return _default_engine.compute_forecast(scenario, actuals, as_of_date)
