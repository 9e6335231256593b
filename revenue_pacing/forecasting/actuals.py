"""
Join actual daily revenue/spend onto the baseline forecast curve.
"""

import logging
from datetime import date
from typing import Sequence

import pandas as pd

from revenue_pacing.config.schema import DailyActual, RevenueSource
from revenue_pacing.forecasting.results import DailyForecast, ForecastDataPoint

logger = logging.getLogger(__name__)

ACTUAL_COLUMNS = ["revenue", "ad_spend"]


def actuals_from_dataframe(
    df: pd.DataFrame,
    date_column: str = "date",
) -> list[DailyActual]:
    """
    Convert a daily actuals table into DailyActual records.

    Parameters
    ----------
    df : pd.DataFrame
        Table with a date column, ``revenue`` and ``ad_spend`` (or
        ``adSpend``) columns and an optional ``source`` column.
    date_column : str
        Name of the date column.

    Returns
    -------
    list[DailyActual]
        One record per row; blank numeric cells count as 0.

    Raises
    ------
    ValueError
        If the date or revenue column is missing.
    """
    df = df.rename(columns={"adSpend": "ad_spend"})

    if date_column not in df.columns:
        raise ValueError(
            f"Date column '{date_column}' not found. Available: {list(df.columns)}"
        )
    if "revenue" not in df.columns:
        raise ValueError(f"Column 'revenue' not found. Available: {list(df.columns)}")

    df = df.copy()
    df[date_column] = pd.to_datetime(df[date_column]).dt.date
    if "ad_spend" not in df.columns:
        df["ad_spend"] = 0.0
    df[ACTUAL_COLUMNS] = df[ACTUAL_COLUMNS].apply(pd.to_numeric, errors="coerce").fillna(0.0)

    records = []
    for row in df.to_dict(orient="records"):
        source = row.get("source")
        records.append(DailyActual(
            date=row[date_column],
            revenue=float(row["revenue"]),
            ad_spend=float(row["ad_spend"]),
            source=source if isinstance(source, str) and source else None,
        ))
    return records


class ActualsJoiner:
    """
    Merge sparse actuals with the baseline curve by date.

    For days up to and including the as-of date, a supplied record sets
    the day's actual fields and feeds the cumulative actual total; a
    missing record leaves the fields None and adds 0. Days after the
    as-of date never carry actuals.
    """

    @staticmethod
    def filter_by_source(
        actuals: Sequence[DailyActual],
        revenue_source: RevenueSource,
    ) -> list[DailyActual]:
        """Keep records counting toward ``revenue_source``. Untagged records always count."""
        if revenue_source == RevenueSource.COMBINED:
            return list(actuals)
        return [a for a in actuals if a.source is None or a.source == revenue_source]

    @staticmethod
    def totals_by_date(actuals: Sequence[DailyActual]) -> dict[date, tuple[float, float]]:
        """Sum revenue and ad spend per date."""
        if not actuals:
            return {}

        df = pd.DataFrame(
            [{"date": a.date, "revenue": a.revenue, "ad_spend": a.ad_spend} for a in actuals]
        )
        totals = df.groupby("date")[ACTUAL_COLUMNS].sum()
        return {
            day: (float(row["revenue"]), float(row["ad_spend"]))
            for day, row in totals.iterrows()
        }

    def join(
        self,
        curve: Sequence[DailyForecast],
        actuals: Sequence[DailyActual],
        as_of_date: date,
        revenue_source: RevenueSource = RevenueSource.COMBINED,
    ) -> list[ForecastDataPoint]:
        """
        Produce one ForecastDataPoint per day of the curve.

        Parameters
        ----------
        curve : Sequence[DailyForecast]
            Baseline forecast, one entry per day in range.
        actuals : Sequence[DailyActual]
            Sparse actual records; several records for one day are summed.
        as_of_date : date
            "Today". Later days are treated as not yet occurred.
        revenue_source : RevenueSource
            Storefront whose records count.

        Returns
        -------
        list[ForecastDataPoint]
        """
        selected = self.filter_by_source(actuals, revenue_source)
        if len(selected) < len(actuals):
            logger.debug(
                f"Ignored {len(actuals) - len(selected)} actual records "
                f"not from source '{revenue_source.value}'"
            )

        totals = self.totals_by_date(selected)
        if curve:
            first, last = curve[0].date, curve[-1].date
            outside = [d for d in totals if d < first or d > last]
            if outside:
                logger.warning(
                    f"Ignored actuals for {len(outside)} dates outside {first} to {last}"
                )

        points = []
        cumulative_actual = 0.0
        for day in curve:
            actual_revenue = actual_ad_spend = None
            if day.date <= as_of_date and day.date in totals:
                actual_revenue, actual_ad_spend = totals[day.date]
                cumulative_actual += actual_revenue

            points.append(ForecastDataPoint(
                date=day.date,
                actual_revenue=actual_revenue,
                actual_ad_spend=actual_ad_spend,
                forecast_revenue=day.forecast_revenue,
                forecast_ad_spend=day.forecast_ad_spend,
                cumulative_actual_revenue=cumulative_actual,
                cumulative_forecast_revenue=day.cumulative_forecast_revenue,
            ))

        return points
