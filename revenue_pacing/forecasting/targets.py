"""
Monthly target distribution.

Splits a scenario's total revenue target across the calendar months its
date range touches, weighted by the number of in-range days, or checks
an explicit per-month split against the total.

All splitting is done in integer minor units so that the monthly
targets always sum exactly to the total.
"""

import calendar
import logging
import math
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Sequence

from revenue_pacing.config.schema import EngineSettings, MonthlyTarget
from revenue_pacing.forecasting.errors import (
    InconsistentMonthlyTargetsError,
    InvalidRangeError,
    InvalidTargetError,
)
from revenue_pacing.forecasting.results import MonthInfo

logger = logging.getLogger(__name__)


# =============================================================================
# Calendar helpers
# =============================================================================

def month_key(day: date) -> str:
    """YYYY-MM key of the month containing ``day``."""
    return f"{day.year:04d}-{day.month:02d}"


def iter_days(start_date: date, end_date: date):
    """Yield every calendar day from start_date to end_date inclusive."""
    for offset in range((end_date - start_date).days + 1):
        yield start_date + timedelta(days=offset)


def months_in_range(start_date: date, end_date: date) -> list[MonthInfo]:
    """
    List the calendar months intersecting an inclusive date range.

    Parameters
    ----------
    start_date : date
        First day of the range.
    end_date : date
        Last day of the range.

    Returns
    -------
    list[MonthInfo]
        One entry per month in calendar order, with the month's calendar
        length and the number of its days inside the range.

    Raises
    ------
    InvalidRangeError
        If end_date is before start_date.
    """
    validate_date_range(start_date, end_date)

    months = []
    year, month = start_date.year, start_date.month
    while (year, month) <= (end_date.year, end_date.month):
        days_in_month = calendar.monthrange(year, month)[1]
        first = max(date(year, month, 1), start_date)
        last = min(date(year, month, days_in_month), end_date)
        months.append(MonthInfo(
            month=f"{year:04d}-{month:02d}",
            month_name=f"{calendar.month_name[month]} {year}",
            days_in_month=days_in_month,
            days_in_range=(last - first).days + 1,
        ))
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)

    return months


def running_year_range(as_of_date: date) -> tuple[date, date]:
    """
    Twelve-month window starting on the first of ``as_of_date``'s month.

    Returns
    -------
    tuple[date, date]
        (start, end) with end the day before the same date a year later.
    """
    start = as_of_date.replace(day=1)
    end = start.replace(year=start.year + 1) - timedelta(days=1)
    return start, end


# =============================================================================
# Minor-unit arithmetic
# =============================================================================

def to_minor_units(value: float, precision: int) -> int:
    """Round ``value`` half-up to ``precision`` decimals, as an integer count."""
    scaled = Decimal(str(value)).scaleb(precision)
    return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def from_minor_units(value: int, precision: int) -> float:
    return value / 10 ** precision


def split_minor_units(total: int, weights: Sequence[int], step: int = 1) -> list[int]:
    """
    Split an integer total proportionally to integer weights.

    Each share is rounded half-up to a multiple of ``step``; the rounding
    residual is assigned to the last share. If that would make the last
    share negative, the remainder is taken from the shares before it.

    Parameters
    ----------
    total : int
        Non-negative amount to split, in minor units.
    weights : Sequence[int]
        Positive weights (e.g. day counts).
    step : int
        Rounding granularity in minor units.

    Returns
    -------
    list[int]
        Shares summing exactly to ``total``.
    """
    weight_sum = sum(weights)
    if not weights or weight_sum <= 0:
        return []

    # floor(total * w / weight_sum / step + 1/2) * step, in integers
    shares = [
        (2 * total * w + weight_sum * step) // (2 * weight_sum * step) * step
        for w in weights
    ]

    adjustment = total - sum(shares)
    for i in reversed(range(len(shares))):
        if adjustment == 0:
            break
        adjusted = max(0, shares[i] + adjustment)
        adjustment -= adjusted - shares[i]
        shares[i] = adjusted

    return shares


# =============================================================================
# Validation
# =============================================================================

def validate_date_range(start_date: date, end_date: date) -> None:
    """Raise InvalidRangeError if the range is inverted."""
    if end_date < start_date:
        raise InvalidRangeError(
            "End date is before start date",
            f"{start_date.isoformat()} > {end_date.isoformat()}",
        )


def validate_revenue_target(revenue_target: float) -> None:
    """Raise InvalidTargetError for a negative or non-finite target."""
    if not math.isfinite(revenue_target):
        raise InvalidTargetError("Revenue target must be a finite number", str(revenue_target))
    if revenue_target < 0:
        raise InvalidTargetError("Revenue target must not be negative", str(revenue_target))


# =============================================================================
# Distributor
# =============================================================================

class TargetDistributor:
    """
    Produce per-month revenue targets for a date range.

    Parameters
    ----------
    settings : EngineSettings, optional
        Rounding precision and monthly target tolerance.

    Examples
    --------
    >>> distributor = TargetDistributor()
    >>> targets = distributor.distribute_evenly(
    ...     1_000_000, date(2025, 1, 1), date(2025, 2, 28)
    ... )
    >>> [t.target for t in targets]
    [525424.0, 474576.0]
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or EngineSettings()

    @property
    def minor_precision(self) -> int:
        """Decimals of the shared minor unit used for all splitting."""
        return max(self.settings.target_precision, self.settings.curve_precision)

    def distribute_evenly(
        self,
        revenue_target: float,
        start_date: date,
        end_date: date,
    ) -> list[MonthlyTarget]:
        """
        Split the total across months by their share of in-range days.

        Each month's target is rounded to ``target_precision`` decimals and
        the rounding residual goes to the last month, so the targets sum
        exactly to ``revenue_target``.

        Raises
        ------
        InvalidRangeError
            If end_date is before start_date.
        InvalidTargetError
            If revenue_target is negative.
        """
        validate_date_range(start_date, end_date)
        validate_revenue_target(revenue_target)

        months = months_in_range(start_date, end_date)
        precision = self.minor_precision
        step = 10 ** (precision - self.settings.target_precision)

        shares = split_minor_units(
            to_minor_units(revenue_target, precision),
            [m.days_in_range for m in months],
            step=step,
        )

        targets = [
            MonthlyTarget(month=m.month, target=from_minor_units(share, precision))
            for m, share in zip(months, shares)
        ]
        logger.debug(
            f"Distributed {revenue_target:,.2f} across {len(targets)} months "
            f"({start_date} to {end_date})"
        )
        return targets

    def validate_monthly_targets(
        self,
        revenue_target: float,
        start_date: date,
        end_date: date,
        monthly_targets: Sequence[MonthlyTarget],
    ) -> list[MonthlyTarget]:
        """
        Check an explicit monthly split and return it in calendar order.

        Raises
        ------
        InvalidTargetError
            If any monthly target is negative.
        InconsistentMonthlyTargetsError
            If a month is repeated, the months don't match the months of
            the range, or the targets don't sum to revenue_target within
            ``monthly_target_tolerance``.
        """
        validate_date_range(start_date, end_date)
        validate_revenue_target(revenue_target)

        non_finite = [t.month for t in monthly_targets if not math.isfinite(t.target)]
        if non_finite:
            raise InvalidTargetError("Monthly targets must be finite numbers", ", ".join(non_finite))

        negative = [t.month for t in monthly_targets if t.target < 0]
        if negative:
            raise InvalidTargetError("Monthly targets must not be negative", ", ".join(negative))

        keys = [t.month for t in monthly_targets]
        duplicates = sorted({k for k in keys if keys.count(k) > 1})
        if duplicates:
            raise InconsistentMonthlyTargetsError(
                "Monthly targets repeat a month", ", ".join(duplicates)
            )

        expected = {m.month for m in months_in_range(start_date, end_date)}
        missing = sorted(expected - set(keys))
        extra = sorted(set(keys) - expected)
        if missing or extra:
            raise InconsistentMonthlyTargetsError(
                "Monthly targets don't cover the months of the date range",
                f"missing: {missing}, extra: {extra}",
            )

        total = sum(t.target for t in monthly_targets)
        if abs(total - revenue_target) > self.settings.monthly_target_tolerance:
            raise InconsistentMonthlyTargetsError(
                "Monthly targets don't sum to the revenue target",
                f"expected {revenue_target:,.2f}, got {total:,.2f}",
                expected=revenue_target,
                got=total,
            )

        return sorted(monthly_targets, key=lambda t: t.month)

    def resolve(self, scenario) -> list[MonthlyTarget]:
        """Monthly targets for a scenario: explicit if enabled, else an even split."""
        if scenario.use_monthly_targets:
            return self.validate_monthly_targets(
                scenario.revenue_target,
                scenario.start_date,
                scenario.end_date,
                scenario.monthly_targets,
            )
        return self.distribute_evenly(
            scenario.revenue_target, scenario.start_date, scenario.end_date
        )
