"""
Advertising ratio metrics.

Converts raw counters (spend, impressions, clicks, purchases, revenue)
into ROAS, CPA, CPM, CTR, CPC and MER, plus a trailing rolling MER
("aMER").

Zero-denominator policy: any ratio whose denominator is 0 is None, never
0 or NaN, so chart and aggregation layers can skip the point instead of
plotting a false zero.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Optional, Sequence, Union

import numpy as np
import pandas as pd

from revenue_pacing.config.schema import AdCounters

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 7


def safe_ratio(numerator: float, denominator: float, scale: float = 1.0) -> Optional[float]:
    """``numerator / denominator * scale``, or None when the denominator is 0."""
    if denominator == 0:
        return None
    return numerator / denominator * scale


def percent_change(current: float, previous: float) -> Optional[float]:
    """Period-over-period change in percent; None when previous is 0."""
    return safe_ratio(current - previous, previous, 100.0)


@dataclass(frozen=True)
class RatioMetrics:
    """Ratios derived from one set of counters. None means undefined."""
    roas: Optional[float]
    cpa: Optional[float]
    cpm: Optional[float]
    ctr: Optional[float]
    cpc: Optional[float]
    mer: Optional[float]

    def to_dict(self) -> dict:
        return asdict(self)


def compute_ratio_metrics(counters: AdCounters) -> RatioMetrics:
    """
    Compute all ratios for a set of counters.

    Examples
    --------
    >>> compute_ratio_metrics(AdCounters(spend=50, revenue=100)).roas
    2.0
    >>> compute_ratio_metrics(AdCounters(spend=0, revenue=100)).roas is None
    True
    """
    roas = safe_ratio(counters.revenue, counters.spend)
    return RatioMetrics(
        roas=roas,
        cpa=safe_ratio(counters.spend, counters.purchases),
        cpm=safe_ratio(counters.spend, counters.impressions, 1000.0),
        ctr=safe_ratio(counters.clicks, counters.impressions, 100.0),
        cpc=safe_ratio(counters.spend, counters.clicks),
        # MER is ROAS measured at the account level
        mer=roas,
    )


def _series_columns(
    series: Union[pd.DataFrame, Sequence[AdCounters], Sequence[dict]],
) -> tuple[np.ndarray, np.ndarray]:
    """Extract revenue and spend arrays from a frame, counters or dicts."""
    if isinstance(series, pd.DataFrame):
        df = series
    else:
        df = pd.DataFrame([
            s.model_dump() if isinstance(s, AdCounters) else dict(s)
            for s in series
        ])

    if df.empty:
        return np.array([], dtype=float), np.array([], dtype=float)

    missing = [c for c in ("revenue", "spend") if c not in df.columns]
    if missing:
        raise ValueError(f"Series is missing required columns: {missing}")

    revenue = pd.to_numeric(df["revenue"], errors="coerce").fillna(0.0).to_numpy(dtype=float)
    spend = pd.to_numeric(df["spend"], errors="coerce").fillna(0.0).to_numpy(dtype=float)
    return revenue, spend


def compute_rolling_ratio(
    series: Union[pd.DataFrame, Sequence[AdCounters], Sequence[dict]],
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> list[Optional[float]]:
    """
    Trailing-window revenue / spend ratio for each day of a series.

    For day *i* revenue and spend are summed over
    ``[max(0, i - window_days + 1), i]``; the first days use the shorter
    window available rather than returning None.

    Parameters
    ----------
    series : DataFrame or sequence of counters / dicts
        Daily counters in date order, with ``revenue`` and ``spend``.
    window_days : int
        Trailing window length in days (>= 1).

    Returns
    -------
    list[Optional[float]]
        One value per day; None where the windowed spend is 0.

    Raises
    ------
    ValueError
        If window_days < 1 or required columns are missing.
    """
    if window_days < 1:
        raise ValueError(f"window_days must be >= 1, got {window_days}")

    revenue, spend = _series_columns(series)
    if len(revenue) == 0:
        return []

    window_revenue = pd.Series(revenue).rolling(window_days, min_periods=1).sum().to_numpy()
    window_spend = pd.Series(spend).rolling(window_days, min_periods=1).sum().to_numpy()

    return [
        safe_ratio(float(r), float(s))
        for r, s in zip(window_revenue, window_spend)
    ]


def add_ratio_columns(
    df: pd.DataFrame,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> pd.DataFrame:
    """
    Add per-day ratio columns and a rolling ``amer`` column to a counters frame.

    Parameters
    ----------
    df : pd.DataFrame
        Daily rows in date order with ``spend``, ``impressions``,
        ``clicks``, ``purchases`` and ``revenue`` columns. Missing
        counter columns are treated as 0.
    window_days : int
        Window for ``amer``.

    Returns
    -------
    pd.DataFrame
        Copy of ``df`` with ``roas``, ``cpa``, ``cpm``, ``ctr``, ``cpc``,
        ``mer`` and ``amer`` columns; undefined ratios are None.
    """
    out = df.copy()
    counter_fields = list(AdCounters.model_fields)
    for col in counter_fields:
        if col not in out.columns:
            out[col] = 0.0

    ratios = [
        compute_ratio_metrics(AdCounters(**{c: float(row[c]) for c in counter_fields}))
        for _, row in out[counter_fields].fillna(0.0).iterrows()
    ]
    for name in ("roas", "cpa", "cpm", "ctr", "cpc", "mer"):
        out[name] = pd.Series([getattr(r, name) for r in ratios], index=out.index, dtype=object)

    out["amer"] = pd.Series(
        compute_rolling_ratio(out, window_days), index=out.index, dtype=object
    )

    logger.debug(f"Derived ratio columns for {len(out)} rows (aMER window {window_days}d)")
    return out


class RatioMetricsEngine:
    """
    Ratio computations bound to a rolling window length.

    Parameters
    ----------
    window_days : int
        Trailing window for the rolling ratio (aMER).
    """

    def __init__(self, window_days: int = DEFAULT_WINDOW_DAYS):
        if window_days < 1:
            raise ValueError(f"window_days must be >= 1, got {window_days}")
        self.window_days = window_days

    def compute_ratio_metrics(self, counters: AdCounters) -> RatioMetrics:
        return compute_ratio_metrics(counters)

    def compute_rolling_ratio(self, series) -> list[Optional[float]]:
        return compute_rolling_ratio(series, self.window_days)

    def add_ratio_columns(self, df: pd.DataFrame) -> pd.DataFrame:
        return add_ratio_columns(df, self.window_days)
