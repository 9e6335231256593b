"""
Advertising ratio metrics (ROAS, CPA, CPM, CTR, CPC, MER, rolling aMER).
"""

from revenue_pacing.metrics.ratios import (
    RatioMetrics,
    RatioMetricsEngine,
    safe_ratio,
    percent_change,
    compute_ratio_metrics,
    compute_rolling_ratio,
    add_ratio_columns,
)

__all__ = [
    "RatioMetrics",
    "RatioMetricsEngine",
    "safe_ratio",
    "percent_change",
    "compute_ratio_metrics",
    "compute_rolling_ratio",
    "add_ratio_columns",
]
