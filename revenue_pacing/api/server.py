"""
FastAPI server for the revenue pacing engine.

Provides stateless endpoints for:
- Listing the months of a date range and the running-year preset
- Previewing monthly targets and the baseline curve for a scenario
- Computing a full pacing result from a scenario and actuals
- Converting ad counters into ratio metrics

Scenarios and actuals are supplied with each request; nothing is stored.
"""

import logging
from datetime import date, datetime
from typing import Optional, List

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from revenue_pacing.config.schema import (
    AdCounters,
    DailyActual,
    DailyCounters,
    EngineSettings,
    ForecastScenario,
)
from revenue_pacing.forecasting import (
    ForecastEngine,
    ForecastError,
    months_in_range,
    running_year_range,
)
from revenue_pacing.metrics import RatioMetricsEngine, compute_ratio_metrics

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SERVICE_VERSION = "1.0.0"

# ============================================================================
# Pydantic Models for API
# ============================================================================

class ComputeForecastRequest(BaseModel):
    """Request to compute pacing for a scenario."""
    model_config = ConfigDict(populate_by_name=True)

    scenario: ForecastScenario
    actuals: List[DailyActual] = []
    as_of_date: Optional[date] = Field(
        None, alias="asOfDate", description="Date treated as today (defaults to the server date)"
    )
    apply_catch_up: bool = Field(
        False, alias="applyCatchUp",
        description="Return the catch-up projected daily series when the scenario enables it",
    )


class RollingRatioRequest(BaseModel):
    """Request to compute a trailing revenue/spend ratio."""
    model_config = ConfigDict(populate_by_name=True)

    series: List[DailyCounters]
    window_days: Optional[int] = Field(
        None, ge=1, alias="windowDays",
        description="Trailing window in days (defaults to the engine setting)",
    )


# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="Revenue Pacing API",
    description="Revenue goal forecasting, pacing and ad ratio metrics",
    version=SERVICE_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

engine = ForecastEngine(EngineSettings())
ratio_engine = RatioMetricsEngine(engine.settings.rolling_window_days)


def _engine_error(e: ForecastError) -> HTTPException:
    logger.warning(f"Rejected forecast input: {e}")
    return HTTPException(
        status_code=422,
        detail={"error": type(e).__name__, "message": str(e)},
    )


# ============================================================================
# API Endpoints
# ============================================================================

@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "Revenue Pacing",
        "version": SERVICE_VERSION,
    }


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "settings": engine.settings.model_dump(),
        "timestamp": datetime.utcnow().isoformat(),
    }


@app.get("/forecasting/months")
async def list_months(
    start: date = Query(..., description="Range start, YYYY-MM-DD"),
    end: date = Query(..., description="Range end, YYYY-MM-DD"),
):
    """Months intersecting a date range, with day counts."""
    try:
        months = months_in_range(start, end)
    except ForecastError as e:
        raise _engine_error(e)
    return {"months": [m.to_dict() for m in months]}


@app.get("/forecasting/running-year")
async def running_year(as_of: Optional[date] = Query(None, description="Defaults to today")):
    """Twelve-month range starting this month."""
    start, end = running_year_range(as_of or date.today())
    return {"start_date": start.isoformat(), "end_date": end.isoformat()}


@app.post("/forecasting/distribute")
async def distribute(scenario: ForecastScenario):
    """Monthly targets and baseline daily curve for a scenario."""
    try:
        preview = engine.distribute_and_build_forecast(scenario)
    except ForecastError as e:
        raise _engine_error(e)
    return preview.to_dict()


@app.post("/forecasting/compute")
async def compute(request: ComputeForecastRequest):
    """
    Compute pacing for a scenario against the supplied actuals.

    Returns metrics, the daily series and weekly/monthly/quarterly rollups.
    """
    as_of = request.as_of_date or date.today()

    try:
        result = engine.compute_forecast(request.scenario, request.actuals, as_of)
    except ForecastError as e:
        raise _engine_error(e)

    if request.apply_catch_up:
        result = result.with_daily_data(tuple(engine.project_catch_up(result)))

    return result.to_dict()


@app.post("/metrics/ratios")
async def ratios(counters: AdCounters):
    """ROAS, CPA, CPM, CTR, CPC and MER for a set of counters."""
    return compute_ratio_metrics(counters).to_dict()


@app.post("/metrics/rolling")
async def rolling(request: RollingRatioRequest):
    """Trailing-window revenue/spend ratio (aMER) for each day of a series."""
    window_days = request.window_days or ratio_engine.window_days
    values = RatioMetricsEngine(window_days).compute_rolling_ratio(request.series)
    return {
        "window_days": window_days,
        "dates": [s.day.isoformat() if s.day else None for s in request.series],
        "values": values,
    }


# ============================================================================
# Run with: uvicorn revenue_pacing.api.server:app --host 0.0.0.0 --port 8000
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
