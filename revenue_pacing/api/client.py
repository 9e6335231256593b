"""
Client for the revenue pacing API.

Used by dashboards and scripts that talk to a running pacing server
instead of importing the engine directly.
"""

import os
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Union

import httpx

from revenue_pacing.config.schema import AdCounters, DailyActual, DailyCounters, ForecastScenario

logger = logging.getLogger(__name__)


class PacingAPIError(RuntimeError):
    """The server rejected a forecast input (HTTP 422 from the engine)."""

    def __init__(self, error: str, message: str):
        self.error = error
        self.message = message
        super().__init__(f"{error}: {message}")


class PacingClient:
    """
    Client for the Revenue Pacing API.

    Usage:
        with PacingClient("http://localhost:8000") as client:
            result = client.compute_forecast(scenario, actuals, as_of_date=date(2025, 2, 14))
            print(result["metrics"]["status"])
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Initialize the client.

        Parameters
        ----------
        base_url : str, optional
            Base URL of the API. Defaults to PACING_API_URL env var or localhost.
        timeout : float
            Request timeout in seconds.
        http_client : httpx.Client, optional
            Pre-configured client to send requests with (e.g. a test client).
        """
        self.base_url = base_url or os.getenv("PACING_API_URL", "http://localhost:8000")
        self.timeout = timeout
        self._client = http_client or httpx.Client(
            base_url=self.base_url, timeout=httpx.Timeout(timeout)
        )

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self._client.close()

    def close(self):
        """Close the client."""
        self._client.close()

    def _handle(self, response: httpx.Response) -> Any:
        if response.status_code == 422:
            detail = response.json().get("detail")
            if isinstance(detail, dict) and "error" in detail:
                raise PacingAPIError(detail["error"], detail.get("message", ""))
        response.raise_for_status()
        return response.json()

    def health_check(self) -> bool:
        """
        Check if the API is healthy.

        Returns
        -------
        bool
            True if healthy, False otherwise.
        """
        try:
            response = self._client.get("/health")
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning(f"Health check failed: {e}")
            return False

    def list_months(self, start: date, end: date) -> List[Dict[str, Any]]:
        """Months intersecting ``[start, end]`` with day counts."""
        response = self._client.get(
            "/forecasting/months",
            params={"start": start.isoformat(), "end": end.isoformat()},
        )
        return self._handle(response)["months"]

    def running_year(self, as_of: Optional[date] = None) -> tuple[date, date]:
        """Twelve-month range starting in the month of ``as_of``."""
        params = {"as_of": as_of.isoformat()} if as_of else {}
        data = self._handle(self._client.get("/forecasting/running-year", params=params))
        return date.fromisoformat(data["start_date"]), date.fromisoformat(data["end_date"])

    def distribute(self, scenario: ForecastScenario) -> Dict[str, Any]:
        """
        Preview monthly targets and the baseline curve for a scenario.

        Raises
        ------
        PacingAPIError
            If the scenario is rejected by the engine.
        """
        response = self._client.post(
            "/forecasting/distribute", json=scenario.model_dump(mode="json", by_alias=True)
        )
        return self._handle(response)

    def compute_forecast(
        self,
        scenario: ForecastScenario,
        actuals: Sequence[DailyActual] = (),
        as_of_date: Optional[date] = None,
        apply_catch_up: bool = False,
    ) -> Dict[str, Any]:
        """
        Compute pacing on the server.

        Parameters
        ----------
        scenario : ForecastScenario
            Revenue goal and date range.
        actuals : Sequence[DailyActual]
            Daily actuals to join onto the baseline.
        as_of_date : date, optional
            Date treated as today; the server date if omitted.
        apply_catch_up : bool
            Return the catch-up projected daily series when eligible.

        Returns
        -------
        dict
            The serialized forecast result.

        Raises
        ------
        PacingAPIError
            If the scenario is rejected by the engine.
        """
        request_body = {
            "scenario": scenario.model_dump(mode="json", by_alias=True),
            "actuals": [a.model_dump(mode="json", by_alias=True) for a in actuals],
            "applyCatchUp": apply_catch_up,
        }
        if as_of_date:
            request_body["asOfDate"] = as_of_date.isoformat()

        logger.info(f"Computing forecast '{scenario.id}' with {len(actuals)} actuals")
        return self._handle(self._client.post("/forecasting/compute", json=request_body))

    def compute_ratios(self, counters: AdCounters) -> Dict[str, Optional[float]]:
        """Ratio metrics for one set of counters; undefined ratios are None."""
        response = self._client.post("/metrics/ratios", json=counters.model_dump(mode="json"))
        return self._handle(response)

    def rolling_ratio(
        self,
        series: Sequence[Union[DailyCounters, AdCounters]],
        window_days: Optional[int] = None,
    ) -> List[Optional[float]]:
        """
        Trailing-window revenue/spend ratio for each day of a series.

        The server's configured window applies when window_days is None.
        """
        request_body = {"series": [s.model_dump(mode="json", by_alias=True) for s in series]}
        if window_days is not None:
            request_body["windowDays"] = window_days
        return self._handle(self._client.post("/metrics/rolling", json=request_body))["values"]


def get_client(base_url: Optional[str] = None) -> PacingClient:
    """
    Get a pacing API client instance.

    Parameters
    ----------
    base_url : str, optional
        API URL. Uses PACING_API_URL env var if not provided.
    """
    return PacingClient(base_url)
