"""
API module for the revenue pacing engine.

- client.py: httpx client for dashboards and scripts
- server.py: stateless FastAPI app over the forecasting and metrics modules
"""

from .client import PacingClient, PacingAPIError, get_client

__all__ = ["PacingClient", "PacingAPIError", "get_client"]
