"""
Exception hierarchy for forecast input validation.

Exception Hierarchy:
    ForecastError (base, a ValueError)
    ├── InvalidRangeError                - end date before start date
    ├── InvalidTargetError               - negative total or monthly target
    ├── InvalidRoasError                 - ROAS <= 0
    └── InconsistentMonthlyTargetsError  - monthly targets don't match the total/range

All of these are raised before any computation starts. Ratios with a
zero denominator are not errors; they evaluate to None.
"""

from typing import Optional


class ForecastError(ValueError):
    """Base exception for invalid forecast inputs."""

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class InvalidRangeError(ForecastError):
    """The scenario's end date is before its start date."""


class InvalidTargetError(ForecastError):
    """A revenue target is negative."""


class InvalidRoasError(ForecastError):
    """ROAS is zero or negative, so ad spend can't be derived from revenue."""


class InconsistentMonthlyTargetsError(ForecastError):
    """
    Monthly targets disagree with the scenario.

    Raised when the monthly sum diverges from the total target beyond
    tolerance, or when the months don't cover exactly the months of the
    date range. Never corrected silently.
    """

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        expected: Optional[float] = None,
        got: Optional[float] = None,
    ):
        super().__init__(message, details)
        self.expected = expected
        self.got = got
