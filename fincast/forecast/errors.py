"""Errors raised by the forecasting pipeline."""
from typing import Any, Dict, Optional


class ForecastValidationError(ValueError):
    """Malformed input: missing dates, non-positive horizon, bad parameters."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class AggregationInconsistency(Exception):
    """
    A transaction or category crosses a tenant boundary.

    Always fatal to the call; aggregates are never built from data
    belonging to another tenant.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
