"""Errors raised by the forecast projection engine."""

from __future__ import annotations


class ForecastError(ValueError):
    """Base exception for forecast computations."""

    pass


class InvalidInputError(ForecastError):
    """Raised when a projection input is missing or not a finite number."""

    def __init__(self, field: str, value: object) -> None:
        self.field = field
        self.value = value
        super().__init__(f"invalid_forecast_input: {field}={value!r}")
