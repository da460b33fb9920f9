"""Time-series diagnostics: trend, seasonality and autocorrelation.

Runs only when the table has a time-like column (its name contains "time"
or "date") and another numerical variable with at least 10 values.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import numpy as np

from stat_analyzer.core.variables import Variable

MIN_SERIES_LENGTH = 10
MIN_SEASONALITY_LENGTH = 12
TREND_THRESHOLD = 0.05
SEASONALITY_THRESHOLD = 0.3
MAX_LAG = 10
TIME_MARKERS = ("time", "date")


class Trend(str, Enum):
    """Direction of a series."""

    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


@dataclass(frozen=True)
class TimeSeriesResult:
    """Diagnostics for one series.

    Attributes:
        time_variable: Name of the time-like column
        series_variable: Name of the analysed numerical variable
        trend: Direction of change between the two halves
        seasonality: Whether any early-lag autocorrelation exceeds 0.3
        autocorrelation: Autocorrelation at lags 1..k
        forecast: Reserved for forecasts; always empty
    """

    time_variable: str
    series_variable: str
    trend: Trend
    seasonality: bool
    autocorrelation: tuple[float, ...]
    forecast: tuple[float, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "time_variable": self.time_variable,
            "series_variable": self.series_variable,
            "trend": self.trend.value,
            "seasonality": self.seasonality,
            "autocorrelation": list(self.autocorrelation),
            "forecast": list(self.forecast),
        }


def is_time_like(name: str) -> bool:
    lowered = name.lower()
    return any(marker in lowered for marker in TIME_MARKERS)


def detect_trend(values: Sequence[float]) -> Trend:
    """Compare the mean of the second half with the first half."""
    data = np.asarray(values, dtype=float)
    half = len(data) // 2
    first_mean = float(data[:half].mean())
    second_mean = float(data[half:].mean())

    if first_mean == 0:
        diff = second_mean - first_mean
        if diff > 0:
            return Trend.INCREASING
        if diff < 0:
            return Trend.DECREASING
        return Trend.STABLE

    change = (second_mean - first_mean) / abs(first_mean)
    if change > TREND_THRESHOLD:
        return Trend.INCREASING
    if change < -TREND_THRESHOLD:
        return Trend.DECREASING
    return Trend.STABLE


def autocorrelation(values: Sequence[float], max_lag: int = MAX_LAG) -> list[float]:
    """Autocorrelation for lags 1..min(max_lag, n // 4).

    Each lag is the mean cross-product of deviations divided by the
    population variance. A constant series has zero autocorrelation.
    """
    data = np.asarray(values, dtype=float)
    n = len(data)
    deviations = data - data.mean()
    constant = n == 0 or np.ptp(data) == 0
    variance = float(data.var(ddof=0)) if n else 0.0

    acf = []
    for lag in range(1, min(max_lag, n // 4) + 1):
        count = n - lag
        if count <= 0 or constant:
            acf.append(0.0)
            continue
        total = float(np.sum(deviations[:-lag] * deviations[lag:]))
        acf.append(total / (count * variance))
    return acf


def detect_seasonality(values: Sequence[float]) -> bool:
    if len(values) < MIN_SEASONALITY_LENGTH:
        return False
    return any(abs(r) > SEASONALITY_THRESHOLD for r in autocorrelation(values))


def time_series_analysis(variables: Sequence[Variable]) -> TimeSeriesResult | None:
    """Diagnose the first numerical series when a time-like column is present.

    Returns:
        TimeSeriesResult, or None when no time column or no long enough series
    """
    time_var = next((v for v in variables if is_time_like(v.name)), None)
    if time_var is None:
        return None

    series = next(
        (
            v
            for v in variables
            if v is not time_var and v.is_numerical and v.count >= MIN_SERIES_LENGTH
        ),
        None,
    )
    if series is None:
        return None

    values = [float(v) for v in series.values]
    return TimeSeriesResult(
        time_variable=time_var.name,
        series_variable=series.name,
        trend=detect_trend(values),
        seasonality=detect_seasonality(values),
        autocorrelation=tuple(autocorrelation(values)),
    )
