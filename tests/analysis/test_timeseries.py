"""Tests for time-series diagnostics."""

import math

import numpy as np
import pytest

from stat_analyzer.analysis.timeseries import (
    Trend,
    autocorrelation,
    detect_seasonality,
    detect_trend,
    is_time_like,
    time_series_analysis,
)
from stat_analyzer.core.variables import Variable, VariableKind


def numerical(name: str, values) -> Variable:
    return Variable(name, VariableKind.NUMERICAL, tuple(float(v) for v in values), 0)


def categorical(name: str, values) -> Variable:
    return Variable(name, VariableKind.CATEGORICAL, tuple(values), 0)


class TestTimeLike:
    """Tests for time column detection."""

    @pytest.mark.parametrize("name", ["date", "Timestamp", "order_date", "TIME"])
    def test_time_like(self, name: str) -> None:
        """Test names containing time or date."""
        assert is_time_like(name)

    def test_not_time_like(self) -> None:
        """Test an unrelated name."""
        assert not is_time_like("income")


class TestDetectTrend:
    """Tests for trend direction."""

    def test_increasing(self) -> None:
        """Test an increasing series."""
        assert detect_trend(range(1, 21)) == Trend.INCREASING

    def test_decreasing(self) -> None:
        """Test a decreasing series."""
        assert detect_trend(range(20, 0, -1)) == Trend.DECREASING

    def test_stable(self) -> None:
        """Test a series within 5% of its first-half mean."""
        assert detect_trend([100, 101, 99, 100, 102, 101, 100, 99]) == Trend.STABLE

    def test_zero_first_half(self) -> None:
        """Test that a zero first-half mean falls back to the sign."""
        assert detect_trend([0, 0, 0, 1, 1, 1]) == Trend.INCREASING
        assert detect_trend([0, 0, 0, -1, -1, -1]) == Trend.DECREASING
        assert detect_trend([0, 0, 0, 0]) == Trend.STABLE

    def test_negative_first_half(self) -> None:
        """Test that the change is relative to the magnitude of the first half."""
        assert detect_trend([-10, -10, -5, -5]) == Trend.INCREASING


class TestAutocorrelation:
    """Tests for the autocorrelation function."""

    def test_number_of_lags(self) -> None:
        """Test that lags run to min(10, n // 4)."""
        assert len(autocorrelation(range(20))) == 5
        assert len(autocorrelation(range(100))) == 10

    def test_constant_series(self) -> None:
        """Test that a constant series has zero autocorrelation."""
        assert autocorrelation([3.0] * 16) == [0.0] * 4

    def test_constant_fractional_series(self) -> None:
        """Test that rounding noise in a constant series is not correlated."""
        assert autocorrelation([0.1] * 20) == [0.0] * 5
        assert not detect_seasonality([0.1] * 20)

    def test_alternating_series(self) -> None:
        """Test a strongly negative lag-1 autocorrelation."""
        acf = autocorrelation([1, -1] * 10)
        assert acf[0] == pytest.approx(-1.0)
        assert acf[1] == pytest.approx(1.0)


class TestDetectSeasonality:
    """Tests for seasonality detection."""

    def test_periodic_series(self) -> None:
        """Test that a periodic series is seasonal."""
        values = [math.sin(2 * math.pi * i / 4) for i in range(24)]
        assert detect_seasonality(values)

    def test_short_series(self) -> None:
        """Test that fewer than 12 values are never seasonal."""
        assert not detect_seasonality([1, -1] * 5)

    def test_noise(self) -> None:
        """Test that a flat series is not seasonal."""
        assert not detect_seasonality([5.0] * 30)


class TestTimeSeriesAnalysis:
    """Tests for series selection."""

    def test_requires_time_column(self) -> None:
        """Test that no time column means no analysis."""
        assert time_series_analysis([numerical("x", range(20))]) is None

    def test_requires_ten_values(self) -> None:
        """Test the minimum series length."""
        variables = [categorical("date", ["d"] * 9), numerical("x", range(9))]
        assert time_series_analysis(variables) is None

    def test_first_numerical_series(self) -> None:
        """Test that the first numerical non-time variable is analysed."""
        dates = [f"2024-01-{i + 1:02d}" for i in range(20)]
        variables = [
            categorical("date", dates),
            numerical("sales", np.arange(20) + 100),
            numerical("cost", np.arange(20)),
        ]
        result = time_series_analysis(variables)

        assert result.time_variable == "date"
        assert result.series_variable == "sales"
        assert result.trend == Trend.INCREASING
        assert result.forecast == ()
        assert result.to_dict()["trend"] == "increasing"

    def test_numerical_time_column_not_analysed(self) -> None:
        """Test that the time column itself is never the series."""
        variables = [numerical("time", range(20)), numerical("value", [1.0] * 20)]
        result = time_series_analysis(variables)

        assert result.series_variable == "value"
        assert result.trend == Trend.STABLE
