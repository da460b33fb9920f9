"""Tests for visualization plots module."""

import json

import numpy as np
import pytest

from stat_analyzer.analysis import StatisticalResults
from stat_analyzer.analysis.pairing import paired_values
from stat_analyzer.core.variables import Variable, VariableKind
from stat_analyzer.visualization import (
    PlotResult,
    create_control_chart,
    create_correlation_heatmap,
    create_histogram,
    create_regression_plot,
)


def variable_named(results: StatisticalResults, name: str) -> Variable:
    return next(v for v in results.variables if v.name == name)


class TestPlotResult:
    """Tests for PlotResult dataclass."""

    def test_to_html(self, sample_results: StatisticalResults) -> None:
        """Test converting to HTML."""
        result = create_histogram(variable_named(sample_results, "age"))
        html = result.to_html()

        assert isinstance(html, str)
        assert len(html) > 0

    def test_to_json(self, sample_results: StatisticalResults) -> None:
        """Test converting to JSON."""
        result = create_histogram(variable_named(sample_results, "age"))
        data = json.loads(result.to_json())

        assert "data" in data
        assert "layout" in data


class TestHistogram:
    """Tests for histograms."""

    def test_summary(self, sample_results: StatisticalResults) -> None:
        """Test histogram data summary."""
        result = create_histogram(variable_named(sample_results, "age"), nbins=10)

        assert isinstance(result, PlotResult)
        assert result.title == "Distribution of age"
        assert result.data_summary["count"] == 50
        assert result.data_summary["mean"] == pytest.approx(44.5)

    def test_custom_title(self, sample_results: StatisticalResults) -> None:
        """Test that a given title is used."""
        result = create_histogram(variable_named(sample_results, "age"), title="Ages")
        assert result.title == "Ages"

    def test_categorical_rejected(self, sample_results: StatisticalResults) -> None:
        """Test that categorical variables cannot be plotted."""
        with pytest.raises(ValueError, match="not numerical"):
            create_histogram(variable_named(sample_results, "date"))

    def test_empty_rejected(self) -> None:
        """Test that a variable without values cannot be plotted."""
        empty = Variable("x", VariableKind.NUMERICAL, (), 3)
        with pytest.raises(ValueError, match="No valid data"):
            create_histogram(empty)


class TestControlChartPlot:
    """Tests for control chart figures."""

    def test_limits_drawn(self, sample_results: StatisticalResults) -> None:
        """Test that the three limit lines are drawn."""
        result = create_control_chart(sample_results.control_charts[0])

        assert result.title == "X-BAR chart for age"
        assert len(result.figure.layout.shapes) == 3
        assert result.data_summary["n_points"] == 50
        assert result.data_summary["out_of_control"] == 0

    def test_out_of_control_trace(self) -> None:
        """Test that flagged points get their own trace."""
        from stat_analyzer.analysis.quality_control import individuals_chart

        chart = individuals_chart(Variable("x", VariableKind.NUMERICAL, (0.0,) * 19 + (100.0,), 0))
        result = create_control_chart(chart)

        assert len(result.figure.data) == 2
        assert list(result.figure.data[1].x) == [19]


class TestCorrelationHeatmap:
    """Tests for correlation heatmaps."""

    def test_heatmap(self, sample_results: StatisticalResults) -> None:
        """Test matrix dimensions and the strongest pair."""
        result = create_correlation_heatmap(sample_results.correlation)

        assert result.data_summary["variables"] == ["age", "income"]
        assert result.data_summary["strongest_pair"]["x"] == "age"
        assert np.asarray(result.figure.data[0].z).shape == (2, 2)


class TestRegressionPlot:
    """Tests for regression plots."""

    def test_regression(self, sample_results: StatisticalResults) -> None:
        """Test observed, band and fit traces."""
        regression = sample_results.regressions[0]
        x, y = paired_values(
            variable_named(sample_results, "age"),
            variable_named(sample_results, "income"),
        )
        result = create_regression_plot(regression, x, y)

        assert len(result.figure.data) == 4
        assert result.data_summary["n_points"] == 50
        assert result.data_summary["slope"] == pytest.approx(regression.slope)

    def test_length_mismatch(self, sample_results: StatisticalResults) -> None:
        """Test that too few observations are rejected."""
        regression = sample_results.regressions[0]
        with pytest.raises(ValueError, match="fitted observations"):
            create_regression_plot(regression, np.arange(3), np.arange(3))
