"""Tests for quality-control charts."""

import numpy as np
import pytest

from stat_analyzer.analysis.quality_control import (
    CONTROL_CHART_CONSTANTS,
    ChartType,
    ControlChart,
    build_control_charts,
    individuals_chart,
    rule_violations,
    subgroup_charts,
)
from stat_analyzer.core.variables import Variable, VariableKind


def numerical(name: str, values) -> Variable:
    return Variable(name, VariableKind.NUMERICAL, tuple(float(v) for v in values), 0)


class TestIndividualsChart:
    """Tests for the mean ± 3σ chart."""

    def test_limits(self) -> None:
        """Test center line and population-sigma limits."""
        values = [2, 4, 4, 4, 5, 5, 7, 9]
        chart = individuals_chart(numerical("x", values))

        assert chart.chart_type == ChartType.X_BAR
        assert chart.center_line == pytest.approx(5.0)
        assert chart.upper_control_limit == pytest.approx(11.0)
        assert chart.lower_control_limit == pytest.approx(-1.0)
        assert chart.out_of_control == ()

    def test_constant_column(self) -> None:
        """Test that a constant column collapses the limits with no violations."""
        chart = individuals_chart(numerical("x", [5.0] * 10))

        assert chart.upper_control_limit == chart.center_line == chart.lower_control_limit
        assert chart.out_of_control == ()
        assert chart.in_control

    def test_constant_fractional_column(self) -> None:
        """Test that a constant 0.1 column centres on its value with collapsed limits."""
        chart = individuals_chart(numerical("x", [0.1] * 10))

        assert chart.center_line == 0.1
        assert chart.upper_control_limit == chart.lower_control_limit == 0.1
        assert chart.out_of_control == ()

    def test_out_of_control_point(self) -> None:
        """Test that an extreme observation is flagged."""
        chart = individuals_chart(numerical("x", [0.0] * 19 + [100.0]))
        assert chart.out_of_control == (19,)


class TestSubgroupCharts:
    """Tests for X-bar and R charts."""

    def test_x_bar_and_r(self) -> None:
        """Test limits from the A2, D3 and D4 constants."""
        values = np.array([10, 12, 11, 13, 9, 11, 10, 12, 14, 8, 10, 11, 9, 12, 13], dtype=float)
        x_bar, r_chart = subgroup_charts(numerical("x", values), 5)

        groups = values.reshape(3, 5)
        means = groups.mean(axis=1)
        ranges = np.ptp(groups, axis=1)
        constants = CONTROL_CHART_CONSTANTS[5]

        assert x_bar.chart_type == ChartType.X_BAR
        assert x_bar.data_points == pytest.approx(tuple(means))
        assert x_bar.center_line == pytest.approx(means.mean())
        assert x_bar.upper_control_limit == pytest.approx(
            means.mean() + constants["A2"] * ranges.mean()
        )
        assert r_chart.chart_type == ChartType.R_CHART
        assert r_chart.center_line == pytest.approx(ranges.mean())
        assert r_chart.upper_control_limit == pytest.approx(constants["D4"] * ranges.mean())
        assert r_chart.lower_control_limit == 0.0
        assert x_bar.subgroup_size == r_chart.subgroup_size == 5

    def test_incomplete_subgroup_dropped(self) -> None:
        """Test that trailing observations are ignored."""
        x_bar, _ = subgroup_charts(numerical("x", range(11)), 2)
        assert len(x_bar.data_points) == 5


class TestBuildControlCharts:
    """Tests for chart selection."""

    def test_first_three_numerical(self) -> None:
        """Test that at most three variables are charted."""
        variables = [numerical(name, range(10)) for name in "abcd"]
        charts = build_control_charts(variables)

        assert [c.variable for c in charts] == ["a", "b", "c"]

    def test_subgroups(self) -> None:
        """Test that subgrouping yields X-bar and R charts per variable."""
        charts = build_control_charts([numerical("x", range(20))], subgroup_size=4)
        assert [c.chart_type for c in charts] == [ChartType.X_BAR, ChartType.R_CHART]

    def test_too_few_subgroups_fall_back(self) -> None:
        """Test the individuals chart when fewer than two subgroups fit."""
        (chart,) = build_control_charts([numerical("x", range(6))], subgroup_size=5)

        assert chart.subgroup_size == 1
        assert len(chart.data_points) == 6

    @pytest.mark.parametrize("size", [0, 11])
    def test_invalid_subgroup_size(self, size: int) -> None:
        """Test rejection of unsupported subgroup sizes."""
        with pytest.raises(ValueError, match="Subgroup size"):
            build_control_charts([numerical("x", range(20))], subgroup_size=size)

    def test_to_dict(self) -> None:
        """Test dictionary conversion."""
        (chart,) = build_control_charts([numerical("x", [1, 2, 3])])
        data = chart.to_dict()

        assert data["type"] == "x-bar"
        assert data["out_of_control_points"] == []
        assert data["rule_violations"] == []


class TestRuleViolations:
    """Tests for run rules."""

    def _chart(self, points, out_of_control=()) -> ControlChart:
        return ControlChart(
            variable="x",
            chart_type=ChartType.X_BAR,
            center_line=0.0,
            upper_control_limit=3.0,
            lower_control_limit=-3.0,
            data_points=tuple(float(p) for p in points),
            out_of_control=tuple(out_of_control),
        )

    def test_rule_one(self) -> None:
        """Test points beyond the limits."""
        violations = rule_violations(self._chart([0, 5, -4], out_of_control=(1, 2)))
        assert violations == ["Rule 1: 2 points beyond control limits"]

    def test_rule_two_above(self) -> None:
        """Test a run of eight points above the center line."""
        violations = rule_violations(self._chart([1] * 10 + [-1] * 10))
        assert violations == ["Rule 2: 8+ consecutive points above center line"]

    def test_rule_two_below(self) -> None:
        """Test a run of eight points below the center line."""
        violations = rule_violations(self._chart([-1] * 8))
        assert violations == ["Rule 2: 8+ consecutive points below center line"]

    def test_center_line_resets_run(self) -> None:
        """Test that a point on the center line breaks a run."""
        assert rule_violations(self._chart([1, 1, 1, 1, 0, 1, 1, 1, 1])) == []

    def test_short_runs(self) -> None:
        """Test alternating points."""
        assert rule_violations(self._chart([1, -1] * 10)) == []
