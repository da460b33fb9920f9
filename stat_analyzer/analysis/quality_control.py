"""Quality-control (Shewhart) charts for numerical variables.

With a subgroup size of 1 each observation is its own sample and the chart
uses mean ± 3 standard deviations. With rational subgroups of 2-10
consecutive observations an X-bar chart (A2·R̄ limits) and an R chart
(D3·R̄, D4·R̄ limits) are produced.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

import numpy as np

from stat_analyzer.core.variables import Variable, numerical_variables

logger = logging.getLogger(__name__)

MAX_CHARTS = 3
SIGMA_LIMIT = 3.0
RUN_LENGTH = 8

# A2, D3, D4 for subgroup sizes 2-10
CONTROL_CHART_CONSTANTS = {
    2: {"A2": 1.880, "D3": 0.000, "D4": 3.267},
    3: {"A2": 1.023, "D3": 0.000, "D4": 2.574},
    4: {"A2": 0.729, "D3": 0.000, "D4": 2.282},
    5: {"A2": 0.577, "D3": 0.000, "D4": 2.114},
    6: {"A2": 0.483, "D3": 0.000, "D4": 2.004},
    7: {"A2": 0.419, "D3": 0.076, "D4": 1.924},
    8: {"A2": 0.373, "D3": 0.136, "D4": 1.864},
    9: {"A2": 0.337, "D3": 0.184, "D4": 1.816},
    10: {"A2": 0.308, "D3": 0.223, "D4": 1.777},
}


class ChartType(str, Enum):
    """Kinds of control chart."""

    X_BAR = "x-bar"
    R_CHART = "r-chart"


@dataclass(frozen=True)
class ControlChart:
    """Control limits and out-of-control points for one chart.

    Attributes:
        variable: Variable the chart is built from
        chart_type: X-bar or R chart
        center_line: Center line (CL)
        upper_control_limit: UCL
        lower_control_limit: LCL
        data_points: Plotted points (observations or subgroup statistics)
        out_of_control: Indices of points outside the limits
        subgroup_size: Observations per plotted point
    """

    variable: str
    chart_type: ChartType
    center_line: float
    upper_control_limit: float
    lower_control_limit: float
    data_points: tuple[float, ...]
    out_of_control: tuple[int, ...]
    subgroup_size: int = 1

    @property
    def in_control(self) -> bool:
        return not self.out_of_control

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "variable": self.variable,
            "type": self.chart_type.value,
            "center_line": self.center_line,
            "upper_control_limit": self.upper_control_limit,
            "lower_control_limit": self.lower_control_limit,
            "data_points": list(self.data_points),
            "out_of_control_points": list(self.out_of_control),
            "subgroup_size": self.subgroup_size,
            "rule_violations": rule_violations(self),
        }


def individuals_chart(variable: Variable) -> ControlChart:
    """Chart each observation against mean ± 3 population standard deviations."""
    data = np.asarray(variable.values, dtype=float)
    if np.ptp(data) == 0:
        mean, std = float(data[0]), 0.0
    else:
        mean = float(data.mean())
        std = float(data.std(ddof=0))
    limit = SIGMA_LIMIT * std

    return ControlChart(
        variable=variable.name,
        chart_type=ChartType.X_BAR,
        center_line=mean,
        upper_control_limit=mean + limit,
        lower_control_limit=mean - limit,
        data_points=tuple(float(v) for v in data),
        out_of_control=tuple(int(i) for i in np.flatnonzero(np.abs(data - mean) > limit)),
    )


def _outside(points: np.ndarray, lower: float, upper: float) -> tuple[int, ...]:
    return tuple(int(i) for i in np.flatnonzero((points < lower) | (points > upper)))


def subgroup_charts(variable: Variable, subgroup_size: int) -> list[ControlChart]:
    """X-bar and R charts over consecutive subgroups.

    Trailing observations that do not fill a subgroup are ignored.
    """
    constants = CONTROL_CHART_CONSTANTS[subgroup_size]
    data = np.asarray(variable.values, dtype=float)
    k = len(data) // subgroup_size
    groups = data[: k * subgroup_size].reshape(k, subgroup_size)

    means = groups.mean(axis=1)
    ranges = groups.max(axis=1) - groups.min(axis=1)
    grand_mean = float(means.mean())
    r_bar = float(ranges.mean())

    x_ucl = grand_mean + constants["A2"] * r_bar
    x_lcl = grand_mean - constants["A2"] * r_bar
    r_ucl = constants["D4"] * r_bar
    r_lcl = constants["D3"] * r_bar

    return [
        ControlChart(
            variable=variable.name,
            chart_type=ChartType.X_BAR,
            center_line=grand_mean,
            upper_control_limit=x_ucl,
            lower_control_limit=x_lcl,
            data_points=tuple(float(m) for m in means),
            out_of_control=_outside(means, x_lcl, x_ucl),
            subgroup_size=subgroup_size,
        ),
        ControlChart(
            variable=variable.name,
            chart_type=ChartType.R_CHART,
            center_line=r_bar,
            upper_control_limit=r_ucl,
            lower_control_limit=r_lcl,
            data_points=tuple(float(r) for r in ranges),
            out_of_control=_outside(ranges, r_lcl, r_ucl),
            subgroup_size=subgroup_size,
        ),
    ]


def build_control_charts(
    variables: Sequence[Variable],
    subgroup_size: int = 1,
) -> list[ControlChart]:
    """Build charts for the first three numerical variables.

    Args:
        variables: Detected variables
        subgroup_size: 1 for an individuals chart, 2-10 for X-bar/R charts

    Raises:
        ValueError: If subgroup_size is outside 1-10
    """
    if subgroup_size != 1 and subgroup_size not in CONTROL_CHART_CONSTANTS:
        raise ValueError(f"Subgroup size must be 1 or between 2 and 10, got {subgroup_size}")

    charts: list[ControlChart] = []
    for variable in numerical_variables(variables)[:MAX_CHARTS]:
        if not variable.values:
            continue
        if subgroup_size > 1 and variable.count // subgroup_size >= 2:
            charts.extend(subgroup_charts(variable, subgroup_size))
        else:
            if subgroup_size > 1:
                logger.debug(f"Too few subgroups for {variable.name}; using individuals chart")
            charts.append(individuals_chart(variable))
    return charts


def rule_violations(chart: ControlChart) -> list[str]:
    """Check run rules 1 (beyond limits) and 2 (8 in a row on one side)."""
    violations = []
    if chart.out_of_control:
        violations.append(
            f"Rule 1: {len(chart.out_of_control)} points beyond control limits"
        )

    above = below = 0
    for value in chart.data_points:
        if value > chart.center_line:
            above, below = above + 1, 0
        elif value < chart.center_line:
            above, below = 0, below + 1
        else:
            above = below = 0

        if above >= RUN_LENGTH:
            violations.append(f"Rule 2: {RUN_LENGTH}+ consecutive points above center line")
            break
        if below >= RUN_LENGTH:
            violations.append(f"Rule 2: {RUN_LENGTH}+ consecutive points below center line")
            break

    return violations
