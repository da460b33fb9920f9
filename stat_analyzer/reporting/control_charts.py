"""Text rendering and assessment of control charts for reports."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from stat_analyzer.analysis.quality_control import ControlChart

ASCII_WIDTH = 60
ASCII_HEIGHT = 15
LABEL_WIDTH = 5


@dataclass(frozen=True)
class ProcessAssessment:
    """Overall stability verdict across a set of control charts."""

    stability: str
    summary: str
    recommendations: tuple[str, ...]


def ascii_control_chart(
    chart: ControlChart,
    width: int = ASCII_WIDTH,
    height: int = ASCII_HEIGHT,
) -> str:
    """Render a chart as a fixed-width text plot.

    In-control points are drawn as ``*``, out-of-control points as ``X``,
    and the UCL/CL/LCL rows are labelled on the left.
    """
    points = list(chart.data_points[: width - LABEL_WIDTH])
    top = max([chart.upper_control_limit, *points])
    bottom = min([chart.lower_control_limit, *points])
    span = top - bottom
    middle = height // 2

    def row_of(value: float) -> int:
        if span == 0:
            return middle
        return round((top - value) / span * (height - 1))

    grid = [[" "] * len(points) for _ in range(height)]
    for limit in (chart.upper_control_limit, chart.center_line, chart.lower_control_limit):
        grid[row_of(limit)] = ["-"] * len(points)

    outside = set(chart.out_of_control)
    for col, value in enumerate(points):
        grid[row_of(value)][col] = "X" if col in outside else "*"

    labels = {
        row_of(chart.upper_control_limit): "UCL |",
        row_of(chart.center_line): " CL |",
        row_of(chart.lower_control_limit): "LCL |",
    }
    lines = [labels.get(row, "    |") + "".join(cells) for row, cells in enumerate(grid)]
    lines.append("")
    lines.append("Legend: * = In Control, X = Out of Control")
    lines.append(
        f"UCL = {chart.upper_control_limit:.3f}, CL = {chart.center_line:.3f}, "
        f"LCL = {chart.lower_control_limit:.3f}"
    )
    return "\n".join(lines)


def assess_process(charts: Sequence[ControlChart]) -> ProcessAssessment:
    """Summarise process stability from a set of charts.

    Stable when no chart has out-of-control points, mostly stable when fewer
    than half do, and unstable otherwise.
    """
    total = len(charts)
    out_of_control = sum(1 for chart in charts if not chart.in_control)
    in_control = total - out_of_control

    if out_of_control == 0:
        stability = "STABLE"
    elif out_of_control < total / 2:
        stability = "MOSTLY STABLE"
    else:
        stability = "UNSTABLE"

    summary = (
        f"Process assessment based on {total} control chart(s): {in_control} "
        f"process(es) are in statistical control, while {out_of_control} "
        f"process(es) show signs of special cause variation. "
        f"Overall process stability: {stability}."
    )

    recommendations = []
    if out_of_control:
        recommendations += [
            "Investigate and eliminate special causes in out-of-control processes",
            "Implement corrective actions for identified issues",
            "Increase sampling frequency for unstable processes",
        ]
    if in_control:
        recommendations += [
            "Continue monitoring stable processes with regular control charts",
            "Consider process improvement initiatives for controlled processes",
        ]
    recommendations += [
        "Review control limits periodically and update as needed",
        "Train personnel on control chart interpretation and response procedures",
    ]

    return ProcessAssessment(
        stability=stability,
        summary=summary,
        recommendations=tuple(recommendations),
    )


def chart_title(chart: ControlChart) -> str:
    return f"{chart.chart_type.value.upper()} chart for {chart.variable}"
