"""Interactive charts for analysis results.

This module provides:
- Histograms of numerical variables
- Shewhart control charts with limits and flagged points
- Correlation heatmaps
- Regression scatter plots with the fitted line and residual band

All plots are generated using Plotly for interactivity.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
import plotly.graph_objects as go

from stat_analyzer.analysis.correlation import CorrelationResult
from stat_analyzer.analysis.quality_control import ControlChart
from stat_analyzer.analysis.regression import RegressionResult
from stat_analyzer.core.variables import Variable


@dataclass
class PlotResult:
    """Result from a plot generation function.

    Attributes:
        figure: Plotly figure object
        title: Plot title
        description: Description of what the plot shows
        data_summary: Summary of data used
    """

    figure: go.Figure
    title: str
    description: str
    data_summary: dict[str, Any]

    def to_html(self, include_plotlyjs: bool = True) -> str:
        """Convert figure to HTML string.

        Args:
            include_plotlyjs: Include Plotly.js library in HTML

        Returns:
            HTML string
        """
        return self.figure.to_html(
            include_plotlyjs="cdn" if include_plotlyjs else False,
            full_html=False,
        )

    def to_json(self) -> str:
        """Convert figure to JSON for frontend rendering."""
        return self.figure.to_json()


def create_histogram(
    variable: Variable,
    nbins: int = 30,
    title: str | None = None,
) -> PlotResult:
    """Create a histogram for a numerical variable.

    Args:
        variable: Numerical variable to plot
        nbins: Number of bins
        title: Plot title (auto-generated if None)

    Returns:
        PlotResult with histogram figure

    Raises:
        ValueError: If the variable is not numerical or has no values
    """
    if not variable.is_numerical:
        raise ValueError(f"Variable {variable.name} is not numerical")
    if not variable.values:
        raise ValueError(f"No valid data for variable {variable.name}")

    data = np.asarray(variable.values, dtype=float)

    if title is None:
        title = f"Distribution of {variable.name}"

    fig = go.Figure()
    fig.add_trace(go.Histogram(
        x=data,
        nbinsx=nbins,
        name=variable.name,
    ))

    fig.update_layout(
        title=dict(text=title, x=0.5),
        xaxis_title=variable.name,
        yaxis_title="Count",
        template="plotly_white",
        bargap=0.05,
    )

    summary = {
        "variable": variable.name,
        "count": len(data),
        "mean": float(data.mean()),
        "median": float(np.median(data)),
        "std": float(data.std(ddof=0)),
    }

    return PlotResult(
        figure=fig,
        title=title,
        description=f"Histogram of {variable.name} distribution.",
        data_summary=summary,
    )


def create_control_chart(chart: ControlChart, title: str | None = None) -> PlotResult:
    """Plot a control chart with its center line and control limits.

    Out-of-control points are drawn in red on top of the series.
    """
    points = list(chart.data_points)
    index = list(range(len(points)))

    if title is None:
        title = f"{chart.chart_type.value.upper()} chart for {chart.variable}"

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=index,
        y=points,
        mode="lines+markers",
        marker=dict(size=6),
        line=dict(width=1),
        name=chart.variable,
    ))

    if chart.out_of_control:
        fig.add_trace(go.Scatter(
            x=list(chart.out_of_control),
            y=[points[i] for i in chart.out_of_control],
            mode="markers",
            marker=dict(size=10, color="red", symbol="x"),
            name="Out of control",
        ))

    for value, label, dash in (
        (chart.upper_control_limit, "UCL", "dash"),
        (chart.center_line, "CL", "solid"),
        (chart.lower_control_limit, "LCL", "dash"),
    ):
        fig.add_hline(
            y=value,
            line=dict(color="gray" if label == "CL" else "red", dash=dash, width=1),
            annotation_text=f"{label} = {value:.4g}",
            annotation_position="right",
        )

    fig.update_layout(
        title=dict(text=title, x=0.5),
        xaxis_title="Subgroup" if chart.subgroup_size > 1 else "Observation",
        yaxis_title=chart.variable,
        template="plotly_white",
        hovermode="closest",
    )

    summary = {
        "variable": chart.variable,
        "chart_type": chart.chart_type.value,
        "n_points": len(points),
        "out_of_control": len(chart.out_of_control),
    }

    return PlotResult(
        figure=fig,
        title=title,
        description=f"Control chart of {chart.variable} with 3-sigma limits.",
        data_summary=summary,
    )


def create_correlation_heatmap(
    correlation: CorrelationResult,
    title: str = "Correlation Matrix",
) -> PlotResult:
    """Plot the Pearson correlation matrix as an annotated heatmap."""
    names = list(correlation.variables)
    matrix = [list(row) for row in correlation.matrix]

    fig = go.Figure(go.Heatmap(
        z=matrix,
        x=names,
        y=names,
        zmin=-1,
        zmax=1,
        colorscale="RdBu",
        reversescale=True,
        text=[[f"{r:.2f}" for r in row] for row in matrix],
        texttemplate="%{text}",
        colorbar=dict(title="r"),
    ))

    fig.update_layout(
        title=dict(text=title, x=0.5),
        template="plotly_white",
        yaxis=dict(autorange="reversed"),
    )

    strongest = correlation.strongest_pairs(limit=1)
    summary: dict[str, Any] = {"variables": names}
    if strongest:
        x, y, r, p = strongest[0]
        summary["strongest_pair"] = {"x": x, "y": y, "r": r, "p_value": p}

    return PlotResult(
        figure=fig,
        title=title,
        description=f"Pearson correlations between {len(names)} numerical variables.",
        data_summary=summary,
    )


def create_regression_plot(
    regression: RegressionResult,
    x: np.ndarray,
    y: np.ndarray,
    title: str | None = None,
) -> PlotResult:
    """Scatter the observed pairs with the fitted line and residual band.

    Args:
        regression: Fitted model
        x: Predictor values the model was fitted on
        y: Response values the model was fitted on
        title: Plot title

    Raises:
        ValueError: If x and y do not match the fitted sample size
    """
    x = np.asarray(x, dtype=float)[: regression.n]
    y = np.asarray(y, dtype=float)[: regression.n]
    if len(x) != regression.n or len(y) != regression.n:
        raise ValueError("x and y must contain the fitted observations")

    if title is None:
        title = f"{regression.response} vs {regression.predictor}"

    order = np.argsort(x)
    x_sorted = x[order]

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=x,
        y=y,
        mode="markers",
        marker=dict(size=6, opacity=0.7),
        name="Observed",
    ))
    fig.add_trace(go.Scatter(
        x=x_sorted,
        y=np.asarray(regression.upper)[order],
        mode="lines",
        line=dict(width=0),
        showlegend=False,
        hoverinfo="skip",
    ))
    fig.add_trace(go.Scatter(
        x=x_sorted,
        y=np.asarray(regression.lower)[order],
        mode="lines",
        line=dict(width=0),
        fill="tonexty",
        fillcolor="rgba(255, 0, 0, 0.1)",
        name="±1.96σ band",
    ))
    fig.add_trace(go.Scatter(
        x=x_sorted,
        y=np.asarray(regression.predictions)[order],
        mode="lines",
        line=dict(color="red", dash="dash"),
        name=f"Fit (slope={regression.slope:.2f}, R²={regression.r_squared:.2f})",
    ))

    fig.update_layout(
        title=dict(text=title, x=0.5),
        xaxis_title=regression.predictor,
        yaxis_title=regression.response,
        template="plotly_white",
        hovermode="closest",
    )

    summary = {
        "x_param": regression.predictor,
        "y_param": regression.response,
        "n_points": regression.n,
        "slope": regression.slope,
        "intercept": regression.intercept,
        "r_squared": regression.r_squared,
    }

    return PlotResult(
        figure=fig,
        title=title,
        description=f"Linear regression of {regression.response} on {regression.predictor}.",
        data_summary=summary,
    )
