"""Visualization tools for StatAnalyzer.

This module contains:
- Histograms of numerical variables
- Control charts
- Correlation heatmaps
- Regression plots
"""

from stat_analyzer.visualization.plots import (
    PlotResult,
    create_control_chart,
    create_correlation_heatmap,
    create_histogram,
    create_regression_plot,
)

__all__ = [
    "PlotResult",
    "create_histogram",
    "create_control_chart",
    "create_correlation_heatmap",
    "create_regression_plot",
]
