"""PDF and text report generation."""

from stat_analyzer.reporting.control_charts import (
    ProcessAssessment,
    ascii_control_chart,
    assess_process,
)
from stat_analyzer.reporting.renderer import (
    ReportGenerator,
    ReportOptions,
    build_sections,
    render_text,
)

__all__ = [
    "ProcessAssessment",
    "ReportGenerator",
    "ReportOptions",
    "ascii_control_chart",
    "assess_process",
    "build_sections",
    "render_text",
]
