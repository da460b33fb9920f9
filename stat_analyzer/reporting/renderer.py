"""Analysis report rendering.

Reports are produced as PDF (reportlab platypus) or plain text. Both formats
share the same section order:

    title, executive summary, data overview, descriptive statistics,
    hypothesis tests, correlation, normality, regression, control charts,
    time series, interpretation, methodology

Optional sections are left out when the analysis produced nothing for them.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Literal
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import (
    PageBreak,
    Paragraph,
    Preformatted,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from stat_analyzer.analysis.correlation import interpret_correlation
from stat_analyzer.analysis.engine import StatisticalResults
from stat_analyzer.analysis.quality_control import rule_violations
from stat_analyzer.llm.interpretation import Interpretation
from stat_analyzer.reporting.control_charts import (
    ascii_control_chart,
    assess_process,
    chart_title,
)
from stat_analyzer.storage.repository import AnalysisRecord

logger = logging.getLogger(__name__)

REPORT_TITLE = "Statistical Analysis Report"
MATRIX_LABEL_WIDTH = 12
MAX_AUTOCORRELATION_LAGS = 5

STANDARD_PROCEDURES = (
    "Variable type detection (numerical when more than 80% of values parse as numbers)",
    "Outlier detection using the 1.5 x IQR rule",
    "Statistical significance tested at alpha = 0.05",
    "Correlation analysis using the Pearson correlation coefficient",
    "Normality testing using Shapiro-Wilk and Jarque-Bera",
    "Shewhart control charts with 3-sigma limits",
)

TABLE_STYLE = TableStyle(
    [
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.black),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
    ]
)


@dataclass(frozen=True)
class ReportOptions:
    """Report rendering options."""

    format: Literal["pdf", "text"] = "pdf"

    @property
    def extension(self) -> str:
        return "pdf" if self.format == "pdf" else "txt"


def fmt(value: float | None, digits: int = 3) -> str:
    """Format a number for a report cell."""
    if value is None:
        return "N/A"
    if isinstance(value, float) and math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return f"{value:.{digits}f}"


@dataclass(frozen=True)
class Section:
    """A titled block of report content.

    ``table`` rows (header first) are rendered as a grid in PDFs and as
    aligned columns in text reports. ``preformatted`` blocks keep their
    spacing in both.
    """

    title: str
    paragraphs: tuple[str, ...] = ()
    table: tuple[tuple[str, ...], ...] = ()
    bullets: tuple[str, ...] = ()
    preformatted: tuple[str, ...] = ()


def build_sections(
    results: StatisticalResults,
    interpretation: Interpretation,
) -> list[Section]:
    """Lay out report content independent of output format."""
    sections = [
        Section("Executive Summary", paragraphs=(interpretation.executive_summary,)),
        _overview_section(results),
        _descriptive_section(results),
    ]

    if results.hypothesis_tests:
        sections.append(_hypothesis_section(results))
    if results.correlation is not None:
        sections.append(_correlation_section(results))
    if results.normality_tests:
        sections.append(_normality_section(results))
    if results.regressions:
        sections.append(_regression_section(results))
    if results.control_charts:
        sections.append(_control_chart_section(results))
    if results.time_series is not None:
        sections.append(_time_series_section(results))

    sections.extend(_interpretation_sections(interpretation))
    sections.append(
        Section(
            "Methodology",
            paragraphs=(interpretation.methodology,) if interpretation.methodology else (),
            bullets=STANDARD_PROCEDURES,
        )
    )
    return sections


def _overview_section(results: StatisticalResults) -> Section:
    o = results.overview
    rows = [("Variable", "Type", "Count", "Missing")]
    rows.extend(
        (v.name, v.kind.value, str(v.count), str(v.missing_count)) for v in results.variables
    )
    return Section(
        "Data Overview",
        paragraphs=(
            f"Total Observations: {o.total_observations}",
            f"Total Variables: {o.total_variables}",
            f"Numerical Variables: {o.numerical_variables}",
            f"Categorical Variables: {o.categorical_variables}",
            f"Missing Values: {o.missing_percentage:.2f}%",
            f"Data Quality: {o.quality_grade.value} (score {o.quality_score:.1f})",
        ),
        table=tuple(rows),
    )


def _descriptive_section(results: StatisticalResults) -> Section:
    rows = [("Variable", "Type", "Count", "Mean", "Median", "Std Dev", "Min", "Max", "Mode")]
    for d in results.descriptive_statistics:
        if d.is_numerical:
            rows.append(
                (
                    d.variable,
                    d.kind.value,
                    str(d.count),
                    fmt(d.mean),
                    fmt(d.median),
                    fmt(d.std),
                    fmt(d.min),
                    fmt(d.max),
                    fmt(d.mode) if isinstance(d.mode, float) else "N/A",
                )
            )
        else:
            rows.append(
                (
                    d.variable,
                    d.kind.value,
                    str(d.count),
                    "",
                    "",
                    "",
                    "",
                    f"{len(d.frequencies)} unique",
                    str(d.mode) if d.mode is not None else "N/A",
                )
            )
    return Section("Descriptive Statistics", table=tuple(rows))


def _hypothesis_section(results: StatisticalResults) -> Section:
    rows = [("Test", "Statistic", "p-value", "Significant")]
    rows.extend(
        (t.name, fmt(t.statistic, 4), fmt(t.p_value, 4), "Yes" if t.significant else "No")
        for t in results.hypothesis_tests
    )
    return Section(
        "Statistical Tests",
        table=tuple(rows),
        bullets=tuple(f"{t.name}: {t.interpretation}" for t in results.hypothesis_tests),
    )


def _correlation_section(results: StatisticalResults) -> Section:
    corr = results.correlation
    assert corr is not None
    header = ("Variable", *(name[:MATRIX_LABEL_WIDTH] for name in corr.variables))
    rows = [header]
    for name, row in zip(corr.variables, corr.matrix):
        rows.append((name[:MATRIX_LABEL_WIDTH], *(fmt(r) for r in row)))

    strongest = tuple(
        f"{x} and {y}: r = {r:.3f}, p = {p:.4f}. {interpret_correlation(r, p)}"
        for x, y, r, p in corr.strongest_pairs()
    )
    return Section("Correlation Analysis", table=tuple(rows), bullets=strongest)


def _normality_section(results: StatisticalResults) -> Section:
    rows = [("Variable", "Shapiro-Wilk", "p-value", "Jarque-Bera", "JB p-value", "Distribution")]
    rows.extend(
        (
            n.variable,
            fmt(n.shapiro_wilk, 4),
            fmt(n.p_value, 4),
            fmt(n.jarque_bera, 4),
            fmt(n.jarque_bera_p, 4),
            "Normal" if n.is_normal else "Non-Normal",
        )
        for n in results.normality_tests
    )
    return Section("Normality Assessment", table=tuple(rows))


def _regression_section(results: StatisticalResults) -> Section:
    paragraphs = []
    for index, reg in enumerate(results.regressions, start=1):
        paragraphs.append(
            f"{reg.kind.upper()} Regression Model {index}: {reg.response} ~ {reg.predictor} "
            f"(n = {reg.n}). Equation: y = {fmt(reg.intercept, 4)} + {fmt(reg.slope, 4)}x. "
            f"R² = {fmt(reg.r_squared, 4)}, adjusted R² = {fmt(reg.adjusted_r_squared, 4)}, "
            f"F = {fmt(reg.f_statistic, 4)}, p = {fmt(reg.p_value, 4)} "
            f"({'Significant' if reg.significant else 'Not Significant'})."
        )
    return Section("Regression Analysis", paragraphs=tuple(paragraphs))


def _control_chart_section(results: StatisticalResults) -> Section:
    paragraphs = []
    plots = []
    for chart in results.control_charts:
        status = "IN STATISTICAL CONTROL" if chart.in_control else "OUT OF CONTROL"
        text = (
            f"{chart_title(chart)}: CL = {fmt(chart.center_line, 4)}, "
            f"UCL = {fmt(chart.upper_control_limit, 4)}, "
            f"LCL = {fmt(chart.lower_control_limit, 4)}, "
            f"{len(chart.data_points)} points, "
            f"{len(chart.out_of_control)} out of control. Process status: {status}."
        )
        if chart.out_of_control:
            points = ", ".join(str(i) for i in chart.out_of_control)
            text += f" Special causes detected at points: {points}."
        violations = rule_violations(chart)
        if violations:
            text += " " + "; ".join(violations) + "."
        paragraphs.append(text)
        plots.append(f"{chart_title(chart)}\n{ascii_control_chart(chart)}")

    assessment = assess_process(results.control_charts)
    paragraphs.append(assessment.summary)
    return Section(
        "Quality Control Charts",
        paragraphs=tuple(paragraphs),
        bullets=assessment.recommendations,
        preformatted=tuple(plots),
    )


def _time_series_section(results: StatisticalResults) -> Section:
    ts = results.time_series
    assert ts is not None
    paragraphs = [
        f"Series: {ts.series_variable} (time column: {ts.time_variable})",
        f"Trend: {ts.trend.value.upper()}",
        f"Seasonality: {'DETECTED' if ts.seasonality else 'NOT DETECTED'}",
    ]
    lags = tuple(
        f"Lag {lag}: {value:.4f}"
        for lag, value in enumerate(ts.autocorrelation[:MAX_AUTOCORRELATION_LAGS], start=1)
    )
    return Section("Time Series Analysis", paragraphs=tuple(paragraphs), bullets=lags)


def _interpretation_sections(interpretation: Interpretation) -> list[Section]:
    sections = []
    if interpretation.key_findings:
        sections.append(Section("Key Findings", bullets=tuple(interpretation.key_findings)))
    for title, text in (
        ("Statistical Significance", interpretation.statistical_significance),
        ("Practical Implications", interpretation.practical_implications),
        ("Limitations", interpretation.limitations),
    ):
        if text:
            sections.append(Section(title, paragraphs=(text,)))
    if interpretation.recommendations:
        sections.append(
            Section("Recommendations", bullets=tuple(interpretation.recommendations))
        )
    return sections


def render_text(
    record: AnalysisRecord,
    results: StatisticalResults,
    interpretation: Interpretation,
) -> str:
    """Render the report as plain text."""
    lines = [
        REPORT_TITLE.upper(),
        "=" * len(REPORT_TITLE),
        "",
        f"File: {record.filename}",
        f"Date: {datetime.now().strftime('%Y-%m-%d')}",
    ]
    if record.research_question:
        lines.append(f"Research Question: {record.research_question}")

    for section in build_sections(results, interpretation):
        lines += ["", section.title.upper(), "-" * len(section.title)]
        lines += list(section.paragraphs)
        if section.table:
            lines += ["", *_text_table(section.table)]
        if section.bullets:
            lines += ["", *(f"{i}. {b}" for i, b in enumerate(section.bullets, start=1))]
        for block in section.preformatted:
            lines += ["", *(f"  {line}" for line in block.splitlines())]

    lines.append("")
    return "\n".join(lines)


def _text_table(rows: tuple[tuple[str, ...], ...]) -> list[str]:
    widths = [max(len(row[i]) for row in rows) for i in range(len(rows[0]))]
    return ["  ".join(cell.ljust(w) for cell, w in zip(row, widths)).rstrip() for row in rows]


def render_pdf(
    path: Path,
    record: AnalysisRecord,
    results: StatisticalResults,
    interpretation: Interpretation,
) -> None:
    """Render the report as a PDF at ``path``."""
    doc = SimpleDocTemplate(str(path), pagesize=A4, title=REPORT_TITLE)
    styles = getSampleStyleSheet()
    story = [
        Paragraph(REPORT_TITLE, styles["Title"]),
        Spacer(1, 12),
        Paragraph(f"File: {escape(record.filename)}", styles["Normal"]),
        Paragraph(f"Generated: {datetime.now().strftime('%Y-%m-%d')}", styles["Normal"]),
    ]
    if record.research_question:
        story.append(
            Paragraph(f"Research Question: {escape(record.research_question)}", styles["Normal"])
        )

    for section in build_sections(results, interpretation):
        story.append(PageBreak())
        story.append(Paragraph(escape(section.title), styles["Heading2"]))
        for text in section.paragraphs:
            story.append(Paragraph(escape(text), styles["Normal"]))
            story.append(Spacer(1, 4))
        if section.table:
            table = Table([list(row) for row in section.table], repeatRows=1)
            table.setStyle(TABLE_STYLE)
            story.append(Spacer(1, 6))
            story.append(table)
        if section.bullets:
            story.append(Spacer(1, 6))
            for bullet in section.bullets:
                story.append(Paragraph(escape(bullet), styles["Normal"], bulletText="•"))
        for block in section.preformatted:
            story.append(Spacer(1, 6))
            story.append(Preformatted(block, styles["Code"]))

    doc.build(story)


class ReportGenerator:
    """Writes analysis reports into a directory.

    Args:
        reports_dir: Output directory, created on first use

    Example:
        >>> generator = ReportGenerator(Path("reports"))
        >>> path = generator.generate(record, results, interpretation, ReportOptions("text"))
        >>> path.name
        'analysis_report_1_1718000000000.txt'
    """

    def __init__(self, reports_dir: Path) -> None:
        self.reports_dir = Path(reports_dir)

    def report_path(self, analysis_id: int, options: ReportOptions) -> Path:
        timestamp = int(time.time() * 1000)
        return self.reports_dir / f"analysis_report_{analysis_id}_{timestamp}.{options.extension}"

    def generate(
        self,
        record: AnalysisRecord,
        results: StatisticalResults,
        interpretation: Interpretation,
        options: ReportOptions | None = None,
    ) -> Path:
        """Render a report and return its path.

        Raises:
            ValueError: If the format is not "pdf" or "text"
        """
        options = options or ReportOptions()
        if options.format not in ("pdf", "text"):
            raise ValueError(f"Unsupported report format: {options.format}")

        self.reports_dir.mkdir(parents=True, exist_ok=True)
        path = self.report_path(record.id, options)

        if options.format == "pdf":
            render_pdf(path, record, results, interpretation)
        else:
            path.write_text(render_text(record, results, interpretation), encoding="utf-8")

        logger.info(f"Wrote {options.format} report for analysis {record.id} to {path}")
        return path
