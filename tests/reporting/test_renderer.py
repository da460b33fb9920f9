"""Tests for report rendering."""

import pytest

from stat_analyzer.analysis import StatisticalResults, analyze
from stat_analyzer.analysis.quality_control import ChartType, ControlChart
from stat_analyzer.llm import fallback_interpretation
from stat_analyzer.reporting import (
    ReportGenerator,
    ReportOptions,
    ascii_control_chart,
    assess_process,
    build_sections,
    render_text,
)
from stat_analyzer.reporting.renderer import fmt
from stat_analyzer.storage import AnalysisRecord


def make_record(**fields) -> AnalysisRecord:
    return AnalysisRecord(id=7, filename="sample.csv", file_type="csv", file_size=100, **fields)


def make_chart(points, out_of_control=()) -> ControlChart:
    return ControlChart(
        variable="x",
        chart_type=ChartType.X_BAR,
        center_line=0.0,
        upper_control_limit=3.0,
        lower_control_limit=-3.0,
        data_points=tuple(float(p) for p in points),
        out_of_control=tuple(out_of_control),
    )


class TestFormatting:
    """Tests for number formatting."""

    def test_values(self) -> None:
        """Test missing, infinite and finite values."""
        assert fmt(None) == "N/A"
        assert fmt(float("inf")) == "inf"
        assert fmt(1.23456, 2) == "1.23"


class TestBuildSections:
    """Tests for section layout."""

    def test_full_analysis(self, sample_results: StatisticalResults) -> None:
        """Test that every analysis section appears in order."""
        titles = [s.title for s in build_sections(sample_results, fallback_interpretation())]

        assert titles[:3] == ["Executive Summary", "Data Overview", "Descriptive Statistics"]
        for title in (
            "Statistical Tests",
            "Correlation Analysis",
            "Normality Assessment",
            "Regression Analysis",
            "Quality Control Charts",
            "Time Series Analysis",
        ):
            assert title in titles
        assert titles[-1] == "Methodology"

    def test_correlation_pairs_interpreted(self, sample_results: StatisticalResults) -> None:
        """Test that the strongest pairs carry a plain-language reading."""
        sections = build_sections(sample_results, fallback_interpretation())
        correlation = next(s for s in sections if s.title == "Correlation Analysis")

        (pair,) = correlation.bullets
        assert pair.startswith("age and income: r = ")
        assert "Very strong positive correlation, highly significant (p < 0.001)." in pair

    def test_optional_sections_omitted(self) -> None:
        """Test that absent analyses produce no sections."""
        results = analyze([["a"], ["b"]], ["label"])
        titles = [s.title for s in build_sections(results, fallback_interpretation())]

        assert "Correlation Analysis" not in titles
        assert "Regression Analysis" not in titles
        assert "Quality Control Charts" not in titles
        assert "Time Series Analysis" not in titles
        assert "Descriptive Statistics" in titles


class TestRenderText:
    """Tests for plain-text reports."""

    def test_content(self, sample_results: StatisticalResults) -> None:
        """Test the header and key sections."""
        text = render_text(
            make_record(research_question="Does income grow with age?"),
            sample_results,
            fallback_interpretation(),
        )

        assert text.startswith("STATISTICAL ANALYSIS REPORT")
        assert "File: sample.csv" in text
        assert "Research Question: Does income grow with age?" in text
        assert "DESCRIPTIVE STATISTICS" in text
        assert "Legend: * = In Control, X = Out of Control" in text
        assert "income ~ age" in text


class TestReportGenerator:
    """Tests for report files."""

    def test_text_report(self, tmp_path, sample_results: StatisticalResults) -> None:
        """Test writing a text report."""
        generator = ReportGenerator(tmp_path / "out")
        path = generator.generate(
            make_record(), sample_results, fallback_interpretation(), ReportOptions("text")
        )

        assert path.parent == tmp_path / "out"
        assert path.name.startswith("analysis_report_7_")
        assert path.suffix == ".txt"
        assert "DATA OVERVIEW" in path.read_text(encoding="utf-8")

    def test_pdf_report(self, tmp_path, sample_results: StatisticalResults) -> None:
        """Test writing a PDF report."""
        path = ReportGenerator(tmp_path).generate(
            make_record(research_question="A & B <test>"),
            sample_results,
            fallback_interpretation(),
        )

        assert path.suffix == ".pdf"
        assert path.read_bytes().startswith(b"%PDF")

    def test_unknown_format(self, tmp_path, sample_results: StatisticalResults) -> None:
        """Test rejection of unsupported formats."""
        with pytest.raises(ValueError, match="Unsupported report format"):
            ReportGenerator(tmp_path).generate(
                make_record(), sample_results, fallback_interpretation(), ReportOptions("html")
            )


class TestAsciiControlChart:
    """Tests for text control charts."""

    def test_markers_and_labels(self) -> None:
        """Test limit labels and point markers."""
        text = ascii_control_chart(make_chart([0, 1, -1, 5], out_of_control=(3,)))
        lines = text.splitlines()

        assert any(l.startswith("UCL |") for l in lines)
        assert any(l.startswith(" CL |") for l in lines)
        assert any(l.startswith("LCL |") for l in lines)
        assert "X" in text
        assert text.count("*") >= 3
        assert "UCL = 3.000, CL = 0.000, LCL = -3.000" in text

    def test_flat_chart(self) -> None:
        """Test a chart whose limits and points coincide."""
        chart = ControlChart(
            variable="x",
            chart_type=ChartType.X_BAR,
            center_line=1.0,
            upper_control_limit=1.0,
            lower_control_limit=1.0,
            data_points=(1.0, 1.0),
            out_of_control=(),
        )
        lines = ascii_control_chart(chart, height=5).splitlines()
        assert lines[2].endswith("**")

    def test_width_limit(self) -> None:
        """Test that points beyond the plot width are dropped."""
        text = ascii_control_chart(make_chart([0] * 100), width=20)
        assert all(len(line) <= 20 for line in text.splitlines()[:15])


class TestAssessProcess:
    """Tests for stability assessment."""

    def test_stable(self) -> None:
        """Test that in-control charts are stable."""
        assessment = assess_process([make_chart([0, 1]), make_chart([1, 0])])

        assert assessment.stability == "STABLE"
        assert "2 process(es) are in statistical control" in assessment.summary
        assert len(assessment.recommendations) == 4

    def test_mostly_stable(self) -> None:
        """Test fewer than half of the charts out of control."""
        charts = [make_chart([0]), make_chart([0]), make_chart([5], out_of_control=(0,))]
        assert assess_process(charts).stability == "MOSTLY STABLE"

    def test_unstable(self) -> None:
        """Test half or more of the charts out of control."""
        charts = [make_chart([0]), make_chart([5], out_of_control=(0,))]
        assessment = assess_process(charts)

        assert assessment.stability == "UNSTABLE"
        assert len(assessment.recommendations) == 7
