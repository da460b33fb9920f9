"""Analysis orchestrator.

``analyze`` is the single entry point into the statistics core. It turns a
raw table into a ``StatisticalResults`` object in one synchronous pass:

    variables -> descriptive, correlation, hypothesis tests, outliers,
                 regression, time series, control charts -> quality score

Example:
    >>> results = analyze(rows, ["age", "income", "date"])
    >>> results.overview.total_variables
    3
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from stat_analyzer.analysis.correlation import CorrelationResult, correlation_matrix
from stat_analyzer.analysis.descriptive import DescriptiveStats, calculate_descriptive_stats
from stat_analyzer.analysis.hypothesis import (
    HypothesisTest,
    NormalityAssessment,
    run_hypothesis_tests,
    run_normality_tests,
)
from stat_analyzer.analysis.outliers import OutlierReport, detect_outliers
from stat_analyzer.analysis.pairing import PairAlignment
from stat_analyzer.analysis.quality import QualityGrade, assess_data_quality
from stat_analyzer.analysis.quality_control import ControlChart, build_control_charts
from stat_analyzer.analysis.regression import RegressionResult, regression_analysis
from stat_analyzer.analysis.timeseries import TimeSeriesResult, time_series_analysis
from stat_analyzer.core.errors import MalformedInputError
from stat_analyzer.core.variables import Variable, detect_variables

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DataOverview:
    """Table-level summary.

    Attributes:
        total_observations: Number of rows
        total_variables: Number of columns
        numerical_variables: Columns detected as numerical
        categorical_variables: Columns detected as categorical
        missing_percentage: Missing cells as a percentage of all kept cells
        quality_grade: Overall data quality grade
        quality_score: Score behind the grade
    """

    total_observations: int
    total_variables: int
    numerical_variables: int
    categorical_variables: int
    missing_percentage: float
    quality_grade: QualityGrade
    quality_score: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_observations": self.total_observations,
            "total_variables": self.total_variables,
            "numerical_variables": self.numerical_variables,
            "categorical_variables": self.categorical_variables,
            "missing_values_percentage": self.missing_percentage,
            "data_quality": self.quality_grade.value,
            "data_quality_score": self.quality_score,
        }


@dataclass(frozen=True)
class StatisticalResults:
    """Complete, immutable result of one analysis."""

    overview: DataOverview
    variables: tuple[Variable, ...]
    descriptive_statistics: tuple[DescriptiveStats, ...]
    correlation: CorrelationResult | None
    hypothesis_tests: tuple[HypothesisTest, ...]
    normality_tests: tuple[NormalityAssessment, ...]
    outliers: tuple[OutlierReport, ...]
    regressions: tuple[RegressionResult, ...]
    time_series: TimeSeriesResult | None
    control_charts: tuple[ControlChart, ...]

    @property
    def numerical_names(self) -> list[str]:
        return [v.name for v in self.variables if v.is_numerical]

    @property
    def visualizations(self) -> dict[str, Any]:
        """Variables eligible for each chart type."""
        numeric = self.numerical_names
        return {
            "histograms": numeric,
            "boxplots": numeric,
            "scatterplots": numeric,
            "correlation_heatmap": "correlation_matrix" if self.correlation else None,
            "qq_plots": numeric,
            "density_plots": numeric,
            "control_charts": [c.variable for c in self.control_charts],
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serialisable dictionary."""
        return {
            "data_overview": self.overview.to_dict(),
            "variables": [v.to_dict() for v in self.variables],
            "descriptive_statistics": [d.to_dict() for d in self.descriptive_statistics],
            "correlation_analysis": self.correlation.to_dict() if self.correlation else None,
            "hypothesis_tests": [t.to_dict() for t in self.hypothesis_tests],
            "outliers": [o.to_dict() for o in self.outliers],
            "regression_analysis": [r.to_dict() for r in self.regressions],
            "time_series_analysis": self.time_series.to_dict() if self.time_series else None,
            "quality_control_charts": [c.to_dict() for c in self.control_charts],
            "visualizations": self.visualizations,
            "advanced_tests": {
                "normality_tests": [n.to_dict() for n in self.normality_tests],
            },
        }

    def format_for_display(self) -> str:
        """Format as human-readable string."""
        o = self.overview
        parts = [
            f"**Data Overview**: {o.total_observations} observations, "
            f"{o.total_variables} variables ({o.numerical_variables} numerical, "
            f"{o.categorical_variables} categorical), "
            f"{o.missing_percentage:.2f}% missing, quality {o.quality_grade.value}"
        ]
        parts.extend(d.format_for_display() for d in self.descriptive_statistics)
        parts.extend(t.format_for_display() for t in self.hypothesis_tests)
        parts.extend(r.format_for_display() for r in self.regressions)
        return "\n\n".join(parts)


def validate_table(rows: Sequence[Sequence[Any]], headers: Sequence[str]) -> None:
    """Reject tables the statistics cannot be computed on.

    Raises:
        MalformedInputError: On empty tables, ragged rows or empty columns
    """
    if not headers:
        raise MalformedInputError("Table has no columns")
    if not rows:
        raise MalformedInputError("Table has no rows")

    width = len(headers)
    for index, row in enumerate(rows):
        if len(row) != width:
            raise MalformedInputError(
                f"Row {index} has {len(row)} cells but there are {width} headers"
            )


def _check_columns(variables: Sequence[Variable]) -> None:
    for variable in variables:
        if not variable.values:
            raise MalformedInputError(f"Column '{variable.name}' has no non-missing values")


def analyze(
    rows: Sequence[Sequence[Any]],
    headers: Sequence[str],
    *,
    alignment: PairAlignment | str = PairAlignment.TRUNCATE,
    qc_subgroup_size: int = 1,
) -> StatisticalResults:
    """Run the full statistical analysis of a table.

    Args:
        rows: Table rows; ``rows[i][j]`` belongs to ``headers[j]``
        headers: Column names
        alignment: How pairs of variables are matched for correlation and
            regression ("truncate" or "row")
        qc_subgroup_size: Subgroup size for control charts (1 = individuals)

    Returns:
        StatisticalResults

    Raises:
        MalformedInputError: If the table cannot be analysed
    """
    validate_table(rows, headers)
    alignment = PairAlignment(alignment)
    logger.info(f"Analyzing table with {len(rows)} rows and {len(headers)} columns")

    variables = detect_variables(rows, headers)
    _check_columns(variables)

    descriptive = [calculate_descriptive_stats(v) for v in variables]
    correlation = correlation_matrix(variables, alignment)
    if correlation is None:
        logger.debug("Skipping correlation: fewer than two numerical variables")
    hypothesis_tests = run_hypothesis_tests(variables)
    normality = run_normality_tests(variables)
    outliers = detect_outliers(variables)
    regressions = regression_analysis(variables, alignment)
    time_series = time_series_analysis(variables)
    charts = build_control_charts(variables, qc_subgroup_size)

    total_missing = sum(v.missing_count for v in variables)
    total_values = sum(v.count for v in variables)
    missing_percentage = total_missing / (total_values + total_missing) * 100

    quality = assess_data_quality(missing_percentage, len(rows), outliers, normality)
    numerical_count = sum(1 for v in variables if v.is_numerical)

    overview = DataOverview(
        total_observations=len(rows),
        total_variables=len(headers),
        numerical_variables=numerical_count,
        categorical_variables=len(variables) - numerical_count,
        missing_percentage=missing_percentage,
        quality_grade=quality.grade,
        quality_score=quality.score,
    )

    logger.info(
        f"Analysis complete: {numerical_count} numerical variables, "
        f"{len(hypothesis_tests)} tests, {len(regressions)} regressions, "
        f"quality {quality.grade.value}"
    )

    return StatisticalResults(
        overview=overview,
        variables=tuple(variables),
        descriptive_statistics=tuple(descriptive),
        correlation=correlation,
        hypothesis_tests=tuple(hypothesis_tests),
        normality_tests=tuple(normality),
        outliers=tuple(outliers),
        regressions=tuple(regressions),
        time_series=time_series,
        control_charts=tuple(charts),
    )
