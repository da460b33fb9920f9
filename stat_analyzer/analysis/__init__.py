"""Statistical analysis for StatAnalyzer.

This module contains:
- Descriptive statistics (mean, median, mode, quartiles, frequencies)
- Pearson correlation matrix with significance
- Normality and one-sample location tests
- IQR outlier detection
- Pairwise linear regression
- Time-series diagnostics
- Quality-control charts
- Data quality scoring
"""

from stat_analyzer.analysis.correlation import CorrelationResult, correlation_matrix
from stat_analyzer.analysis.descriptive import DescriptiveStats, calculate_descriptive_stats
from stat_analyzer.analysis.engine import DataOverview, StatisticalResults, analyze
from stat_analyzer.analysis.hypothesis import (
    HypothesisTest,
    NormalityAssessment,
    run_hypothesis_tests,
    run_normality_tests,
)
from stat_analyzer.analysis.outliers import OutlierReport, detect_outliers
from stat_analyzer.analysis.pairing import PairAlignment
from stat_analyzer.analysis.quality import DataQuality, QualityGrade, assess_data_quality
from stat_analyzer.analysis.quality_control import (
    ChartType,
    ControlChart,
    build_control_charts,
    rule_violations,
)
from stat_analyzer.analysis.regression import RegressionResult, regression_analysis
from stat_analyzer.analysis.timeseries import TimeSeriesResult, Trend, time_series_analysis

__all__ = [
    # Orchestrator
    "analyze",
    "StatisticalResults",
    "DataOverview",
    "PairAlignment",
    # Components
    "calculate_descriptive_stats",
    "DescriptiveStats",
    "correlation_matrix",
    "CorrelationResult",
    "run_hypothesis_tests",
    "run_normality_tests",
    "HypothesisTest",
    "NormalityAssessment",
    "detect_outliers",
    "OutlierReport",
    "regression_analysis",
    "RegressionResult",
    "time_series_analysis",
    "TimeSeriesResult",
    "Trend",
    "build_control_charts",
    "rule_violations",
    "ControlChart",
    "ChartType",
    "assess_data_quality",
    "DataQuality",
    "QualityGrade",
]
