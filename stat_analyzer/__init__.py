"""StatAnalyzer: automated statistical analysis of tabular data files.

This package turns an uploaded table (CSV, Excel, PDF or Word) into
descriptive statistics, correlations, hypothesis tests, regression models,
time-series diagnostics and quality-control charts, with a narrative
interpretation and a downloadable report.
"""

__version__ = "0.1.0"


def __getattr__(name: str):
    """Lazy imports for main package exports."""
    if name == "analyze":
        from stat_analyzer.analysis import analyze

        return analyze
    if name == "StatisticalResults":
        from stat_analyzer.analysis import StatisticalResults

        return StatisticalResults
    if name == "parse_file":
        from stat_analyzer.ingest import parse_file

        return parse_file
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "StatisticalResults",
    "analyze",
    "parse_file",
    "__version__",
]
