"""Pytest configuration and fixtures for StatAnalyzer tests."""

import pytest

from stat_analyzer.analysis import StatisticalResults, analyze
from stat_analyzer.config import Settings


def make_table(n: int = 50) -> tuple[list[list[str]], list[str]]:
    """Table with an increasing age, a linear income and a date column."""
    headers = ["age", "income", "date"]
    rows = [
        [str(20 + i), str(30000 + 1000 * i + (i % 3) * 50), f"2024-01-{(i % 28) + 1:02d}"]
        for i in range(n)
    ]
    return rows, headers


@pytest.fixture
def sample_table() -> tuple[list[list[str]], list[str]]:
    """Return the 50-row age/income/date table."""
    return make_table()


@pytest.fixture
def sample_results(sample_table) -> StatisticalResults:
    """Return the analysis of the sample table."""
    rows, headers = sample_table
    return analyze(rows, headers)


@pytest.fixture
def sample_csv(sample_table) -> bytes:
    """Return the sample table encoded as CSV."""
    rows, headers = sample_table
    lines = [",".join(headers)] + [",".join(row) for row in rows]
    return ("\n".join(lines) + "\n").encode("utf-8")


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings with no LLM keys and reports in a temporary directory."""
    return Settings(
        _env_file=None,
        openai_api_key="",
        anthropic_api_key="",
        reports_dir=tmp_path / "reports",
    )
