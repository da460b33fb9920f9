"""Hypothesis and normality tests for numerical variables.

For each numerical variable:
- Shapiro-Wilk normality test (more than 3 values)
- One-sample t-test against a reference mean of 0 (more than 1 value)

Normality assessments additionally report the Jarque-Bera statistic and
feed the data quality score.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np
from scipy import stats

from stat_analyzer.core.variables import Variable, numerical_variables

logger = logging.getLogger(__name__)

SIGNIFICANCE_LEVEL = 0.05
MIN_NORMALITY_VALUES = 3


def _finite(value: float | None) -> float | None:
    if value is None or not math.isfinite(value):
        return None
    return value


@dataclass(frozen=True)
class HypothesisTest:
    """Result of a single hypothesis test.

    Attributes:
        name: Test name, including the variable it was run on
        variable: Variable the test was run on
        statistic: Test statistic
        p_value: Two-sided p-value
        degrees_of_freedom: Degrees of freedom, where applicable
        significant: Whether p_value <= 0.05
        interpretation: Human-readable conclusion
    """

    name: str
    variable: str
    statistic: float
    p_value: float
    significant: bool
    interpretation: str
    degrees_of_freedom: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "test_name": self.name,
            "variable": self.variable,
            "statistic": _finite(self.statistic),
            "p_value": self.p_value,
            "degrees_of_freedom": self.degrees_of_freedom,
            "significant": self.significant,
            "interpretation": self.interpretation,
        }

    def format_for_display(self) -> str:
        """Format as human-readable string."""
        df = f", df = {self.degrees_of_freedom}" if self.degrees_of_freedom is not None else ""
        return (
            f"**{self.name}**: statistic = {self.statistic:.4f}, "
            f"p = {self.p_value:.4f}{df}\n  {self.interpretation}"
        )


@dataclass(frozen=True)
class NormalityAssessment:
    """Normality statistics for one variable.

    Attributes:
        variable: Variable name
        shapiro_wilk: Shapiro-Wilk W statistic
        p_value: Shapiro-Wilk p-value
        jarque_bera: Jarque-Bera statistic
        jarque_bera_p: Jarque-Bera p-value
    """

    variable: str
    shapiro_wilk: float
    p_value: float
    jarque_bera: float
    jarque_bera_p: float

    @property
    def is_normal(self) -> bool:
        return self.p_value > SIGNIFICANCE_LEVEL

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "variable": self.variable,
            "shapiro_wilk": self.shapiro_wilk,
            "p_value": self.p_value,
            "jarque_bera": self.jarque_bera,
            "jarque_bera_p": self.jarque_bera_p,
        }


def shapiro_wilk(values: Sequence[float]) -> tuple[float, float]:
    """Return (W, p) for a sample of at least 3 values.

    A sample with zero range is treated as perfectly normal (W=1, p=1).
    """
    data = np.asarray(values, dtype=float)
    if np.ptp(data) == 0:
        return 1.0, 1.0
    w, p = stats.shapiro(data)
    return float(w), float(p)


def jarque_bera(values: Sequence[float]) -> tuple[float, float]:
    """Return (JB, p); a sample with zero range gives (0, 1)."""
    data = np.asarray(values, dtype=float)
    if np.ptp(data) == 0:
        return 0.0, 1.0
    result = stats.jarque_bera(data)
    return float(result.statistic), float(result.pvalue)


def shapiro_wilk_test(variable: Variable) -> HypothesisTest:
    """Shapiro-Wilk normality test for one variable."""
    w, p = shapiro_wilk(variable.values)
    return HypothesisTest(
        name=f"Shapiro-Wilk Normality Test ({variable.name})",
        variable=variable.name,
        statistic=w,
        p_value=p,
        significant=p <= SIGNIFICANCE_LEVEL,
        interpretation=(
            "Data appears to be normally distributed"
            if p > SIGNIFICANCE_LEVEL
            else "Data may not be normally distributed"
        ),
    )


def one_sample_t_test(variable: Variable, population_mean: float = 0.0) -> HypothesisTest | None:
    """One-sample t-test of the variable mean against ``population_mean``.

    Returns None when the sample has zero variance.
    """
    data = np.asarray(variable.values, dtype=float)
    n = len(data)
    if n < 2 or np.ptp(data) == 0:
        logger.debug(f"Skipping t-test for {variable.name}: zero variance")
        return None
    sample_std = float(data.std(ddof=1))

    t_statistic = (float(data.mean()) - population_mean) / (sample_std / math.sqrt(n))
    df = n - 1
    p_value = min(1.0, 2 * float(stats.t.sf(abs(t_statistic), df)))
    significant = p_value <= SIGNIFICANCE_LEVEL

    return HypothesisTest(
        name=f"One-Sample T-Test ({variable.name})",
        variable=variable.name,
        statistic=t_statistic,
        p_value=p_value,
        degrees_of_freedom=df,
        significant=significant,
        interpretation=(
            "Sample mean is significantly different from population mean"
            if significant
            else "No significant difference from population mean"
        ),
    )


def run_hypothesis_tests(variables: Sequence[Variable]) -> list[HypothesisTest]:
    """Run normality tests, then one-sample t-tests, over numerical variables."""
    numeric = numerical_variables(variables)
    tests: list[HypothesisTest] = []

    for variable in numeric:
        if variable.count > MIN_NORMALITY_VALUES:
            tests.append(shapiro_wilk_test(variable))

    for variable in numeric:
        if variable.count > 1:
            t_test = one_sample_t_test(variable)
            if t_test is not None:
                tests.append(t_test)

    return tests


def run_normality_tests(variables: Sequence[Variable]) -> list[NormalityAssessment]:
    """Shapiro-Wilk and Jarque-Bera statistics for each numerical variable."""
    assessments = []
    for variable in numerical_variables(variables):
        if variable.count < MIN_NORMALITY_VALUES:
            logger.debug(f"Skipping normality assessment for {variable.name}: n={variable.count}")
            continue
        w, p = shapiro_wilk(variable.values)
        jb, jb_p = jarque_bera(variable.values)
        assessments.append(
            NormalityAssessment(
                variable=variable.name,
                shapiro_wilk=w,
                p_value=p,
                jarque_bera=jb,
                jarque_bera_p=jb_p,
            )
        )
    return assessments
