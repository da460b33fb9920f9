"""Simple linear regression between pairs of numerical variables."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Any

import numpy as np
from scipy import stats

from stat_analyzer.analysis.pairing import PairAlignment, paired_values
from stat_analyzer.core.variables import Variable, numerical_variables

logger = logging.getLogger(__name__)

MIN_REGRESSION_VALUES = 10
BAND_Z = 1.96


def _finite(value: float) -> float | None:
    return value if math.isfinite(value) else None


@dataclass(frozen=True)
class RegressionResult:
    """Ordinary least squares fit of ``response`` on ``predictor``.

    Attributes:
        predictor: Name of the x variable
        response: Name of the y variable
        n: Number of paired observations used
        intercept: Fitted intercept
        slope: Fitted slope
        r_squared: Coefficient of determination
        adjusted_r_squared: R² adjusted for one predictor
        f_statistic: F statistic with (1, n-2) degrees of freedom
        p_value: p-value of the F test
        residuals: Observed minus fitted values
        predictions: Fitted values
        lower: Fitted values minus 1.96 residual standard deviations
        upper: Fitted values plus 1.96 residual standard deviations
        columns: Positions of predictor and response among the numerical
            variables, which tells apart columns sharing a header
    """

    predictor: str
    response: str
    n: int
    intercept: float
    slope: float
    r_squared: float
    adjusted_r_squared: float
    f_statistic: float
    p_value: float
    residuals: tuple[float, ...]
    predictions: tuple[float, ...]
    lower: tuple[float, ...]
    upper: tuple[float, ...]
    kind: str = "linear"
    columns: tuple[int, ...] = ()

    @property
    def coefficients(self) -> tuple[float, float]:
        return self.intercept, self.slope

    @property
    def significant(self) -> bool:
        return self.p_value <= 0.05

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": self.kind,
            "predictor": self.predictor,
            "response": self.response,
            "n": self.n,
            "coefficients": [self.intercept, self.slope],
            "r_squared": self.r_squared,
            "adjusted_r_squared": self.adjusted_r_squared,
            "f_statistic": _finite(self.f_statistic),
            "p_value": self.p_value,
            "residuals": list(self.residuals),
            "predictions": list(self.predictions),
            "confidence_intervals": {
                "lower": list(self.lower),
                "upper": list(self.upper),
            },
        }

    def format_for_display(self) -> str:
        """Format as human-readable string."""
        return "\n".join(
            [
                f"**{self.response} ~ {self.predictor}** (n={self.n})",
                f"  y = {self.intercept:.4g} + {self.slope:.4g}x",
                f"  R² = {self.r_squared:.4f} (adjusted {self.adjusted_r_squared:.4f})",
                f"  F = {self.f_statistic:.4g}, p = {self.p_value:.2e}",
            ]
        )


def fit_linear(
    x: np.ndarray,
    y: np.ndarray,
    predictor: str = "x",
    response: str = "y",
) -> RegressionResult | None:
    """Fit y = intercept + slope * x by least squares.

    Returns None when fewer than 3 points are given or x has zero range.
    """
    n = min(len(x), len(y))
    x = np.asarray(x[:n], dtype=float)
    y = np.asarray(y[:n], dtype=float)
    if n < 3:
        return None

    x_mean = x.mean()
    y_mean = y.mean()
    if np.ptp(x) == 0:
        return None
    sxx = float(np.sum((x - x_mean) ** 2))

    slope = float(np.sum((x - x_mean) * (y - y_mean))) / sxx
    intercept = float(y_mean - slope * x_mean)

    predictions = intercept + slope * x
    residuals = y - predictions

    sst = float(np.sum((y - y_mean) ** 2))
    sse = float(np.sum(residuals**2))
    r_squared = 1.0 - sse / sst if sst > 0 else 0.0
    adjusted = 1.0 - (1.0 - r_squared) * (n - 1) / (n - 2)

    if r_squared >= 1.0:
        f_statistic = math.inf
        p_value = 0.0
    else:
        f_statistic = r_squared / (1.0 - r_squared) * (n - 2)
        p_value = float(stats.f.sf(f_statistic, 1, n - 2))

    band = BAND_Z * float(residuals.std(ddof=0))

    return RegressionResult(
        predictor=predictor,
        response=response,
        n=n,
        intercept=intercept,
        slope=slope,
        r_squared=r_squared,
        adjusted_r_squared=adjusted,
        f_statistic=f_statistic,
        p_value=p_value,
        residuals=tuple(float(r) for r in residuals),
        predictions=tuple(float(p) for p in predictions),
        lower=tuple(float(p - band) for p in predictions),
        upper=tuple(float(p + band) for p in predictions),
    )


def regression_analysis(
    variables: Sequence[Variable],
    alignment: PairAlignment = PairAlignment.TRUNCATE,
) -> list[RegressionResult]:
    """Fit every unordered pair of numerical variables with more than 10 values.

    The earlier variable in the table is the predictor.
    """
    numeric = numerical_variables(variables)
    results: list[RegressionResult] = []

    for i in range(len(numeric) - 1):
        for j in range(i + 1, len(numeric)):
            x_var, y_var = numeric[i], numeric[j]
            if x_var.count <= MIN_REGRESSION_VALUES or y_var.count <= MIN_REGRESSION_VALUES:
                continue
            x, y = paired_values(x_var, y_var, alignment)
            fit = fit_linear(x, y, predictor=x_var.name, response=y_var.name)
            if fit is None:
                logger.debug(f"Skipping regression {y_var.name} ~ {x_var.name}: degenerate predictor")
                continue
            results.append(replace(fit, columns=(i, j)))

    return results
