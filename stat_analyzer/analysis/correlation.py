"""Pairwise Pearson correlation across numerical variables."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np
from scipy import stats

from stat_analyzer.analysis.pairing import PairAlignment, paired_values
from stat_analyzer.core.variables import Variable, numerical_variables


@dataclass(frozen=True)
class CorrelationResult:
    """Correlation matrix over all numerical variables.

    Attributes:
        variables: Variable names, in matrix order
        matrix: Pearson r for each pair (diagonal is 1)
        p_values: Two-sided p-values (diagonal is 0)
        n_matrix: Number of pairs used for each cell
    """

    variables: tuple[str, ...]
    matrix: tuple[tuple[float, ...], ...]
    p_values: tuple[tuple[float, ...], ...]
    n_matrix: tuple[tuple[int, ...], ...]

    def get(self, x: str, y: str) -> tuple[float, float]:
        """Return (r, p) for two variable names."""
        i = self.variables.index(x)
        j = self.variables.index(y)
        return self.matrix[i][j], self.p_values[i][j]

    def strongest_pairs(self, limit: int = 5) -> list[tuple[str, str, float, float]]:
        """Off-diagonal pairs ordered by |r|, each pair listed once."""
        pairs = []
        for i, x in enumerate(self.variables):
            for j in range(i + 1, len(self.variables)):
                pairs.append((x, self.variables[j], self.matrix[i][j], self.p_values[i][j]))
        pairs.sort(key=lambda p: abs(p[2]), reverse=True)
        return pairs[:limit]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "variables": list(self.variables),
            "correlation_matrix": [list(row) for row in self.matrix],
            "p_values": [list(row) for row in self.p_values],
            "n_matrix": [list(row) for row in self.n_matrix],
        }


def pearson_r(x: np.ndarray, y: np.ndarray) -> float:
    """Pearson correlation; 0 when either side has zero variance or n < 2."""
    n = min(len(x), len(y))
    if n < 2:
        return 0.0
    if np.ptp(x[:n]) == 0 or np.ptp(y[:n]) == 0:
        return 0.0
    dx = x[:n] - x[:n].mean()
    dy = y[:n] - y[:n].mean()
    denominator = math.sqrt(float(np.sum(dx * dx)) * float(np.sum(dy * dy)))
    if denominator == 0:
        return 0.0
    r = float(np.sum(dx * dy)) / denominator
    return max(-1.0, min(1.0, r))


def correlation_p_value(r: float, n: int) -> float:
    """Two-sided p-value of r under the Student-t distribution with n-2 df."""
    if n < 3:
        return 1.0
    if abs(r) >= 1.0:
        return 0.0
    t = r * math.sqrt((n - 2) / (1 - r * r))
    p = 2 * float(stats.t.sf(abs(t), n - 2))
    return max(0.0, min(1.0, p))


def correlation_matrix(
    variables: Sequence[Variable],
    alignment: PairAlignment = PairAlignment.TRUNCATE,
) -> CorrelationResult | None:
    """Compute the Pearson correlation matrix of numerical variables.

    Args:
        variables: Detected variables (non-numerical ones are ignored)
        alignment: How to pair values of two variables

    Returns:
        CorrelationResult, or None with fewer than two numerical variables
    """
    numeric = numerical_variables(variables)
    k = len(numeric)
    if k < 2:
        return None

    matrix = [[0.0] * k for _ in range(k)]
    p_values = [[0.0] * k for _ in range(k)]
    n_matrix = [[0] * k for _ in range(k)]

    for i in range(k):
        for j in range(k):
            if i == j:
                matrix[i][j] = 1.0
                p_values[i][j] = 0.0
                n_matrix[i][j] = numeric[i].count
                continue
            x, y = paired_values(numeric[i], numeric[j], alignment)
            r = pearson_r(x, y)
            matrix[i][j] = r
            p_values[i][j] = correlation_p_value(r, len(x))
            n_matrix[i][j] = len(x)

    return CorrelationResult(
        variables=tuple(v.name for v in numeric),
        matrix=tuple(tuple(row) for row in matrix),
        p_values=tuple(tuple(row) for row in p_values),
        n_matrix=tuple(tuple(row) for row in n_matrix),
    )


def interpret_correlation(r: float, p: float) -> str:
    """Generate human-readable interpretation of a correlation."""
    abs_r = abs(r)

    if abs_r < 0.1:
        strength = "negligible"
    elif abs_r < 0.3:
        strength = "weak"
    elif abs_r < 0.5:
        strength = "moderate"
    elif abs_r < 0.7:
        strength = "strong"
    else:
        strength = "very strong"

    direction = "positive" if r > 0 else "negative"

    if p < 0.001:
        significance = "highly significant (p < 0.001)"
    elif p < 0.01:
        significance = "significant (p < 0.01)"
    elif p < 0.05:
        significance = "marginally significant (p < 0.05)"
    else:
        significance = "not statistically significant"

    return f"{strength.capitalize()} {direction} correlation, {significance}."
