"""IQR-based outlier detection (Tukey fences)."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from stat_analyzer.analysis.descriptive import quantile
from stat_analyzer.core.variables import Variable, numerical_variables

FENCE_MULTIPLIER = 1.5


@dataclass(frozen=True)
class OutlierReport:
    """Outliers of one numerical variable.

    Indices are positions within the variable's own value sequence, not
    original row numbers.
    """

    variable: str
    indices: tuple[int, ...]
    values: tuple[float, ...]
    lower_fence: float
    upper_fence: float

    @property
    def count(self) -> int:
        return len(self.indices)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "variable": self.variable,
            "outlier_indices": list(self.indices),
            "outlier_values": list(self.values),
            "lower_fence": self.lower_fence,
            "upper_fence": self.upper_fence,
        }


def tukey_fences(values: Sequence[float]) -> tuple[float, float]:
    """Return (Q1 - 1.5 IQR, Q3 + 1.5 IQR)."""
    q1 = quantile(values, 0.25)
    q3 = quantile(values, 0.75)
    iqr = q3 - q1
    return q1 - FENCE_MULTIPLIER * iqr, q3 + FENCE_MULTIPLIER * iqr


def detect_outliers(variables: Sequence[Variable]) -> list[OutlierReport]:
    """Flag values outside the Tukey fences.

    Example:
        >>> [r.values for r in detect_outliers([var])]   # var = [1, 2, 3, 4, 5, 100]
        [(100.0,)]
    """
    reports = []
    for variable in numerical_variables(variables):
        if not variable.values:
            continue
        lower, upper = tukey_fences(variable.values)
        flagged = [
            (i, float(v)) for i, v in enumerate(variable.values) if v < lower or v > upper
        ]
        if not flagged:
            continue
        reports.append(
            OutlierReport(
                variable=variable.name,
                indices=tuple(i for i, _ in flagged),
                values=tuple(v for _, v in flagged),
                lower_fence=lower,
                upper_fence=upper,
            )
        )
    return reports
