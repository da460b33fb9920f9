"""Descriptive statistics for detected variables.

Numerical variables get location, spread and quartiles; categorical
variables get a frequency table and mode.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from stat_analyzer.core.variables import Variable, VariableKind


def quantile(values: Sequence[float], q: float) -> float:
    """Quantile with linear interpolation between order statistics."""
    return float(np.quantile(np.asarray(values, dtype=float), q, method="linear"))


def numeric_mode(values: Sequence[float]) -> float:
    """Most frequent value; ties go to the smallest value.

    An all-unique sample therefore has its minimum as mode.
    """
    counts = Counter(values)
    best = max(counts.values())
    return float(min(v for v, c in counts.items() if c == best))


def categorical_mode(frequencies: dict[str, int]) -> str | None:
    """Key with the highest count; ties go to the first-seen key."""
    mode: str | None = None
    best = 0
    for key, count in frequencies.items():
        if count > best:
            mode, best = key, count
    return mode


@dataclass(frozen=True)
class DescriptiveStats:
    """Summary statistics for one variable.

    Attributes:
        variable: Variable name
        kind: Numerical or categorical
        count: Number of non-missing values
        missing: Number of missing cells
        mean: Arithmetic mean (numerical only)
        median: Median value (numerical only)
        mode: Most frequent value
        std: Population standard deviation (numerical only)
        variance: Population variance (numerical only)
        min: Minimum value (numerical only)
        max: Maximum value (numerical only)
        q1: 25th percentile (numerical only)
        q3: 75th percentile (numerical only)
        frequencies: Value counts (categorical only)
    """

    variable: str
    kind: VariableKind
    count: int
    missing: int
    mean: float | None = None
    median: float | None = None
    mode: float | str | None = None
    std: float | None = None
    variance: float | None = None
    min: float | None = None
    max: float | None = None
    q1: float | None = None
    q3: float | None = None
    frequencies: dict[str, int] = field(default_factory=dict)

    @property
    def is_numerical(self) -> bool:
        return self.kind == VariableKind.NUMERICAL

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        base: dict[str, Any] = {
            "variable": self.variable,
            "type": self.kind.value,
            "count": self.count,
            "missing": self.missing,
            "mode": self.mode,
        }
        if self.is_numerical:
            base.update(
                {
                    "mean": self.mean,
                    "median": self.median,
                    "standard_deviation": self.std,
                    "variance": self.variance,
                    "min": self.min,
                    "max": self.max,
                    "q1": self.q1,
                    "q3": self.q3,
                }
            )
        else:
            base["frequencies"] = dict(self.frequencies)
        return base

    def format_for_display(self) -> str:
        """Format as human-readable string."""
        if not self.is_numerical:
            return "\n".join(
                [
                    f"**{self.variable}** (categorical, n={self.count})",
                    f"  Mode: {self.mode}",
                    f"  Unique Values: {len(self.frequencies)}",
                ]
            )
        return "\n".join(
            [
                f"**{self.variable}** (n={self.count}, missing={self.missing})",
                f"  Mean: {self.mean:.4g}",
                f"  Median: {self.median:.4g}",
                f"  Std Dev: {self.std:.4g}",
                f"  Range: [{self.min:.4g}, {self.max:.4g}]",
                f"  IQR: [{self.q1:.4g}, {self.q3:.4g}]",
            ]
        )


def calculate_descriptive_stats(variable: Variable) -> DescriptiveStats:
    """Compute descriptive statistics for a single variable.

    Args:
        variable: A detected variable with at least one value

    Returns:
        DescriptiveStats for the variable

    Example:
        >>> stats = calculate_descriptive_stats(variable)
        >>> print(stats.format_for_display())
    """
    if variable.is_numerical and variable.values:
        data = np.asarray(variable.values, dtype=float)
        return DescriptiveStats(
            variable=variable.name,
            kind=variable.kind,
            count=len(data),
            missing=variable.missing_count,
            mean=float(data.mean()),
            median=float(np.median(data)),
            mode=numeric_mode(variable.values),
            std=float(data.std(ddof=0)),
            variance=float(data.var(ddof=0)),
            min=float(data.min()),
            max=float(data.max()),
            q1=quantile(data, 0.25),
            q3=quantile(data, 0.75),
        )

    frequencies: dict[str, int] = {}
    for value in variable.values:
        key = str(value)
        frequencies[key] = frequencies.get(key, 0) + 1

    return DescriptiveStats(
        variable=variable.name,
        kind=variable.kind,
        count=len(variable.values),
        missing=variable.missing_count,
        mode=categorical_mode(frequencies),
        frequencies=frequencies,
    )
