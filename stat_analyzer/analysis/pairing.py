"""Pairing of two numerical variables for bivariate statistics.

Missing cells are removed per column, so two value sequences of the same
table may have different lengths. Two strategies are available:

- ``TRUNCATE``: pair the first ``min(len(x), len(y))`` values positionally.
  This can pair values that came from different rows once a column has
  missing cells.
- ``ROW``: pair only values that were observed on the same original row.
"""

from __future__ import annotations

from enum import Enum

import numpy as np

from stat_analyzer.core.variables import Variable


class PairAlignment(str, Enum):
    """How two variables are paired."""

    TRUNCATE = "truncate"
    ROW = "row"


def paired_values(
    x: Variable,
    y: Variable,
    alignment: PairAlignment = PairAlignment.TRUNCATE,
) -> tuple[np.ndarray, np.ndarray]:
    """Return equally long arrays of paired observations."""
    if PairAlignment(alignment) == PairAlignment.ROW:
        y_by_row = dict(zip(y.positions, y.values))
        pairs = [(v, y_by_row[row]) for row, v in zip(x.positions, x.values) if row in y_by_row]
        if not pairs:
            return np.empty(0), np.empty(0)
        xs, ys = zip(*pairs)
        return np.asarray(xs, dtype=float), np.asarray(ys, dtype=float)

    n = min(len(x.values), len(y.values))
    return (
        np.asarray(x.values[:n], dtype=float),
        np.asarray(y.values[:n], dtype=float),
    )
