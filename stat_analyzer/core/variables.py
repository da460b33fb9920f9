"""Variable detection for raw tables.

Each column of the input table becomes one ``Variable``. A column is
numerical when strictly more than 80% of its non-missing cells parse as
finite numbers; otherwise it is categorical.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from stat_analyzer.core.cells import Missing, RawCell, cell_text, parse_number, to_cell

NUMERICAL_THRESHOLD = 0.8


class VariableKind(str, Enum):
    """Measurement level of a variable."""

    NUMERICAL = "numerical"
    CATEGORICAL = "categorical"


@dataclass(frozen=True)
class Variable:
    """A typed column of the input table.

    Attributes:
        name: Column header
        kind: Numerical or categorical
        values: Parsed non-missing values (floats or strings)
        missing_count: Rows with an empty cell in this column
        positions: Original row index of each entry in ``values``
    """

    name: str
    kind: VariableKind
    values: tuple[Any, ...]
    missing_count: int
    positions: tuple[int, ...] = ()

    @property
    def is_numerical(self) -> bool:
        return self.kind == VariableKind.NUMERICAL

    @property
    def count(self) -> int:
        return len(self.values)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "type": self.kind.value,
            "values": list(self.values),
            "missing_count": self.missing_count,
        }


def _detect_column(name: str, cells: list[RawCell]) -> Variable:
    present = [
        (row, cell) for row, cell in enumerate(cells) if not isinstance(cell, Missing)
    ]
    missing_count = len(cells) - len(present)

    parsed = [(row, parse_number(cell)) for row, cell in present]
    numeric = [(row, value) for row, value in parsed if value is not None]

    if len(numeric) > len(present) * NUMERICAL_THRESHOLD:
        return Variable(
            name=name,
            kind=VariableKind.NUMERICAL,
            values=tuple(value for _, value in numeric),
            missing_count=missing_count,
            positions=tuple(row for row, _ in numeric),
        )

    return Variable(
        name=name,
        kind=VariableKind.CATEGORICAL,
        values=tuple(cell_text(cell) for _, cell in present),
        missing_count=missing_count,
        positions=tuple(row for row, _ in present),
    )


def detect_variables(
    rows: Sequence[Sequence[Any]],
    headers: Sequence[str],
) -> list[Variable]:
    """Classify every column of a table.

    Numerical variables silently drop cells that do not parse as numbers;
    those cells are not counted as missing.

    Args:
        rows: Table rows, each aligned with ``headers``
        headers: Column names (need not be unique)

    Returns:
        One Variable per header, in header order

    Example:
        >>> detect_variables([["1", "a"], ["2", "b"]], ["x", "label"])[0].kind
        <VariableKind.NUMERICAL: 'numerical'>
    """
    variables = []
    for index, header in enumerate(headers):
        column = [to_cell(row[index]) for row in rows]
        variables.append(_detect_column(str(header), column))
    return variables


def numerical_variables(variables: Sequence[Variable]) -> list[Variable]:
    """Filter to numerical variables, preserving order."""
    return [v for v in variables if v.is_numerical]
