"""Raw cell values for tabular input.

Every value read from an uploaded file is normalised into one of three
variants before any statistics are computed:

- ``Missing``: empty strings, ``None`` and NaN-like markers
- ``Text``: any non-empty value that is not already a finite number
- ``Number``: finite numeric values

Example:
    >>> to_cell("  ")
    Missing()
    >>> parse_number(to_cell(" 3.5 "))
    3.5
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Any

import pandas as pd


@dataclass(frozen=True)
class Missing:
    """An empty or null cell."""


@dataclass(frozen=True)
class Text:
    """A non-empty textual cell."""

    value: str


@dataclass(frozen=True)
class Number:
    """A finite numeric cell."""

    value: float


RawCell = Missing | Text | Number

MISSING = Missing()


def _is_null(raw: Any) -> bool:
    """Check for None, NaN, pd.NA and pd.NaT without tripping on arrays."""
    if raw is None:
        return True
    try:
        return bool(pd.isna(raw))
    except (TypeError, ValueError):
        return False


def to_cell(raw: Any) -> RawCell:
    """Convert an arbitrary decoded value into a tagged cell.

    Args:
        raw: Value as produced by a file decoder (str, int, float, None, ...)

    Returns:
        Missing, Text or Number
    """
    if isinstance(raw, (Missing, Text, Number)):
        return raw
    if isinstance(raw, str):
        return MISSING if not raw.strip() else Text(raw)
    if _is_null(raw):
        return MISSING
    if isinstance(raw, bool):
        return Text(str(raw))
    if isinstance(raw, numbers.Real):
        value = float(raw)
        return Number(value) if math.isfinite(value) else Text(str(raw))
    return Text(str(raw))


def parse_number(cell: RawCell) -> float | None:
    """Parse a cell as a finite float.

    Text is stripped and parsed with ``float()``, so the parse is
    locale-free ("1,5" is not a number). Non-finite results fail.
    """
    if isinstance(cell, Number):
        return cell.value
    if isinstance(cell, Text):
        try:
            value = float(cell.value.strip())
        except ValueError:
            return None
        return value if math.isfinite(value) else None
    return None


def cell_text(cell: RawCell) -> str:
    """Return the original textual form of a non-missing cell."""
    if isinstance(cell, Text):
        return cell.value
    if isinstance(cell, Number):
        value = cell.value
        return str(int(value)) if value.is_integer() else str(value)
    return ""
