"""Tests for raw cell normalisation."""

import math

import numpy as np
import pytest

from stat_analyzer.core.cells import (
    MISSING,
    Missing,
    Number,
    Text,
    cell_text,
    parse_number,
    to_cell,
)


class TestToCell:
    """Tests for converting decoded values into cells."""

    @pytest.mark.parametrize("raw", ["", "   ", "\t", None, float("nan"), np.nan])
    def test_missing_values(self, raw) -> None:
        """Test that blanks and nulls become Missing."""
        assert to_cell(raw) == MISSING

    def test_text(self) -> None:
        """Test that strings are kept verbatim."""
        assert to_cell(" abc ") == Text(" abc ")

    def test_number(self) -> None:
        """Test that finite numbers become Number."""
        assert to_cell(3) == Number(3.0)
        assert to_cell(np.float64(2.5)) == Number(2.5)

    def test_bool_is_text(self) -> None:
        """Test that booleans are not treated as numbers."""
        assert to_cell(True) == Text("True")

    def test_infinite_number_is_text(self) -> None:
        """Test that non-finite numbers do not become Number."""
        assert isinstance(to_cell(math.inf), Text)

    def test_cells_pass_through(self) -> None:
        """Test that already-converted cells are returned unchanged."""
        cell = Number(1.0)
        assert to_cell(cell) is cell


class TestParseNumber:
    """Tests for numeric parsing."""

    def test_parses_padded_text(self) -> None:
        """Test that surrounding whitespace is ignored."""
        assert parse_number(Text(" 3.5 ")) == 3.5

    def test_scientific_notation(self) -> None:
        """Test exponent notation."""
        assert parse_number(Text("1e3")) == 1000.0

    @pytest.mark.parametrize("text", ["abc", "1,5", "12abc", "2024-01-01", "nan", "inf"])
    def test_rejects_non_numbers(self, text: str) -> None:
        """Test that partial and non-finite parses fail."""
        assert parse_number(Text(text)) is None

    def test_missing(self) -> None:
        """Test that Missing never parses."""
        assert parse_number(Missing()) is None

    def test_number(self) -> None:
        """Test that Number cells return their value."""
        assert parse_number(Number(-2.0)) == -2.0


class TestCellText:
    """Tests for textual rendering of cells."""

    def test_integer_valued_number(self) -> None:
        """Test that whole numbers render without a decimal part."""
        assert cell_text(Number(5.0)) == "5"

    def test_fractional_number(self) -> None:
        """Test fractional numbers."""
        assert cell_text(Number(2.5)) == "2.5"

    def test_text(self) -> None:
        """Test text cells."""
        assert cell_text(Text("red")) == "red"
