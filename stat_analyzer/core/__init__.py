"""Core data model for StatAnalyzer.

This module contains:
- Tagged raw cell values (Missing, Text, Number)
- Variable detection (numerical vs categorical)
- Error types shared by the analysis core and decoders
"""

from stat_analyzer.core.cells import (
    Missing,
    Number,
    RawCell,
    Text,
    parse_number,
    to_cell,
)
from stat_analyzer.core.errors import MalformedInputError, UnsupportedFileError
from stat_analyzer.core.variables import (
    Variable,
    VariableKind,
    detect_variables,
    numerical_variables,
)

__all__ = [
    "MalformedInputError",
    "Missing",
    "Number",
    "RawCell",
    "Text",
    "UnsupportedFileError",
    "Variable",
    "VariableKind",
    "detect_variables",
    "numerical_variables",
    "parse_number",
    "to_cell",
]
