"""Decoders turning uploaded files into raw tables."""

from stat_analyzer.ingest.parsers import (
    ParsedTable,
    file_type_for,
    parse_file,
    split_text_table,
    supported_extensions,
)

__all__ = [
    "ParsedTable",
    "file_type_for",
    "parse_file",
    "split_text_table",
    "supported_extensions",
]
