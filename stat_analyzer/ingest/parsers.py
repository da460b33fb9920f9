"""File decoders producing raw tables.

Supported formats:
- CSV (pandas)
- Excel .xlsx/.xls (pandas + openpyxl)
- PDF text (pypdf)
- Word .docx (python-docx)

PDF and Word documents are not natively tabular; their text is split into
lines and each line into cells on runs of two or more spaces or tabs.
"""

from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pandas as pd

from stat_analyzer.core.errors import UnsupportedFileError

logger = logging.getLogger(__name__)

CELL_SEPARATOR = re.compile(r"\s{2,}|\t")

FILE_TYPES = {
    ".csv": "csv",
    ".xlsx": "excel",
    ".xls": "excel",
    ".pdf": "pdf",
    ".docx": "word",
    ".doc": "word",
}


@dataclass
class ParsedTable:
    """A decoded table.

    Attributes:
        headers: Column names
        rows: Rows of raw cell values
        metadata: File name, type and shape
    """

    headers: list[str]
    rows: list[list[Any]]
    metadata: dict[str, Any] = field(default_factory=dict)

    def preview(self, n: int = 10) -> dict[str, Any]:
        """Headers, first ``n`` rows and metadata for display."""
        return {
            "headers": self.headers,
            "sample_data": [[_jsonable(c) for c in row] for row in self.rows[:n]],
            "metadata": self.metadata,
        }


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return None if isinstance(value, float) and value != value else value
    return str(value)


def supported_extensions() -> list[str]:
    return sorted(FILE_TYPES)


def file_type_for(filename: str) -> str:
    """Map a file name to its decoder type.

    Raises:
        UnsupportedFileError: For unknown extensions
    """
    extension = Path(filename).suffix.lower()
    if extension not in FILE_TYPES:
        raise UnsupportedFileError(f"Unsupported file format: {extension or filename}")
    return FILE_TYPES[extension]


def parse_file(content: bytes, filename: str) -> ParsedTable:
    """Decode an uploaded file into headers and rows.

    Args:
        content: Raw file bytes
        filename: Original file name (used for format detection)

    Returns:
        ParsedTable

    Raises:
        UnsupportedFileError: For unknown extensions
        ValueError: If the file cannot be decoded
    """
    file_type = file_type_for(filename)
    logger.info(f"Parsing {file_type} file {filename} ({len(content)} bytes)")

    try:
        if file_type == "csv":
            headers, rows = _parse_csv(content)
        elif file_type == "excel":
            headers, rows = _parse_excel(content)
        elif file_type == "pdf":
            headers, rows = split_text_table(_extract_pdf_text(content))
        else:
            headers, rows = split_text_table(_extract_word_text(content))
    except UnsupportedFileError:
        raise
    except Exception as e:
        raise ValueError(f"Failed to parse file: {e}") from e

    return ParsedTable(
        headers=headers,
        rows=rows,
        metadata={
            "total_rows": len(rows),
            "total_columns": len(headers),
            "file_type": file_type,
            "file_name": filename,
        },
    )


def _parse_csv(content: bytes) -> tuple[list[str], list[list[Any]]]:
    df = pd.read_csv(io.BytesIO(content), dtype=str, keep_default_na=False)
    return [str(c) for c in df.columns], df.values.tolist()


def _parse_excel(content: bytes) -> tuple[list[str], list[list[Any]]]:
    df = pd.read_excel(io.BytesIO(content), sheet_name=0, header=None)
    if df.empty:
        return [], []
    records = df.astype(object).where(df.notna(), None).values.tolist()
    headers = ["" if h is None else str(h) for h in records[0]]
    return headers, records[1:]


def _extract_pdf_text(content: bytes) -> str:
    from pypdf import PdfReader

    reader = PdfReader(io.BytesIO(content))
    return "\n".join(page.extract_text() or "" for page in reader.pages)


def _extract_word_text(content: bytes) -> str:
    import docx

    document = docx.Document(io.BytesIO(content))
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def split_text_table(text: str) -> tuple[list[str], list[list[Any]]]:
    """Infer a table from free text.

    The first non-blank line becomes the header when it splits into more
    than one cell; later lines with more than one cell become rows. When no
    row is found, every line becomes a row of a single "Text" column.
    """
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    headers: list[str] = []
    rows: list[list[Any]] = []

    for index, line in enumerate(lines):
        cells = [c.strip() for c in CELL_SEPARATOR.split(line) if c.strip()]
        if len(cells) <= 1:
            continue
        if index == 0:
            headers = cells
        else:
            rows.append(cells)

    if not rows:
        return ["Text"], [[line] for line in lines]

    return headers, rows
