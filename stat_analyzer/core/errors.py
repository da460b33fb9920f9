"""Exceptions raised by the analysis core and file decoders."""


class MalformedInputError(ValueError):
    """Input table cannot be analysed (shape mismatch, empty table or column)."""


class UnsupportedFileError(ValueError):
    """Uploaded file has an extension no decoder handles."""
