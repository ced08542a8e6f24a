"""
Ingestion errors.

Every error raised for a whole file (as opposed to a single row) derives
from IngestionError and carries the HTTP status it maps to.
"""
from typing import List, Optional


class IngestionError(ValueError):
    """A file could not be ingested."""

    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message}


class EmptyFileError(IngestionError):
    """The CSV contained no data rows."""

    def __init__(self, message: str = "No records found in CSV"):
        super().__init__(message)


class CsvFormatError(IngestionError):
    """The CSV could not be parsed (bad quoting, ragged rows, undecodable)."""


class MissingColumnsError(IngestionError):
    """Required columns are absent from the header row."""

    def __init__(
        self,
        missing: List[str],
        required: List[str],
        found: List[str],
        message: Optional[str] = None,
    ):
        self.missing = missing
        self.required = required
        self.found = found
        super().__init__(
            message
            or f"Missing required columns: {', '.join(missing)}. Found columns: {', '.join(found)}"
        )

    def to_dict(self) -> dict:
        return {
            "error": "Missing required columns",
            "required": self.required,
            "found": self.found,
        }


class UnsupportedFileError(IngestionError):
    """The upload is not a CSV file."""

    def __init__(self, message: str = "Only CSV files are allowed"):
        super().__init__(message)


class FileTooLargeError(IngestionError):
    """The upload exceeds the configured size cap."""

    status_code = 413

    def __init__(self, limit_bytes: int):
        self.limit_bytes = limit_bytes
        super().__init__(f"File exceeds the {limit_bytes // (1024 * 1024)}MB upload limit")
