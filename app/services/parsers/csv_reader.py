"""
CSV reading shared by all statement parsers.

RFC-4180 input (quoted fields, embedded delimiters and newlines) with the
header row defining field names. Exports arrive UTF-8 with or without a BOM;
some older distributor exports are latin-1.
"""

import csv
import io
from dataclasses import dataclass, field
from typing import Dict, List, Union

from app.core.exceptions import CsvFormatError, EmptyFileError


CANDIDATE_DELIMITERS = (",", ";", "\t")


@dataclass
class CsvDocument:
    """A decoded CSV: headers plus one dict per non-blank data row."""
    headers: List[str]
    rows: List[Dict[str, str]] = field(default_factory=list)
    delimiter: str = ","
    # 1-indexed line of each row in the source file, for error messages
    line_numbers: List[int] = field(default_factory=list)


def decode_content(content: Union[str, bytes]) -> str:
    """Decode upload bytes, tolerating a UTF-8 BOM and falling back to latin-1."""
    if isinstance(content, str):
        return content.lstrip("\ufeff")
    try:
        return content.decode("utf-8-sig")  # Handle BOM
    except UnicodeDecodeError:
        return content.decode("latin-1")


def sniff_delimiter(text: str) -> str:
    """Pick the delimiter that splits the header line into the most fields."""
    header_line = text.split("\n", 1)[0]
    counts = {d: header_line.count(d) for d in CANDIDATE_DELIMITERS}
    best = max(counts, key=lambda d: counts[d])
    return best if counts[best] > 0 else ","


def _is_blank(row: List[str]) -> bool:
    return not row or all(cell.strip() == "" for cell in row)


def read_csv(content: Union[str, bytes], strict: bool = True) -> CsvDocument:
    """
    Parse CSV content into a CsvDocument.

    Args:
        content: Raw file content
        strict: Reject rows whose field count differs from the header.
            When False, short rows are padded and surplus cells dropped.

    Raises:
        EmptyFileError: no header or no data rows
        CsvFormatError: malformed quoting or (strict) ragged rows
    """
    text = decode_content(content)
    delimiter = sniff_delimiter(text)
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter, strict=True)

    try:
        headers: List[str] = []
        for row in reader:
            if not _is_blank(row):
                headers = [h.strip() for h in row]
                break
        if not headers:
            raise EmptyFileError()

        document = CsvDocument(headers=headers, delimiter=delimiter)
        for row in reader:
            if _is_blank(row):
                continue
            if len(row) != len(headers):
                if strict:
                    raise CsvFormatError(
                        f"Invalid record length on line {reader.line_num}: "
                        f"expected {len(headers)} fields, got {len(row)}"
                    )
                row = (row + [""] * len(headers))[:len(headers)]
            document.rows.append({h: v.strip() for h, v in zip(headers, row)})
            document.line_numbers.append(reader.line_num)
    except csv.Error as e:
        raise CsvFormatError(f"Malformed CSV on line {reader.line_num}: {e}")

    if not document.rows:
        raise EmptyFileError()

    return document
