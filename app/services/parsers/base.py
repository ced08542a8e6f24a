"""
Base statement parser.

A parser turns raw upload bytes into ParsedRow objects: the natural key of
the parent entity (Track or Work), the attributes to create that parent
with, and the attributes of the child line item. Subclasses supply the
synonym table, the required fields and the row builder.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from app.core.exceptions import MissingColumnsError
from app.services.column_mapping import ColumnMapper
from app.services.parsers.csv_reader import CsvDocument, read_csv

logger = logging.getLogger(__name__)


@dataclass
class ParsedRow:
    """One data row after mapping and normalization."""
    row_number: int
    natural_key: str
    parent: Dict[str, Any]
    child: Dict[str, Any]
    amount: Decimal = Decimal("0")
    # Summary/subtotal rows resolve their parent but produce no line item
    is_summary: bool = False


@dataclass
class ParseContext:
    """File-level facts available to every row builder."""
    headers: List[str]
    header_mapping: Dict[str, str]
    currency: str
    decimal_comma: bool = False

    def header_for(self, field_name: str) -> Optional[str]:
        """Original header text that mapped onto a canonical field."""
        for header, mapped in self.header_mapping.items():
            if mapped == field_name:
                return header
        return None


@dataclass
class ParseResult:
    """Result of parsing one statement file."""
    rows: List[ParsedRow] = field(default_factory=list)
    total_rows: int = 0
    skipped: int = 0
    headers: List[str] = field(default_factory=list)
    header_mapping: Dict[str, str] = field(default_factory=dict)
    currency: str = "USD"


class RecordParser:
    """Parser skeleton shared by the distributor and PRS formats."""

    mapper: ColumnMapper
    # canonical field -> display name used in error responses
    required_fields: Dict[str, str] = {}
    key_field: str = ""
    strict_columns: bool = True

    def detect_currency(self, headers: List[str]) -> str:
        raise NotImplementedError

    def build_row(
        self,
        mapped: Dict[str, str],
        extras: Dict[str, str],
        row_number: int,
        context: ParseContext,
    ) -> ParsedRow:
        raise NotImplementedError

    def check_required_columns(self, headers: List[str], header_mapping: Dict[str, str]) -> None:
        """Fail the whole file when a required column is absent."""
        present = set(header_mapping.values())
        missing = [
            display for field_name, display in self.required_fields.items()
            if field_name not in present
        ]
        if missing:
            raise MissingColumnsError(
                missing=missing,
                required=list(self.required_fields.values()),
                found=headers,
            )

    def parse(self, content: Union[str, bytes]) -> ParseResult:
        """
        Parse statement CSV content.

        Args:
            content: CSV file content as string or bytes

        Returns:
            ParseResult with parsed rows and the skip count

        Raises:
            EmptyFileError, CsvFormatError, MissingColumnsError
        """
        document: CsvDocument = read_csv(content, strict=self.strict_columns)
        header_mapping = self.mapper.map_headers(document.headers)
        self.check_required_columns(document.headers, header_mapping)

        context = ParseContext(
            headers=document.headers,
            header_mapping=header_mapping,
            currency=self.detect_currency(document.headers),
            decimal_comma=document.delimiter == ";",
        )
        result = ParseResult(
            headers=document.headers,
            header_mapping=header_mapping,
            currency=context.currency,
        )

        for row_number, raw in zip(document.line_numbers, document.rows):
            result.total_rows += 1
            mapped, extras = self.mapper.split_row(raw, header_mapping)

            if not mapped.get(self.key_field, "").strip():
                result.skipped += 1
                logger.debug(f"Skipping row {row_number}: no {self.key_field}")
                continue

            result.rows.append(self.build_row(mapped, extras, row_number, context))

        return result
