"""
PRS for Music statement parser.

Performance royalty statements list one line per work and usage, with the
interested parties (IP1-IP4), the member's share, a usage/territory label,
duration as hh:mm:ss and the royalty in pounds.
"""

from typing import Dict, List

from app.services.column_mapping import prs_mapper
from app.services.parsers.base import ParseContext, ParsedRow, RecordParser
from app.services.parsers.values import (
    parse_amount,
    parse_count,
    parse_duration,
    parse_percentage,
    to_pence,
)


class PrsParser(RecordParser):
    """Parser for PRS performance royalty CSV files."""

    mapper = prs_mapper
    required_fields = {"work_no": "Work No"}
    key_field = "work_no"
    strict_columns = False

    def detect_currency(self, headers: List[str]) -> str:
        return "GBP"

    def build_row(
        self,
        mapped: Dict[str, str],
        extras: Dict[str, str],
        row_number: int,
        context: ParseContext,
    ) -> ParsedRow:
        work_no = mapped["work_no"].strip()
        amount = to_pence(parse_amount(mapped.get("royalty_amount"), context.decimal_comma))

        parent = {
            "work_no": work_no,
            "title": mapped.get("work_title", "").strip() or "Unknown",
            "ip1": mapped.get("ip1") or None,
            "ip2": mapped.get("ip2") or None,
            "ip3": mapped.get("ip3") or None,
            "ip4": mapped.get("ip4") or None,
            "your_share_percent": parse_percentage(mapped.get("your_share_percent")),
        }

        child = {
            "usage_territory": mapped.get("usage_territory") or None,
            "broadcast_region": mapped.get("broadcast_region") or None,
            "period": mapped.get("period") or None,
            "duration_seconds": parse_duration(mapped.get("duration")),
            "production": mapped.get("production") or None,
            "performances": parse_count(mapped.get("performances"), context.decimal_comma),
            "royalty_amount": amount,
            "currency": context.currency,
            "extras": extras or None,
        }

        return ParsedRow(
            row_number=row_number,
            natural_key=work_no,
            parent=parent,
            child=child,
            amount=amount,
        )
