"""
Distributor CSV Parser

Parses royalty/usage exports from digital distributors (generic exports,
Ditto, DistroKid, TuneCore, Believe). Headers are reconciled through the
distributor synonym table; anything unrecognized is carried in `extras`.

Ditto exports contain per-track summary rows that repeat the ISRC but have
no store and no earnings. Those rows are flagged as summaries.
"""

from typing import Dict

from app.services.column_mapping import distributor_mapper
from app.services.parsers.base import ParseContext, ParsedRow, RecordParser
from app.services.parsers.values import (
    detect_currency,
    parse_amount,
    parse_count,
    parse_optional_amount,
    parse_percentage,
    parse_report_date,
    strip_percentage,
)


DATE_FIELDS = ("date_inserted", "reporting_date", "start_date", "end_date")


def _text(mapped: Dict[str, str], field_name: str):
    value = mapped.get(field_name, "").strip()
    return value or None


class DistributorParser(RecordParser):
    """Parser for distributor royalty CSV files."""

    mapper = distributor_mapper
    required_fields = {"isrc": "ISRC", "title": "Title", "artist": "Artist"}
    key_field = "isrc"
    strict_columns = True

    def detect_currency(self, headers):
        return detect_currency(headers)

    def build_row(
        self,
        mapped: Dict[str, str],
        extras: Dict[str, str],
        row_number: int,
        context: ParseContext,
    ) -> ParsedRow:
        """Parse a single mapped row into a ParsedRow."""
        isrc = mapped["isrc"].strip()
        extras = dict(extras)

        dates = {}
        for field_name in DATE_FIELDS:
            raw = _text(mapped, field_name)
            parsed = parse_report_date(raw)
            if raw and parsed is None:
                # Keep unrecognized date text rather than losing it
                extras[context.header_for(field_name) or field_name] = raw
            dates[field_name] = parsed

        earnings_raw = _text(mapped, "earnings")
        store = _text(mapped, "store")
        earnings = parse_amount(earnings_raw, context.decimal_comma)

        withheld = parse_optional_amount(
            mapped.get("songwriter_royalties_withheld"), context.decimal_comma
        )
        recoup = parse_optional_amount(mapped.get("recoup"), context.decimal_comma)

        child = {
            **dates,
            "sale_month": _text(mapped, "sale_month"),
            "store": store or "Unknown",
            "country_of_sale": _text(mapped, "country_of_sale"),
            "song_or_album": _text(mapped, "song_or_album"),
            "release_title": _text(mapped, "release_title"),
            "quantity": parse_count(mapped.get("quantity"), context.decimal_comma),
            "team_percentage": parse_percentage(mapped.get("team_percentage")),
            "songwriter_royalties_withheld": withheld if withheld is not None else parse_amount(None),
            "earnings": earnings,
            "net_earnings": parse_optional_amount(mapped.get("net_earnings"), context.decimal_comma),
            "commission": strip_percentage(mapped.get("commission")),
            "splits_percent": strip_percentage(mapped.get("splits_percent")),
            "commission_type": _text(mapped, "commission_type"),
            "recoup": recoup if recoup is not None else parse_amount(None),
            "currency": context.currency,
            "extras": extras or None,
        }

        parent = {
            "isrc": isrc,
            "title": _text(mapped, "title") or "Unknown",
            "artist": _text(mapped, "artist") or "Unknown",
            "upc": _text(mapped, "upc"),
        }

        return ParsedRow(
            row_number=row_number,
            natural_key=isrc,
            parent=parent,
            child=child,
            amount=earnings,
            is_summary=store is None and earnings_raw is None,
        )
