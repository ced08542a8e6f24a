"""Tests for the distributor and PRS statement parsers."""

from datetime import date
from decimal import Decimal

import pytest

from app.core.exceptions import CsvFormatError, EmptyFileError, MissingColumnsError
from app.services.parsers import DistributorParser, PrsParser


DITTO_HEADER = (
    "DateInserted,ReportingDate,SaleMonth,StoreName,CountryOfSale,ArtistName,"
    "TrackTitle,ISRC,UPC,Quantity,Earnings (£),Commission %,NetEarnings (£),Splits %"
)

PRS_HEADER = (
    "Work Title,Work No,IP1,IP2,Your Share %,Usage & Territory,Broadcast Region,"
    "Period,HHHH:MM:SS,Production,Performances,Royalty £"
)


def csv_bytes(*lines: str) -> bytes:
    return ("\n".join(lines) + "\n").encode("utf-8")


class TestDistributorParser:
    def setup_method(self):
        self.parser = DistributorParser()

    def test_ditto_export(self):
        content = csv_bytes(
            DITTO_HEADER,
            "2024-02-01,2024-03-15,2024-01,Spotify,GB,Artist A,Song A,GBAAA2400001,123,1000,3.50,15%,2.975,100%",
            "2024-02-01,2024-03-15,2024-01,Apple Music,US,Artist A,Song A,GBAAA2400001,123,200,1.10,15%,0.935,100%",
        )

        result = self.parser.parse(content)

        assert result.total_rows == 2
        assert result.skipped == 0
        assert result.currency == "GBP"
        assert len(result.rows) == 2

        row = result.rows[0]
        assert row.natural_key == "GBAAA2400001"
        assert row.parent == {"isrc": "GBAAA2400001", "title": "Song A", "artist": "Artist A", "upc": "123"}
        assert row.child["store"] == "Spotify"
        assert row.child["date_inserted"] == date(2024, 2, 1)
        assert row.child["sale_month"] == "2024-01"
        assert row.child["quantity"] == 1000
        assert row.child["earnings"] == Decimal("3.50")
        assert row.child["net_earnings"] == Decimal("2.975")
        assert row.child["commission"] == "15"
        assert row.child["splits_percent"] == "100"
        assert row.child["currency"] == "GBP"
        assert row.child["extras"] is None
        assert row.amount == Decimal("3.50")
        assert not row.is_summary

    def test_summary_rows_are_flagged(self):
        content = csv_bytes(
            DITTO_HEADER,
            "2024-02-01,2024-03-15,2024-01,Spotify,GB,Artist A,Song A,GBAAA2400001,123,1000,3.50,15%,2.975,100%",
            ",,,,,Artist A,Song A,GBAAA2400001,123,,,,,",
        )

        result = self.parser.parse(content)

        assert [row.is_summary for row in result.rows] == [False, True]

    def test_rows_without_isrc_are_skipped(self):
        content = csv_bytes(
            "ISRC,Title,Artist,Store,Earnings (USD)",
            "US1234567890,Song,Artist,Spotify,1.00",
            ",Orphan,Artist,Spotify,2.00",
            "   ,Orphan,Artist,Spotify,2.00",
        )

        result = self.parser.parse(content)

        assert result.total_rows == 3
        assert result.skipped == 2
        assert [row.natural_key for row in result.rows] == ["US1234567890"]
        assert result.currency == "USD"

    def test_unmapped_columns_are_kept_in_extras(self):
        content = csv_bytes(
            "ISRC,Title,Artist,Store,Earnings (USD),Label Notes,Internal ID",
            "US1234567890,Song,Artist,Spotify,1.00,promo push,42",
        )

        row = self.parser.parse(content).rows[0]

        assert row.child["extras"] == {"Label Notes": "promo push", "Internal ID": "42"}

    def test_unrecognized_date_is_kept_in_extras(self):
        content = csv_bytes(
            "ISRC,Title,Artist,Store,Earnings (USD),Reporting Date",
            "US1234567890,Song,Artist,Spotify,1.00,sometime in March",
        )

        row = self.parser.parse(content).rows[0]

        assert row.child["reporting_date"] is None
        assert row.child["extras"] == {"Reporting Date": "sometime in March"}

    def test_defaults_for_blank_values(self):
        content = csv_bytes(
            "ISRC,Title,Artist,Store,Earnings (USD),Quantity",
            "US1234567890,Song,Artist,Spotify,not a number,lots",
        )

        row = self.parser.parse(content).rows[0]

        assert row.child["earnings"] == Decimal("0")
        assert row.child["quantity"] == 0
        assert row.child["recoup"] == Decimal("0")
        assert row.child["songwriter_royalties_withheld"] == Decimal("0")

    def test_blank_store_defaults_to_unknown(self):
        content = csv_bytes(
            "ISRC,Title,Artist,Store,Earnings (USD)",
            "US1234567890,Song,Artist,,0.50",
        )

        row = self.parser.parse(content).rows[0]

        assert row.child["store"] == "Unknown"
        assert not row.is_summary

    def test_missing_required_columns(self):
        content = csv_bytes("ISRC,Store,Earnings (USD)", "US1234567890,Spotify,1.00")

        with pytest.raises(MissingColumnsError) as exc_info:
            self.parser.parse(content)

        error = exc_info.value
        assert error.missing == ["Title", "Artist"]
        assert error.required == ["ISRC", "Title", "Artist"]
        assert error.found == ["ISRC", "Store", "Earnings (USD)"]
        assert error.to_dict()["error"] == "Missing required columns"

    @pytest.mark.parametrize("content", [b"", b"\n\n", b"ISRC,Title,Artist\n"])
    def test_empty_files(self, content):
        with pytest.raises(EmptyFileError, match="No records found in CSV"):
            self.parser.parse(content)

    def test_ragged_row_fails_the_file(self):
        content = csv_bytes(
            "ISRC,Title,Artist,Store",
            "US1234567890,Song,Artist,Spotify",
            "US1234567891,Song,Artist",
        )

        with pytest.raises(CsvFormatError):
            self.parser.parse(content)

    def test_quoted_fields_and_bom(self):
        content = "\ufeffISRC,Title,Artist,Store,Earnings (USD)\n" \
                  'US1234567890,"Song, Part 2","Artist ""The Best""",Spotify,"1,234.50"\n'

        row = self.parser.parse(content.encode("utf-8")).rows[0]

        assert row.parent["title"] == "Song, Part 2"
        assert row.parent["artist"] == 'Artist "The Best"'
        assert row.child["earnings"] == Decimal("1234.50")

    def test_semicolon_file_uses_decimal_commas(self):
        content = csv_bytes(
            "Code ISRC;Titre de la piste;Artiste;Plateforme;Revenu brut",
            "FR1234567890;Chanson;Artiste;Deezer;0,0055",
        )

        row = self.parser.parse(content).rows[0]

        assert row.natural_key == "FR1234567890"
        assert row.child["store"] == "Deezer"
        assert row.child["earnings"] == Decimal("0.0055")

    def test_semicolon_file_with_dot_decimals(self):
        content = csv_bytes(
            "ISRC;Title;Artist;Store;Earnings (USD);Quantity",
            "US1234567890;Song;Artist;Spotify;1.25;10",
            "US1234567891;Other;Artist;Deezer;1,50;1.234",
        )

        rows = self.parser.parse(content).rows

        assert rows[0].child["earnings"] == Decimal("1.25")
        assert rows[0].child["quantity"] == 10
        assert rows[1].child["earnings"] == Decimal("1.50")
        assert rows[1].child["quantity"] == 1234

    def test_latin1_content(self):
        content = "ISRC,Title,Artist,Store,Earnings (USD)\nUS1234567890,Café,Zoé,Spotify,1.00\n".encode("latin-1")

        row = self.parser.parse(content).rows[0]

        assert row.parent["title"] == "Café"


class TestPrsParser:
    def setup_method(self):
        self.parser = PrsParser()

    def test_statement_rows(self):
        content = csv_bytes(
            PRS_HEADER,
            "My Song,12345678,WRITER A,PUBLISHER B,50.00%,RADIO UK,LONDON,2024Q1,01:02:03,BBC Radio 1,12,10.005",
        )

        result = self.parser.parse(content)

        assert result.currency == "GBP"
        row = result.rows[0]
        assert row.natural_key == "12345678"
        assert row.parent == {
            "work_no": "12345678",
            "title": "My Song",
            "ip1": "WRITER A",
            "ip2": "PUBLISHER B",
            "ip3": None,
            "ip4": None,
            "your_share_percent": Decimal("50.00"),
        }
        assert row.child["usage_territory"] == "RADIO UK"
        assert row.child["broadcast_region"] == "LONDON"
        assert row.child["duration_seconds"] == 3723
        assert row.child["performances"] == 12
        assert row.child["royalty_amount"] == Decimal("10.01")
        assert row.child["currency"] == "GBP"
        assert row.amount == Decimal("10.01")

    def test_bad_duration_is_none(self):
        content = csv_bytes(
            "Work No,Work Title,HH:MM:SS,Royalty £",
            "1,Song,02:03,1.00",
        )

        row = self.parser.parse(content).rows[0]

        assert row.child["duration_seconds"] is None

    def test_short_rows_are_padded(self):
        content = csv_bytes(
            "Work No,Work Title,Performances,Royalty £",
            "1,Song",
            "2,Other,3,1.50,unexpected",
        )

        result = self.parser.parse(content)

        assert len(result.rows) == 2
        assert result.rows[0].child["royalty_amount"] == Decimal("0.00")
        assert result.rows[1].child["performances"] == 3

    def test_semicolon_statement_counts(self):
        content = csv_bytes(
            "Work No;Work Title;Performances;Royalty £",
            "1;Song;2.500;3,75",
        )

        row = self.parser.parse(content).rows[0]

        assert row.child["performances"] == 2500
        assert row.child["royalty_amount"] == Decimal("3.75")

    def test_blank_title_is_unknown(self):
        content = csv_bytes("Work No,Work Title,Royalty £", "1,,1.00")

        row = self.parser.parse(content).rows[0]

        assert row.parent["title"] == "Unknown"

    def test_missing_work_number_column(self):
        content = csv_bytes("Work Title,Royalty £", "Song,1.00")

        with pytest.raises(MissingColumnsError) as exc_info:
            self.parser.parse(content)

        assert exc_info.value.required == ["Work No"]
