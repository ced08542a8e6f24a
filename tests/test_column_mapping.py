"""Tests for header reconciliation."""

from app.services.column_mapping import (
    ColumnMapper,
    distributor_mapper,
    normalize_column_name,
    prs_mapper,
)


def test_normalize_column_name():
    assert normalize_column_name("  Earnings   (USD) ") == "earnings_(usd)"
    assert normalize_column_name("Track Title") == "track_title"
    assert normalize_column_name("ISRC") == "isrc"


def test_lookup_is_case_and_whitespace_insensitive():
    for header in ("Track Title", "track_title", "  TRACK   TITLE  "):
        assert distributor_mapper.lookup(header) == "title"


def test_lookup_falls_back_to_lowercased_header():
    assert distributor_mapper.lookup("Earnings (£)") == "earnings"
    assert distributor_mapper.lookup("NetEarnings (£)") == "net_earnings"


def test_ditto_headers_map_to_canonical_fields():
    headers = ["StoreName", "ArtistName", "TrackTitle", "ISRC", "Earnings (£)", "Splits %", "Commission %"]
    mapping = distributor_mapper.map_headers(headers)

    assert mapping == {
        "StoreName": "store",
        "ArtistName": "artist",
        "TrackTitle": "title",
        "ISRC": "isrc",
        "Earnings (£)": "earnings",
        "Splits %": "splits_percent",
        "Commission %": "commission",
    }


def test_unknown_headers_are_not_mapped():
    mapping = distributor_mapper.map_headers(["ISRC", "Label Notes", "Internal ID"])
    assert mapping == {"ISRC": "isrc"}


def test_split_row_keeps_unmapped_columns_in_order():
    headers = ["ISRC", "Label Notes", "Title", "Internal ID"]
    row = {"ISRC": "US1234567890", "Label Notes": "promo", "Title": "Song", "Internal ID": "42"}

    mapped, extras = ColumnMapper.split_row(row, distributor_mapper.map_headers(headers))

    assert mapped == {"isrc": "US1234567890", "title": "Song"}
    assert extras == {"Label Notes": "promo", "Internal ID": "42"}
    assert list(extras) == ["Label Notes", "Internal ID"]


def test_split_row_first_non_blank_value_wins():
    headers = ["Track Title", "Title", "Song Title"]
    mapping = distributor_mapper.map_headers(headers)
    row = {"Track Title": "", "Title": "Second", "Song Title": "Third"}

    mapped, extras = ColumnMapper.split_row(row, mapping)

    assert mapped["title"] == "Second"
    assert extras == {}


def test_prs_and_distributor_tables_disagree_on_shared_words():
    assert distributor_mapper.lookup("Title") == "title"
    assert prs_mapper.lookup("Title") == "work_title"
    assert distributor_mapper.lookup("Region") == "country_of_sale"
    assert prs_mapper.lookup("Region") == "broadcast_region"


def test_prs_headers():
    headers = ["Work Title", "Work No", "IP1", "Your Share %", "Usage & Territory", "HHHH:MM:SS", "Royalty £"]
    mapping = prs_mapper.map_headers(headers)

    assert mapping["Work No"] == "work_no"
    assert mapping["Your Share %"] == "your_share_percent"
    assert mapping["Usage & Territory"] == "usage_territory"
    assert mapping["HHHH:MM:SS"] == "duration"
    assert mapping["Royalty £"] == "royalty_amount"
