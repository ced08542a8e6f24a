"""
Column Mapping

Translates distributor-specific CSV headers into canonical field names.

Headers are looked up in a closed synonym table, first in normalized form
("Earnings (USD)" -> "earnings_(usd)"), then lower-cased and trimmed only
("Earnings (£)" -> "earnings (£)"). Support for a new export dialect is
added by extending a table, never by changing parser code.

Distributor and PRS statements use separate tables on purpose: "title",
"region" and "amount" mean different things in the two formats.
"""

import re
from typing import Dict, Iterable, Mapping, Optional, Tuple


# Canonical fields for distributor royalty CSVs
DISTRIBUTOR_COLUMNS: Dict[str, str] = {
    # ISRC
    "isrc": "isrc",
    "isrc_code": "isrc",
    "track_isrc": "isrc",
    "optional_isrc": "isrc",  # TuneCore
    "code_isrc": "isrc",

    # Title (Ditto writes "TrackTitle" without a space)
    "title": "title",
    "track_title": "title",
    "track_name": "title",
    "song_title": "title",
    "song_name": "title",
    "tracktitle": "title",
    "track": "title",
    "titre_de_la_piste": "title",  # Believe FR
    "titre_piste": "title",

    # Artist
    "artist": "artist",
    "artist_name": "artist",
    "artistname": "artist",  # Ditto
    "track_artist": "artist",
    "performer": "artist",
    "artiste": "artist",
    "nom_de_l'artiste": "artist",  # Believe FR
    "nom_de_l_artiste": "artist",

    # UPC
    "upc": "upc",
    "upc_code": "upc",
    "album_upc": "upc",
    "upc/ean": "upc",
    "code_upc": "upc",

    # Store / DSP
    "store": "store",
    "storename": "store",  # Ditto
    "store_name": "store",
    "dsp": "store",
    "platform": "store",
    "service": "store",
    "streaming_service": "store",
    "plateforme": "store",  # Believe FR

    # Dates
    "date_inserted": "date_inserted",
    "dateinserted": "date_inserted",
    "reporting_date": "reporting_date",
    "reportingdate": "reporting_date",
    "mois_de_reporting": "reporting_date",  # Believe FR
    "sale_month": "sale_month",
    "salemonth": "sale_month",
    "sales_month": "sale_month",
    "sales_period": "sale_month",  # TuneCore
    "mois_de_vente": "sale_month",  # Believe FR
    "startdate": "start_date",  # Ditto
    "start_date": "start_date",
    "enddate": "end_date",  # Ditto
    "end_date": "end_date",

    # Territory
    "country_of_sale": "country_of_sale",
    "countryofsale": "country_of_sale",
    "country": "country_of_sale",
    "territory": "country_of_sale",
    "region": "country_of_sale",
    "pays": "country_of_sale",
    "pays_/_région": "country_of_sale",  # Believe FR
    "pays_/_region": "country_of_sale",

    # Song / album flag
    "song/album": "song_or_album",
    "song_or_album": "song_or_album",
    "type": "song_or_album",

    # Release (album) title
    "releasetitle": "release_title",  # Ditto
    "release_title": "release_title",
    "album": "release_title",
    "album_title": "release_title",
    "titre_de_la_sortie": "release_title",  # Believe FR

    # Quantity / streams
    "quantity": "quantity",
    "streams": "quantity",
    "plays": "quantity",
    "units": "quantity",
    "units_sold": "quantity",
    "#_units_sold": "quantity",  # TuneCore
    "quantité": "quantity",  # Believe FR
    "quantite": "quantity",

    # Team percentage
    "team_percentage": "team_percentage",
    "teampercentage": "team_percentage",
    "share": "team_percentage",
    "percentage": "team_percentage",

    # Earnings (gross)
    "earnings_(usd)": "earnings",
    "earnings (usd)": "earnings",
    "earnings_(£)": "earnings",  # Ditto GBP
    "earnings (£)": "earnings",
    "earnings": "earnings",
    "revenue": "earnings",
    "royalties": "earnings",
    "amount": "earnings",
    "total_earned": "earnings",  # TuneCore
    "revenu_brut": "earnings",  # Believe FR

    # Net earnings (after commission) - Ditto
    "netearnings_(£)": "net_earnings",
    "netearnings (£)": "net_earnings",
    "net_earnings_(£)": "net_earnings",
    "net_earnings_(usd)": "net_earnings",
    "net_earnings": "net_earnings",
    "netearnings": "net_earnings",
    "revenu_net": "net_earnings",  # Believe FR

    # Commission - Ditto
    "commission": "commission",
    "commission_%": "commission",
    "commission_percent": "commission",

    # Splits percent - Ditto
    "splits_%": "splits_percent",
    "splits %": "splits_percent",
    "splits_percent": "splits_percent",

    # Commission type - Ditto
    "commissiontype": "commission_type",
    "commission_type": "commission_type",

    # Songwriter royalties withheld (DistroKid)
    "songwriter_royalties_withheld_(usd)": "songwriter_royalties_withheld",
    "songwriter royalties withheld (usd)": "songwriter_royalties_withheld",
    "songwriter_royalties_withheld": "songwriter_royalties_withheld",
    "withheld": "songwriter_royalties_withheld",

    # Recoup
    "recoup_(usd)": "recoup",
    "recoup (usd)": "recoup",
    "recoup": "recoup",
    "recoupment": "recoup",
}

# Canonical fields for PRS performance-royalty CSVs
PRS_COLUMNS: Dict[str, str] = {
    "work_title": "work_title",
    "work title": "work_title",
    "title": "work_title",
    "work_no": "work_no",
    "work no": "work_no",
    "work_number": "work_no",
    "work number": "work_no",
    "tunecode": "work_no",
    "ip1": "ip1",
    "ip2": "ip2",
    "ip3": "ip3",
    "ip4": "ip4",
    "your_share_%": "your_share_percent",
    "your share %": "your_share_percent",
    "your_share_percent": "your_share_percent",
    "share": "your_share_percent",
    "usage_&_territory": "usage_territory",
    "usage & territory": "usage_territory",
    "usage_territory": "usage_territory",
    "usage territory": "usage_territory",
    "broadcast_region": "broadcast_region",
    "broadcast region": "broadcast_region",
    "region": "broadcast_region",
    "period": "period",
    "hhhh:mm:ss": "duration",
    "hh:mm:ss": "duration",
    "duration": "duration",
    "time": "duration",
    "production": "production",
    "performances": "performances",
    "royalty_£": "royalty_amount",
    "royalty £": "royalty_amount",
    "royalty_(£)": "royalty_amount",
    "royalty": "royalty_amount",
    "amount": "royalty_amount",
}


_WHITESPACE_RE = re.compile(r"\s+")


def normalize_column_name(name: str) -> str:
    """Lower-case, trim and collapse internal whitespace to single underscores."""
    return _WHITESPACE_RE.sub("_", name.strip().lower())


class ColumnMapper:
    """Maps raw header text onto canonical field names using one synonym table."""

    def __init__(self, synonyms: Mapping[str, str]):
        self._synonyms = dict(synonyms)

    def lookup(self, header: str) -> Optional[str]:
        """Return the canonical field for a header, or None if unknown."""
        mapped = self._synonyms.get(normalize_column_name(header))
        if mapped is None:
            mapped = self._synonyms.get(header.strip().lower())
        return mapped

    def map_headers(self, headers: Iterable[str]) -> Dict[str, str]:
        """Map each recognized original header to its canonical field."""
        mapping: Dict[str, str] = {}
        for header in headers:
            mapped = self.lookup(header)
            if mapped:
                mapping[header] = mapped
        return mapping

    @staticmethod
    def split_row(
        row: Mapping[str, str],
        mapping: Mapping[str, str],
    ) -> Tuple[Dict[str, str], Dict[str, str]]:
        """
        Split a raw row into canonical values and extras.

        Unmapped columns are returned in `extras` keyed by their original
        header text. If several headers map to the same field, the first
        non-blank value wins.
        """
        mapped: Dict[str, str] = {}
        extras: Dict[str, str] = {}

        for header, value in row.items():
            field_name = mapping.get(header)
            if field_name is None:
                extras[header] = value
            elif not mapped.get(field_name):
                mapped[field_name] = value

        return mapped, extras


distributor_mapper = ColumnMapper(DISTRIBUTOR_COLUMNS)
prs_mapper = ColumnMapper(PRS_COLUMNS)
