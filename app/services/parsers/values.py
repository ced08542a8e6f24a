"""
Value normalization for statement fields.

Ingestion favors completeness over strictness: an amount or count that
cannot be read becomes zero rather than rejecting the row, so the entry is
still recorded and totals stay auditable. Durations and dates are the
exception: an unreadable value is None, never a fabricated zero.
"""

import re
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, Optional


CURRENCY_SYMBOLS = ("$", "€", "£")
PENCE = Decimal("0.01")

_DURATION_SEGMENT_RE = re.compile(r"^\d+$")
# "1.234" or "12.345.678": dot-grouped thousands
_DOT_GROUPED_RE = re.compile(r"^-?\d{1,3}(\.\d{3})+$")


def _resolve_separators(cleaned: str) -> str:
    """
    Read separators value by value in a decimal-comma file.

    With both present, the last one is the decimal point ("1.234,56",
    "1,234.56"). A lone comma is the decimal point ("0,0055"). Dots alone
    are kept as written ("1.25") unless repeated ("1.234.567").
    """
    has_comma = "," in cleaned
    has_dot = "." in cleaned
    if has_comma and has_dot:
        if cleaned.rfind(",") > cleaned.rfind("."):
            return cleaned.replace(".", "").replace(",", ".")
        return cleaned.replace(",", "")
    if has_comma:
        if cleaned.count(",") > 1:
            return cleaned.replace(",", "")
        return cleaned.replace(",", ".")
    if cleaned.count(".") > 1:
        return cleaned.replace(".", "")
    return cleaned


def _clean_number(value: str, decimal_comma: bool) -> str:
    cleaned = value.strip()
    for symbol in CURRENCY_SYMBOLS:
        cleaned = cleaned.replace(symbol, "")
    cleaned = cleaned.replace(" ", "").replace("\u00a0", "")

    # Handle negative in parentheses: (123.45) -> -123.45
    if cleaned.startswith("(") and cleaned.endswith(")"):
        cleaned = "-" + cleaned[1:-1]

    if decimal_comma:
        cleaned = _resolve_separators(cleaned)
    else:
        # Remove thousands separators
        cleaned = cleaned.replace(",", "")
    return cleaned


def parse_optional_amount(value: Optional[str], decimal_comma: bool = False) -> Optional[Decimal]:
    """Parse a monetary amount, returning None when blank or unreadable."""
    if value is None or not value.strip():
        return None
    try:
        amount = Decimal(_clean_number(value, decimal_comma))
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None
    return amount


def parse_amount(value: Optional[str], decimal_comma: bool = False) -> Decimal:
    """Parse a monetary amount, defaulting to zero."""
    amount = parse_optional_amount(value, decimal_comma)
    return amount if amount is not None else Decimal("0")


def to_pence(amount: Decimal) -> Decimal:
    """Round an amount to two decimal places (half up)."""
    return amount.quantize(PENCE, rounding=ROUND_HALF_UP)


def parse_count(value: Optional[str], decimal_comma: bool = False) -> int:
    """
    Parse a stream/sale count.

    Thousands separators are accepted and fractional counts truncated.
    In a decimal-comma file a dot-grouped count ("1.234") is 1234.
    Unreadable and negative values become 0.
    """
    if decimal_comma and value is not None and _DOT_GROUPED_RE.match(value.strip()):
        value = value.replace(".", "")
    amount = parse_optional_amount(value, decimal_comma)
    if amount is None:
        return 0
    count = int(amount)
    return count if count > 0 else 0


def strip_percentage(value: Optional[str]) -> Optional[str]:
    """
    Remove a trailing percent sign: "15%" -> "15".

    The number itself is kept literally; it is not divided by 100.
    """
    if value is None:
        return None
    cleaned = value.replace("%", "").strip()
    return cleaned or None


def parse_percentage(value: Optional[str]) -> Optional[Decimal]:
    """Parse a percentage such as "50.00%" into Decimal("50.00")."""
    return parse_optional_amount(strip_percentage(value))


def parse_duration(value: Optional[str]) -> Optional[int]:
    """
    Convert hh:mm:ss (or hhhh:mm:ss) into whole seconds.

    Returns None for blank input, a segment count other than three, or a
    non-numeric segment.
    """
    if not value or not value.strip():
        return None
    parts = value.strip().split(":")
    if len(parts) != 3 or not all(_DURATION_SEGMENT_RE.match(p) for p in parts):
        return None
    hours, minutes, seconds = (int(p) for p in parts)
    return hours * 3600 + minutes * 60 + seconds


def parse_report_date(value: Optional[str]) -> Optional[date]:
    """
    Parse a statement date string into a date object.

    Handles formats like:
    - "2024-01-15" and "2024-01-15 10:30:00"
    - "2024/01/15"
    - "15/01/2024" (or "01/15/2024" when the day is unambiguous)
    - "2024-01" (first of the month)

    Returns None when the format is not recognized.
    """
    if not value:
        return None

    value = value.strip()

    try:
        # ISO format: YYYY-MM-DD or YYYY-MM-DD HH:MM:SS
        if re.match(r"^\d{4}-\d{2}-\d{2}", value):
            return date.fromisoformat(value[:10])

        # Slash format: YYYY/MM/DD
        match = re.match(r"^(\d{4})/(\d{1,2})/(\d{1,2})$", value)
        if match:
            year, month, day = map(int, match.groups())
            return date(year, month, day)

        # DD/MM/YYYY or MM/DD/YYYY
        match = re.match(r"^(\d{1,2})[/.](\d{1,2})[/.](\d{4})$", value)
        if match:
            a, b, year = map(int, match.groups())
            if b > 12:
                return date(year, a, b)  # MM/DD/YYYY
            return date(year, b, a)  # DD/MM/YYYY

        # YYYY-MM
        match = re.match(r"^(\d{4})-(\d{2})$", value)
        if match:
            year, month = map(int, match.groups())
            return date(year, month, 1)
    except ValueError:
        return None

    return None


def detect_currency(headers: Iterable[str]) -> str:
    """
    Infer the statement currency from the original header text.

    A pound sign anywhere in the headers means the whole file is GBP;
    otherwise it is USD.
    """
    return "GBP" if any("£" in header for header in headers) else "USD"


def format_amount(amount: Optional[Decimal]) -> str:
    """
    Format a Decimal for API responses.

    Zero renders as "0"; other amounts keep at least two decimal places
    and drop trailing zeros beyond that ("15.5" -> "15.50").
    """
    if amount is None:
        return "0"
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    if amount == 0:
        return "0"
    normalized = amount.normalize()
    if normalized.as_tuple().exponent > -2:
        normalized = normalized.quantize(PENCE)
    return f"{normalized:f}"
