"""Tests for field value normalization."""

from datetime import date
from decimal import Decimal

import pytest

from app.services.parsers.values import (
    detect_currency,
    format_amount,
    parse_amount,
    parse_count,
    parse_duration,
    parse_optional_amount,
    parse_percentage,
    parse_report_date,
    strip_percentage,
    to_pence,
)


class TestDuration:
    def test_hours_minutes_seconds(self):
        assert parse_duration("01:02:03") == 3723

    def test_long_aggregate_hours(self):
        assert parse_duration("1234:02:03") == 1234 * 3600 + 2 * 60 + 3

    @pytest.mark.parametrize("value", ["bad", "02:03", "1:2:3:4", "01:xx:03", "", None])
    def test_unreadable_is_none_not_zero(self, value):
        assert parse_duration(value) is None


class TestPercentages:
    def test_suffix_is_stripped_not_divided(self):
        assert strip_percentage("15%") == "15"
        assert strip_percentage(" 12.5 % ") == "12.5"

    def test_blank_is_none(self):
        assert strip_percentage("%") is None
        assert strip_percentage(None) is None

    def test_parse_percentage(self):
        assert parse_percentage("50.00%") == Decimal("50.00")
        assert parse_percentage("") is None


class TestAmounts:
    def test_currency_symbols_and_thousands(self):
        assert parse_amount("$1,234.50") == Decimal("1234.50")
        assert parse_amount("£0.0055") == Decimal("0.0055")

    def test_parentheses_are_negative(self):
        assert parse_amount("(12.50)") == Decimal("-12.50")

    def test_unreadable_defaults_to_zero(self):
        assert parse_amount("n/a") == Decimal("0")
        assert parse_amount(None) == Decimal("0")
        assert parse_optional_amount("n/a") is None

    def test_decimal_comma(self):
        assert parse_amount("1.234,56", decimal_comma=True) == Decimal("1234.56")
        assert parse_amount("0,0055", decimal_comma=True) == Decimal("0.0055")

    @pytest.mark.parametrize("value, expected", [
        ("1.25", Decimal("1.25")),
        ("1,234.50", Decimal("1234.50")),
        ("1.234.567", Decimal("1234567")),
        ("€ 3,10", Decimal("3.10")),
    ])
    def test_decimal_comma_file_reads_each_value(self, value, expected):
        assert parse_amount(value, decimal_comma=True) == expected

    def test_to_pence_rounds_half_up(self):
        assert to_pence(Decimal("1.005")) == Decimal("1.01")
        assert to_pence(Decimal("2.344")) == Decimal("2.34")


class TestCounts:
    def test_thousands_separator(self):
        assert parse_count("1,200") == 1200

    def test_fraction_truncated(self):
        assert parse_count("12.7") == 12

    def test_dot_grouped_in_decimal_comma_file(self):
        assert parse_count("1.234", decimal_comma=True) == 1234
        assert parse_count("12.345.678", decimal_comma=True) == 12345678
        assert parse_count("12,7", decimal_comma=True) == 12

    @pytest.mark.parametrize("value", ["-5", "abc", "", None])
    def test_negative_or_unreadable_is_zero(self, value):
        assert parse_count(value) == 0


class TestReportDate:
    def test_iso_and_datetime(self):
        assert parse_report_date("2024-01-15") == date(2024, 1, 15)
        assert parse_report_date("2024-01-15 10:30:00") == date(2024, 1, 15)

    def test_slash_formats(self):
        assert parse_report_date("2024/01/15") == date(2024, 1, 15)
        assert parse_report_date("15/01/2024") == date(2024, 1, 15)
        assert parse_report_date("01/15/2024") == date(2024, 1, 15)

    def test_year_month(self):
        assert parse_report_date("2024-03") == date(2024, 3, 1)

    @pytest.mark.parametrize("value", ["March 2024", "2024-13-45", "", None])
    def test_unrecognized_is_none(self, value):
        assert parse_report_date(value) is None


def test_currency_from_pound_sign_in_headers():
    assert detect_currency(["ISRC", "Earnings (£)"]) == "GBP"
    assert detect_currency(["ISRC", "Earnings (USD)"]) == "USD"
    assert detect_currency([]) == "USD"


class TestFormatAmount:
    def test_zero(self):
        assert format_amount(Decimal("0")) == "0"
        assert format_amount(Decimal("0E-8")) == "0"
        assert format_amount(None) == "0"

    def test_at_least_two_places(self):
        assert format_amount(Decimal("15.5")) == "15.50"
        assert format_amount(Decimal("4.00000000")) == "4.00"
        assert format_amount(Decimal("100")) == "100.00"

    def test_extra_precision_kept(self):
        assert format_amount(Decimal("0.00312")) == "0.00312"

    def test_float_input(self):
        assert format_amount(4.0) == "4.00"
