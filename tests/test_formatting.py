"""Tests for date pattern translation and amount normalization."""

from datetime import datetime

import pytest

from csv2qif.formatting import (
    format_date,
    normalize_amount,
    parse_date,
    reformat_date,
    reverse_sign,
    translate_date_pattern,
)


class TestTranslateDatePattern:
    """Tests for token to directive translation."""

    def test_iso_pattern(self):
        assert translate_date_pattern("YYYY-MM-DD") == "%Y-%m-%d"

    def test_empty_pattern(self):
        assert translate_date_pattern("") == ""

    def test_lowercase_tokens(self):
        """Test that tokens are matched after uppercasing."""
        assert translate_date_pattern("dd/mm/yy") == "%d/%m/%y"

    def test_unpadded_tokens(self):
        assert translate_date_pattern("M/D/YYYY") == "%-m/%-d/%Y"

    def test_month_names(self):
        assert translate_date_pattern("D MMMM YYYY") == "%-d %B %Y"
        assert translate_date_pattern("MMM DD, Y") == "%b %d, %y"

    def test_long_tokens_are_not_split(self):
        """Test that DD and YYYY are never partially replaced."""
        assert translate_date_pattern("DDMMYYYY") == "%d%m%Y"
        assert translate_date_pattern("YYYYMMMMDD") == "%Y%B%d"

    def test_four_digit_year_is_not_rewritten_again(self):
        """Test that the Y inside a produced %Y is not translated."""
        assert translate_date_pattern("DD.MM.YYYY") == "%d.%m.%Y"
        assert translate_date_pattern("YYYY YY Y") == "%Y %y %y"

    def test_literal_percent_is_escaped(self):
        assert translate_date_pattern("YYYY%") == "%Y%%"

    def test_unknown_characters_pass_through(self):
        assert translate_date_pattern("YYYY.Q") == "%Y.Q"


class TestDateParsing:
    """Tests for parsing and formatting with translated patterns."""

    def test_parse_unpadded(self):
        assert parse_date("5/1/2023", "%-d/%-m/%Y") == datetime(2023, 1, 5)

    def test_format_unpadded(self):
        assert format_date(datetime(2023, 1, 5), "%-m/%-d/%y") == "1/5/23"

    def test_format_keeps_escaped_percent(self):
        assert format_date(datetime(2023, 1, 5), "%Y%%") == "2023%"

    def test_reformat_day_first_to_month_first(self):
        assert reformat_date("05.01.2023", "DD.MM.YYYY", "MM/DD/YYYY") == "01/05/2023"

    def test_reformat_to_unpadded_short_year(self):
        assert reformat_date("2023-01-05", "YYYY-MM-DD", "M/D/YY") == "1/5/23"

    def test_reformat_from_unpadded(self):
        assert reformat_date("5/1/2023", "D/M/YYYY", "YYYY-MM-DD") == "2023-01-05"

    def test_reformat_with_month_name(self):
        assert reformat_date("2023-01-05", "YYYY-MM-DD", "D MMM YYYY") == "5 Jan 2023"

    def test_reformat_rejects_garbage(self):
        with pytest.raises(ValueError):
            reformat_date("not a date", "YYYY-MM-DD", "MM/DD/YYYY")

    def test_reformat_rejects_trailing_text(self):
        """Test that the whole value must match the pattern."""
        with pytest.raises(ValueError):
            reformat_date("2023-01-05 10:00", "YYYY-MM-DD", "MM/DD/YYYY")


class TestNormalizeAmount:
    """Tests for currency stripping."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("$1,234.56", "1,234.56"),
            ("USD -99", "-99"),
            ("-12.50", "-12.50"),
            ("1 234,50 EUR", "1234,50"),
            ("(45.00)", "45.00"),
            ("€ -0,99", "-0,99"),
            ("", ""),
            ("$", ""),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_amount(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        ["$1,234.56", "USD -99", "--5 CHF", "12-34", "abc", "", "1.2.3,4"],
    )
    def test_idempotent(self, raw):
        once = normalize_amount(raw)
        assert normalize_amount(once) == once


class TestReverseSign:
    """Tests for amount sign reversal."""

    def test_positive_becomes_negative(self):
        assert reverse_sign("50.00") == "-50.00"

    def test_negative_becomes_positive(self):
        assert reverse_sign("-50.00") == "50.00"

    def test_empty_stays_empty(self):
        assert reverse_sign("") == ""

    @pytest.mark.parametrize("amount", ["50.00", "-50.00", "1,234.56"])
    def test_involution(self, amount):
        assert reverse_sign(reverse_sign(amount)) == amount
