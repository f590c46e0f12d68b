"""
Unit tests for display formatters.
"""

from decimal import Decimal

import pytest

from chicken_admin.ui.utils.formatters import format_currency, format_date, format_number, format_percent


@pytest.mark.parametrize(
    "amount,currency,expected",
    [
        (100, "INR", "₹100.00"),
        (123456.789, "INR", "₹1,23,456.79"),
        (12345678, "INR", "₹1,23,45,678.00"),
        ("-1234.5", "INR", "-₹1,234.50"),
        (Decimal("1234567.5"), "USD", "$1,234,567.50"),
        (10, "AED", "AED 10.00"),
    ],
)
def test_format_currency(amount, currency, expected):
    assert format_currency(amount, currency) == expected


def test_format_currency_defaults_to_inr_and_keeps_garbage():
    assert format_currency("2500") == "₹2,500.00"
    assert format_currency("n/a") == "n/a"
    assert format_currency(None) == ""


def test_format_number():
    assert format_number(1234567) == "1,234,567"
    assert format_number("1234.5") == "1,234.5"
    assert format_number(Decimal("2.0")) == "2"
    assert format_number(1.23456) == "1.235"
    assert format_number("abc") == "abc"


def test_format_date_uses_console_timezone():
    assert format_date("2024-03-05T09:00:00.000Z") == "Mar 05, 2024 14:30"
    assert format_date("2024-03-05T09:00:00Z", tz_name="UTC") == "Mar 05, 2024 09:00"


def test_format_date_falls_back_to_raw_string():
    assert format_date("yesterday") == "yesterday"
    assert format_date(None) == ""


def test_format_percent():
    assert format_percent(12.5) == "12.50%"
    assert format_percent(None) == "-"
