from datetime import date, datetime

from shawarma.config import set_config_for_test
from shawarma.reporting.formatting import (
    format_currency,
    format_date,
    format_datetime,
    format_percentage,
    relative_date_label,
)

TODAY = date(2026, 10, 18)


def test_format_currency():
    assert format_currency(1250) == "RM12.50"
    assert format_currency(123456) == "RM1,234.56"
    assert format_currency(0) == "RM0.00"
    assert format_currency(-500) == "-RM5.00"


def test_format_percentage():
    assert format_percentage(12.345) == "12.3%"


def test_format_date():
    assert format_date(date(2026, 10, 16)) == "Oct 16, 2026"
    assert format_date("2026-10-16") == "Oct 16, 2026"
    assert format_date("garbage") == "Invalid Date"
    assert format_date(None) == "Invalid Date"
    assert format_datetime(datetime(2026, 10, 16, 9, 5)) == "Oct 16, 2026 09:05"


def test_relative_date_label():
    assert relative_date_label(TODAY, TODAY) == "Today"
    assert relative_date_label(date(2026, 10, 17), TODAY) == "Yesterday"
    assert relative_date_label(date(2026, 10, 15), TODAY) == "3 days ago"
    assert relative_date_label(date(2026, 10, 4), TODAY) == "2 weeks ago"
    assert relative_date_label(date(2026, 8, 1), TODAY) == "2 months ago"
    assert relative_date_label(datetime(2024, 10, 1, 12, 0), TODAY) == "2 years ago"


def test_currency_symbol_from_config():
    set_config_for_test(currency_symbol="$")
    assert format_currency(1250) == "$12.50"
    assert format_currency(1250, symbol="RM") == "RM12.50"
