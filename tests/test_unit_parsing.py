from datetime import date, datetime
from decimal import Decimal

from adreport.utils.metrics import format_money, format_percent, safe_div
from adreport.utils.parsing import is_blank, parse_date, to_decimal, to_int, to_text


def test_to_decimal_cleans_report_formatting():
    assert to_decimal("1,234.56") == Decimal("1234.56")
    assert to_decimal("$12.30") == Decimal("12.30")
    assert to_decimal("€ 9") == Decimal("9")
    assert to_decimal("12.5%") == Decimal("12.5")
    assert to_decimal(0.1) == Decimal("0.1")


def test_to_decimal_placeholders_use_default():
    for value in ["--", "-", "N/A", "nan", "", None, True]:
        assert to_decimal(value) == Decimal("0")
    assert to_decimal("junk", default=Decimal("1")) == Decimal("1")


def test_to_int_never_returns_nan():
    assert to_int("NaN") == 0
    assert to_int(float("nan")) == 0
    assert to_int("7.9") == 7
    assert to_int(4) == 4


def test_to_int_outside_int64_uses_default():
    assert to_int("1e30") == 0
    assert to_int("1e999999", default=-1) == -1
    assert to_int(2 ** 63) == 0
    assert to_int(-(2 ** 63)) == -(2 ** 63)
    assert to_int("-9,223,372,036,854,775,809", default=7) == 7


def test_to_text():
    assert to_text("  shoes ") == "shoes"
    assert to_text(None, "dflt") == "dflt"
    assert to_text(12.5) == "12.5"


def test_parse_date_variants():
    assert parse_date(datetime(2024, 5, 6, 8, 0)) == date(2024, 5, 6)
    assert parse_date("20240506") == date(2024, 5, 6)
    assert parse_date("05/06/2024") == date(2024, 5, 6)
    assert parse_date("May 6, 2024") == date(2024, 5, 6)
    assert parse_date(12) is None
    assert parse_date("2024-13-40") is None


def test_is_blank():
    assert is_blank("   ") and is_blank(None) and is_blank(float("nan"))
    assert not is_blank(0)


def test_metric_helpers():
    assert safe_div(1, 0) == 0.0
    assert safe_div(Decimal("5"), Decimal("0.00")) == 0.0
    assert format_percent(0.10396) == "10.40%"
    assert format_money(Decimal("0.5")) == "0.50"
