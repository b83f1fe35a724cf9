import datetime
import re
from decimal import Decimal

import pytest

from sales_reports.common.formatting import (
    format_money,
    format_report_date,
    parse_money,
    resolve_timezone,
    to_decimal,
)

MONEY_PATTERN = re.compile(r"^\$\d{1,3}(,\d{3})*\.\d{2}$")


@pytest.mark.parametrize(
    "amount, expected",
    [
        (0, "$0.00"),
        (1000, "$1,000.00"),
        (96818.71, "$96,818.71"),
        (12, "$12.00"),
        (Decimal("1234567.891"), "$1,234,567.89"),
        (0.005, "$0.01"),
        (999.999, "$1,000.00"),
        (None, "$0.00"),
    ],
)
def test_format_money_examples(amount, expected):
    assert format_money(amount) == expected


@pytest.mark.parametrize("amount", [0, 1, 12.5, 999, 1000, 65432.1, 1_000_000, 123456789.99])
def test_format_money_shape(amount):
    assert MONEY_PATTERN.match(format_money(amount))


def test_format_money_is_idempotent():
    assert format_money(96818.71) == format_money(96818.71)


def test_format_money_negative_keeps_sign():
    assert format_money(-1234.5) == "-$1,234.50"
    assert parse_money("-$1,234.50") == Decimal("-1234.50")


def test_parse_money_reads_back_formatted_amount():
    assert parse_money(format_money(96818.71)) == Decimal("96818.71")
    with pytest.raises(ValueError):
        parse_money("twelve")


def test_to_decimal_rejects_non_amounts():
    assert to_decimal(96818.71) == Decimal("96818.71")
    with pytest.raises(ValueError):
        to_decimal("abc")
    with pytest.raises(ValueError):
        to_decimal(True)


def test_format_report_date_has_no_zero_padding():
    value = datetime.datetime(2025, 3, 5, 15, 0, tzinfo=datetime.timezone.utc)
    assert format_report_date(value) == "5/3/2025"


def test_format_report_date_naive_is_utc():
    assert format_report_date(datetime.datetime(2025, 12, 31, 23, 0)) == "31/12/2025"


def test_format_report_date_converts_timezone():
    late_evening = datetime.datetime(2025, 1, 1, 3, 0, tzinfo=datetime.timezone.utc)
    six_hours_behind = datetime.timezone(datetime.timedelta(hours=-6))
    assert format_report_date(late_evening, six_hours_behind) == "31/12/2024"


def test_resolve_timezone_utc_needs_no_tz_database():
    assert resolve_timezone("UTC") is datetime.timezone.utc
    assert resolve_timezone("") is datetime.timezone.utc
