"""Formatting helpers for amounts and dates shown in reports.

Amounts are handled as Decimal end to end so that the grand total printed in
the footer is exactly the sum of the printed rows. Dates follow the es-MX
short convention (day/month/year, no zero padding)."""

import datetime
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Optional, Union
from zoneinfo import ZoneInfo

CENTS = Decimal("0.01")

Amount = Union[int, float, Decimal, str, None]


def to_decimal(amount: Amount) -> Decimal:
    """Coerce a stored amount to Decimal. None counts as zero.

    Floats go through str() so 96818.71 stays 96818.71 instead of its
    binary expansion.
    """
    if amount is None:
        return Decimal(0)
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, bool):
        raise ValueError(f"Not a monetary amount: {amount!r}")
    try:
        return Decimal(str(amount))
    except InvalidOperation as e:
        raise ValueError(f"Not a monetary amount: {amount!r}") from e


def format_money(amount: Amount) -> str:
    """
    Format an amount as "$1,234.56".

    Two decimals (half-up rounding), a comma every three integer digits.
    Negative amounts keep their sign in front of the currency symbol: "-$1,234.50".
    """
    value = to_decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def parse_money(text: str) -> Decimal:
    """Inverse of format_money: "-$1,234.50" -> Decimal("-1234.50")."""
    cleaned = text.strip()
    negative = cleaned.startswith("-")
    cleaned = cleaned.lstrip("-").lstrip("$").replace(",", "")
    try:
        value = Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Not a formatted amount: {text!r}") from e
    return -value if negative else value


def resolve_timezone(name: Optional[str]) -> datetime.tzinfo:
    if not name or name.upper() == "UTC":
        return datetime.timezone.utc
    return ZoneInfo(name)


def format_report_date(value: datetime.datetime, tz: datetime.tzinfo = datetime.timezone.utc) -> str:
    """
    Render a date the way es-MX short dates read: 5/3/2025 for 5 March 2025.

    Aware datetimes are converted to `tz` first; naive ones are assumed to be UTC,
    which is what both sales stores hand back.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    local = value.astimezone(tz)
    return f"{local.day}/{local.month}/{local.year}"
