"""Display formatting for amounts and dates."""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "INR": "₹",
    "JPY": "¥",
}

SHORT_MONTHS = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]


def format_currency(amount: Union[Decimal, int, float], currency_code: str = "USD") -> str:
    """
    Format an amount with thousands separators and two decimals.

    format_currency(Decimal("1234.5")) -> "$1,234.50"
    format_currency(-20)               -> "-$20.00"
    Unknown codes are written as a prefix: "CAD 10.00".
    """
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    symbol = CURRENCY_SYMBOLS.get(currency_code.upper())
    digits = f"{abs(value):,.2f}"
    sign = "-" if value < 0 else ""
    if symbol is None:
        return f"{sign}{currency_code.upper()} {digits}"
    return f"{sign}{symbol}{digits}"


def format_date(value: Union[date, str]) -> str:
    """Short date, e.g. "Jun 1, 2024"."""
    if isinstance(value, str):
        value = date.fromisoformat(value)
    return f"{SHORT_MONTHS[value.month - 1]} {value.day}, {value.year}"


def format_count(count: int, noun: str = "item") -> str:
    """Count with a pluralized noun, e.g. "1 item" or "3 items"."""
    return f"{count} {noun if count == 1 else noun + 's'}"
