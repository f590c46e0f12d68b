"""Display formatting utilities for the console.

Currency amounts use Indian digit grouping (``₹1,23,456.78``); dates are shown
in the console timezone.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

from chicken_admin.utils.datetime_helpers import console_timezone, parse_utc_iso

CURRENCY_SYMBOLS = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}

DATE_DISPLAY_FORMAT = "%b %d, %Y %H:%M"

Number = Union[Decimal, float, int, str]


def _to_decimal(value: Optional[Number]) -> Optional[Decimal]:
    """Safely coerce a value to Decimal, returning None on failure."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return None
    return result if result.is_finite() else None


def _group_indian(digits: str) -> str:
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(amount: Optional[Number], currency: str = "INR") -> str:
    """
    Format an amount with its currency symbol and two decimals.

    INR uses lakh/crore grouping, other currencies thousands grouping; unknown
    currency codes are rendered as a ``"CODE "`` prefix. Unparseable amounts
    come back unchanged as text.
    """
    value = _to_decimal(amount)
    if value is None:
        return "" if amount is None else str(amount)

    quantized = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if quantized < 0 else ""
    whole, _, cents = f"{abs(quantized):.2f}".partition(".")
    code = (currency or "INR").upper()
    grouped = _group_indian(whole) if code == "INR" else f"{int(whole):,}"
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
    return f"{sign}{symbol}{grouped}.{cents}"


def format_number(value: Optional[Number]) -> str:
    """Thousands separators, at most three decimals, trailing zeros dropped."""
    number = _to_decimal(value)
    if number is None:
        return "" if value is None else str(value)
    rounded = number.quantize(Decimal("0.001"), rounding=ROUND_HALF_UP)
    if rounded == rounded.to_integral_value():
        return f"{int(rounded):,}"
    text = f"{rounded:,.3f}".rstrip("0")
    return text


def format_date(iso_string: Optional[str], tz_name: Optional[str] = None) -> str:
    """
    Format an ISO8601 timestamp as ``Mar 05, 2024 14:30`` in the console timezone.

    Falls back to the raw string when it cannot be parsed.
    """
    if not iso_string:
        return ""
    try:
        dt = parse_utc_iso(iso_string)
    except (ValueError, TypeError):
        return iso_string
    return dt.astimezone(console_timezone(tz_name)).strftime(DATE_DISPLAY_FORMAT)


def format_percent(value: Optional[Number], decimals: int = 2) -> str:
    number = _to_decimal(value)
    if number is None:
        return "-" if value is None else str(value)
    return f"{number:.{decimals}f}%"
