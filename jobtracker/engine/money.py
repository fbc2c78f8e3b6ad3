"""Monetary amounts as fixed-point text.

Prices and balances are kept as non-negative strings with exactly two
fraction digits. Values from spreadsheets and the store are dirty (labels,
currency symbols, mis-encoded pound signs), so parsing keeps digits and dots
only and reads the leading number, the way a lenient float parser would.
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

ZERO = "0.00"
_CENT = Decimal("0.01")
_NON_NUMERIC = re.compile(r"[^0-9.]")
_LEADING_NUMBER = re.compile(r"^(\d+(?:\.\d*)?|\.\d+)")


def parse_amount(raw: object) -> Decimal | None:
    """Parse a dirty amount into a ``Decimal``; ``None`` when no number can be read.

    Minus signs are dropped along with every other non-numeric character, so the
    result is never negative. Numbers too long to hold to the cent in the
    decimal context are unreadable.
    """
    if raw is None:
        return None
    cleaned = _NON_NUMERIC.sub("", str(raw))
    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return None
    try:
        value = Decimal(match.group(1))
        value.quantize(_CENT)
    except InvalidOperation:
        return None
    return value


def format_amount(raw: object) -> str:
    """Normalize an amount to a two-decimal string; unreadable input becomes ``"0.00"``."""
    value = raw if isinstance(raw, Decimal) else parse_amount(raw)
    if value is None or not value.is_finite() or value < 0:
        return ZERO
    try:
        return str(value.quantize(_CENT, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return ZERO


def amount_value(raw: object) -> Decimal:
    """Return the parsed amount, treating unreadable input as zero."""
    value = parse_amount(raw)
    return value if value is not None else Decimal(0)


def is_positive(raw: object) -> bool:
    """True when the amount parses to something greater than zero."""
    return amount_value(raw) > 0


def price_label(raw: object, currency_symbol: str = "£") -> str:
    """Human-facing price text; zero or unreadable prices prompt for a rate."""
    value = parse_amount(raw)
    if value is None or value <= 0:
        return "Enter rate"
    return f"{currency_symbol}{format_amount(value)}"
