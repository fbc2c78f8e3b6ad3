"""Turn spreadsheet rows of unknown shape into canonical job records.

Each row is handled on its own: columns are resolved to semantic fields,
label prefixes and currency debris are stripped, a payment method mentioned
in the notes is lifted into its own field, and balance decides whether the
job starts as ``pending`` or ``debtor``. Rows with neither a usable name nor
an address are rejected (``None``) so blank lines and header artifacts never
become jobs.
"""

import re
from collections.abc import Mapping

from jobtracker.core.models import JobRecord, JobStatus, PaymentMethod
from jobtracker.engine.columns import JobField, resolve_row
from jobtracker.engine.money import amount_value, format_amount

DEFAULT_SERVICES = "Window Cleaning"
PLACEHOLDER_NAME = "Unknown"

# Longest token first so "Bank Transfer" is not shadowed by a shorter match.
PAYMENT_TOKENS: tuple[PaymentMethod, ...] = (PaymentMethod.BANK_TRANSFER, PaymentMethod.CASH, PaymentMethod.CARD)

STRICT_FIELDS = frozenset({JobField.FREQUENCY})

_NAME_LABEL = re.compile(r"name:\s*", re.IGNORECASE)
_PRICE_LABEL = re.compile(r"price:\s*", re.IGNORECASE)
_NOTES_LABEL = re.compile(r"notes:\s*", re.IGNORECASE)
# "Â£" is a UTF-8 pound sign read back as Latin-1.
_CURRENCY_DEBRIS = re.compile(r"Â£|Â|£|\$|€|GBP", re.IGNORECASE)


def strip_label(value: str, label: re.Pattern) -> str:
    """Remove the first ``Label:`` marker from a cell value and trim it."""
    return label.sub("", value, count=1).strip()


def clean_price(raw: str) -> str:
    """Strip label and currency artifacts from a price cell and format it."""
    if not raw:
        return format_amount(None)
    cleaned = _CURRENCY_DEBRIS.sub("", strip_label(raw, _PRICE_LABEL)).strip()
    return format_amount(cleaned)


def extract_payment_method(notes: str) -> tuple[PaymentMethod | None, str]:
    """Find a payment method mentioned in free-text notes.

    Returns the method and the notes with every occurrence of its token removed,
    or ``(None, notes)`` when no token appears.
    """
    lowered = notes.lower()
    for method in PAYMENT_TOKENS:
        if method.value.lower() in lowered:
            remainder = re.sub(re.escape(method.value), "", notes, flags=re.IGNORECASE)
            return method, remainder.strip()
    return None, notes


def is_usable_name(name: str) -> bool:
    """A name counts when it is non-blank and not the placeholder."""
    return bool(name) and name.lower() != PLACEHOLDER_NAME.lower()


def transform_row(row: Mapping, default_services: str = DEFAULT_SERVICES) -> JobRecord | None:
    """Build a canonical job record from one import row, or ``None`` to reject it."""
    fields = resolve_row(row, strict_fields=STRICT_FIELDS)

    name = strip_label(fields[JobField.NAME], _NAME_LABEL)
    address = fields[JobField.ADDRESS]
    if not is_usable_name(name) and not address:
        return None

    if not name:
        name = address.split(",")[0].strip() or PLACEHOLDER_NAME

    balance = amount_value(fields[JobField.BALANCE])
    notes = strip_label(fields[JobField.NOTES], _NOTES_LABEL)
    payment_method, notes = extract_payment_method(notes)

    return JobRecord(
        name=name,
        address=address,
        phone=fields[JobField.PHONE],
        services=fields[JobField.SERVICES] or default_services,
        price=clean_price(fields[JobField.PRICE]),
        balance=format_amount(balance),
        next_due=fields[JobField.NEXT_DUE] or None,
        frequency=fields[JobField.FREQUENCY],
        payment_method=payment_method,
        notes=notes,
        status=JobStatus.DEBTOR if balance > 0 else JobStatus.PENDING,
    )
