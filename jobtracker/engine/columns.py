"""Column resolution for spreadsheets of unknown origin.

Exports from other job-management tools label the same information in many
ways ("Customer", "Client Name", "Job Address", "When work is due"...). Each
semantic field has a priority-ordered list of aliases. Resolution is done in
two passes over that list:

1. case-insensitive exact header match;
2. (unless ``strict``) case-insensitive substring match in either direction.

Within a pass the first alias whose column holds a non-empty value wins.
"""

from collections.abc import Mapping
from enum import Enum
from typing import NamedTuple

from jobtracker.core.utils import as_text


class JobField(str, Enum):
    """Semantic fields the importer knows how to locate."""

    NAME = "name"
    ADDRESS = "address"
    PHONE = "phone"
    SERVICES = "services"
    PRICE = "price"
    NEXT_DUE = "next_due"
    FREQUENCY = "frequency"
    NOTES = "notes"
    BALANCE = "balance"


class ColumnAlias(NamedTuple):
    """One accepted header label for a field; lower priority is tried first."""

    field: JobField
    alias: str
    priority: int


def _aliases(field: JobField, *labels: str) -> list[ColumnAlias]:
    return [ColumnAlias(field, label, priority) for priority, label in enumerate(labels)]


COLUMN_ALIASES: tuple[ColumnAlias, ...] = (
    *_aliases(JobField.NAME, "Name", "Customer Name", "Customer", "Client", "Client Name", "Full Name", "ContactName"),
    *_aliases(
        JobField.ADDRESS,
        "Job Address",
        "Address",
        "Street Address",
        "Location",
        "Site Address",
        "Property Address",
        "Street",
        "AddressLine1",
    ),
    *_aliases(JobField.PHONE, "Phone", "Phone Number", "Telephone", "Mobile", "Cell", "Contact Number", "Tel"),
    *_aliases(JobField.SERVICES, "Services", "Service", "Work Carried Out", "Work", "Job Type", "Description", "Type"),
    *_aliases(JobField.PRICE, "Price", "Cost", "Amount", "Fee", "Charge", "Rate", "Job Price", "Total"),
    *_aliases(
        JobField.NEXT_DUE,
        "Next Due",
        "NextDue",
        "Due Date",
        "Due",
        "Next Service",
        "When work is due",
        "Schedule Date",
        "Scheduled",
    ),
    *_aliases(JobField.FREQUENCY, "Frequency", "Freq", "Job Frequency", "Interval"),
    *_aliases(JobField.NOTES, "Notes", "Comments", "Remarks", "Description", "Info", "Details"),
    *_aliases(JobField.BALANCE, "Balance", "Outstanding", "Owed", "Debt"),
)


def aliases_for(field: JobField | str) -> list[str]:
    """Return the header aliases for a field in priority order."""
    wanted = JobField(field)
    matches = sorted((alias for alias in COLUMN_ALIASES if alias.field is wanted), key=lambda alias: alias.priority)
    return [alias.alias for alias in matches]


def _first_value(row: Mapping, headers: list) -> str:
    for header in headers:
        value = as_text(row.get(header))
        if value:
            return value
    return ""


def resolve_column(row: Mapping, field: JobField | str, strict: bool = False) -> str:
    """Find the value of a semantic field in a row with arbitrary headers.

    Returns an empty string when no column matches. The row is never modified.
    """
    headers = [header for header in row if as_text(header)]
    lowered = {header: as_text(header).lower() for header in headers}
    aliases = [alias.lower() for alias in aliases_for(field)]

    for alias in aliases:
        value = _first_value(row, [header for header in headers if lowered[header] == alias])
        if value:
            return value

    if strict:
        return ""

    for alias in aliases:
        candidates = [header for header in headers if alias in lowered[header] or lowered[header] in alias]
        value = _first_value(row, candidates)
        if value:
            return value
    return ""


def resolve_row(row: Mapping, strict_fields: frozenset[JobField] = frozenset()) -> dict[JobField, str]:
    """Resolve every known field of a row; fields in ``strict_fields`` skip substring matching."""
    return {field: resolve_column(row, field, strict=field in strict_fields) for field in JobField}
