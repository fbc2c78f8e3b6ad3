"""Runtime-independent date handling.

Dates arrive from spreadsheets and forms in several text shapes. Everything
inside the tracker compares them in the canonical ``YYYY-MM-DD`` form, which
orders correctly as plain strings because it is zero-padded and most
significant field first. Parsing is done with explicit patterns rather than a
locale-aware date parser, so ``05/03/2024`` is always read day-first and an
unrecognised value degrades to ``None`` instead of a guess.
"""

import re
from datetime import date, datetime

SECONDS_PER_DAY = 24 * 60 * 60

# Year first, "-" or "/" separated, optionally followed by a time component.
_YEAR_FIRST = re.compile(r"^(\d{4})[-/](\d{2})[-/](\d{2})")
# Day first (UK order), "-" or "/" separated.
_DAY_FIRST = re.compile(r"^(\d{2})[-/](\d{2})[-/](\d{4})")
_CANONICAL = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def _canonical(year: str, month: str, day: str) -> str | None:
    try:
        date(int(year), int(month), int(day))
    except ValueError:
        return None
    return f"{year}-{month}-{day}"


def normalize_date(raw: object) -> str | None:
    """Convert a raw date value to ``YYYY-MM-DD``, or ``None`` when it is not a recognised date.

    Accepted forms, first match wins:

    1. ``YYYY-MM-DD`` / ``YYYY/MM/DD``, with or without a trailing time (``2024-03-05T10:00:00``).
    2. ``DD-MM-YYYY`` / ``DD/MM/YYYY``.

    ``date`` and ``datetime`` instances are accepted as-is. Values naming an impossible
    calendar day (``2024-02-30``) are rejected.
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date().isoformat()
    if isinstance(raw, date):
        return raw.isoformat()
    text = str(raw).strip()
    if not text:
        return None
    match = _YEAR_FIRST.match(text)
    if match:
        return _canonical(match.group(1), match.group(2), match.group(3))
    match = _DAY_FIRST.match(text)
    if match:
        return _canonical(match.group(3), match.group(2), match.group(1))
    return None


def today_string(now: date | None = None) -> str:
    """Return the local wall-clock date as ``YYYY-MM-DD`` (no UTC shift)."""
    current = now if now is not None else date.today()
    return current.isoformat()


def _local_midnight(canonical: str) -> float:
    match = _CANONICAL.match(canonical or "")
    if not match:
        msg = f"Expected a canonical YYYY-MM-DD date, got {canonical!r}"
        raise ValueError(msg)
    year, month, day = (int(part) for part in match.groups())
    # Naive datetimes are interpreted in local time, so DST offsets show up in the delta.
    return datetime(year, month, day).timestamp()


def days_between(first: str, second: str) -> int:
    """Whole days from ``second`` to ``first`` (positive when ``first`` is later).

    Both arguments must already be canonical. The delta between the two local
    midnights is rounded to the nearest day, which absorbs one-hour daylight
    saving shifts.
    """
    delta = _local_midnight(first) - _local_midnight(second)
    return round(delta / SECONDS_PER_DAY)


def is_before_or_on(candidate: str, limit: str) -> bool:
    """Compare two canonical dates as strings."""
    return candidate <= limit
