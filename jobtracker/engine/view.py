"""Filtering and ordering of the job list.

Three views are supported: every job ordered by due date, a single day, and
free-text search. Search wins whenever the query is non-blank. All date work
is done on canonical ``YYYY-MM-DD`` strings.
"""

from collections.abc import Sequence
from datetime import date
from enum import Enum
from typing import TypeVar

from jobtracker.core.models import Job
from jobtracker.engine.dates import is_before_or_on, normalize_date, today_string

J = TypeVar("J", bound=Job)

SEARCH_FIELDS = ("name", "address", "services")


class ViewMode(str, Enum):
    """Which slice of the job list to show."""

    ALL = "all"
    DAY = "day"
    SEARCH = "search"


def sort_by_due(jobs: Sequence[J]) -> list[J]:
    """Order jobs by due date ascending; undated or unreadable dates go last in input order."""
    dated = []
    undated = []
    for job in jobs:
        due = normalize_date(job.next_due)
        if due is None:
            undated.append(job)
        else:
            dated.append((due, job))
    # sorted() is stable, so equal dates keep their input order.
    dated = sorted(dated, key=lambda pair: pair[0])
    return [job for _, job in dated] + undated


def filter_search(jobs: Sequence[J], query: str) -> list[J]:
    """Case-insensitive substring match on name, address and services, in input order."""
    needle = (query or "").strip().lower()
    return [job for job in jobs if any(needle in (getattr(job, attr, None) or "").lower() for attr in SEARCH_FIELDS)]


def filter_day(jobs: Sequence[J], day: str | date, today: str | None = None) -> list[J]:
    """Jobs due on ``day``; when ``day`` is today, anything still overdue is included as well.

    Jobs without a readable due date never appear in a day view.
    """
    selected = normalize_date(day)
    if selected is None:
        return []
    include_overdue = selected == (today or today_string())
    result = []
    for job in jobs:
        due = normalize_date(job.next_due)
        if due is None:
            continue
        if due == selected or (include_overdue and is_before_or_on(due, selected)):
            result.append(job)
    return result


def select_jobs(
    jobs: Sequence[J],
    mode: ViewMode | str = ViewMode.ALL,
    param: str | date | None = None,
    today: str | None = None,
) -> list[J]:
    """Apply one view mode to a job list; a blank search falls back to the date-sorted list."""
    mode = ViewMode(mode)
    if mode is ViewMode.SEARCH:
        text = str(param or "")
        if text.strip():
            return filter_search(jobs, text)
        return sort_by_due(jobs)
    if mode is ViewMode.DAY and param is not None:
        return filter_day(jobs, param, today=today)
    return sort_by_due(jobs)


def resolve_view(search: str | None = None, day: str | date | None = None) -> tuple[ViewMode, str | date | None]:
    """Pick the view mode for a request; a non-blank search overrides any selected day."""
    if search and search.strip():
        return ViewMode.SEARCH, search
    if day is not None and str(day).strip():
        return ViewMode.DAY, day
    return ViewMode.ALL, None
