"""Due status labels for a job's next due date."""

from enum import Enum
from typing import NamedTuple

from jobtracker.engine.dates import days_between, normalize_date, today_string


class DueStyle(str, Enum):
    """Visual urgency levels understood by the front end."""

    AD_HOC = "ad-hoc"
    INVALID = "invalid"
    OVERDUE = "overdue"
    DUE_TODAY = "due-today"
    UPCOMING = "upcoming"


class DueStatus(NamedTuple):
    """Label and style tag for one job."""

    label: str
    style: DueStyle


AD_HOC = DueStatus("Ad Hoc", DueStyle.AD_HOC)
INVALID_DATE = DueStatus("Invalid Date", DueStyle.INVALID)


def classify_due(raw: object, today: str | None = None) -> DueStatus:
    """Classify a raw due date relative to ``today`` (defaults to the local date).

    Must be evaluated at render time; the result changes when the date rolls over.
    """
    if raw is None or not str(raw).strip():
        return AD_HOC
    due = normalize_date(raw)
    if due is None:
        return INVALID_DATE
    days = days_between(due, today or today_string())
    if days < 0:
        return DueStatus("Overdue", DueStyle.OVERDUE)
    if days == 0:
        return DueStatus("Due Today", DueStyle.DUE_TODAY)
    if days == 1:
        return DueStatus("Due Tomorrow", DueStyle.UPCOMING)
    return DueStatus(f"In {days} days", DueStyle.UPCOMING)
