"""Job lifecycle and list views on top of the job store.

Transitions supported:

- ``pending -> completed``: finished and paid by cash or card.
- ``pending -> overdue``: finished, payment expected by bank transfer; the price becomes the balance.
- ``debtor|overdue -> completed``: balance paid off.

Nothing returns a job to ``pending``.
"""

from datetime import date
from decimal import Decimal

from jobtracker.core.db import JobStore, RecordNotFoundError
from jobtracker.core.models import (
    DebtorSummary,
    Job,
    JobCreate,
    JobRecord,
    JobStatus,
    JobUpdate,
    JobView,
    PaymentMethod,
)
from jobtracker.core.settings import Settings
from jobtracker.core.utils import get_logger
from jobtracker.engine.dates import today_string
from jobtracker.engine.due_status import classify_due
from jobtracker.engine.money import ZERO, amount_value, format_amount, is_positive, price_label
from jobtracker.engine.view import resolve_view, select_jobs, sort_by_due

logger = get_logger("jobtracker.jobs")

FINISHABLE = frozenset({JobStatus.PENDING})
PAYABLE = frozenset({JobStatus.DEBTOR, JobStatus.OVERDUE})


class InvalidTransitionError(Exception):
    """Raised when a lifecycle action is not allowed from the job's current status."""


class JobService:
    """Create, edit, finish and list jobs."""

    def __init__(self, store: JobStore, settings: Settings) -> None:
        """Initialize the service with a job store and settings."""
        self.store = store
        self.settings = settings

    def _require(self, job_id: str) -> Job:
        job = self.store.get(job_id)
        if job is None:
            msg = f"Job '{job_id}' not found"
            raise RecordNotFoundError(msg)
        return job

    def render(self, job: Job, today: str | None = None) -> JobView:
        """Attach the render-time labels to a job."""
        due = classify_due(job.next_due, today=today)
        return JobView(
            **job.model_dump(),
            due_label=due.label,
            due_style=due.style.value,
            price_label=price_label(job.price, self.settings.currency_symbol),
            frequency_label=job.frequency or "Ad hoc",
        )

    def list_active(
        self,
        search: str | None = None,
        day: str | date | None = None,
        today: str | None = None,
    ) -> list[JobView]:
        """List pending jobs ordered by due date, narrowed by search text or a day."""
        today = today or today_string()
        if isinstance(day, str) and day.strip().lower() == "today":
            day = today
        jobs = sort_by_due(self.store.find({"status": JobStatus.PENDING}))
        mode, param = resolve_view(search, day)
        selected = select_jobs(jobs, mode, param, today=today)
        logger.info(f"Job list: mode={mode.value} param={param!r} -> {len(selected)}/{len(jobs)} jobs")
        return [self.render(job, today) for job in selected]

    def create_job(self, data: JobCreate, today: str | None = None) -> Job:
        """Add a job entered by hand; it always starts as pending."""
        record = JobRecord(
            name=data.name,
            address=data.address,
            phone=data.phone,
            services=data.services,
            price=data.price,
            balance=ZERO,
            next_due=data.next_due or today or today_string(),
            frequency=data.frequency,
            payment_method=data.payment_method,
            status=JobStatus.PENDING,
        )
        job = self.store.create(record)
        logger.info(f"Created job {job.id} for '{job.name}'")
        return job

    def edit_job(self, job_id: str, data: JobUpdate) -> Job:
        """Overwrite the editable fields of a job."""
        self._require(job_id)
        job = self.store.update(job_id, data)
        logger.info(f"Updated job {job_id}")
        return job

    def finish_job(self, job_id: str, method: PaymentMethod) -> Job:
        """Finish a pending job with the given payment method."""
        job = self._require(job_id)
        if job.status not in FINISHABLE:
            msg = f"Job '{job_id}' is {job.status.value}; only pending jobs can be finished"
            raise InvalidTransitionError(msg)
        if method is PaymentMethod.BANK_TRANSFER:
            patch = {"status": JobStatus.OVERDUE, "payment_method": method, "balance": format_amount(job.price)}
        else:
            patch = {"status": JobStatus.COMPLETED, "payment_method": method, "balance": ZERO}
        updated = self.store.update(job_id, patch)
        logger.info(f"Finished job {job_id} via {method.value}: status={updated.status.value}")
        return updated

    def mark_paid(self, job_id: str) -> Job:
        """Clear the balance of a debtor or overdue job."""
        job = self._require(job_id)
        if job.status not in PAYABLE:
            msg = f"Job '{job_id}' is {job.status.value}; only debtor or overdue jobs can be marked paid"
            raise InvalidTransitionError(msg)
        updated = self.store.update(job_id, {"status": JobStatus.COMPLETED, "balance": ZERO})
        logger.info(f"Job {job_id} marked paid")
        return updated

    def debtors(self) -> DebtorSummary:
        """Jobs with an outstanding balance, largest first."""
        owing = [job for job in self.store.find() if is_positive(job.balance)]
        owing = sorted(owing, key=lambda job: amount_value(job.balance), reverse=True)
        owing = owing[: self.settings.debtors_limit]
        total = sum((amount_value(job.balance) for job in owing), Decimal(0))
        return DebtorSummary(jobs=owing, total_owed=format_amount(total))

    def clear_jobs(self) -> int:
        """Delete every job."""
        removed = self.store.delete_many()
        logger.warning(f"Cleared {removed} jobs")
        return removed
