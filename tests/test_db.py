"""Tests for the record stores."""

import pytest
from sqlalchemy.engine import Engine

from jobtracker.core.db import JobRow, JobStore, RecordNotFoundError, StorageError
from jobtracker.core.models import JobRecord, JobStatus


def test_create_assigns_ids_and_find_filters(job_store: JobStore) -> None:
    """Records get opaque ids; find applies equality filters."""
    created = job_store.create_many(
        [JobRecord(name="A"), JobRecord(name="B", status=JobStatus.DEBTOR, balance="9")],
    )
    if len({job.id for job in created}) != len(created):
        msg = "Ids should be unique"
        raise AssertionError(msg)
    debtors = job_store.find({"status": JobStatus.DEBTOR})
    if [job.name for job in debtors] != ["B"]:
        msg = f"Unexpected filter result: {debtors}"
        raise AssertionError(msg)


def test_amounts_are_reparsed_on_read(job_store: JobStore, session) -> None:
    """Text amounts written by other tools come back as two-decimal strings."""
    session.add(JobRow(id="legacy", name="Legacy", price="£12", balance="abc", status="pending", created_at="x"))
    session.commit()
    job = job_store.get("legacy")
    if job is None or job.price != "12.00" or job.balance != "0.00":
        msg = f"Amounts not re-parsed: {job}"
        raise AssertionError(msg)


def test_update_unknown_id_raises(job_store: JobStore) -> None:
    """Updating a missing record raises RecordNotFoundError."""
    with pytest.raises(RecordNotFoundError):
        job_store.update("missing", {"status": JobStatus.COMPLETED})


def test_unknown_filter_column_is_rejected(job_store: JobStore) -> None:
    """Filtering on a column that does not exist is a caller error."""
    with pytest.raises(ValueError, match="Unknown column"):
        job_store.find({"colour": "red"})


def test_backend_failure_becomes_storage_error(job_store: JobStore) -> None:
    """Database errors surface as StorageError and the session stays usable."""
    with pytest.raises(StorageError):
        job_store.create({"name": None})
    job = job_store.create(JobRecord(name="After failure"))
    if job_store.get(job.id) is None:
        msg = "Store should keep working after a rolled back failure"
        raise AssertionError(msg)


def test_lookup_failures_become_storage_error(engine: Engine, job_store: JobStore) -> None:
    """get and update wrap errors raised while loading the row."""
    JobRow.__table__.drop(engine)
    with pytest.raises(StorageError):
        job_store.get("missing")
    with pytest.raises(StorageError):
        job_store.update("missing", {"notes": "x"})


def test_delete_many_counts_rows(job_store: JobStore) -> None:
    """delete_many honours its filter and reports the number removed."""
    job_store.create_many([JobRecord(name="A"), JobRecord(name="B", status=JobStatus.COMPLETED)])
    if job_store.delete_many({"status": JobStatus.COMPLETED}) != 1:
        msg = "Expected one completed job to be deleted"
        raise AssertionError(msg)
    if [job.name for job in job_store.find()] != ["A"]:
        msg = "Pending job should remain"
        raise AssertionError(msg)
