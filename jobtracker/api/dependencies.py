"""FastAPI dependencies for DI (settings, DB session, stores, services).

This module provides dependency injection helpers so endpoints receive their stores and services, and tests can swap the database session for an in-memory one.
"""

from collections.abc import Iterator

from fastapi import Depends
from sqlalchemy.orm import Session

from jobtracker.core.db import CustomerStore, JobStore, SessionLocal
from jobtracker.core.settings import Settings, get_settings
from jobtracker.services.customer_service import CustomerService
from jobtracker.services.job_service import JobService
from jobtracker.workers.import_runner import ImportRunner


def get_session() -> Iterator[Session]:
    """Provide a SQLAlchemy session for the duration of a request."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def get_job_store(session: Session = Depends(get_session)) -> JobStore:
    """Provide a job store bound to the request session."""
    return JobStore(session)


def get_customer_store(session: Session = Depends(get_session)) -> CustomerStore:
    """Provide a customer store bound to the request session."""
    return CustomerStore(session)


def get_job_service(
    store: JobStore = Depends(get_job_store),
    settings: Settings = Depends(get_settings),
) -> JobService:
    """Provide a JobService instance for dependency injection."""
    return JobService(store, settings)


def get_customer_service(store: CustomerStore = Depends(get_customer_store)) -> CustomerService:
    """Provide a CustomerService instance for dependency injection."""
    return CustomerService(store)


def get_job_importer(
    store: JobStore = Depends(get_job_store),
    settings: Settings = Depends(get_settings),
) -> ImportRunner:
    """Provide an ImportRunner writing to the job store."""
    return ImportRunner(store, settings)


def get_customer_importer(
    store: CustomerStore = Depends(get_customer_store),
    settings: Settings = Depends(get_settings),
) -> ImportRunner:
    """Provide an ImportRunner writing to the customer store."""
    return ImportRunner(store, settings)
