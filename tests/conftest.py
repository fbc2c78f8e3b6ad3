"""Shared fixtures: an in-memory database wired into the API through dependency overrides."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from jobtracker.api.dependencies import get_session
from jobtracker.core.db import CustomerStore, JobStore, create_tables
from jobtracker.core.settings import Settings
from main import app


@pytest.fixture
def engine() -> Iterator[Engine]:
    """Provide a fresh in-memory SQLite engine with the tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    """Provide a session bound to the in-memory engine."""
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def job_store(session: Session) -> JobStore:
    """Provide a job store on the in-memory database."""
    return JobStore(session)


@pytest.fixture
def customer_store(session: Session) -> CustomerStore:
    """Provide a customer store on the in-memory database."""
    return CustomerStore(session)


@pytest.fixture
def settings() -> Settings:
    """Provide settings with defaults, independent of any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def client(engine: Engine) -> Iterator[TestClient]:
    """Provide a TestClient whose requests use the in-memory database."""
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_session() -> Iterator[Session]:
        session = factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_session] = override_session
    yield TestClient(app)
    app.dependency_overrides.clear()
