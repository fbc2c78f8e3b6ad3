"""DB connection and record stores for the job tracker.

The stores are the only place that talks to the database. They expose a small
CRUD contract (list with an equality filter, get, create, batch create, partial
update, delete with a filter) and return pydantic models, so amounts stored as
text are re-validated on the way out.
"""

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import Column, String, Text, create_engine, delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from jobtracker.core.models import Customer, Job
from jobtracker.core.utils import get_logger, new_id, utcnow_iso

Base = declarative_base()
logger = get_logger("jobtracker.store")

ModelT = TypeVar("ModelT", bound=BaseModel)


class StorageError(Exception):
    """Raised when the backing database rejects or fails an operation."""


class RecordNotFoundError(LookupError):
    """Raised when a record id does not exist."""


class JobRow(Base):
    """A job as stored; monetary amounts are kept as text."""

    __tablename__ = "jobs"
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    address = Column(String, nullable=False, default="")
    phone = Column(String, nullable=False, default="")
    services = Column(String, nullable=False, default="")
    price = Column(String, nullable=False, default="0.00")
    balance = Column(String, nullable=False, default="0.00")
    next_due = Column(String, nullable=True)
    frequency = Column(String, nullable=False, default="")
    payment_method = Column(String, nullable=True)
    notes = Column(Text, nullable=False, default="")
    status = Column(String, nullable=False, default="pending", index=True)
    created_at = Column(String, nullable=False)


class CustomerRow(Base):
    """A customer directory entry."""

    __tablename__ = "customers"
    id = Column(String, primary_key=True)
    reference = Column(String, nullable=False, default="")
    name = Column(String, nullable=False, index=True)
    address = Column(String, nullable=False, default="")
    phone = Column(String, nullable=False, default="")
    created_at = Column(String, nullable=False)


def get_engine(url: str | None = None) -> Engine:
    """Create a SQLAlchemy engine using the configured database URL."""
    if url is None:
        from jobtracker.core.settings import get_settings

        url = get_settings().database_url
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args)


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


def _column_value(value: object) -> object:
    return value.value if isinstance(value, Enum) else value


def _as_fields(item: BaseModel | dict[str, Any]) -> dict[str, Any]:
    fields = item.model_dump(mode="json") if isinstance(item, BaseModel) else dict(item)
    return {key: _column_value(value) for key, value in fields.items()}


class RecordStore(Generic[ModelT]):
    """CRUD helper over one table, keyed by opaque string ids."""

    row_cls: type = Base
    model_cls: type[BaseModel] = BaseModel

    def __init__(self, session: Session) -> None:
        """Initialize the store with a SQLAlchemy session."""
        self.session = session

    @contextmanager
    def _unit_of_work(self, action: str) -> Iterator[None]:
        try:
            yield
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception(f"{self.row_cls.__tablename__}: {action} failed")
            msg = f"{action} failed: {exc}"
            raise StorageError(msg) from exc

    def _filters(self, where: dict[str, Any] | None) -> list:
        clauses = []
        for key, value in (where or {}).items():
            column = getattr(self.row_cls, key, None)
            if column is None:
                msg = f"Unknown column '{key}' for {self.row_cls.__tablename__}"
                raise ValueError(msg)
            clauses.append(column == _column_value(value))
        return clauses

    def _new_row(self, item: BaseModel | dict[str, Any]) -> Any:
        fields = {key: value for key, value in _as_fields(item).items() if hasattr(self.row_cls, key)}
        fields["id"] = new_id()
        fields["created_at"] = utcnow_iso()
        return self.row_cls(**fields)

    def _to_model(self, row: Any) -> ModelT:
        return self.model_cls.model_validate(row)

    def find(self, where: dict[str, Any] | None = None, order_by: str | None = None) -> list[ModelT]:
        """List records matching an equality filter, in insertion order unless ``order_by`` is given."""
        order = getattr(self.row_cls, order_by or "created_at")
        stmt = select(self.row_cls).order_by(order, self.row_cls.id)
        clauses = self._filters(where)
        if clauses:
            stmt = stmt.where(*clauses)
        try:
            rows = self.session.execute(stmt).scalars().all()
        except SQLAlchemyError as exc:
            logger.exception(f"{self.row_cls.__tablename__}: find failed")
            msg = f"find failed: {exc}"
            raise StorageError(msg) from exc
        return [self._to_model(row) for row in rows]

    def _get_row(self, record_id: str, action: str) -> Any:
        try:
            return self.session.get(self.row_cls, record_id)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception(f"{self.row_cls.__tablename__}: {action} failed")
            msg = f"{action} failed: {exc}"
            raise StorageError(msg) from exc

    def get(self, record_id: str) -> ModelT | None:
        """Fetch a single record by id."""
        row = self._get_row(record_id, "get")
        return self._to_model(row) if row is not None else None

    def create(self, item: BaseModel | dict[str, Any]) -> ModelT:
        """Insert one record and return it with its assigned id."""
        row = self._new_row(item)
        with self._unit_of_work("create"):
            self.session.add(row)
        return self._to_model(row)

    def create_many(self, items: Iterable[BaseModel | dict[str, Any]]) -> list[ModelT]:
        """Insert a batch of records in a single commit."""
        rows = [self._new_row(item) for item in items]
        with self._unit_of_work(f"create_many({len(rows)})"):
            self.session.add_all(rows)
        return [self._to_model(row) for row in rows]

    def update(self, record_id: str, patch: BaseModel | dict[str, Any]) -> ModelT:
        """Apply a partial field patch to one record."""
        row = self._get_row(record_id, "update")
        if row is None:
            msg = f"{self.row_cls.__tablename__} record '{record_id}' not found"
            raise RecordNotFoundError(msg)
        with self._unit_of_work("update"):
            for key, value in _as_fields(patch).items():
                if key in ("id", "created_at") or not hasattr(self.row_cls, key):
                    continue
                setattr(row, key, value)
        return self._to_model(row)

    def delete_many(self, where: dict[str, Any] | None = None) -> int:
        """Delete every record matching the filter and return how many were removed."""
        stmt = delete(self.row_cls)
        clauses = self._filters(where)
        if clauses:
            stmt = stmt.where(*clauses)
        with self._unit_of_work("delete_many"):
            result = self.session.execute(stmt)
        return result.rowcount or 0

    def close(self) -> None:
        """Close the SQLAlchemy session."""
        self.session.close()


class JobStore(RecordStore[Job]):
    """Store for jobs."""

    row_cls = JobRow
    model_cls = Job


class CustomerStore(RecordStore[Customer]):
    """Store for customer directory entries."""

    row_cls = CustomerRow
    model_cls = Customer


def create_tables(engine: Engine | None = None) -> None:
    """Create the jobs and customers tables if they do not exist."""
    Base.metadata.create_all(engine or get_engine())
