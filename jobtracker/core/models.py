"""Pydantic models for the job tracker.

This module defines the job and customer records exchanged between the import engine, the storage layer and the API, together with the request and result models used by the endpoints.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jobtracker.engine.money import ZERO, format_amount


class JobStatus(str, Enum):
    """Lifecycle state of a job."""

    PENDING = "pending"
    DEBTOR = "debtor"
    OVERDUE = "overdue"
    COMPLETED = "completed"


class PaymentMethod(str, Enum):
    """How a job was (or will be) paid for."""

    CASH = "Cash"
    CARD = "Card"
    BANK_TRANSFER = "Bank Transfer"


class JobType(str, Enum):
    """Job types offered when a job is entered by hand."""

    WINDOWS = "Windows"
    GUTTERS = "Gutters"
    FASCIAS = "Fascias"
    PRESSURE_WASHING = "Pressure Washing"
    CONSERVATORY = "Conservatory"
    OTHER = "Other"


def _optional_payment_method(value: object) -> object:
    if value is None:
        return None
    if isinstance(value, PaymentMethod):
        return value
    text = str(value).strip()
    if not text:
        return None
    for method in PaymentMethod:
        if method.value.lower() == text.lower():
            return method
    return text


class JobRecord(BaseModel):
    """Canonical job fields, ready to be persisted."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    address: str = ""
    phone: str = ""
    services: str = ""
    price: str = ZERO
    balance: str = ZERO
    next_due: str | None = None
    frequency: str = ""
    payment_method: PaymentMethod | None = None
    notes: str = ""
    status: JobStatus = JobStatus.PENDING

    @field_validator("price", "balance", mode="before")
    @classmethod
    def _normalize_amount(cls, value: object) -> str:
        return format_amount(value)

    @field_validator("payment_method", mode="before")
    @classmethod
    def _normalize_payment_method(cls, value: object) -> object:
        return _optional_payment_method(value)

    @field_validator("phone", "services", "frequency", "notes", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        return "" if value is None else value


class Job(JobRecord):
    """A stored job, identified by the id the store assigned."""

    id: str


class JobCreate(BaseModel):
    """Fields entered by hand when adding a job."""

    name: str = Field(min_length=1)
    address: str = Field(min_length=1)
    phone: str = ""
    services: str = JobType.WINDOWS.value
    price: str = ZERO
    next_due: str | None = None
    frequency: str = ""
    payment_method: PaymentMethod | None = None

    @field_validator("name", "address", mode="before")
    @classmethod
    def _strip_required(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("price", mode="before")
    @classmethod
    def _normalize_price(cls, value: object) -> str:
        return format_amount(value)

    @field_validator("payment_method", mode="before")
    @classmethod
    def _normalize_payment_method(cls, value: object) -> object:
        return _optional_payment_method(value)


class JobUpdate(BaseModel):
    """Full overwrite of the editable job fields."""

    name: str
    address: str
    price: str
    services: str
    frequency: str = ""
    payment_method: PaymentMethod | None = None

    @field_validator("price", mode="before")
    @classmethod
    def _normalize_price(cls, value: object) -> str:
        return format_amount(value)

    @field_validator("payment_method", mode="before")
    @classmethod
    def _normalize_payment_method(cls, value: object) -> object:
        return _optional_payment_method(value)


class FinishRequest(BaseModel):
    """Payment method chosen when a job is finished."""

    payment_method: PaymentMethod


class JobView(Job):
    """A job as shown in lists, with render-time labels."""

    due_label: str
    due_style: str
    price_label: str
    frequency_label: str


class DebtorSummary(BaseModel):
    """Jobs with an outstanding balance and the total owed."""

    jobs: list[Job]
    total_owed: str


class Customer(BaseModel):
    """A customer directory entry."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    reference: str = ""
    name: str
    address: str = ""
    phone: str = ""


class CustomerCreate(BaseModel):
    """Fields entered when adding a customer."""

    name: str = Field(min_length=1)
    reference: str = ""
    address: str = ""
    phone: str = ""

    @field_validator("name", "reference", "address", "phone", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


class ImportResult(BaseModel):
    """Outcome of a bulk import.

    ``count`` is the number of records persisted. When a chunk fails, ``success`` is
    false, ``partial`` says whether earlier chunks were kept and ``error`` carries the
    underlying failure.
    """

    success: bool
    count: int = 0
    rejected: int = 0
    chunks_persisted: int = 0
    partial: bool = False
    error: str | None = None
    columns: list[str] = Field(default_factory=list)


class CsvPreview(BaseModel):
    """Column names and a few sample rows from an uploaded CSV."""

    columns: list[str] = Field(default_factory=list)
    sample_rows: list[dict[str, str]] = Field(default_factory=list)
    error: str | None = None
