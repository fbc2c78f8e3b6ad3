"""FastAPI endpoints for the job tracker API.

This module defines the routes for importing job and customer spreadsheets, listing and filtering jobs, the job lifecycle actions (finish, mark paid, edit), the debtor view, the customer directory and health checks. It wires together the import runner and the job and customer services.
"""

from fastapi import APIRouter, Depends, HTTPException, UploadFile
from fastapi.responses import JSONResponse

from jobtracker.api.dependencies import (
    get_customer_importer,
    get_customer_service,
    get_job_importer,
    get_job_service,
)
from jobtracker.core.db import RecordNotFoundError
from jobtracker.core.models import (
    CsvPreview,
    Customer,
    CustomerCreate,
    DebtorSummary,
    FinishRequest,
    Job,
    JobCreate,
    JobUpdate,
    JobView,
)
from jobtracker.core.settings import get_settings
from jobtracker.core.utils import get_logger
from jobtracker.services.csv_service import decode_csv, preview_csv
from jobtracker.services.customer_service import CustomerService
from jobtracker.services.job_service import InvalidTransitionError, JobService
from jobtracker.workers.import_runner import ImportRunner

router = APIRouter()
logger = get_logger("jobtracker.api")

HTTP_404_NOT_FOUND = 404
HTTP_409_CONFLICT = 409
HTTP_500_INTERNAL_SERVER_ERROR = 500


async def _read_csv_upload(file: UploadFile) -> str:
    logger.info(f"Received upload request: filename={file.filename}")
    if not (file.filename or "").lower().endswith(".csv"):
        logger.warning(f"Rejected file (not CSV): {file.filename}")
        raise HTTPException(400, "Only CSV files accepted")
    return decode_csv(await file.read())


@router.post(
    "/import/preview",
    response_model=CsvPreview,
    summary="Preview the columns of a CSV before importing",
    description=(
        "Upload a CSV file and get back its column names, exactly as they appear in the header row, "
        "and the first few rows. Nothing is saved.\n\n"
        "**Response:**\n"
        "- 200 OK: columns and sample rows, or an `error` message when the file cannot be parsed.\n"
        "- 400 Bad Request: If the file is not a CSV."
    ),
)
async def preview_import(file: UploadFile) -> CsvPreview:
    """Return column names and sample rows of an uploaded CSV."""
    text = await _read_csv_upload(file)
    return preview_csv(text, rows=get_settings().preview_rows)


@router.post(
    "/import/jobs",
    summary="Import jobs from a CSV export",
    description=(
        "Upload a CSV exported from any job-management tool. Columns are matched to job fields by name, "
        "rows without a name or address are skipped, and the rest are saved in chunks.\n\n"
        "**Response:**\n"
        "- 200 OK: `{ 'success': true, 'count': <saved> }`; when nothing was imported, `columns` lists the headers found.\n"
        "- 400 Bad Request: If the file is not a CSV.\n"
        "- 500 Internal Server Error: If saving failed; `count` and `partial` report what was kept."
    ),
    responses={
        200: {
            "description": "Import finished.",
            "content": {"application/json": {"example": {"success": True, "count": 42, "rejected": 3}}},
        },
        400: {
            "description": "Only CSV files accepted.",
            "content": {"application/json": {"example": {"detail": "Only CSV files accepted"}}},
        },
        500: {"description": "Import failed part way or could not start."},
    },
)
async def import_jobs(file: UploadFile, runner: ImportRunner = Depends(get_job_importer)) -> JSONResponse:
    """Import jobs from an uploaded CSV."""
    text = await _read_csv_upload(file)
    result = runner.import_jobs(text)
    status_code = 200 if result.success else HTTP_500_INTERNAL_SERVER_ERROR
    return JSONResponse(result.model_dump(), status_code=status_code)


@router.post("/import/customers", summary="Import customers from a CSV")
async def import_customers(file: UploadFile, runner: ImportRunner = Depends(get_customer_importer)) -> JSONResponse:
    """Import customers from an uploaded CSV with Name, Reference, Address and Phone columns."""
    text = await _read_csv_upload(file)
    result = runner.import_customers(text)
    status_code = 200 if result.success else HTTP_500_INTERNAL_SERVER_ERROR
    return JSONResponse(result.model_dump(), status_code=status_code)


@router.get(
    "/jobs",
    response_model=list[JobView],
    summary="List pending jobs",
    description=(
        "List pending jobs ordered by next due date, with undated jobs last.\n\n"
        "**Query parameters:**\n"
        "- `search`: case-insensitive match on name, address or services. Overrides `day`.\n"
        "- `day`: `YYYY-MM-DD`, `DD/MM/YYYY` or `today`. Today's view also includes overdue jobs."
    ),
)
async def list_jobs(
    search: str | None = None,
    day: str | None = None,
    service: JobService = Depends(get_job_service),
) -> list[JobView]:
    """List pending jobs for the requested view."""
    return service.list_active(search=search, day=day)


@router.post("/jobs", response_model=Job, status_code=201, summary="Add a job")
async def create_job(data: JobCreate, service: JobService = Depends(get_job_service)) -> Job:
    """Add a job entered by hand."""
    return service.create_job(data)


@router.patch("/jobs/{job_id}", response_model=Job, summary="Edit a job")
async def edit_job(job_id: str, data: JobUpdate, service: JobService = Depends(get_job_service)) -> Job:
    """Overwrite the editable fields of a job."""
    try:
        return service.edit_job(job_id, data)
    except RecordNotFoundError as exc:
        raise HTTPException(HTTP_404_NOT_FOUND, "Job not found") from exc


@router.post(
    "/jobs/{job_id}/finish",
    response_model=Job,
    summary="Finish a job",
    description=(
        "Finish a pending job. Cash or Card completes it; Bank Transfer moves it to the debtors list "
        "with its price as the outstanding balance."
    ),
)
async def finish_job(job_id: str, data: FinishRequest, service: JobService = Depends(get_job_service)) -> Job:
    """Finish a pending job."""
    try:
        return service.finish_job(job_id, data.payment_method)
    except RecordNotFoundError as exc:
        raise HTTPException(HTTP_404_NOT_FOUND, "Job not found") from exc
    except InvalidTransitionError as exc:
        raise HTTPException(HTTP_409_CONFLICT, str(exc)) from exc


@router.post("/jobs/{job_id}/paid", response_model=Job, summary="Mark a debt as paid")
async def mark_paid(job_id: str, service: JobService = Depends(get_job_service)) -> Job:
    """Clear the outstanding balance of a job."""
    try:
        return service.mark_paid(job_id)
    except RecordNotFoundError as exc:
        raise HTTPException(HTTP_404_NOT_FOUND, "Job not found") from exc
    except InvalidTransitionError as exc:
        raise HTTPException(HTTP_409_CONFLICT, str(exc)) from exc


@router.delete("/jobs", summary="Delete all jobs")
async def clear_jobs(service: JobService = Depends(get_job_service)) -> dict:
    """Delete every job."""
    return {"deleted": service.clear_jobs()}


@router.get("/debtors", response_model=DebtorSummary, summary="Jobs with an outstanding balance")
async def list_debtors(service: JobService = Depends(get_job_service)) -> DebtorSummary:
    """List jobs that still owe money, largest balance first."""
    return service.debtors()


@router.get("/customers", response_model=list[Customer], summary="List customers")
async def list_customers(
    search: str | None = None,
    service: CustomerService = Depends(get_customer_service),
) -> list[Customer]:
    """List customers by name, optionally filtered."""
    return service.list_customers(search)


@router.post("/customers", response_model=Customer, status_code=201, summary="Add a customer")
async def create_customer(data: CustomerCreate, service: CustomerService = Depends(get_customer_service)) -> Customer:
    """Add a customer."""
    return service.create_customer(data)


@router.get(
    "/health",
    summary="Health check",
    description="Simple health check endpoint. Returns status ok.",
    response_description="Status ok.",
    responses={200: {"description": "API is healthy.", "content": {"application/json": {"example": {"status": "ok"}}}}},
)
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}
