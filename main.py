"""Main entrypoint and application factory for the Job Tracker API.

This module initializes the FastAPI application, configures logging, creates the database tables, maps storage failures to HTTP responses, and exposes the Scalar API reference endpoint for interactive OpenAPI documentation. It also includes the main entrypoint for running the app with Uvicorn.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from scalar_fastapi import get_scalar_api_reference
from sqlalchemy.exc import SQLAlchemyError

from jobtracker.api.routes import router
from jobtracker.core.db import StorageError, create_tables
from jobtracker.core.settings import get_settings
from jobtracker.core.utils import ensure_dir, get_logger

HTTP_503_SERVICE_UNAVAILABLE = 503


# --- Logging Setup ---
def setup_logging() -> None:
    """Configure logging to file and console, and ensure the log directory exists."""
    log_path = Path(get_settings().log_file)
    ensure_dir(log_path.parent)
    logger = get_logger("jobtracker")
    logger.setLevel(logging.INFO)
    # Add file handler for persistent logs (not colorized)
    if not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        logger.addHandler(file_handler)
    logger.propagate = False


setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan event handler to create the jobs and customers tables."""
    _ = app  # Silence unused argument warning
    try:
        create_tables()
    except SQLAlchemyError as exc:
        get_logger("jobtracker").exception(f"Failed to create tables: {exc}")
        raise
    yield


app = FastAPI(
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    title="Job Tracker API",
    description="""
    The Job Tracker API schedules recurring cleaning jobs, tracks when they are due, and records payments and debts.

    **Endpoints:**
    - `POST /import/preview`: Show the columns and first rows of a CSV export.
    - `POST /import/jobs`: Import jobs from a CSV export with any column naming.
    - `GET /jobs`: Pending jobs by due date, for all days, one day, or a search.
    - `POST /jobs/{{job_id}}/finish`: Finish a job with Cash, Card or Bank Transfer.
    - `GET /debtors`: Jobs with an outstanding balance.
    - `GET /health`: Health check endpoint.
    - `GET /scalar`: Interactive Scalar OpenAPI documentation.
    """,
    version="1.0.0",
)
app.include_router(router)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    """Report storage failures as 503 with the underlying error."""
    get_logger("jobtracker.api").error(f"Storage failure on {request.url.path}: {exc}")
    return JSONResponse({"detail": str(exc)}, status_code=HTTP_503_SERVICE_UNAVAILABLE)


@app.get("/scalar", include_in_schema=False)
async def scalar_docs() -> JSONResponse:
    """Return Scalar API reference."""
    return get_scalar_api_reference(openapi_url=app.openapi_url, title=app.title)


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("main:app", host=settings.server_host, port=settings.server_port, reload=True)
