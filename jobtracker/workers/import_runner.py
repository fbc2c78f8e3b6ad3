"""Bulk import orchestration for jobs and customers."""

from collections.abc import Callable, Mapping

from pydantic import BaseModel

from jobtracker.core.db import RecordStore, StorageError
from jobtracker.core.models import ImportResult
from jobtracker.core.settings import Settings
from jobtracker.core.utils import chunked, get_logger
from jobtracker.engine.transform import transform_row
from jobtracker.services.csv_service import CsvFormatError, read_csv_rows
from jobtracker.services.customer_service import customer_from_row

logger = get_logger("jobtracker.import")

MAX_ROW_LOG_LEN = 300

RowMapper = Callable[[Mapping], BaseModel | None]


class ImportRunner:
    """Transforms CSV rows into records and persists them in ordered chunks.

    Chunks are written one after another. If a chunk fails, the chunks already
    written stay persisted and the failure is returned in the result.
    """

    def __init__(self, store: RecordStore, settings: Settings) -> None:
        """Initialize the runner with a target store and settings."""
        self.store = store
        self.chunk_size = settings.import_chunk_size
        self.default_services = settings.default_services

    def _log_sample(self, rows: list[dict[str, str]]) -> None:
        if not rows:
            return
        sample = str(rows[0])
        if len(sample) > MAX_ROW_LOG_LEN:
            sample = sample[: MAX_ROW_LOG_LEN - 3] + "..."
        logger.info(f"First row sample: {sample}")

    def run(self, text: str, mapper: RowMapper) -> ImportResult:
        """Parse, map and persist a CSV; never raises."""
        try:
            columns, rows = read_csv_rows(text)
        except CsvFormatError as exc:
            logger.warning(f"Import aborted: {exc}")
            return ImportResult(success=False, error=str(exc))
        self._log_sample(rows)

        records = []
        rejected = 0
        for row in rows:
            record = mapper(row)
            if record is None:
                rejected += 1
                continue
            records.append(record)
        logger.info(f"Accepted {len(records)} rows, rejected {rejected}")

        if not records:
            return ImportResult(success=True, count=0, rejected=rejected, columns=columns)
        return self.persist(records, rejected, columns)

    def persist(self, records: list[BaseModel], rejected: int = 0, columns: list[str] | None = None) -> ImportResult:
        """Write records in chunks, stopping at the first failing chunk."""
        persisted = 0
        chunks = chunked(records, self.chunk_size)
        for index, chunk in enumerate(chunks):
            try:
                self.store.create_many(chunk)
            except StorageError as exc:
                logger.exception(f"Chunk {index + 1}/{len(chunks)} failed after {persisted} records were saved")
                return ImportResult(
                    success=False,
                    count=persisted,
                    rejected=rejected,
                    chunks_persisted=index,
                    partial=persisted > 0,
                    error=str(exc),
                    columns=columns or [],
                )
            persisted += len(chunk)
            logger.info(f"Saved chunk {index + 1}/{len(chunks)} ({len(chunk)} records)")
        return ImportResult(
            success=True,
            count=persisted,
            rejected=rejected,
            chunks_persisted=len(chunks),
            columns=columns or [],
        )

    def import_jobs(self, text: str) -> ImportResult:
        """Import jobs from a CSV of unknown layout."""
        return self.run(text, lambda row: transform_row(row, self.default_services))

    def import_customers(self, text: str) -> ImportResult:
        """Import customers from a CSV with ``Name``/``Reference``/``Address``/``Phone`` columns."""
        return self.run(text, customer_from_row)
