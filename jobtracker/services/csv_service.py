"""CSV text handling: decode uploads, read rows with headers taken verbatim, preview."""

import io

import pandas as pd

from jobtracker.core.models import CsvPreview
from jobtracker.core.utils import get_logger

logger = get_logger("jobtracker.csv")

UNNAMED_PREFIX = "Unnamed: "


class CsvFormatError(ValueError):
    """Raised when uploaded text cannot be read as a CSV with a header row."""


def decode_csv(data: bytes) -> str:
    """Decode uploaded bytes as UTF-8, dropping a BOM and replacing undecodable bytes."""
    return data.decode("utf-8-sig", errors="replace")


def read_csv_rows(text: str) -> tuple[list[str], list[dict[str, str]]]:
    """Parse CSV text into its column names and a list of row dicts.

    Every cell is read as text (no type inference, empty cells stay empty) and
    blank lines are skipped.
    """
    if not text or not text.strip():
        msg = "No content in CSV"
        raise CsvFormatError(msg)
    try:
        data_frame = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        msg = f"Failed to parse CSV: {exc}"
        raise CsvFormatError(msg) from exc
    # Blank headers come back as "Unnamed: N", which would substring-match the "name" alias.
    blank = [column for column in data_frame.columns if str(column).startswith(UNNAMED_PREFIX)]
    data_frame = data_frame.drop(columns=blank)
    columns = [str(column) for column in data_frame.columns]
    data_frame.columns = columns
    rows = data_frame.to_dict(orient="records")
    logger.info(f"Parsed {len(rows)} rows with columns: {columns}")
    return columns, rows


def preview_csv(text: str, rows: int = 3) -> CsvPreview:
    """Return the columns and first few rows of a CSV, or the parse error."""
    try:
        columns, records = read_csv_rows(text)
    except CsvFormatError as exc:
        logger.warning(f"Preview failed: {exc}")
        return CsvPreview(error=str(exc))
    return CsvPreview(columns=columns, sample_rows=records[:rows])
