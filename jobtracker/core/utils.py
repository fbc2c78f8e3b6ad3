"""Shared utility functions for the job tracker project."""

import logging
import uuid
from datetime import UTC, datetime
from pathlib import Path

import colorlog


def get_logger(name: str) -> logging.Logger:
    """Get a logger with a colorized format for the project.

    Child loggers (``jobtracker.api``) carry no handlers of their own and propagate to
    the top-level project logger, so file handlers added there see every message.
    """
    logger = logging.getLogger(name)
    if "." in name:
        get_logger(name.split(".", 1)[0])
        logger.propagate = True
        return logger
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = colorlog.ColoredFormatter(
            "%(log_color)s%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    logger.propagate = False
    return logger


def ensure_dir(path: str | Path) -> None:
    """Ensure a directory exists (like mkdir -p)."""
    Path(path).mkdir(parents=True, exist_ok=True)


def new_id() -> str:
    """Return a fresh opaque record identifier."""
    return str(uuid.uuid4())


def as_text(value: object) -> str:
    """Coerce a cell or field value to stripped text, treating None as empty."""
    if value is None:
        return ""
    return str(value).strip()


def chunked(items: list, size: int) -> list[list]:
    """Split a list into consecutive slices of at most ``size`` items, preserving order."""
    if size < 1:
        msg = f"Chunk size must be positive, got {size}"
        raise ValueError(msg)
    return [items[i : i + size] for i in range(0, len(items), size)]


def utcnow_iso() -> str:
    """Get the current UTC time as an ISO8601 string."""
    return datetime.now(UTC).isoformat()
