"""Core package: provides models, storage helpers, settings, and shared utilities."""

from .models import Job, JobRecord, JobStatus, PaymentMethod  # noqa: F401
from .settings import Settings  # noqa: F401
from .utils import get_logger  # noqa: F401
