"""Data migrations run by operators from the command line."""

from .models import BackfillFailure, BackfillResult
from .salary_backfill import (
    DEFAULT_BATCH_SIZE,
    SalaryBackfill,
    count_legacy_salaries,
    run_backfill,
)

__all__ = [
    "BackfillFailure",
    "BackfillResult",
    "DEFAULT_BATCH_SIZE",
    "SalaryBackfill",
    "count_legacy_salaries",
    "run_backfill",
]
