"""Data models for backfill execution tracking and reporting."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List


@dataclass
class BackfillFailure:
    """A record the backfill could not convert.

    Attributes:
        job_id: Job whose salary was left untouched
        error_type: Exception class name
        error_message: Exception message
    """

    job_id: int
    error_type: str
    error_message: str


@dataclass
class BackfillResult:
    """
    Outcome of a salary backfill run.

    Attributes:
        run_started_at: UTC timestamp when the run began
        run_finished_at: UTC timestamp when the run completed
        examined: Legacy records read
        changed: Records rewritten to the canonical number (or that would be, on a dry run)
        failed: Records left unchanged because conversion or storage failed
        batches: Number of batches processed
        dry_run: Whether writes were suppressed
        skipped: Whether the run was skipped because another run held the lock
        failures: Per-record failure details
        total_duration_seconds: Time for the entire run
    """

    run_started_at: datetime
    run_finished_at: datetime
    examined: int = 0
    changed: int = 0
    failed: int = 0
    batches: int = 0
    dry_run: bool = False
    skipped: bool = False
    failures: List[BackfillFailure] = field(default_factory=list)
    total_duration_seconds: float = 0.0

    def __post_init__(self):
        """Compute duration if not set."""
        if self.total_duration_seconds == 0.0:
            delta = self.run_finished_at - self.run_started_at
            self.total_duration_seconds = delta.total_seconds()

    @property
    def had_errors(self) -> bool:
        return self.failed > 0

    def as_dict(self) -> Dict[str, int]:
        """Summary counts: ``{"examined", "changed", "failed"}``."""
        return {"examined": self.examined, "changed": self.changed, "failed": self.failed}
