"""One-time rewrite of legacy salary objects to the canonical number."""

import threading
from typing import Any, List, Optional
from uuid import uuid4

from sqlalchemy.orm import Session

from jobboard.logging import get_logger
from jobboard.logging.context import log_context
from jobboard.persistence.database import get_session
from jobboard.persistence.exceptions import PersistenceError
from jobboard.persistence.repositories import JobRepository
from jobboard.salary.normalizer import normalize_stored_salary
from jobboard.utils.timestamps import utc_now

from .models import BackfillFailure, BackfillResult

logger = get_logger(__name__, component="backfill")

DEFAULT_BATCH_SIZE = 100


class SalaryBackfill:
    """
    Converts every stored ``{min, max, currency}`` salary to a single number.

    Rows are scanned in id order, ``batch_size`` at a time, each batch in its
    own transaction. Invalid bounds are treated as absent, the same way the
    read path treats them, and an object with no usable bound becomes NULL.
    Every record is written inside a savepoint so a record that fails to
    store is rolled back alone, reported, and the run continues.

    Running it again is harmless: converted rows are no longer objects and are
    not scanned.
    """

    # One run per process
    _lock = threading.Lock()

    def __init__(self, batch_size: int = DEFAULT_BATCH_SIZE):
        """
        Initialize the backfill.

        Args:
            batch_size: Rows fetched and committed per transaction

        Raises:
            ValueError: If batch_size is not positive
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        self.batch_size = batch_size

    def run(self, dry_run: bool = False) -> BackfillResult:
        """
        Execute the backfill.

        Args:
            dry_run: Compute conversions and counts without writing

        Returns:
            BackfillResult with examined/changed/failed counts

        Raises:
            PersistenceError: If a batch cannot be read or committed
        """
        run_started_at = utc_now()
        run_id = uuid4().hex

        if not self._lock.acquire(blocking=False):
            with log_context(run_id=run_id):
                logger.warning(
                    "Backfill run skipped: previous run still in progress",
                    extra={"event": "backfill.run.skipped", "reason": "lock_held"},
                )
            return BackfillResult(
                run_started_at=run_started_at,
                run_finished_at=utc_now(),
                dry_run=dry_run,
                skipped=True,
            )

        try:
            with log_context(run_id=run_id):
                logger.info(
                    "Backfill run started",
                    extra={
                        "event": "backfill.run.started",
                        "batch_size": self.batch_size,
                        "dry_run": dry_run,
                    },
                )

                examined = changed = batches = 0
                failures: List[BackfillFailure] = []
                after_id = 0

                while True:
                    with get_session() as session:
                        repo = JobRepository(session)
                        batch = repo.find_legacy_salaries(after_id, self.batch_size)

                        for job_id, stored in batch:
                            examined += 1
                            if self._convert(session, repo, job_id, stored, dry_run, failures):
                                changed += 1

                    if not batch:
                        break

                    batches += 1
                    after_id = batch[-1][0]
                    logger.debug(
                        f"Processed batch {batches}",
                        extra={
                            "event": "backfill.batch.completed",
                            "batch_rows": len(batch),
                            "last_job_id": after_id,
                        },
                    )

                    if len(batch) < self.batch_size:
                        break

                result = BackfillResult(
                    run_started_at=run_started_at,
                    run_finished_at=utc_now(),
                    examined=examined,
                    changed=changed,
                    failed=len(failures),
                    batches=batches,
                    dry_run=dry_run,
                    failures=failures,
                )

                logger.info(
                    "Backfill run completed",
                    extra={
                        "event": "backfill.run.completed",
                        "duration_ms": int(result.total_duration_seconds * 1000),
                        "dry_run": dry_run,
                        **result.as_dict(),
                    },
                )

                return result

        finally:
            self._lock.release()

    def _convert(
        self,
        session: Session,
        repo: JobRepository,
        job_id: int,
        stored: Any,
        dry_run: bool,
        failures: List[BackfillFailure],
    ) -> bool:
        """
        Convert one record, appending to ``failures`` if it cannot be converted
        or stored. Only this record's savepoint is rolled back; rows already
        converted in the batch are kept.

        Returns:
            True when the record was (or on a dry run would be) rewritten
        """
        try:
            amount = normalize_stored_salary(stored)

            if dry_run:
                logger.debug(
                    f"Would convert salary for job {job_id}",
                    extra={"event": "backfill.record.planned", "job_id": job_id, "amount": amount},
                )
                return True

            with session.begin_nested():
                replaced = repo.replace_legacy_salary(job_id, amount)
        except PersistenceError as e:
            failures.append(self._failure(job_id, e))
            return False
        except Exception as e:
            # Unexpected error converting this record, keep going with the rest
            failures.append(self._failure(job_id, e, exc_info=True))
            return False

        if not replaced:
            logger.debug(
                f"Salary for job {job_id} already canonical",
                extra={"event": "backfill.record.unchanged", "job_id": job_id},
            )
            return False

        logger.debug(
            f"Converted salary for job {job_id}",
            extra={"event": "backfill.record.converted", "job_id": job_id, "amount": amount},
        )
        return True

    @staticmethod
    def _failure(job_id: int, error: Exception, exc_info: bool = False) -> BackfillFailure:
        logger.warning(
            f"Could not convert salary for job {job_id}: {error}",
            extra={
                "event": "backfill.record.failed",
                "job_id": job_id,
                "error_type": type(error).__name__,
            },
            exc_info=exc_info,
        )
        return BackfillFailure(
            job_id=job_id,
            error_type=type(error).__name__,
            error_message=str(error),
        )


def run_backfill(batch_size: Optional[int] = None, dry_run: bool = False) -> BackfillResult:
    """Run the salary backfill against the initialized database.

    Example:
        >>> run_backfill().as_dict()
        {'examined': 3, 'changed': 3, 'failed': 0}
    """
    return SalaryBackfill(batch_size or DEFAULT_BATCH_SIZE).run(dry_run=dry_run)


def count_legacy_salaries() -> int:
    """Number of jobs whose salary is still stored as an object.

    Zero means the legacy range-filter disjuncts can be removed.
    """
    with get_session() as session:
        return JobRepository(session).count_legacy_salaries()
