"""Job and application handlers.

Create and update normalize the salary explicitly before anything is
persisted; listings filter with the mixed-shape range predicate and sort by the
derived salary value, so canonical and legacy rows behave the same.
"""

from typing import Any, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from jobboard.domain.models import Application, ApplicationStatus, Job, User, UserRole
from jobboard.logging import get_logger
from jobboard.logging.context import log_context
from jobboard.persistence.exceptions import DataIntegrityError
from jobboard.persistence.repositories import ApplicationRepository, JobRepository
from jobboard.salary import (
    CanonicalSalary,
    SalaryValue,
    UnspecifiedSalary,
    average_value,
    normalize_salary,
)

from .exceptions import (
    DuplicateApplicationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from .models import ApplicationView, JobDraft, JobListing, JobPatch, JobSearchFilters, JobView

logger = get_logger(__name__, component="jobs")

ModelT = TypeVar("ModelT", bound=BaseModel)


def _validate(model_cls: Type[ModelT], payload: Union[ModelT, Mapping[str, Any]]) -> ModelT:
    if isinstance(payload, model_cls):
        return payload
    try:
        return model_cls.model_validate(payload)
    except ValidationError as e:
        raise ValidationFailedError.from_pydantic(e) from e


def _salary_from_payload(raw: Any) -> SalaryValue:
    """Normalize a salary from a request payload; None means no salary."""
    if raw is None:
        return UnspecifiedSalary()
    return CanonicalSalary(amount=normalize_salary(raw))


def _require_role(actor: User, *roles: UserRole) -> None:
    if not actor.is_active:
        raise PermissionDeniedError("Account is deactivated")
    if actor.role not in roles:
        allowed = ", ".join(role.value for role in roles)
        raise PermissionDeniedError(f"This action requires one of the roles: {allowed}")


def _require_job_owner(actor: User, job: Job) -> None:
    _require_role(actor, UserRole.EMPLOYER, UserRole.ADMIN)
    if not actor.is_admin and job.employer_id != actor.id:
        raise PermissionDeniedError(f"Not authorized to modify job {job.id}")


class JobService:
    """Job posting, browsing, and application operations for one session."""

    def __init__(self, session: Session):
        self.session = session
        self.jobs = JobRepository(session)
        self.applications = ApplicationRepository(session)

    # Jobs

    def create_job(self, actor: User, payload: Union[JobDraft, Mapping[str, Any]]) -> JobView:
        """
        Post a new job.

        Args:
            actor: Authenticated employer or admin
            payload: Job fields; ``salary`` may be a number or a legacy min/max object

        Returns:
            The created job

        Raises:
            PermissionDeniedError: If the actor cannot post jobs
            ValidationFailedError: If the payload is invalid
            InvalidSalary: If the salary cannot be normalized
        """
        _require_role(actor, UserRole.EMPLOYER, UserRole.ADMIN)
        draft = _validate(JobDraft, payload)
        salary = _salary_from_payload(draft.salary)

        try:
            job = Job(**draft.model_dump(exclude={"salary"}), salary=salary, employer_id=actor.id)
        except ValidationError as e:
            raise ValidationFailedError.from_pydantic(e) from e

        created = self.jobs.create(job)

        logger.info(
            f"Job created: {created.title}",
            extra={
                "event": "jobs.created",
                "job_id": created.id,
                "actor_id": actor.id,
                "has_salary": not isinstance(salary, UnspecifiedSalary),
            },
        )
        return JobView.from_job(created)

    def update_job(
        self, actor: User, job_id: int, payload: Union[JobPatch, Mapping[str, Any]]
    ) -> JobView:
        """
        Apply a partial update to a job.

        A salary in the payload is re-normalized; ``salary: None`` clears it.
        Fields not in the payload are left alone, including a legacy salary.

        Raises:
            NotFoundError: If the job does not exist
            PermissionDeniedError: If the actor does not own the job and is not an admin
            ValidationFailedError: If the payload is invalid
            InvalidSalary: If the salary cannot be normalized
        """
        with log_context(actor_id=actor.id, job_id=job_id):
            existing = self.jobs.get_by_id(job_id)
            if existing is None:
                raise NotFoundError(f"Job {job_id} not found")

            _require_job_owner(actor, existing)
            changes = _validate(JobPatch, payload).changes()

            if "salary" in changes:
                changes["salary"] = _salary_from_payload(changes["salary"])

            if not changes:
                return self._view(existing)

            updated = self.jobs.update_fields(job_id, changes)

            logger.info(
                f"Job updated: {updated.title}",
                extra={"event": "jobs.updated", "fields": sorted(changes)},
            )
            return self._view(updated)

    def get_job(self, job_id: int) -> JobView:
        """
        Fetch a single job.

        Raises:
            NotFoundError: If the job does not exist
        """
        job = self.jobs.get_by_id(job_id)
        if job is None:
            raise NotFoundError(f"Job {job_id} not found")
        return self._view(job)

    def list_jobs(
        self, filters: Union[JobSearchFilters, Mapping[str, Any], None] = None
    ) -> JobListing:
        """
        List active jobs matching the filters.

        ``newest`` keeps the database order (created_at descending). The salary
        sorts order by ``average_value`` and fall back to newest for ties.

        Raises:
            ValidationFailedError: If the filters are malformed
            InvalidSalaryRange: If the salary bounds are negative or inverted
        """
        filters = _validate(JobSearchFilters, filters or {})

        jobs = self.jobs.search(
            category=filters.category,
            job_type=filters.job_type,
            location=filters.location,
            text=filters.search,
            min_salary=filters.min_salary,
            max_salary=filters.max_salary,
        )

        if filters.sort == "salary_desc":
            jobs = sorted(jobs, key=lambda job: average_value(job.salary), reverse=True)
        elif filters.sort == "salary_asc":
            jobs = sorted(jobs, key=lambda job: average_value(job.salary))

        views = self._views(jobs)

        logger.debug(
            f"Listed {len(views)} jobs",
            extra={
                "event": "jobs.listed",
                "result_count": len(views),
                "sort": filters.sort,
                "min_salary": filters.min_salary,
                "max_salary": filters.max_salary,
            },
        )
        return JobListing(jobs=views, total=len(views))

    def list_employer_jobs(self, actor: User) -> List[JobView]:
        """Jobs posted by the actor (every job for admins), active or not."""
        _require_role(actor, UserRole.EMPLOYER, UserRole.ADMIN)
        employer_id = None if actor.is_admin else actor.id
        return self._views(self.jobs.list_by_employer(employer_id))

    # Applications

    def apply_to_job(
        self,
        actor: User,
        job_id: int,
        resume: Optional[str] = None,
        cover_letter: Optional[str] = None,
    ) -> Application:
        """
        Submit an application.

        Raises:
            PermissionDeniedError: If the actor is not a job seeker
            NotFoundError: If the job does not exist
            ValidationFailedError: If the job is no longer active
            DuplicateApplicationError: If the actor already applied
        """
        _require_role(actor, UserRole.JOBSEEKER)

        job = self.jobs.get_by_id(job_id)
        if job is None:
            raise NotFoundError(f"Job {job_id} not found")
        if not job.is_active:
            raise ValidationFailedError(f"Job {job_id} is not accepting applications")

        if self.applications.get_for_job_and_seeker(job_id, actor.id) is not None:
            raise DuplicateApplicationError(f"Already applied for job {job_id}")

        try:
            application = self.applications.create(
                Application(
                    job_id=job_id,
                    job_seeker_id=actor.id,
                    resume=resume,
                    cover_letter=cover_letter,
                )
            )
        except DataIntegrityError as e:
            raise DuplicateApplicationError(f"Already applied for job {job_id}") from e

        logger.info(
            "Application submitted",
            extra={
                "event": "applications.submitted",
                "application_id": application.id,
                "job_id": job_id,
                "actor_id": actor.id,
            },
        )
        return application

    def list_my_applications(self, actor: User) -> List[ApplicationView]:
        """The actor's applications with job summaries, most recent first."""
        _require_role(actor, UserRole.JOBSEEKER)

        applications = self.applications.list_for_seeker(actor.id)
        jobs = self.jobs.get_many(application.job_id for application in applications)

        return [
            ApplicationView.from_application(application, jobs[application.job_id])
            for application in applications
            if application.job_id in jobs
        ]

    def withdraw_application(self, actor: User, application_id: int) -> None:
        """
        Withdraw one of the actor's applications.

        Raises:
            NotFoundError: If the application does not exist or belongs to someone else
        """
        _require_role(actor, UserRole.JOBSEEKER)

        application = self.applications.get_by_id(application_id)
        if application is None or application.job_seeker_id != actor.id:
            raise NotFoundError(f"Application {application_id} not found")

        self.applications.delete(application_id)

        logger.info(
            "Application withdrawn",
            extra={
                "event": "applications.withdrawn",
                "application_id": application_id,
                "job_id": application.job_id,
                "actor_id": actor.id,
            },
        )

    def update_application_status(
        self, actor: User, application_id: int, status: Union[ApplicationStatus, str]
    ) -> Application:
        """
        Move an application to a new review status.

        Raises:
            NotFoundError: If the application does not exist
            PermissionDeniedError: If the actor does not own the job and is not an admin
            ValidationFailedError: If the status is unknown
        """
        try:
            new_status = ApplicationStatus(status)
        except ValueError as e:
            allowed = ", ".join(s.value for s in ApplicationStatus)
            raise ValidationFailedError(
                "Invalid application status", errors=[f"status: must be one of {allowed}"]
            ) from e

        application = self.applications.get_by_id(application_id)
        if application is None:
            raise NotFoundError(f"Application {application_id} not found")

        job = self.jobs.get_by_id(application.job_id)
        if job is None:
            raise NotFoundError(f"Job {application.job_id} not found")
        _require_job_owner(actor, job)

        updated = self.applications.update_status(application_id, new_status.value)

        logger.info(
            f"Application status changed to {new_status.value}",
            extra={
                "event": "applications.status_changed",
                "application_id": application_id,
                "job_id": job.id,
                "actor_id": actor.id,
                "status": new_status.value,
            },
        )
        return updated

    # Helpers

    def _view(self, job: Job) -> JobView:
        counts = self.applications.count_by_job([job.id])
        return JobView.from_job(job, counts[job.id])

    def _views(self, jobs: List[Job]) -> List[JobView]:
        counts = self.applications.count_by_job(job.id for job in jobs)
        return [JobView.from_job(job, counts[job.id]) for job in jobs]
