"""Data access layer (repositories) for persistence operations.

This module provides repository classes for CRUD operations on users, jobs, and
applications. Repositories encapsulate database operations and return domain
models rather than ORM models.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from jobboard.domain.models import Application, Job, User
from jobboard.salary.filters import build_range_filter, is_legacy_salary
from jobboard.salary.models import Number, encode_salary
from jobboard.utils.timestamps import to_storage_string, utc_now

from .exceptions import DataIntegrityError, PersistenceError, RecordNotFoundError
from .schema import ApplicationModel, JobModel, UserModel

logger = logging.getLogger(__name__)

# Domain fields that may be changed through JobRepository.update_fields
JOB_UPDATABLE_FIELDS = frozenset(
    {
        "title",
        "company",
        "description",
        "requirements",
        "category",
        "location",
        "job_type",
        "salary",
        "is_active",
    }
)


class UserRepository:
    """Repository for user account operations."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def create(self, user: User) -> User:
        """Insert a new user.

        Args:
            user: User domain model to persist (id is assigned by the database)

        Returns:
            Persisted User with its id

        Raises:
            DataIntegrityError: If the email is already registered
            PersistenceError: If database error occurs
        """
        try:
            user_model = UserModel.from_domain(user)
            self.session.add(user_model)
            self.session.flush()
            return user_model.to_domain()

        except IntegrityError as e:
            logger.error(f"Integrity error creating user {user.email}: {e}", exc_info=True)
            raise DataIntegrityError(f"User already exists with email {user.email}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating user {user.email}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to create user: {e}") from e

    def get_by_id(self, user_id: int) -> Optional[User]:
        """Retrieve user by primary key.

        Args:
            user_id: User identifier

        Returns:
            User domain model if found, None otherwise

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            user_model = self.session.get(UserModel, user_id)
            return user_model.to_domain() if user_model else None

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving user {user_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve user: {e}") from e

    def get_by_email(self, email: str) -> Optional[User]:
        """Retrieve user by email address (case-insensitive).

        Args:
            email: Email address

        Returns:
            User domain model if found, None otherwise

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(UserModel).where(UserModel.email == email.strip().lower())
            user_model = self.session.execute(stmt).scalar_one_or_none()
            return user_model.to_domain() if user_model else None

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving user by email: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve user: {e}") from e


class JobRepository:
    """Repository for job-related database operations."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def create(self, job: Job) -> Job:
        """Insert a new job.

        Args:
            job: Job domain model with a canonical or unspecified salary

        Returns:
            Persisted Job with its id

        Raises:
            InvalidSalary: If the job carries a legacy salary
            PersistenceError: If database error occurs
        """
        job_model = JobModel.from_domain(job)

        try:
            self.session.add(job_model)
            self.session.flush()
            return job_model.to_domain()

        except IntegrityError as e:
            logger.error(f"Integrity error creating job '{job.title}': {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to create job due to constraint violation: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating job '{job.title}': {e}", exc_info=True)
            raise PersistenceError(f"Failed to create job: {e}") from e

    def get_by_id(self, job_id: int) -> Optional[Job]:
        """Retrieve job by primary key.

        Args:
            job_id: Job identifier

        Returns:
            Job domain model if found, None otherwise

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            job_model = self.session.get(JobModel, job_id)
            return job_model.to_domain() if job_model else None

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving job {job_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve job: {e}") from e

    def get_many(self, job_ids: Iterable[int]) -> Dict[int, Job]:
        """Retrieve several jobs by primary key.

        Args:
            job_ids: Job identifiers (missing ids are skipped)

        Returns:
            Mapping of job id to Job domain model

        Raises:
            PersistenceError: If database error occurs
        """
        ids = list(job_ids)
        if not ids:
            return {}

        try:
            stmt = select(JobModel).where(JobModel.id.in_(ids))
            return {model.id: model.to_domain() for model in self.session.execute(stmt).scalars()}

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving jobs {ids}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve jobs: {e}") from e

    def update_fields(self, job_id: int, changes: Dict[str, Any]) -> Job:
        """Apply a partial update to a job.

        Only the given fields are written, so updating the title of a job whose
        salary is still in the legacy shape leaves that salary untouched.
        ``updated_at`` is always refreshed.

        Args:
            job_id: Job identifier
            changes: Mapping of domain field name to new value; ``salary`` must be
                a decoded salary model or None

        Returns:
            Updated Job domain model

        Raises:
            ValueError: If a field cannot be updated
            InvalidSalary: If the new salary is in the legacy shape
            RecordNotFoundError: If job_id doesn't exist
            PersistenceError: If database error occurs
        """
        unknown = set(changes) - JOB_UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update job fields: {', '.join(sorted(unknown))}")

        values = dict(changes)
        if "salary" in values:
            values["salary"] = encode_salary(values["salary"])

        try:
            job_model = self.session.get(JobModel, job_id)
            if job_model is None:
                raise RecordNotFoundError(f"Job with id {job_id} not found")

            for field_name, value in values.items():
                setattr(job_model, field_name, value)
            job_model.updated_at = to_storage_string(utc_now())

            self.session.flush()
            return job_model.to_domain()

        except RecordNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error updating job {job_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update job: {e}") from e

    def search(
        self,
        category: Optional[str] = None,
        job_type: Optional[str] = None,
        location: Optional[str] = None,
        text: Optional[str] = None,
        min_salary: Optional[Number] = None,
        max_salary: Optional[Number] = None,
        active_only: bool = True,
    ) -> List[Job]:
        """Query jobs matching the given filters, newest first.

        Args:
            category: Exact category match
            job_type: Exact job type match
            location: Case-insensitive substring of the location
            text: Case-insensitive substring of title, description, or company
            min_salary: Inclusive lower salary bound
            max_salary: Inclusive upper salary bound
            active_only: Exclude inactive jobs

        Returns:
            List of Job domain models (empty list if none found)

        Raises:
            InvalidSalaryRange: If the salary bounds are invalid
            PersistenceError: If database error occurs
        """
        stmt = select(JobModel)

        if active_only:
            stmt = stmt.where(JobModel.is_active.is_(True))
        if category:
            stmt = stmt.where(JobModel.category == category)
        if job_type:
            stmt = stmt.where(JobModel.job_type == job_type)
        if location:
            stmt = stmt.where(
                func.lower(JobModel.location).contains(location.strip().lower(), autoescape=True)
            )
        if text:
            needle = text.strip().lower()
            stmt = stmt.where(
                or_(
                    func.lower(JobModel.title).contains(needle, autoescape=True),
                    func.lower(JobModel.description).contains(needle, autoescape=True),
                    func.lower(JobModel.company).contains(needle, autoescape=True),
                )
            )
        if min_salary is not None or max_salary is not None:
            stmt = stmt.where(build_range_filter(min_salary, max_salary, JobModel.salary))

        stmt = stmt.order_by(JobModel.created_at.desc(), JobModel.id.desc())

        try:
            job_models = self.session.execute(stmt).scalars().all()
            return [job_model.to_domain() for job_model in job_models]

        except SQLAlchemyError as e:
            logger.error(f"Error searching jobs: {e}", exc_info=True)
            raise PersistenceError(f"Failed to search jobs: {e}") from e

    def list_by_employer(self, employer_id: Optional[int] = None) -> List[Job]:
        """List jobs posted by an employer, newest first.

        Args:
            employer_id: Employer user id, or None for all jobs

        Returns:
            List of Job domain models (active and inactive)

        Raises:
            PersistenceError: If database error occurs
        """
        stmt = select(JobModel).order_by(JobModel.created_at.desc(), JobModel.id.desc())
        if employer_id is not None:
            stmt = stmt.where(JobModel.employer_id == employer_id)

        try:
            job_models = self.session.execute(stmt).scalars().all()
            return [job_model.to_domain() for job_model in job_models]

        except SQLAlchemyError as e:
            logger.error(f"Error listing jobs for employer {employer_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list employer jobs: {e}") from e

    def find_legacy_salaries(self, after_id: int = 0, limit: int = 100) -> List[Tuple[int, Any]]:
        """Fetch the next batch of jobs whose salary is still a legacy object.

        Uses keyset pagination on the primary key so rows that fail to convert
        are not fetched again within the same scan.

        Args:
            after_id: Only return jobs with an id greater than this
            limit: Maximum number of rows to return

        Returns:
            List of (job_id, raw stored salary) tuples ordered by id

        Raises:
            PersistenceError: If database error occurs
        """
        stmt = (
            select(JobModel.id, JobModel.salary)
            .where(is_legacy_salary(JobModel.salary), JobModel.id > after_id)
            .order_by(JobModel.id.asc())
            .limit(limit)
        )

        try:
            return [(row.id, row.salary) for row in self.session.execute(stmt)]

        except SQLAlchemyError as e:
            logger.error(f"Error scanning legacy salaries after id {after_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to scan legacy salaries: {e}") from e

    def count_legacy_salaries(self) -> int:
        """Count jobs whose salary is still a legacy object.

        Raises:
            PersistenceError: If database error occurs
        """
        stmt = select(func.count()).select_from(JobModel).where(is_legacy_salary(JobModel.salary))

        try:
            return self.session.execute(stmt).scalar_one()

        except SQLAlchemyError as e:
            logger.error(f"Error counting legacy salaries: {e}", exc_info=True)
            raise PersistenceError(f"Failed to count legacy salaries: {e}") from e

    def replace_legacy_salary(self, job_id: int, amount: Optional[Number]) -> bool:
        """Overwrite a legacy salary object with the canonical amount (or NULL).

        The update only applies while the row still holds an object, so a
        concurrent update that already wrote a canonical salary is not clobbered.
        ``updated_at`` is left unchanged: only the representation changes.

        Args:
            job_id: Job identifier
            amount: Canonical salary, or None to store NULL

        Returns:
            True if the row was rewritten, False if it no longer held a legacy salary

        Raises:
            PersistenceError: If database error occurs
        """
        stmt = (
            update(JobModel)
            .where(JobModel.id == job_id, is_legacy_salary(JobModel.salary))
            .values(salary=amount)
            .execution_options(synchronize_session=False)
        )

        try:
            result = self.session.execute(stmt)
            self.session.flush()
            return result.rowcount > 0

        except SQLAlchemyError as e:
            logger.error(f"Error replacing salary for job {job_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to replace salary: {e}") from e


class ApplicationRepository:
    """Repository for job application operations."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def create(self, application: Application) -> Application:
        """Insert a new application.

        Args:
            application: Application domain model

        Returns:
            Persisted Application with its id

        Raises:
            DataIntegrityError: If the seeker already applied to this job
            PersistenceError: If database error occurs
        """
        try:
            application_model = ApplicationModel.from_domain(application)
            self.session.add(application_model)
            self.session.flush()
            return application_model.to_domain()

        except IntegrityError as e:
            logger.error(
                f"Integrity error creating application for job {application.job_id}: {e}",
                exc_info=True,
            )
            raise DataIntegrityError(
                f"Failed to create application due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating application: {e}", exc_info=True)
            raise PersistenceError(f"Failed to create application: {e}") from e

    def get_by_id(self, application_id: int) -> Optional[Application]:
        """Retrieve application by primary key.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            application_model = self.session.get(ApplicationModel, application_id)
            return application_model.to_domain() if application_model else None

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving application {application_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve application: {e}") from e

    def get_for_job_and_seeker(self, job_id: int, job_seeker_id: int) -> Optional[Application]:
        """Find a seeker's application to a job, if any.

        Raises:
            PersistenceError: If database error occurs
        """
        stmt = select(ApplicationModel).where(
            ApplicationModel.job_id == job_id,
            ApplicationModel.job_seeker_id == job_seeker_id,
        )

        try:
            application_model = self.session.execute(stmt).scalar_one_or_none()
            return application_model.to_domain() if application_model else None

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving application for job {job_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve application: {e}") from e

    def list_for_seeker(self, job_seeker_id: int) -> List[Application]:
        """List a seeker's applications, most recent first.

        Raises:
            PersistenceError: If database error occurs
        """
        stmt = (
            select(ApplicationModel)
            .where(ApplicationModel.job_seeker_id == job_seeker_id)
            .order_by(ApplicationModel.applied_at.desc(), ApplicationModel.id.desc())
        )

        try:
            return [model.to_domain() for model in self.session.execute(stmt).scalars().all()]

        except SQLAlchemyError as e:
            logger.error(f"Error listing applications for seeker {job_seeker_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list applications: {e}") from e

    def count_by_job(self, job_ids: Iterable[int]) -> Dict[int, int]:
        """Count applications per job.

        Args:
            job_ids: Job identifiers to count

        Returns:
            Mapping of job id to application count (jobs without applications map to 0)

        Raises:
            PersistenceError: If database error occurs
        """
        ids = list(job_ids)
        counts = {job_id: 0 for job_id in ids}
        if not ids:
            return counts

        stmt = (
            select(ApplicationModel.job_id, func.count(ApplicationModel.id))
            .where(ApplicationModel.job_id.in_(ids))
            .group_by(ApplicationModel.job_id)
        )

        try:
            for job_id, count in self.session.execute(stmt):
                counts[job_id] = count
            return counts

        except SQLAlchemyError as e:
            logger.error(f"Error counting applications: {e}", exc_info=True)
            raise PersistenceError(f"Failed to count applications: {e}") from e

    def update_status(self, application_id: int, status: str) -> Application:
        """Change an application's review status.

        Raises:
            RecordNotFoundError: If application_id doesn't exist
            PersistenceError: If database error occurs
        """
        try:
            application_model = self.session.get(ApplicationModel, application_id)
            if application_model is None:
                raise RecordNotFoundError(f"Application with id {application_id} not found")

            application_model.status = status
            self.session.flush()
            return application_model.to_domain()

        except RecordNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error updating application {application_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update application: {e}") from e

    def delete(self, application_id: int) -> None:
        """Delete an application.

        Raises:
            RecordNotFoundError: If application_id doesn't exist
            PersistenceError: If database error occurs
        """
        try:
            application_model = self.session.get(ApplicationModel, application_id)
            if application_model is None:
                raise RecordNotFoundError(f"Application with id {application_id} not found")

            self.session.delete(application_model)
            self.session.flush()

        except RecordNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error deleting application {application_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to delete application: {e}") from e
