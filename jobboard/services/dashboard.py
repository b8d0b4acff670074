"""Role-specific dashboard summaries."""

from sqlalchemy.orm import Session

from jobboard.domain.models import ApplicationStatus, User, UserRole
from jobboard.logging import get_logger

from .exceptions import PermissionDeniedError
from .jobs import JobService
from .models import DashboardSummary, EmployerDashboard, JobSeekerDashboard

logger = get_logger(__name__, component="dashboard")

DEFAULT_RECOMMENDATION_LIMIT = 5


class DashboardService:
    """Builds the dashboard shown after sign-in.

    Employers see their jobs with application counts; admins see the same over
    every job; job seekers see their applications and active jobs they have not
    applied to yet. Salaries are rendered through the same display path as the
    listings, so legacy and canonical rows look identical here too.
    """

    def __init__(self, session: Session, recommendation_limit: int = DEFAULT_RECOMMENDATION_LIMIT):
        self.job_service = JobService(session)
        self.recommendation_limit = recommendation_limit

    def summary(self, user: User) -> DashboardSummary:
        if not user.is_active:
            raise PermissionDeniedError("Account is deactivated")

        if user.role in (UserRole.EMPLOYER, UserRole.ADMIN):
            dashboard = self._employer_summary(user)
        else:
            dashboard = self._job_seeker_summary(user)

        logger.debug(
            "Dashboard generated",
            extra={"event": "dashboard.generated", "actor_id": user.id, "role": user.role},
        )
        return dashboard

    def _employer_summary(self, user: User) -> EmployerDashboard:
        jobs = self.job_service.list_employer_jobs(user)
        return EmployerDashboard(
            role=user.role,
            total_jobs=len(jobs),
            total_applications=sum(job.application_count for job in jobs),
            jobs=jobs,
        )

    def _job_seeker_summary(self, user: User) -> JobSeekerDashboard:
        applications = self.job_service.list_my_applications(user)
        applied_job_ids = {application.job_id for application in applications}

        recommended = [
            job
            for job in self.job_service.list_jobs().jobs
            if job.id not in applied_job_ids
        ][: self.recommendation_limit]

        return JobSeekerDashboard(
            role=user.role,
            total_applications=len(applications),
            pending_applications=sum(
                1 for application in applications if application.status == ApplicationStatus.PENDING
            ),
            applications=applications,
            recommended_jobs=recommended,
        )
