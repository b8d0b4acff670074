"""Tests for role-specific dashboards."""

import pytest

from jobboard.persistence import close_database, get_session, init_database
from jobboard.services import (
    DashboardService,
    EmployerDashboard,
    JobSeekerDashboard,
    JobService,
    PermissionDeniedError,
)
from tests.helpers import insert_job_row, persist_user


@pytest.fixture
def board(tmp_path):
    """Two employers, a job seeker, an admin, and a handful of jobs."""
    init_database(f"sqlite:///{tmp_path / 'dashboard.db'}")
    with get_session() as session:
        employer = persist_user(session)
        other = persist_user(session, name="Other", email="other@example.com")
        seeker = persist_user(session, name="Seeker", email="seeker@example.com", role="jobseeker")
        admin = persist_user(session, name="Admin", email="admin@example.com", role="admin")

        jobs = [
            insert_job_row(session, {"min": 40000, "max": 60000}, employer.id, minutes_ago=3),
            insert_job_row(session, 52000, employer.id, minutes_ago=2),
            insert_job_row(session, None, other.id, minutes_ago=1),
            insert_job_row(session, 70000, other.id, is_active=False),
        ]

        JobService(session).apply_to_job(seeker, jobs[0])

    yield {"employer": employer, "other": other, "seeker": seeker, "admin": admin, "jobs": jobs}
    close_database()


class TestDashboardService:
    """Tests for DashboardService.summary."""

    def test_employer_sees_own_jobs_with_counts(self, board):
        with get_session() as session:
            summary = DashboardService(session).summary(board["employer"])

        assert isinstance(summary, EmployerDashboard)
        assert summary.total_jobs == 2
        assert summary.total_applications == 1
        assert [job.salary_display for job in summary.jobs] == ["$52,000", "$40,000 - $60,000"]

    def test_admin_sees_every_job(self, board):
        with get_session() as session:
            summary = DashboardService(session).summary(board["admin"])

        assert summary.role == "admin"
        assert summary.total_jobs == 4

    def test_job_seeker_summary(self, board):
        """Test applications and recommendations for a job seeker."""
        with get_session() as session:
            summary = DashboardService(session).summary(board["seeker"])

        assert isinstance(summary, JobSeekerDashboard)
        assert summary.total_applications == 1
        assert summary.pending_applications == 1
        assert summary.applications[0].salary_display == "$40,000 - $60,000"

        recommended = [job.id for job in summary.recommended_jobs]
        assert board["jobs"][0] not in recommended
        assert board["jobs"][3] not in recommended
        assert recommended == [board["jobs"][2], board["jobs"][1]]

    def test_recommendation_limit(self, board):
        with get_session() as session:
            summary = DashboardService(session, recommendation_limit=1).summary(board["seeker"])

        assert len(summary.recommended_jobs) == 1

    def test_inactive_user_denied(self, board):
        inactive = board["seeker"].model_copy(update={"is_active": False})

        with get_session() as session:
            with pytest.raises(PermissionDeniedError):
                DashboardService(session).summary(inactive)
