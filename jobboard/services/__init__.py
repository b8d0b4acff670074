"""Job board services: jobs, applications, and dashboards.

Services receive an already-authenticated ``User`` and a SQLAlchemy session
(typically from ``jobboard.persistence.get_session()``) and return response
models. Authentication and HTTP wiring live outside this package.
"""

from .dashboard import DashboardService
from .exceptions import (
    DuplicateApplicationError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
    ValidationFailedError,
)
from .jobs import JobService
from .models import (
    ApplicationView,
    DashboardSummary,
    EmployerDashboard,
    JobDraft,
    JobListing,
    JobPatch,
    JobSearchFilters,
    JobSeekerDashboard,
    JobView,
)

__all__ = [
    # Services
    "JobService",
    "DashboardService",
    # Models
    "JobDraft",
    "JobPatch",
    "JobSearchFilters",
    "JobView",
    "JobListing",
    "ApplicationView",
    "EmployerDashboard",
    "JobSeekerDashboard",
    "DashboardSummary",
    # Exceptions
    "ServiceError",
    "NotFoundError",
    "PermissionDeniedError",
    "ValidationFailedError",
    "DuplicateApplicationError",
]
