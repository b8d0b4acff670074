"""Domain models for the job board."""

from .models import Application, ApplicationStatus, Job, JobCategory, JobType, User, UserRole

__all__ = [
    "Application",
    "ApplicationStatus",
    "Job",
    "JobCategory",
    "JobType",
    "User",
    "UserRole",
]
