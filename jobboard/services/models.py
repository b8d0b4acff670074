"""Request and response models for the job board services."""

from datetime import datetime
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from jobboard.domain.models import Application, Job, JobCategory, JobType
from jobboard.salary import average_value, display_string, to_stored_value
from jobboard.salary.models import Number

JobSort = Literal["newest", "salary_desc", "salary_asc"]

_TEXT_FIELDS = ("title", "company", "description", "requirements", "location")


def _strip_required(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not v.strip():
        raise ValueError("Field cannot be empty or whitespace-only")
    return v.strip()


class JobDraft(BaseModel):
    """Payload for creating a job.

    ``salary`` is accepted in any shape a client may send (number or legacy
    min/max object) and is normalized by the service, not here.
    """

    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    title: str = Field(..., max_length=255)
    company: str = Field(..., max_length=255)
    description: str
    requirements: str
    category: JobCategory
    location: str = Field(..., max_length=255)
    job_type: JobType
    salary: Any = None

    @field_validator(*_TEXT_FIELDS)
    @classmethod
    def strip_whitespace(cls, v: Optional[str]) -> Optional[str]:
        """Strip whitespace from text fields."""
        return _strip_required(v)


class JobPatch(BaseModel):
    """Partial update for a job.

    Only fields present in the payload are changed. ``salary: None`` clears the
    salary; other fields cannot be set to None.
    """

    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    title: Optional[str] = Field(None, max_length=255)
    company: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    requirements: Optional[str] = None
    category: Optional[JobCategory] = None
    location: Optional[str] = Field(None, max_length=255)
    job_type: Optional[JobType] = None
    salary: Any = None
    is_active: Optional[bool] = None

    @field_validator(*_TEXT_FIELDS)
    @classmethod
    def strip_whitespace(cls, v: Optional[str]) -> Optional[str]:
        """Strip whitespace from text fields."""
        return _strip_required(v)

    @model_validator(mode="after")
    def reject_null_fields(self):
        nulls = [
            name
            for name in self.model_fields_set
            if name != "salary" and getattr(self, name) is None
        ]
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(sorted(nulls))}")
        return self

    def changes(self) -> dict:
        """Fields present in the payload, with their validated values."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class JobSearchFilters(BaseModel):
    """Listing filters.

    Salary bounds are validated when the range predicate is built, so a
    negative or inverted range raises InvalidSalaryRange.
    """

    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    category: Optional[JobCategory] = None
    job_type: Optional[JobType] = None
    location: Optional[str] = None
    search: Optional[str] = None
    min_salary: Optional[Number] = None
    max_salary: Optional[Number] = None
    sort: JobSort = "newest"

    @field_validator("location", "search")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat blank text filters as absent."""
        if v is None or not v.strip():
            return None
        return v.strip()


class JobView(BaseModel):
    """Job as returned to clients.

    ``salary`` is the stored value (number, legacy object, or null);
    ``salary_display`` and ``salary_value`` are derived from it on every read.
    """

    id: int
    title: str
    company: str
    description: str
    requirements: str
    category: str
    location: str
    job_type: str
    salary: Any = None
    salary_display: str
    salary_value: Number
    employer_id: int
    is_active: bool
    created_at: datetime
    updated_at: datetime
    application_count: int = 0

    @classmethod
    def from_job(cls, job: Job, application_count: int = 0) -> "JobView":
        return cls(
            **job.model_dump(exclude={"salary"}),
            salary=to_stored_value(job.salary),
            salary_display=display_string(job.salary),
            salary_value=average_value(job.salary),
            application_count=application_count,
        )


class JobListing(BaseModel):
    """Result of a job search."""

    jobs: List[JobView] = Field(default_factory=list)
    total: int = 0


class ApplicationView(BaseModel):
    """A job seeker's application together with a summary of the job."""

    id: int
    job_id: int
    job_title: str
    company: str
    location: str
    job_type: str
    category: str
    salary_display: str
    status: str
    applied_at: datetime
    resume: Optional[str] = None
    cover_letter: Optional[str] = None

    @classmethod
    def from_application(cls, application: Application, job: Job) -> "ApplicationView":
        return cls(
            id=application.id,
            job_id=job.id,
            job_title=job.title,
            company=job.company,
            location=job.location,
            job_type=job.job_type,
            category=job.category,
            salary_display=display_string(job.salary),
            status=application.status,
            applied_at=application.applied_at,
            resume=application.resume,
            cover_letter=application.cover_letter,
        )


class EmployerDashboard(BaseModel):
    """Dashboard for employers (and admins, over every job)."""

    role: str
    total_jobs: int = 0
    total_applications: int = 0
    jobs: List[JobView] = Field(default_factory=list)


class JobSeekerDashboard(BaseModel):
    """Dashboard for job seekers."""

    role: str
    total_applications: int = 0
    pending_applications: int = 0
    applications: List[ApplicationView] = Field(default_factory=list)
    recommended_jobs: List[JobView] = Field(default_factory=list)


DashboardSummary = Union[EmployerDashboard, JobSeekerDashboard]
