"""Core domain models for users, jobs, and applications.

This module defines the data structures used throughout the application:
- User: an account with a role (job seeker, employer, admin)
- Job: a posted job with a decoded salary
- Application: a job seeker's application to a job
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from jobboard.salary.models import Salary, UnspecifiedSalary
from jobboard.utils.timestamps import ensure_utc, utc_now


class UserRole(str, Enum):
    """Account roles."""

    JOBSEEKER = "jobseeker"
    EMPLOYER = "employer"
    ADMIN = "admin"


class JobCategory(str, Enum):
    """Job categories offered on the board."""

    TECHNOLOGY = "Technology"
    BUSINESS = "Business"
    HEALTHCARE = "Healthcare"
    EDUCATION = "Education"
    ARTS = "Arts"
    OTHER = "Other"


class JobType(str, Enum):
    """Employment types."""

    FULL_TIME = "Full-time"
    PART_TIME = "Part-time"
    INTERNSHIP = "Internship"
    CONTRACT = "Contract"


class ApplicationStatus(str, Enum):
    """Lifecycle of an application."""

    PENDING = "pending"
    REVIEWED = "reviewed"
    REJECTED = "rejected"
    ACCEPTED = "accepted"


class User(BaseModel):
    """Registered account.

    Authentication material is handled outside this service; a User here is
    already authenticated by the caller.
    """

    id: Optional[int] = Field(None, description="Database identifier")
    name: str = Field(..., max_length=50, description="Display name")
    email: EmailStr = Field(..., description="Unique, lower-cased email address")
    role: UserRole = Field(UserRole.JOBSEEKER, description="Account role")
    company_name: Optional[str] = Field(None, description="Employer company name")
    is_active: bool = Field(True, description="Whether the account is active")
    created_at: datetime = Field(default_factory=utc_now, description="Creation time (UTC)")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Strip whitespace from name."""
        if not v or not v.strip():
            raise ValueError("Name cannot be empty or whitespace-only")
        return v.strip()

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        """Store email addresses lower-cased."""
        return v.lower()

    @field_validator("created_at")
    @classmethod
    def to_utc(cls, v: datetime) -> datetime:
        """Ensure datetime is timezone-aware and in UTC."""
        return ensure_utc(v)

    @property
    def is_employer(self) -> bool:
        return self.role == UserRole.EMPLOYER

    @property
    def is_job_seeker(self) -> bool:
        return self.role == UserRole.JOBSEEKER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    model_config = {"use_enum_values": True, "validate_default": True}


class Job(BaseModel):
    """Posted job.

    ``salary`` is always one of the decoded salary models. Rows written before
    the salary migration decode to LegacySalary; everything written since is
    CanonicalSalary (or UnspecifiedSalary when no salary was given).
    """

    id: Optional[int] = Field(None, description="Database identifier")
    title: str = Field(..., description="Job title")
    company: str = Field(..., description="Company name")
    description: str = Field(..., description="Full job description text")
    requirements: str = Field(..., description="Candidate requirements")
    category: JobCategory = Field(..., description="Job category")
    location: str = Field(..., description="Job location")
    job_type: JobType = Field(..., description="Employment type")
    salary: Salary = Field(default_factory=UnspecifiedSalary, description="Decoded salary")
    employer_id: int = Field(..., description="User id of the posting employer")
    is_active: bool = Field(True, description="Whether the job is listed")
    created_at: datetime = Field(default_factory=utc_now, description="Creation time (UTC)")
    updated_at: datetime = Field(default_factory=utc_now, description="Last update time (UTC)")

    @field_validator("title", "company", "description", "requirements", "location")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip whitespace from string fields."""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty or whitespace-only")
        return v.strip()

    @field_validator("created_at", "updated_at")
    @classmethod
    def to_utc(cls, v: datetime) -> datetime:
        """Ensure datetime is timezone-aware and in UTC."""
        return ensure_utc(v)

    model_config = {"use_enum_values": True, "validate_default": True, "json_schema_extra": {"example": {
        "title": "Junior Data Analyst",
        "company": "Example Corp",
        "description": "Analyse sales data and build weekly reports.",
        "requirements": "SQL, spreadsheets, curiosity",
        "category": "Technology",
        "location": "Remote",
        "job_type": "Full-time",
        "salary": {"kind": "canonical", "amount": 52000},
        "employer_id": 1,
    }}}


class Application(BaseModel):
    """A job seeker's application to a job."""

    id: Optional[int] = Field(None, description="Database identifier")
    job_id: int = Field(..., description="Job applied to")
    job_seeker_id: int = Field(..., description="Applicant user id")
    resume: Optional[str] = Field(None, description="Resume reference or text")
    cover_letter: Optional[str] = Field(None, description="Cover letter text")
    status: ApplicationStatus = Field(ApplicationStatus.PENDING, description="Review status")
    applied_at: datetime = Field(default_factory=utc_now, description="Submission time (UTC)")

    @field_validator("applied_at")
    @classmethod
    def to_utc(cls, v: datetime) -> datetime:
        """Ensure datetime is timezone-aware and in UTC."""
        return ensure_utc(v)

    model_config = {"use_enum_values": True, "validate_default": True}
