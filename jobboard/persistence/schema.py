"""Database schema definition and ORM models.

This module defines SQLAlchemy ORM models for the database schema and provides
conversion methods between ORM models and domain models.

The ``jobs.salary`` column is JSON: it holds the canonical number for every row
written by current code, and may still hold a legacy ``{min, max, currency}``
object for rows that predate the migration. Conversion to the domain model
decodes either shape; conversion from the domain model only ever writes the
canonical number (or NULL).
"""

import logging

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from jobboard.domain.models import Application, Job, User
from jobboard.salary.models import decode_salary, encode_salary
from jobboard.utils.timestamps import from_storage_string, to_storage_string

logger = logging.getLogger(__name__)

# Create base class for ORM models
Base = declarative_base()


class UserModel(Base):
    """ORM model for users table."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    role = Column(String(20), nullable=False, default="jobseeker")
    company_name = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(String(50), nullable=False)

    def to_domain(self) -> User:
        """Convert ORM model to domain model.

        Returns:
            User: Domain model instance
        """
        return User(
            id=self.id,
            name=self.name,
            email=self.email,
            role=self.role,
            company_name=self.company_name,
            is_active=self.is_active,
            created_at=from_storage_string(self.created_at),
        )

    @classmethod
    def from_domain(cls, user: User) -> "UserModel":
        """Create ORM model from domain model.

        Args:
            user: Domain model instance

        Returns:
            UserModel: ORM model instance
        """
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            company_name=user.company_name,
            is_active=user.is_active,
            created_at=to_storage_string(user.created_at),
        )


class JobModel(Base):
    """ORM model for jobs table.

    Stores job postings. ``salary`` may be a number, a legacy object, or NULL.
    """

    __tablename__ = "jobs"

    # Primary key
    id = Column(Integer, primary_key=True, autoincrement=True)

    # Job details
    title = Column(String(255), nullable=False)
    company = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    requirements = Column(Text, nullable=False)
    category = Column(String(50), nullable=False)
    location = Column(String(255), nullable=False)
    job_type = Column(String(50), nullable=False)
    salary = Column(JSON(none_as_null=True), nullable=True)

    # Ownership and state
    employer_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    # Timestamps (stored as ISO 8601 strings)
    created_at = Column(String(50), nullable=False)
    updated_at = Column(String(50), nullable=False)

    # Indexes
    __table_args__ = (
        Index("idx_jobs_employer", "employer_id"),
        Index("idx_jobs_active_created", "is_active", "created_at"),
        Index("idx_jobs_category", "category"),
    )

    def to_domain(self) -> Job:
        """Convert ORM model to domain model, decoding either salary shape.

        Returns:
            Job: Domain model instance
        """
        return Job(
            id=self.id,
            title=self.title,
            company=self.company,
            description=self.description,
            requirements=self.requirements,
            category=self.category,
            location=self.location,
            job_type=self.job_type,
            salary=decode_salary(self.salary),
            employer_id=self.employer_id,
            is_active=self.is_active,
            created_at=from_storage_string(self.created_at),
            updated_at=from_storage_string(self.updated_at),
        )

    @classmethod
    def from_domain(cls, job: Job) -> "JobModel":
        """Create ORM model from domain model.

        Args:
            job: Domain model instance

        Returns:
            JobModel: ORM model instance

        Raises:
            InvalidSalary: If the job still carries a legacy salary
        """
        return cls(
            id=job.id,
            title=job.title,
            company=job.company,
            description=job.description,
            requirements=job.requirements,
            category=job.category,
            location=job.location,
            job_type=job.job_type,
            salary=encode_salary(job.salary),
            employer_id=job.employer_id,
            is_active=job.is_active,
            created_at=to_storage_string(job.created_at),
            updated_at=to_storage_string(job.updated_at),
        )


class ApplicationModel(Base):
    """ORM model for applications table.

    One row per (job, job seeker) pair.
    """

    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    job_seeker_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    resume = Column(Text, nullable=True)
    cover_letter = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="pending")
    applied_at = Column(String(50), nullable=False)

    __table_args__ = (
        UniqueConstraint("job_id", "job_seeker_id", name="uq_applications_job_seeker"),
        Index("idx_applications_seeker", "job_seeker_id"),
    )

    def to_domain(self) -> Application:
        """Convert ORM model to domain model.

        Returns:
            Application: Domain model instance
        """
        return Application(
            id=self.id,
            job_id=self.job_id,
            job_seeker_id=self.job_seeker_id,
            resume=self.resume,
            cover_letter=self.cover_letter,
            status=self.status,
            applied_at=from_storage_string(self.applied_at),
        )

    @classmethod
    def from_domain(cls, application: Application) -> "ApplicationModel":
        """Create ORM model from domain model.

        Args:
            application: Domain model instance

        Returns:
            ApplicationModel: ORM model instance
        """
        return cls(
            id=application.id,
            job_id=application.job_id,
            job_seeker_id=application.job_seeker_id,
            resume=application.resume,
            cover_letter=application.cover_letter,
            status=application.status,
            applied_at=to_storage_string(application.applied_at),
        )


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they don't exist (idempotent).

    Args:
        engine: SQLAlchemy engine instance
    """
    logger.info("Creating database schema if not exists")

    try:
        Base.metadata.create_all(engine, checkfirst=True)

        from sqlalchemy import inspect

        inspector = inspect(engine)
        tables = inspector.get_table_names()
        logger.info(f"Database schema ready. Tables: {', '.join(tables)}")

    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
