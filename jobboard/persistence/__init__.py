"""Persistence layer for database operations using SQLite.

This module provides the public API for database operations including:
- Database initialization and connection management
- Repository classes for users, jobs, and applications
- Custom exceptions for error handling

Public API:
    # Database initialization and session management
    - init_database(database_url: str) -> None
    - get_session() -> ContextManager[Session]
    - close_database() -> None
    - get_engine() -> Engine

    # Repository classes
    - UserRepository: account lookups
    - JobRepository: job CRUD, search, and legacy salary scans
    - ApplicationRepository: job application CRUD

    # Exceptions
    - PersistenceError: Base exception for all persistence errors
    - DatabaseConnectionError: Database connection/initialization failures
    - RecordNotFoundError: Required record not found
    - DataIntegrityError: Constraint violations

Example usage:
    >>> from jobboard.persistence import init_database, get_session, JobRepository
    >>>
    >>> # Initialize database (once at startup)
    >>> init_database("sqlite:///./data/job_board.db")
    >>>
    >>> # Use repository within session context
    >>> with get_session() as session:
    ...     repo = JobRepository(session)
    ...     jobs = repo.search(min_salary=45000, max_salary=55000)
"""

# Database initialization and session management
from .database import close_database, get_engine, get_session, init_database

# Repository classes
from .repositories import ApplicationRepository, JobRepository, UserRepository

# Exceptions
from .exceptions import (
    DatabaseConnectionError,
    DataIntegrityError,
    PersistenceError,
    RecordNotFoundError,
)

# Public API exports
__all__ = [
    # Database functions
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    # Repositories
    "UserRepository",
    "JobRepository",
    "ApplicationRepository",
    # Exceptions
    "PersistenceError",
    "DatabaseConnectionError",
    "RecordNotFoundError",
    "DataIntegrityError",
]
