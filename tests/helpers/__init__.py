"""Test helper utilities for job board tests."""

from .factories import (
    BASE_TIME,
    create_test_job,
    create_test_user,
    insert_job_row,
    persist_user,
    stored_salary,
)

__all__ = [
    "BASE_TIME",
    "create_test_job",
    "create_test_user",
    "insert_job_row",
    "persist_user",
    "stored_salary",
]
