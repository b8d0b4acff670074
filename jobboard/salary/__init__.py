"""Salary normalization, presentation, and query building.

Job salaries are stored either as a canonical number or as a legacy
``{min, max, currency}`` object. This package is the single place that
interprets both shapes:

- normalize_salary: write path, converts any accepted input to the canonical number
- normalize_stored_salary: backfill path, converts historical rows permissively
- display_string / average_value: read path, render and sort either shape
- build_range_filter: query path, range predicate that matches either shape
- decode_salary / encode_salary: storage boundary conversion

The one-time backfill that rewrites legacy rows lives in jobboard.migrations.
"""

from .exceptions import InvalidSalary, InvalidSalaryRange, SalaryError
from .models import (
    CanonicalSalary,
    LegacySalary,
    Salary,
    SalaryValue,
    UnspecifiedSalary,
    decode_salary,
    encode_salary,
    to_stored_value,
)
from .normalizer import normalize_salary, normalize_stored_salary
from .presentation import average_value, display_string
from .filters import build_range_filter, is_legacy_salary

__all__ = [
    # Normalization
    "normalize_salary",
    "normalize_stored_salary",
    # Presentation
    "display_string",
    "average_value",
    # Query building
    "build_range_filter",
    "is_legacy_salary",
    # Representations
    "CanonicalSalary",
    "LegacySalary",
    "UnspecifiedSalary",
    "Salary",
    "SalaryValue",
    "decode_salary",
    "encode_salary",
    "to_stored_value",
    # Exceptions
    "SalaryError",
    "InvalidSalary",
    "InvalidSalaryRange",
]
