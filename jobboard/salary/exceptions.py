"""Salary handling exceptions.

All salary exceptions inherit from SalaryError so callers can catch every
salary-related failure with a single except clause.
"""

from typing import Any


class SalaryError(ValueError):
    """Base exception for salary validation and query building errors."""

    pass


class InvalidSalary(SalaryError):
    """Raised when a salary value cannot be normalized to the canonical form.

    Examples:
    - Negative or non-finite numbers
    - Legacy objects without a usable min or max
    - Strings, booleans, None, lists
    """

    def __init__(self, message: str, value: Any = None):
        self.value = value
        super().__init__(message)


class InvalidSalaryRange(SalaryError):
    """Raised when a salary range filter has negative or inverted bounds."""

    pass
