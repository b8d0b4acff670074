"""Service layer exceptions.

All service exceptions inherit from ServiceError so an outer surface (HTTP
handlers, CLI) can map them to responses with a single except clause.
Salary payload errors surface as ``jobboard.salary.InvalidSalary`` and range
errors as ``InvalidSalaryRange``; those are not wrapped.
"""

from typing import List, Optional

from pydantic import ValidationError


class ServiceError(Exception):
    """Base exception for service layer errors."""

    pass


class NotFoundError(ServiceError):
    """Raised when a requested job or application does not exist (or is not visible to the actor)."""

    pass


class PermissionDeniedError(ServiceError):
    """Raised when the actor's role or ownership does not allow the operation."""

    pass


class DuplicateApplicationError(ServiceError):
    """Raised when a job seeker applies to the same job twice."""

    pass


class ValidationFailedError(ServiceError):
    """
    Raised when a request payload fails validation.

    Carries one message per offending field, in the form ``"field: message"``.
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.message = message
        self.errors = errors or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.errors:
            return self.message
        return f"{self.message}: {'; '.join(self.errors)}"

    @classmethod
    def from_pydantic(cls, error: ValidationError, message: str = "Invalid request") -> "ValidationFailedError":
        """Convert a pydantic ValidationError into field messages."""
        errors = []
        for item in error.errors():
            field_path = ".".join(str(loc) for loc in item["loc"]) or "payload"
            errors.append(f"{field_path}: {item['msg']}")
        return cls(message, errors=errors)
