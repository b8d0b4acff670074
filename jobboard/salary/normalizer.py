"""Write-path salary normalization.

Every create or update that carries a salary passes it through
``normalize_salary`` before the job is persisted. The result is always the
canonical number; anything that cannot be converted is rejected with
InvalidSalary rather than coerced to zero.

Historical rows are a different matter: they were accepted long ago and must
stay readable, so ``normalize_stored_salary`` converts them with the same
permissive rules the read path uses.
"""

import math
from typing import Any, Mapping, Optional

from .exceptions import InvalidSalary
from .models import CanonicalSalary, LegacySalary, Number, decode_salary, is_valid_amount, midpoint


def normalize_salary(value: Any) -> Number:
    """Convert an incoming salary value to the canonical number.

    Accepted shapes:
    1. A finite number >= 0, returned unchanged
    2. A legacy mapping with ``min`` and/or ``max``:
       - both present: their average, rounded half-up
       - only ``min``: ``min``
       - only ``max``: ``max``

    A ``None`` bound counts as absent. A bound that is present but negative,
    non-finite, or not a number rejects the whole value. The ``currency`` key is
    ignored. The input is never mutated.

    Args:
        value: Raw salary from a create/update payload or a stored record

    Returns:
        Canonical non-negative salary

    Raises:
        InvalidSalary: If the value cannot be normalized

    Example:
        >>> normalize_salary({"min": 40000, "max": 60001})
        50001
    """
    if isinstance(value, bool):
        raise InvalidSalary("Salary must be a number, not a boolean", value=value)

    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            raise InvalidSalary(f"Salary must be finite, got {value}", value=value)
        if value < 0:
            raise InvalidSalary(f"Salary cannot be negative, got {value}", value=value)
        return value

    if isinstance(value, Mapping):
        return _normalize_range(value)

    raise InvalidSalary(
        f"Salary must be a number or a min/max object, got {type(value).__name__}",
        value=value,
    )


def _normalize_range(value: Mapping) -> Number:
    """Collapse a legacy min/max mapping to a single amount."""
    lower = value.get("min")
    upper = value.get("max")

    for key, bound in (("min", lower), ("max", upper)):
        if bound is not None and not is_valid_amount(bound):
            raise InvalidSalary(
                f"Salary {key} must be a non-negative number, got {bound!r}", value=value
            )

    if lower is not None and upper is not None:
        return midpoint(lower, upper)
    if lower is not None:
        return lower
    if upper is not None:
        return upper

    raise InvalidSalary("Salary object must include min or max", value=value)


def normalize_stored_salary(stored: Any) -> Optional[Number]:
    """Convert a stored salary to its canonical value without rejecting anything.

    Used when rewriting historical rows. Invalid bounds are treated as absent,
    exactly as the read path does, so the converted row keeps the sort value
    ``average_value`` gave the original. An object with no usable bound
    becomes None (no salary), which still renders as "Salary not specified".

    This differs from the earlier one-off fix-up script, which wrote 0 for
    such objects. A stored 0 would read as a real salary and match any range
    starting at 0, while None keeps the job out of salary-range results.

    Args:
        stored: Raw stored salary

    Returns:
        Canonical amount, or None when nothing usable is stored

    Example:
        >>> normalize_stored_salary({"min": -5, "max": 60000})
        60000
    """
    salary = decode_salary(stored)

    if isinstance(salary, CanonicalSalary):
        return salary.amount

    if isinstance(salary, LegacySalary) and not salary.is_empty:
        return _normalize_range({"min": salary.min, "max": salary.max})

    return None
