"""Read-path salary presentation.

These two functions interpret a stored salary for every list view, detail view,
dashboard, and sort order. They accept raw stored values or decoded models and
treat canonical and legacy records identically, so a backfilled record renders
and sorts exactly as it did before the backfill.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from .models import CanonicalSalary, LegacySalary, Number, decode_salary, midpoint

NOT_SPECIFIED = "Salary not specified"


def format_amount(amount: Number) -> str:
    """Format an amount with comma thousands separators.

    Whole numbers print without decimals. Fractional amounts are rounded
    half-up to three decimal places, so anything under 0.0005 prints as "0".

    Example:
        >>> format_amount(50000)
        '50,000'
        >>> format_amount(1234.5675)
        '1,234.568'
    """
    if isinstance(amount, int) or amount.is_integer():
        return f"{int(amount):,}"
    rounded = Decimal(str(amount)).quantize(Decimal("0.001"), rounding=ROUND_HALF_UP)
    return f"{rounded:,}".rstrip("0").rstrip(".")


def display_string(stored: Any) -> str:
    """Human-readable salary for a stored value.

    Args:
        stored: Raw stored salary or a decoded salary model

    Returns:
        "$50,000", "$40,000 - $60,000", "$40,000+", "Up to $60,000",
        or "Salary not specified"
    """
    salary = decode_salary(stored)

    if isinstance(salary, CanonicalSalary):
        return f"${format_amount(salary.amount)}"

    if isinstance(salary, LegacySalary):
        if salary.has_min and salary.has_max:
            return f"${format_amount(salary.min)} - ${format_amount(salary.max)}"
        if salary.has_min:
            return f"${format_amount(salary.min)}+"
        if salary.has_max:
            return f"Up to ${format_amount(salary.max)}"

    return NOT_SPECIFIED


def average_value(stored: Any) -> Number:
    """Effective compensation used for sorting.

    Agrees with ``normalize_salary`` for every legacy object it accepts.

    Args:
        stored: Raw stored salary or a decoded salary model

    Returns:
        The amount, the half-up rounded midpoint, the single bound, or 0
    """
    salary = decode_salary(stored)

    if isinstance(salary, CanonicalSalary):
        return salary.amount

    if isinstance(salary, LegacySalary):
        if salary.has_min and salary.has_max:
            return midpoint(salary.min, salary.max)
        if salary.has_min:
            return salary.min
        if salary.has_max:
            return salary.max

    return 0
