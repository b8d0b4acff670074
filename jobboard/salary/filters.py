"""Salary range predicates for job queries.

The salary column can hold a canonical number or a legacy ``{min, max}``
object, and no single comparison covers both. ``build_range_filter`` therefore
returns the OR of four conditions, each evaluated with SQLite JSON1 functions
(``json_type`` / ``json_extract``):

1. the stored value is a number within the range
2. the stored object has a ``min`` within the range
3. the stored object has a ``max`` within the range
4. the stored object's ``[min, max]`` interval overlaps the range, where a
   missing ``min`` is 0 and a missing ``max`` is unbounded

Bounds that are negative or not numbers never satisfy a condition.

Disjuncts 2-4 only exist for rows that have not been backfilled yet; once
``count_legacy_salaries()`` reports zero they can be dropped.
"""

import math
from typing import Any, Optional, Tuple

from sqlalchemy import and_, case, func, or_
from sqlalchemy.sql.elements import ColumnElement

from .exceptions import InvalidSalaryRange
from .models import Number

_NUMERIC_JSON_TYPES = ("integer", "real")


def _salary_column(column: Optional[Any]) -> Any:
    if column is not None:
        return column

    from jobboard.persistence.schema import JobModel

    return JobModel.salary


def resolve_range(
    min_salary: Optional[Number] = None, max_salary: Optional[Number] = None
) -> Tuple[Number, Optional[Number]]:
    """Validate range bounds and apply defaults.

    Args:
        min_salary: Inclusive lower bound (default 0)
        max_salary: Inclusive upper bound (default unbounded)

    Returns:
        Tuple of (lower, upper) where upper is None when unbounded

    Raises:
        InvalidSalaryRange: If a bound is negative, not a number, or lower > upper
    """
    lower = 0 if min_salary is None else min_salary
    upper = max_salary

    for name, bound in (("min_salary", lower), ("max_salary", upper)):
        if bound is None:
            continue
        is_number = isinstance(bound, (int, float)) and not isinstance(bound, bool)
        if not is_number or (isinstance(bound, float) and math.isnan(bound)):
            raise InvalidSalaryRange(f"{name} must be a number, got {bound!r}")
        if bound < 0:
            raise InvalidSalaryRange(f"{name} cannot be negative, got {bound}")

    if isinstance(lower, float) and not math.isfinite(lower):
        raise InvalidSalaryRange(f"min_salary must be finite, got {lower}")

    if isinstance(upper, float) and math.isinf(upper):
        upper = None

    if upper is not None and lower > upper:
        raise InvalidSalaryRange(
            f"min_salary ({lower}) cannot be greater than max_salary ({upper})"
        )

    return lower, upper


def is_legacy_salary(column: Optional[Any] = None) -> ColumnElement:
    """Condition matching rows whose salary is still stored as an object."""
    column = _salary_column(column)
    return func.json_type(column) == "object"


def _valid_amount(column: Any, path: str) -> ColumnElement:
    return and_(
        func.json_type(column, path).in_(_NUMERIC_JSON_TYPES),
        func.json_extract(column, path) >= 0,
    )


def _within(expression: Any, lower: Number, upper: Optional[Number]) -> ColumnElement:
    if upper is None:
        return expression >= lower
    return expression.between(lower, upper)


def build_range_filter(
    min_salary: Optional[Number] = None,
    max_salary: Optional[Number] = None,
    column: Optional[Any] = None,
) -> ColumnElement:
    """Build a predicate matching jobs whose salary intersects a range.

    Args:
        min_salary: Inclusive lower bound (default 0)
        max_salary: Inclusive upper bound (default unbounded)
        column: Salary column to filter (default JobModel.salary)

    Returns:
        SQLAlchemy boolean expression usable in ``select(...).where(...)``

    Raises:
        InvalidSalaryRange: If the bounds are invalid

    Example:
        >>> stmt = select(JobModel).where(build_range_filter(45000, 55000))
    """
    lower, upper = resolve_range(min_salary, max_salary)
    column = _salary_column(column)

    whole = func.json_extract(column, "$")
    record_min = func.json_extract(column, "$.min")
    record_max = func.json_extract(column, "$.max")

    valid_min = _valid_amount(column, "$.min")
    valid_max = _valid_amount(column, "$.max")
    is_object = is_legacy_salary(column)

    canonical_in_range = and_(
        _valid_amount(column, "$"),
        _within(whole, lower, upper),
    )
    min_in_range = and_(is_object, valid_min, _within(record_min, lower, upper))
    max_in_range = and_(is_object, valid_max, _within(record_max, lower, upper))

    effective_min = case((valid_min, record_min), else_=0)
    effective_max = case((valid_max, record_max), else_=None)
    overlap_conditions = [
        is_object,
        or_(valid_min, valid_max),
        or_(effective_max.is_(None), effective_max >= lower),
    ]
    if upper is not None:
        overlap_conditions.append(effective_min <= upper)
    interval_overlaps = and_(*overlap_conditions)

    return or_(canonical_in_range, min_in_range, max_in_range, interval_overlaps)
