"""Salary representations and storage-boundary conversion.

The jobs table holds salaries in two shapes: the canonical annual number and the
legacy ``{min, max, currency}`` object written before the migration. This module
defines a tagged union for the in-process representation:

- CanonicalSalary: a single non-negative amount
- LegacySalary: an object with optional min/max bounds and a currency
- UnspecifiedSalary: nothing usable is stored (NULL, wrong type, negative number)

``decode_salary`` converts raw stored values into the union and never raises;
``encode_salary`` converts the union back into a storable value and refuses the
legacy shape, so new writes are always canonical.
"""

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Annotated, Any, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import InvalidSalary

Number = Union[int, float]

DEFAULT_CURRENCY = "USD"


class CanonicalSalary(BaseModel):
    """Annual compensation stored as a single number."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["canonical"] = "canonical"
    amount: Number = Field(..., description="Annual compensation")

    @field_validator("amount")
    @classmethod
    def check_amount(cls, v: Number) -> Number:
        if not is_valid_amount(v):
            raise ValueError(f"Salary amount must be a finite non-negative number, got {v!r}")
        return v


class LegacySalary(BaseModel):
    """Pre-migration salary object.

    Bounds that were stored with an invalid value (negative, non-numeric) are
    decoded as None, so ``min`` and ``max`` are either valid amounts or absent.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["legacy"] = "legacy"
    min: Optional[Number] = Field(None, description="Lower bound of the range")
    max: Optional[Number] = Field(None, description="Upper bound of the range")
    currency: str = Field(DEFAULT_CURRENCY, description="ISO currency code")

    @property
    def has_min(self) -> bool:
        return self.min is not None

    @property
    def has_max(self) -> bool:
        return self.max is not None

    @property
    def is_empty(self) -> bool:
        """Whether neither bound is usable."""
        return self.min is None and self.max is None


class UnspecifiedSalary(BaseModel):
    """No usable salary is stored."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unspecified"] = "unspecified"


SalaryValue = Union[CanonicalSalary, LegacySalary, UnspecifiedSalary]

# Use as a pydantic field type; the "kind" tag selects the model.
Salary = Annotated[SalaryValue, Field(discriminator="kind")]

_SALARY_TYPES = (CanonicalSalary, LegacySalary, UnspecifiedSalary)


def is_valid_amount(value: Any) -> bool:
    """Check whether a value is a finite, non-negative number.

    Booleans are rejected even though ``bool`` subclasses ``int``.

    Args:
        value: Value to check

    Returns:
        True if the value can be used as a salary amount
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return (isinstance(value, int) or math.isfinite(value)) and value >= 0


def _to_decimal(value: Number) -> Decimal:
    # str() keeps the short float repr; ints convert exactly at any size
    return Decimal(value) if isinstance(value, int) else Decimal(str(value))


def _exact_precision(*values: Decimal) -> int:
    """Digits needed to add and halve ``values`` without rounding."""
    top = max(v.adjusted() for v in values) + 2
    bottom = min(min(v.as_tuple().exponent for v in values), 0)
    return max(28, top - bottom + 2)


def round_half_up(value: Union[Number, Decimal]) -> int:
    """Round to the nearest integer, ties away from zero.

    Python's built-in round() uses banker's rounding (50000.5 -> 50000), which
    does not match how averages were computed for existing records.

    Example:
        >>> round_half_up(50000.5)
        50001
    """
    if isinstance(value, int):
        return value
    exact = value if isinstance(value, Decimal) else _to_decimal(value)
    with localcontext() as ctx:
        ctx.prec = _exact_precision(exact)
        return int(exact.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def midpoint(lower: Number, upper: Number) -> int:
    """Average of two bounds, rounded half-up.

    No ordering is enforced: ``midpoint(60000, 40000)`` is 50000.
    """
    bounds = (_to_decimal(lower), _to_decimal(upper))
    with localcontext() as ctx:
        ctx.prec = _exact_precision(*bounds)
        return round_half_up((bounds[0] + bounds[1]) / 2)


def decode_salary(raw: Any) -> SalaryValue:
    """Decode a raw stored salary into the tagged representation.

    Never raises: historical rows must always be readable.

    Args:
        raw: Value as stored (number, mapping, None, or anything else),
            or an already-decoded salary model

    Returns:
        CanonicalSalary, LegacySalary, or UnspecifiedSalary
    """
    if isinstance(raw, _SALARY_TYPES):
        return raw

    if is_valid_amount(raw):
        return CanonicalSalary(amount=raw)

    if isinstance(raw, Mapping):
        lower = raw.get("min")
        upper = raw.get("max")
        currency = raw.get("currency")
        if not isinstance(currency, str) or not currency.strip():
            currency = DEFAULT_CURRENCY

        return LegacySalary(
            min=lower if is_valid_amount(lower) else None,
            max=upper if is_valid_amount(upper) else None,
            currency=currency.strip(),
        )

    return UnspecifiedSalary()


def encode_salary(salary: Optional[SalaryValue]) -> Optional[Number]:
    """Convert a decoded salary into the value written to storage.

    Args:
        salary: Decoded salary model, or None

    Returns:
        The canonical amount, or None when no salary is specified

    Raises:
        InvalidSalary: If the salary is in the legacy shape or is not a salary model
    """
    if salary is None or isinstance(salary, UnspecifiedSalary):
        return None

    if isinstance(salary, CanonicalSalary):
        return salary.amount

    if isinstance(salary, LegacySalary):
        raise InvalidSalary(
            "Legacy salary objects cannot be written; normalize the salary first",
            value=salary,
        )

    raise InvalidSalary(
        f"Cannot encode salary of type {type(salary).__name__}", value=salary
    )


def to_stored_value(salary: SalaryValue) -> Any:
    """Raw form of a decoded salary, as it appears in storage.

    Unlike ``encode_salary`` this accepts the legacy shape. It is used to echo
    the stored value back in responses, never to write.

    Example:
        >>> to_stored_value(LegacySalary(min=40000))
        {'min': 40000, 'currency': 'USD'}
    """
    if isinstance(salary, CanonicalSalary):
        return salary.amount
    if isinstance(salary, LegacySalary):
        return salary.model_dump(exclude={"kind"}, exclude_none=True)
    return None
