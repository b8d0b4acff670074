"""Unit tests for write-path salary normalization."""

import copy
import math

import pytest

from jobboard.salary import InvalidSalary, SalaryError, normalize_salary, normalize_stored_salary
from jobboard.salary.presentation import average_value


class TestNumericSalaries:
    """Tests for salaries that are already numbers."""

    @pytest.mark.parametrize("value", [0, 1, 50000, 52000.75, 10**9])
    def test_valid_number_is_returned_unchanged(self, value):
        """Test that finite non-negative numbers pass through."""
        assert normalize_salary(value) == value

    def test_float_keeps_fraction(self):
        """Test that numeric input is not rounded."""
        assert normalize_salary(50000.5) == 50000.5

    def test_negative_number_rejected(self):
        """Test that negative numbers are rejected."""
        with pytest.raises(InvalidSalary, match="negative"):
            normalize_salary(-1)

    def test_integer_beyond_float_range_passes_through(self):
        """Test that ints too large for a float are not run through float checks."""
        assert normalize_salary(10**400) == 10**400

    def test_negative_huge_integer_rejected(self):
        with pytest.raises(InvalidSalary, match="negative"):
            normalize_salary(-(10**400))

    @pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan])
    def test_non_finite_number_rejected(self, value):
        """Test that inf and NaN are rejected."""
        with pytest.raises(InvalidSalary):
            normalize_salary(value)

    @pytest.mark.parametrize("value", [True, False])
    def test_boolean_rejected(self, value):
        """Test that booleans are not treated as numbers."""
        with pytest.raises(InvalidSalary):
            normalize_salary(value)


class TestLegacyObjects:
    """Tests for legacy min/max objects."""

    def test_both_bounds_averaged(self):
        """Test that min and max collapse to their average."""
        assert normalize_salary({"min": 40000, "max": 60000, "currency": "USD"}) == 50000

    def test_average_rounds_half_up(self):
        """Test that .5 averages round up, not to even."""
        assert normalize_salary({"min": 40000, "max": 60001}) == 50001
        assert normalize_salary({"min": 1, "max": 2}) == 2

    def test_huge_bounds_average_exactly(self):
        """Test that the midpoint of very large bounds is not rounded through floats."""
        assert normalize_salary({"min": 10**400, "max": 10**400 + 3}) == 10**400 + 2
        assert normalize_salary({"min": 10**400}) == 10**400

    def test_min_only(self):
        """Test that a lone min is used as-is."""
        assert normalize_salary({"min": 45000}) == 45000

    def test_max_only(self):
        """Test that a lone max is used as-is."""
        assert normalize_salary({"max": 70000}) == 70000

    def test_none_bound_counts_as_absent(self):
        """Test that a None bound is ignored."""
        assert normalize_salary({"min": None, "max": 70000}) == 70000

    def test_inverted_bounds_are_averaged(self):
        """Test that min > max is not an error."""
        assert normalize_salary({"min": 60000, "max": 40000}) == 50000

    def test_currency_is_ignored(self):
        """Test that the currency key does not affect the result."""
        assert normalize_salary({"min": 40000, "max": 60000, "currency": "EUR"}) == 50000

    def test_empty_object_rejected(self):
        """Test that an object without min or max is rejected."""
        with pytest.raises(InvalidSalary, match="min or max"):
            normalize_salary({"currency": "USD"})

    def test_all_none_bounds_rejected(self):
        """Test that explicit None bounds are the same as missing."""
        with pytest.raises(InvalidSalary):
            normalize_salary({"min": None, "max": None})

    @pytest.mark.parametrize(
        "value",
        [
            {"min": -5, "max": 60000},
            {"min": 40000, "max": -1},
            {"min": "40000", "max": 60000},
            {"min": True},
            {"max": math.inf},
        ],
    )
    def test_invalid_present_bound_rejects_object(self, value):
        """Test that any present but invalid bound rejects the whole object."""
        with pytest.raises(InvalidSalary):
            normalize_salary(value)

    def test_input_is_not_mutated(self):
        """Test that the caller's object is left untouched."""
        payload = {"min": 40000, "max": 60000, "currency": "USD"}
        original = copy.deepcopy(payload)

        normalize_salary(payload)

        assert payload == original

    @pytest.mark.parametrize(
        "value",
        [
            {"min": 40000, "max": 60001},
            {"min": 45000},
            {"max": 70000},
            {"min": 60000, "max": 40000},
            {"min": 0.5, "max": 1.5},
        ],
    )
    def test_agrees_with_average_value(self, value):
        """Test that normalization and the sort value agree on accepted objects."""
        assert normalize_salary(value) == average_value(value)


class TestOtherTypes:
    """Tests for values that are neither numbers nor objects."""

    @pytest.mark.parametrize("value", ["50000", None, [40000, 60000], object()])
    def test_rejected(self, value):
        """Test that other types raise InvalidSalary."""
        with pytest.raises(InvalidSalary):
            normalize_salary(value)

    def test_error_carries_value(self):
        """Test that the rejected value is attached to the exception."""
        with pytest.raises(InvalidSalary) as exc_info:
            normalize_salary("lots")

        assert exc_info.value.value == "lots"

    def test_invalid_salary_is_a_salary_error(self):
        """Test the exception hierarchy."""
        assert issubclass(InvalidSalary, SalaryError)
        assert issubclass(SalaryError, ValueError)


class TestNormalizeStoredSalary:
    """Tests for the permissive conversion used on historical rows."""

    def test_valid_object_matches_strict_normalization(self):
        """Test that well-formed objects convert exactly like normalize_salary."""
        stored = {"min": 40000, "max": 60001, "currency": "USD"}
        assert normalize_stored_salary(stored) == normalize_salary(stored) == 50001

    def test_invalid_bound_is_dropped(self):
        """Test that a malformed bound is ignored instead of rejected."""
        assert normalize_stored_salary({"min": -5, "max": 60000}) == 60000
        assert normalize_stored_salary({"min": 40000, "max": "lots"}) == 40000

    @pytest.mark.parametrize("stored", [{}, {"currency": "USD"}, {"min": -1, "max": None}])
    def test_object_without_usable_bound_becomes_none(self, stored):
        """Test that empty objects convert to no salary rather than 0."""
        assert normalize_stored_salary(stored) is None

    @pytest.mark.parametrize(
        "stored",
        [{"min": -5, "max": 60000}, {"min": 45000, "max": True}, {}, {"max": 70000}],
    )
    def test_agrees_with_average_value(self, stored):
        """Test that the converted value keeps the row's sort value."""
        assert average_value(normalize_stored_salary(stored)) == average_value(stored)

    def test_canonical_passes_through(self):
        assert normalize_stored_salary(52000) == 52000
