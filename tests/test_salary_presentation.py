"""Unit tests for salary display strings and sort values."""

import pytest

from jobboard.salary import (
    CanonicalSalary,
    LegacySalary,
    UnspecifiedSalary,
    average_value,
    display_string,
    normalize_salary,
)
from jobboard.salary.presentation import NOT_SPECIFIED, format_amount


class TestFormatAmount:
    """Tests for amount formatting."""

    @pytest.mark.parametrize(
        "amount,expected",
        [
            (0, "0"),
            (999, "999"),
            (50000, "50,000"),
            (1234567, "1,234,567"),
            (50000.0, "50,000"),
            (50000.5, "50,000.5"),
            (1234.125, "1,234.125"),
        ],
    )
    def test_format(self, amount, expected):
        """Test thousands grouping and fraction handling."""
        assert format_amount(amount) == expected

    @pytest.mark.parametrize(
        "amount,expected",
        [(1234.5675, "1,234.568"), (0.0005, "0.001"), (0.0004, "0"), (0.9996, "1")],
    )
    def test_fraction_rounds_half_up_to_three_places(self, amount, expected):
        assert format_amount(amount) == expected

    def test_integer_beyond_float_range(self):
        """Test that huge ints are grouped without going through float."""
        assert format_amount(10**400) == "10" + ",000" * 133


class TestDisplayString:
    """Tests for display_string."""

    def test_canonical(self):
        """Test that a number renders as a single amount."""
        assert display_string(50000) == "$50,000"

    def test_range(self):
        """Test that both bounds render as a range."""
        assert display_string({"min": 40000, "max": 60000}) == "$40,000 - $60,000"

    def test_min_only(self):
        """Test that a lone min renders as open-ended."""
        assert display_string({"min": 40000}) == "$40,000+"

    def test_max_only(self):
        """Test that a lone max renders as an upper limit."""
        assert display_string({"max": 60000}) == "Up to $60,000"

    @pytest.mark.parametrize(
        "stored",
        [None, {}, {"currency": "USD"}, "50000", -5, [1, 2], {"min": -1, "max": "x"}],
    )
    def test_not_specified(self, stored):
        """Test that absent or unreadable values render the placeholder."""
        assert display_string(stored) == NOT_SPECIFIED

    def test_invalid_bound_treated_as_absent(self):
        """Test that a malformed bound is dropped rather than raising."""
        assert display_string({"min": -5, "max": 60000}) == "Up to $60,000"
        assert display_string({"min": 40000, "max": "lots"}) == "$40,000+"

    def test_accepts_decoded_models(self):
        """Test that decoded salaries render the same as raw values."""
        assert display_string(CanonicalSalary(amount=50000)) == "$50,000"
        assert display_string(LegacySalary(min=40000, max=60000)) == "$40,000 - $60,000"
        assert display_string(UnspecifiedSalary()) == NOT_SPECIFIED

    def test_integer_beyond_float_range_renders(self):
        """Test that a huge stored number renders instead of raising."""
        rendered = display_string(10**400)
        assert rendered.startswith("$1,000,000")
        assert rendered.replace("$", "").replace(",", "") == str(10**400)
        assert display_string({"max": 10**400}).startswith("Up to $1,000")


class TestAverageValue:
    """Tests for average_value."""

    def test_canonical(self):
        """Test that a number is its own sort value."""
        assert average_value(52000) == 52000

    def test_range_rounds_half_up(self):
        """Test the midpoint of both bounds."""
        assert average_value({"min": 40000, "max": 60001}) == 50001

    def test_single_bounds(self):
        """Test lone min and lone max."""
        assert average_value({"min": 45000}) == 45000
        assert average_value({"max": 70000}) == 70000

    def test_integer_beyond_float_range(self):
        """Test that huge bounds sort by their exact value."""
        assert average_value(10**400) == 10**400
        assert average_value({"min": 10**400}) == 10**400
        assert average_value({"min": 10**400, "max": 10**400 + 2}) == 10**400 + 1

    @pytest.mark.parametrize("stored", [None, {}, "abc", -1, {"min": None, "max": None}])
    def test_absent_is_zero(self, stored):
        """Test that absent or invalid values sort as 0."""
        assert average_value(stored) == 0


class TestBackfillPreservesPresentation:
    """Converting a legacy value must not change its sort value."""

    @pytest.mark.parametrize(
        "legacy",
        [
            {"min": 40000, "max": 60000},
            {"min": 40000, "max": 60001},
            {"min": 45000},
            {"max": 70000},
        ],
    )
    def test_sort_value_unchanged(self, legacy):
        """Test that average_value is identical before and after normalization."""
        assert average_value(normalize_salary(legacy)) == average_value(legacy)

    def test_canonical_display_after_normalization(self):
        """Test the display string of a normalized range."""
        assert display_string(normalize_salary({"min": 40000, "max": 60000})) == "$50,000"
