"""Tests for the mixed-shape salary range predicate against SQLite."""

import math

import pytest
from sqlalchemy import select

from jobboard.persistence import close_database, get_session, init_database
from jobboard.persistence.schema import JobModel
from jobboard.salary import InvalidSalaryRange, build_range_filter, is_legacy_salary
from jobboard.salary.filters import resolve_range
from tests.helpers import insert_job_row, persist_user


class TestResolveRange:
    """Tests for range bound validation."""

    def test_defaults(self):
        """Test that missing bounds become 0 and unbounded."""
        assert resolve_range() == (0, None)

    def test_infinite_upper_bound_is_unbounded(self):
        assert resolve_range(10, math.inf) == (10, None)

    @pytest.mark.parametrize(
        "min_salary,max_salary",
        [(-1, None), (None, -1), (60000, 50000), ("10", None), (math.nan, None), (True, None)],
    )
    def test_invalid_bounds_raise(self, min_salary, max_salary):
        with pytest.raises(InvalidSalaryRange):
            resolve_range(min_salary, max_salary)

    def test_equal_bounds_allowed(self):
        assert resolve_range(50000, 50000) == (50000, 50000)

    def test_integer_beyond_float_range(self):
        assert resolve_range(None, 10**400) == (0, 10**400)
        with pytest.raises(InvalidSalaryRange):
            resolve_range(10**400 + 1, 10**400)


class TestBuildRangeFilter:
    """Tests for build_range_filter over canonical and legacy rows."""

    @pytest.fixture(autouse=True)
    def setup_database(self, tmp_path):
        """Seed one row per salary shape."""
        init_database(f"sqlite:///{tmp_path / 'filters.db'}")

        with get_session() as session:
            employer = persist_user(session)
            self.ids = {
                name: insert_job_row(session, salary, employer.id, title=name)
                for name, salary in [
                    ("canonical_50000", 50000),
                    ("canonical_20000", 20000),
                    ("canonical_float", 47500.5),
                    ("range_40_60", {"min": 40000, "max": 60000, "currency": "USD"}),
                    ("range_10_30", {"min": 10000, "max": 30000}),
                    ("min_44000", {"min": 44000}),
                    ("min_90000", {"min": 90000}),
                    ("max_30000", {"max": 30000}),
                    ("max_48000", {"max": 48000}),
                    ("wide_range", {"min": 1000, "max": 900000}),
                    ("negative_min", {"min": -5, "max": 30000}),
                    ("string_bounds", {"min": "45000", "max": "55000"}),
                    ("empty_object", {"currency": "USD"}),
                    ("null_salary", None),
                ]
            }

        yield
        close_database()

    def _matching(self, min_salary=None, max_salary=None):
        with get_session() as session:
            stmt = select(JobModel.title).where(build_range_filter(min_salary, max_salary))
            return set(session.execute(stmt).scalars())

    def test_reference_range(self):
        """Test the documented example: 45000 to 55000."""
        matched = self._matching(45000, 55000)

        assert "canonical_50000" in matched
        assert "range_40_60" in matched
        assert "min_44000" in matched
        assert "max_30000" not in matched

    def test_full_match_set(self):
        """Test every shape against a bounded range."""
        assert self._matching(45000, 55000) == {
            "canonical_50000",
            "canonical_float",
            "range_40_60",
            "min_44000",
            "max_48000",
            "wide_range",
        }

    def test_open_upper_bound(self):
        """Test that a missing max_salary is unbounded, including for open intervals."""
        matched = self._matching(min_salary=85000)

        assert matched == {"min_44000", "min_90000", "wide_range"}

    def test_open_lower_bound(self):
        """Test that a missing min_salary starts at 0."""
        matched = self._matching(max_salary=25000)

        assert matched == {
            "canonical_20000",
            "range_10_30",
            "max_30000",
            "max_48000",
            "wide_range",
            "negative_min",
        }

    def test_bounds_are_inclusive(self):
        """Test that values equal to a bound match."""
        assert "canonical_50000" in self._matching(50000, 50000)
        assert "max_30000" in self._matching(30000, 30000)

    def test_invalid_sub_fields_never_match(self):
        """Test that negative or string bounds are ignored by every condition."""
        matched = self._matching(0, 1000000)

        assert "string_bounds" not in matched
        assert "empty_object" not in matched
        assert "null_salary" not in matched
        # The valid max of a half-broken object still counts
        assert "negative_min" in matched

    def test_unfiltered_range_matches_every_usable_salary(self):
        """Test that the default range matches all rows with a usable salary."""
        matched = self._matching()

        assert matched == set(self.ids) - {"string_bounds", "empty_object", "null_salary"}

    def test_invalid_range_raises_before_querying(self):
        with pytest.raises(InvalidSalaryRange):
            build_range_filter(60000, 50000)


class TestIsLegacySalary:
    """Tests for the legacy-row predicate."""

    @pytest.fixture(autouse=True)
    def setup_database(self, tmp_path):
        init_database(f"sqlite:///{tmp_path / 'legacy.db'}")
        yield
        close_database()

    def test_matches_objects_only(self):
        with get_session() as session:
            employer = persist_user(session)
            insert_job_row(session, 50000, employer.id, title="number")
            insert_job_row(session, {"min": 1}, employer.id, title="object")
            insert_job_row(session, {}, employer.id, title="empty")
            insert_job_row(session, None, employer.id, title="null")

        with get_session() as session:
            titles = set(
                session.execute(select(JobModel.title).where(is_legacy_salary())).scalars()
            )

        assert titles == {"object", "empty"}
