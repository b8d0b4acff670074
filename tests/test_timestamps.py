"""Unit tests for timestamp utilities."""

from datetime import datetime, timedelta, timezone

import pytest

from jobboard.utils.timestamps import (
    ensure_utc,
    from_storage_string,
    to_storage_string,
    utc_now,
)


class TestUtcNow:
    """Tests for utc_now function."""

    def test_utc_now_returns_utc_datetime(self):
        """Test that utc_now returns a timezone-aware datetime in UTC."""
        now = utc_now()

        assert now.tzinfo == timezone.utc
        assert isinstance(now, datetime)

    def test_utc_now_is_recent(self):
        """Test that utc_now returns a recent timestamp."""
        before = datetime.now(timezone.utc)
        now = utc_now()
        after = datetime.now(timezone.utc)

        assert before <= now <= after


class TestEnsureUtc:
    """Tests for ensure_utc function."""

    def test_ensure_utc_with_none(self):
        assert ensure_utc(None) is None

    def test_ensure_utc_with_naive_datetime(self):
        """Test that naive datetime is treated as UTC."""
        result = ensure_utc(datetime(2025, 11, 4, 12, 0, 0))

        assert result.tzinfo == timezone.utc
        assert result.hour == 12

    def test_ensure_utc_with_other_timezone(self):
        """Test that datetime with other timezone is converted to UTC."""
        est = timezone(timedelta(hours=-5))

        result = ensure_utc(datetime(2025, 11, 4, 12, 0, 0, tzinfo=est))

        assert result.tzinfo == timezone.utc
        assert result.hour == 17


class TestStorageStrings:
    """Tests for the text column timestamp format."""

    def test_format(self):
        dt = datetime(2025, 11, 4, 12, 30, 45, 123456, tzinfo=timezone.utc)

        assert to_storage_string(dt) == "2025-11-04T12:30:45.123456Z"

    def test_format_converts_to_utc(self):
        """Test that offsets are normalized before formatting."""
        est = timezone(timedelta(hours=-5))

        result = to_storage_string(datetime(2025, 11, 4, 12, 0, 0, tzinfo=est))

        assert result == "2025-11-04T17:00:00.000000Z"

    def test_format_none(self):
        assert to_storage_string(None) is None

    def test_parse(self):
        result = from_storage_string("2025-11-04T12:30:45.123456Z")

        assert result == datetime(2025, 11, 4, 12, 30, 45, 123456, tzinfo=timezone.utc)

    def test_parse_without_fraction(self):
        """Test that older second-precision values still parse."""
        result = from_storage_string("2025-11-04T12:30:45Z")

        assert result == datetime(2025, 11, 4, 12, 30, 45, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, ""])
    def test_parse_empty(self, value):
        assert from_storage_string(value) is None

    def test_parse_invalid_raises(self):
        with pytest.raises(ValueError):
            from_storage_string("2025/11/04")

    def test_text_order_matches_time_order(self):
        """Test that sorting stored strings sorts by time."""
        base = datetime(2025, 1, 1, tzinfo=timezone.utc)
        moments = [base + timedelta(seconds=s) for s in (3600, 1, 59.5, 86400 * 40)]

        stored = sorted(to_storage_string(moment) for moment in moments)

        assert [from_storage_string(value) for value in stored] == sorted(moments)
