"""UTC timestamp helpers.

Timestamps are stored in SQLite as fixed-width ISO 8601 strings ending in
``Z`` so that ordering by the text column orders by time.
"""

from datetime import datetime, timezone
from typing import Optional

STORAGE_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Example:
        >>> now = utc_now()
        >>> now.tzinfo == timezone.utc
        True
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure a datetime is timezone-aware and in UTC.

    Naive datetimes are taken to be UTC already; aware ones are converted.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def to_storage_string(dt: Optional[datetime]) -> Optional[str]:
    """Format a datetime for a text timestamp column.

    Args:
        dt: Datetime (naive values are treated as UTC)

    Returns:
        ``YYYY-MM-DDTHH:MM:SS.ffffffZ`` or None
    """
    if dt is None:
        return None

    return ensure_utc(dt).strftime(STORAGE_FORMAT)


def from_storage_string(value: Optional[str]) -> Optional[datetime]:
    """Parse a stored timestamp back to an aware UTC datetime.

    Accepts the storage format and the same without fractional seconds, which
    older rows may carry.

    Raises:
        ValueError: If the string matches neither format
    """
    if not value:
        return None

    value = value.rstrip("Z")

    try:
        dt = datetime.strptime(value, "%Y-%m-%dT%H:%M:%S.%f")
    except ValueError:
        dt = datetime.strptime(value, "%Y-%m-%dT%H:%M:%S")

    return dt.replace(tzinfo=timezone.utc)
