"""Utility functions for time handling."""

from .timestamps import ensure_utc, from_storage_string, to_storage_string, utc_now

__all__ = [
    "utc_now",
    "ensure_utc",
    "to_storage_string",
    "from_storage_string",
]
