"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List

LARGE_BATCH_SIZE = 5000


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    backfill = config_dict.get("backfill", {})
    if isinstance(backfill, dict):
        batch_size = backfill.get("batch_size", 100)
        if isinstance(batch_size, int) and batch_size > LARGE_BATCH_SIZE:
            warning_messages.append(
                f"Large backfill batch_size ({batch_size}) holds write locks for longer"
            )

        if backfill.get("dry_run") is True:
            warning_messages.append(
                "backfill.dry_run is enabled in the config file; backfill runs will not write"
            )

    logging_section = config_dict.get("logging", {})
    if isinstance(logging_section, dict):
        level = logging_section.get("level")
        if isinstance(level, str) and level.upper() == "DEBUG":
            warning_messages.append("DEBUG logging records every converted salary")

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
