"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List

KNOWN_SECTIONS = {"database", "logging"}


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    for key in sorted(config_dict):
        if key not in KNOWN_SECTIONS:
            warning_messages.append(f"Unknown configuration section '{key}' will be ignored")

    database = config_dict.get("database", {})
    if isinstance(database, dict):
        url = database.get("url")
        if isinstance(url, str) and url.strip().endswith(":memory:"):
            warning_messages.append(
                "database.url points at an in-memory SQLite database; "
                "data will not survive between runs"
            )
        if database.get("echo") is True:
            warning_messages.append("database.echo is enabled; every SQL statement will be logged")

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit warning messages using Python's warnings module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
