"""Utility functions for time handling, identifiers, and label comparison."""

from uuid import uuid4

from .text import clean_labels, contains_either_way, fold_label, parse_skill_list
from .timestamps import ensure_utc, format_timestamp, parse_iso_datetime, utc_now


def new_id() -> str:
    """Generate a new record identifier (UUID4 string)."""
    return str(uuid4())


__all__ = [
    "new_id",
    # Text
    "fold_label",
    "contains_either_way",
    "parse_skill_list",
    "clean_labels",
    # Timestamps
    "utc_now",
    "ensure_utc",
    "parse_iso_datetime",
    "format_timestamp",
]
