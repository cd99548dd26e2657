"""Timestamp parsing for API date strings."""

from collections.abc import Callable
from datetime import datetime

DateParser = Callable[[str], datetime | None]


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp, returning None when it is not one."""
    cleaned = value.strip()
    if not cleaned:
        return None
    try:
        return datetime.fromisoformat(cleaned)
    except ValueError:
        return None
