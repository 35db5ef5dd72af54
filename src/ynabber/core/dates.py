#!/usr/bin/env python3
"""
Timestamp Helpers

RFC3339 parsing/formatting for the watermark file and the bank feed, plus the
ISO date format YNAB expects. All timestamps are normalised to UTC.
"""

from datetime import date, datetime, timezone


def ensure_utc(value: datetime) -> datetime:
    """
    Normalise a datetime to UTC.

    Naive datetimes are assumed to already be UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_rfc3339(value: str) -> datetime:
    """
    Parse an RFC3339 timestamp into an aware UTC datetime.

    Accepts both the "Z" suffix and numeric offsets ("+00:00", "+12:00").

    Args:
        value: Timestamp string, e.g. "2022-07-18T12:00:00Z"

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        ValueError: If the string isn't a full RFC3339 timestamp (date, time and offset)
    """
    if not isinstance(value, str):
        raise ValueError(f"Expected RFC3339 string, got {type(value).__name__}")

    text = value.strip()
    if "T" not in text.upper():
        raise ValueError(f"Not an RFC3339 timestamp: {value!r}")

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        raise ValueError(f"RFC3339 timestamp is missing a UTC offset: {value!r}")
    return parsed.astimezone(timezone.utc)


def format_rfc3339(value: datetime) -> str:
    """Format as RFC3339 UTC with second precision, e.g. "2022-07-18T12:00:00Z"."""
    return ensure_utc(value).strftime("%Y-%m-%dT%H:%M:%SZ")


def to_ynab_date(value: datetime) -> date:
    """Calendar date (UTC) used for the YNAB transaction date."""
    return ensure_utc(value).date()
