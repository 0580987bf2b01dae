"""
Date helpers for the Kickabout Teams application.

Attendance is tracked per calendar day; "today" is the UTC date so every
session agrees on the same key regardless of the server's local zone.
"""
from datetime import date, datetime, timezone


def today_utc() -> date:
    """
    Get the current UTC calendar date.

    Returns:
        Today's date in UTC
    """
    return datetime.now(timezone.utc).date()


def utc_now_iso() -> str:
    """Current UTC timestamp as an ISO 8601 string."""
    return datetime.now(timezone.utc).isoformat()
