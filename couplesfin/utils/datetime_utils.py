"""
Date and time utilities for couplesfin.

Provides timezone-aware datetime helpers.
"""
from datetime import date, datetime, timezone


def utcnow() -> datetime:
    """
    Get current UTC datetime with timezone info.

    Note:
        Always use this function instead of datetime.now() so rate timestamps
        can be compared with each other.
    """
    return datetime.now(timezone.utc)


def parse_ISO_datetime(v) -> datetime:
    """
    Read a timestamp as a timezone-aware datetime.

    Accepts datetime, date (midnight UTC) or an ISO 8601 string. Naive values
    are assumed to be UTC.
    """
    if isinstance(v, datetime):
        result = v
    elif isinstance(v, date):
        result = datetime(v.year, v.month, v.day)
    elif isinstance(v, str):
        try:
            result = datetime.fromisoformat(v.replace("Z", "+00:00"))
        except ValueError as e:
            raise ValueError(f"Input must be an ISO 8601 timestamp. Error: {e}")
    else:
        raise ValueError(f"Input must be a str, date or datetime, got {type(v)}")

    if result.tzinfo is None:
        result = result.replace(tzinfo=timezone.utc)
    return result
