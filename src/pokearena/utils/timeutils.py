"""Time helpers.

Datetimes are stored naive in UTC.
"""

from datetime import datetime, timedelta, timezone


def utc_from_timestamp(timestamp: float) -> datetime:
    """Naive UTC datetime for a Unix timestamp."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).replace(tzinfo=None)


def utc_day_bounds(timestamp: float) -> tuple[datetime, datetime]:
    """Start (inclusive) and end (exclusive) of the UTC calendar day."""
    moment = utc_from_timestamp(timestamp)
    start = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)
