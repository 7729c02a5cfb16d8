"""Utility functions package."""

from pokearena.utils.timeutils import utc_day_bounds, utc_from_timestamp

__all__ = [
    "utc_from_timestamp",
    "utc_day_bounds",
]
