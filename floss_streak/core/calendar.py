"""
Calendar day helpers.

Derives a per-day identity from timestamps for same-day grouping.
"""

from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[datetime, date]


def calendar_signature(value: DateLike) -> str:
    """Return a key identifying the calendar day of a timestamp.
    
    Two values share a signature iff they fall on the same year, month
    and day. Time of day is ignored.
    
    Args:
        value: A datetime or date
        
    Returns:
        Signature in the form "YYYY-MM-DD"
    """
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def is_same_day(first: DateLike, second: DateLike) -> bool:
    """Check whether two timestamps fall on the same calendar day."""
    return calendar_signature(first) == calendar_signature(second)


def is_today(value: DateLike, now: Optional[datetime] = None) -> bool:
    """Check whether a timestamp falls on the current calendar day."""
    return is_same_day(value, now or datetime.now())


def day_of(value: DateLike) -> date:
    """Strip the time of day from a timestamp."""
    return date(value.year, value.month, value.day)
