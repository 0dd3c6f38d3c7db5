"""
Streak classification.

Turns the full floss log into a streak state for display and reminders.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional

from .calendar import day_of


class StreakState(Enum):
    """Where the user stands relative to a daily streak."""
    EMPTY = "empty"  # Nothing logged yet
    STREAK = "streak"  # Logged today
    MISSING_TODAY = "missingToday"  # Logged yesterday, not yet today
    MISSING = "missing"  # Last log is two or more days old


@dataclass(frozen=True)
class StreakInfo:
    """Derived streak result. Never persisted."""
    state: StreakState
    days: int
    
    def __post_init__(self):
        """Validate days is consistent with the state."""
        if self.days < 0:
            raise ValueError("days cannot be negative")
        if self.state == StreakState.EMPTY and self.days != 0:
            raise ValueError("empty streak must have 0 days")
        if self.state != StreakState.EMPTY and self.days < 1:
            raise ValueError(f"{self.state.value} streak must have at least 1 day")


def calculate_current_streak(
    timestamps: Iterable[datetime],
    now: Optional[datetime] = None,
) -> StreakInfo:
    """Classify the current streak from floss log timestamps.
    
    Input may be unsorted and contain several entries on the same day;
    days are deduplicated before counting. A run only counts calendar
    days that are all present, it never skips a gap.
    
    - Most recent day is today: STREAK with the run ending today
    - Most recent day is yesterday: MISSING_TODAY with the run ending yesterday
    - Otherwise: MISSING with the number of days since the last log
    
    Args:
        timestamps: Log timestamps in any order
        now: Reference time (defaults to datetime.now())
        
    Returns:
        StreakInfo with the classified state and day count
    """
    days = sorted({day_of(ts) for ts in timestamps}, reverse=True)
    if not days:
        return StreakInfo(state=StreakState.EMPTY, days=0)
    
    today = day_of(now or datetime.now())
    most_recent = days[0]
    delta = (today - most_recent).days
    
    if delta == 0:
        return StreakInfo(state=StreakState.STREAK, days=_consecutive_run(days))
    if delta == 1:
        return StreakInfo(state=StreakState.MISSING_TODAY, days=_consecutive_run(days))
    
    # Future-dated logs land here too; report their distance from today
    return StreakInfo(state=StreakState.MISSING, days=abs(delta))


def _consecutive_run(days: List[date]) -> int:
    """Count consecutive days from the head of a descending, distinct list."""
    run = 0
    expected = days[0]
    for day in days:
        if day != expected:
            break
        run += 1
        expected = day - timedelta(days=1)
    return run
