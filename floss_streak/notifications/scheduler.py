"""
Reminder scheduler backed by the pending_reminder table.

Only decides which reminder kind fires when and with what streak count;
message text belongs to whatever delivers the notification.
"""

import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, List, Optional

from ..config.loader import ReminderConfig
from ..storage.db import DEFAULT_DB_PATH, get_connection
from ..storage.repository import PersistenceError

logger = logging.getLogger(__name__)

DAILY_STREAK_REMINDER_ID = "dailyStreakNotification"
INACTIVITY_REMINDER_PREFIX = "inactivityReminder"


class ReminderKind(Enum):
    """Reminder tracks the scheduler manages."""
    DAILY_STREAK = "daily_streak"
    INACTIVITY = "inactivity"


@dataclass(frozen=True)
class PendingReminder:
    """A reminder waiting to fire."""
    identifier: str
    kind: ReminderKind
    fire_at: datetime
    streak_days: Optional[int] = None


class ReminderScheduler:
    """Schedules and cancels local reminders.
    
    Scheduling is idempotent: a reminder with the same identifier replaces
    the pending one instead of adding a duplicate.
    """
    
    def __init__(
        self,
        db_path: str = DEFAULT_DB_PATH,
        config: Optional[ReminderConfig] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """Initialize the scheduler.
        
        Args:
            db_path: Path to SQLite database file
            config: Reminder timing (defaults to ReminderConfig())
            clock: Returns the current time
        """
        self.db_path = db_path
        self.config = config or ReminderConfig()
        self.clock = clock
    
    def _fire_time(self, days_ahead: int) -> datetime:
        base = self.clock() + timedelta(days=days_ahead)
        return base.replace(
            hour=self.config.daily_streak_hour,
            minute=self.config.daily_streak_minute,
            second=0,
            microsecond=0
        )
    
    def schedule_daily_streak_reminder(self, streak_days: int) -> PendingReminder:
        """Schedule tomorrow night's streak reminder, replacing any pending one.
        
        Args:
            streak_days: Current streak length the reminder refers to
        """
        reminder = PendingReminder(
            identifier=DAILY_STREAK_REMINDER_ID,
            kind=ReminderKind.DAILY_STREAK,
            fire_at=self._fire_time(1),
            streak_days=streak_days
        )
        self._replace(ReminderKind.DAILY_STREAK, [reminder])
        logger.info("Scheduled daily streak reminder for %s (%d days)",
                    reminder.fire_at.isoformat(), streak_days)
        return reminder
    
    def schedule_inactivity_reminders(self) -> List[PendingReminder]:
        """Replace the inactivity sequence, one reminder per configured offset."""
        reminders = [
            PendingReminder(
                identifier=f"{INACTIVITY_REMINDER_PREFIX}-{offset}",
                kind=ReminderKind.INACTIVITY,
                fire_at=self._fire_time(offset)
            )
            for offset in sorted(self.config.inactivity_offsets_days)
        ]
        self._replace(ReminderKind.INACTIVITY, reminders)
        logger.info("Scheduled %d inactivity reminders", len(reminders))
        return reminders
    
    def cancel_daily_streak_reminder(self) -> None:
        """Drop the pending streak reminder, if any."""
        self._replace(ReminderKind.DAILY_STREAK, [])
        logger.info("Cancelled pending daily streak reminder")
    
    def cancel_all(self) -> None:
        """Drop every pending reminder."""
        self._execute("DELETE FROM pending_reminder", ())
    
    def pending_reminders(self) -> List[PendingReminder]:
        """Return pending reminders ordered by fire time."""
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute("""
                SELECT identifier, kind, fire_at, streak_days
                FROM pending_reminder
                ORDER BY fire_at ASC, identifier ASC
            """)
            return [
                PendingReminder(
                    identifier=row[0],
                    kind=ReminderKind(row[1]),
                    fire_at=datetime.fromisoformat(row[2]),
                    streak_days=row[3]
                )
                for row in cursor.fetchall()
            ]
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to read pending reminders: {e}") from e
        except (ValueError, TypeError) as e:
            raise PersistenceError(f"Corrupt pending reminder row: {e}") from e
        finally:
            conn.close()
    
    def _replace(self, kind: ReminderKind, reminders: List[PendingReminder]) -> None:
        """Swap every pending reminder of a kind in one transaction."""
        conn = get_connection(self.db_path)
        try:
            conn.execute("BEGIN TRANSACTION")
            conn.execute("DELETE FROM pending_reminder WHERE kind = ?", (kind.value,))
            conn.executemany("""
                INSERT OR REPLACE INTO pending_reminder
                (identifier, kind, fire_at, streak_days)
                VALUES (?, ?, ?, ?)
            """, [
                (r.identifier, r.kind.value, r.fire_at.isoformat(), r.streak_days)
                for r in reminders
            ])
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise PersistenceError(f"Failed to schedule {kind.value} reminders: {e}") from e
        finally:
            conn.close()
    
    def _execute(self, query: str, params: tuple) -> None:
        conn = get_connection(self.db_path)
        try:
            conn.execute(query, params)
            conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to update pending reminders: {e}") from e
        finally:
            conn.close()
