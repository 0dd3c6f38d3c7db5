"""
Log interaction orchestration.

Single entry point for user-driven changes to the floss log. Each operation
persists the change, keeps the reminder schedule consistent with the log,
triggers feedback and publishes a change event.

Ordering per operation:
1. Persistence write - always completes before any dependent read
2. Scheduling decision - reads the log, classifies, schedules or cancels
3. Feedback and change notification
"""

import logging
from datetime import date, datetime
from typing import Callable, List, Optional, Union

from .calendar import calendar_signature, is_same_day, is_today
from .events import LogChangeChannel, LogChangeEvent, LogChangeKind
from .streak import StreakInfo, calculate_current_streak
from floss_streak.feedback.haptics import FeedbackManager
from floss_streak.notifications.scheduler import ReminderScheduler
from floss_streak.storage.models import FlossRecord
from floss_streak.storage.persistence import PersistenceManager
from floss_streak.storage.repository import PersistenceError

logger = logging.getLogger(__name__)


class LogInteractionOrchestrator:
    """Coordinates persistence, streak classification, reminders and feedback.
    
    Collaborators are injected; the orchestrator holds no log state between
    calls. Write failures propagate to the caller. Read failures during a
    scheduling decision are logged and treated as an empty log for that
    decision only. Reminder failures are logged; feedback and the change
    event still follow a committed mutation.
    """
    
    def __init__(
        self,
        persistence: PersistenceManager,
        reminders: ReminderScheduler,
        feedback: FeedbackManager,
        channel: Optional[LogChangeChannel] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """Initialize the orchestrator.
        
        Args:
            persistence: Store for floss records and the last floss date
            reminders: Scheduler for the daily-streak and inactivity reminders
            feedback: Feedback for add and remove interactions
            channel: Channel receiving change events (a private one if omitted)
            clock: Returns the current time
        """
        self.persistence = persistence
        self.reminders = reminders
        self.feedback = feedback
        self.channel = channel or LogChangeChannel()
        self.clock = clock
    
    def handle_log_record(self, log_date: datetime) -> FlossRecord:
        """Log a floss for the given moment.
        
        Backfilled dates keep their calendar day but take the current hour
        and minute, so later same-day comparisons behave consistently.
        
        Args:
            log_date: When the user flossed; now or an earlier day
            
        Returns:
            The stored record
            
        Raises:
            PersistenceError: If the record cannot be written
        """
        now = self.clock()
        timestamp = self._normalize(log_date, now)
        
        self.feedback.celebrate()
        record = self.persistence.save_floss_date(timestamp)
        self._schedule_reminders(timestamp, now)
        
        self.channel.publish(LogChangeEvent(
            kind=LogChangeKind.ADDED,
            timestamp=timestamp,
            record_ids=(record.id,)
        ))
        return record
    
    def remove_log_record(self, record: FlossRecord) -> None:
        """Remove one record.
        
        The pending daily-streak reminder is cancelled only when the record
        was logged today and no other record remains for today.
        
        Raises:
            PersistenceError: If the record cannot be deleted
        """
        self.persistence.delete_floss_record(record)
        
        if is_today(record.timestamp, self.clock()):
            self._cancel_streak_reminder_if_day_empty(record)
        
        self.feedback.acknowledge_removal()
        self.channel.publish(LogChangeEvent(
            kind=LogChangeKind.REMOVED,
            timestamp=record.timestamp,
            record_ids=(record.id,)
        ))
    
    def remove_all_log_records(self, day: Union[datetime, date]) -> List[FlossRecord]:
        """Remove every record logged on a calendar day.
        
        Args:
            day: Any moment on the target day
            
        Returns:
            The removed records
            
        Raises:
            PersistenceError: If the records cannot be deleted
        """
        selected = [
            record for record in self._fetch_records_or_empty()
            if is_same_day(record.timestamp, day)
        ]
        
        self.persistence.delete_floss_records(selected)
        self.feedback.acknowledge_removal()
        
        if is_today(day, self.clock()):
            self._update_reminders(self.reminders.cancel_daily_streak_reminder)
        
        self.channel.publish(LogChangeEvent(
            kind=LogChangeKind.DAY_CLEARED,
            timestamp=day if isinstance(day, datetime) else datetime(day.year, day.month, day.day),
            record_ids=tuple(record.id for record in selected)
        ))
        return selected
    
    def current_streak(self) -> StreakInfo:
        """Classify the streak from the stored log."""
        records = self._fetch_records_or_empty()
        return calculate_current_streak(
            (record.timestamp for record in records),
            now=self.clock()
        )
    
    @staticmethod
    def _normalize(log_date: datetime, now: datetime) -> datetime:
        """Stamp a backfilled date with the current hour and minute."""
        if is_today(log_date, now):
            return log_date
        return log_date.replace(hour=now.hour, minute=now.minute, second=0, microsecond=0)
    
    def _schedule_reminders(self, timestamp: datetime, now: datetime) -> None:
        # A backfill leaves today possibly unflossed, so the streak track is untouched
        if not is_today(timestamp, now):
            self._update_reminders(self.reminders.schedule_inactivity_reminders)
            return
        
        records = self._fetch_records_or_empty()
        streak = calculate_current_streak((r.timestamp for r in records), now=now)
        logger.debug("Streak after logging: %s (%d days)", streak.state.value, streak.days)
        self._update_reminders(self.reminders.schedule_daily_streak_reminder, streak.days)
    
    def _cancel_streak_reminder_if_day_empty(self, removed: FlossRecord) -> None:
        removed_signature = calendar_signature(removed.timestamp)
        remaining_days = {
            calendar_signature(record.timestamp)
            for record in self._fetch_records_or_empty()
            if record.id != removed.id
        }
        
        if removed_signature not in remaining_days:
            self._update_reminders(self.reminders.cancel_daily_streak_reminder)
    
    def _fetch_records_or_empty(self) -> List[FlossRecord]:
        try:
            return self.persistence.get_floss_records()
        except PersistenceError as e:
            logger.warning("Failed to fetch floss records, treating log as empty: %s", e)
            return []
    
    def _update_reminders(self, update: Callable[..., object], *args) -> None:
        try:
            update(*args)
        except PersistenceError as e:
            logger.warning("Failed to update reminders, keeping committed change: %s", e)
