"""
Local reminder scheduling for Floss Streak.

Keeps the pending daily-streak and inactivity reminders in sync with the log.
"""

from .scheduler import PendingReminder, ReminderKind, ReminderScheduler

__all__ = ["PendingReminder", "ReminderKind", "ReminderScheduler"]
