"""
Core modules for Floss Streak.

This package contains the streak classification, calendar helpers and the
log interaction orchestrator that coordinates persistence and reminders.
"""
