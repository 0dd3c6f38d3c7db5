"""Floss Streak: a floss log with streak tracking and reminder scheduling."""

__version__ = "0.1.0"
