"""
Database connection management.

Provides SQLite connection for the floss log, settings and reminders.
"""

import sqlite3
from pathlib import Path

DEFAULT_DB_PATH = "floss_streak.db"


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Create and return a SQLite database connection with foreign keys enabled.
    
    Args:
        db_path: Path to SQLite database file
        
    Returns:
        SQLite connection with foreign key constraints enabled
    """
    path = Path(db_path).expanduser()
    conn = sqlite3.connect(str(path))
    conn.execute("PRAGMA foreign_keys = ON")
    return conn
