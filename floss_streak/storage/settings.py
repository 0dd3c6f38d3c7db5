"""
Key-value settings store.

Backs small scalar values such as the last floss date.
"""

import sqlite3
from typing import Optional

from .db import DEFAULT_DB_PATH, get_connection
from .repository import PersistenceError

LAST_FLOSS_DATE_KEY = "LAST_FLOSS_DATE"


class SettingsStore:
    """String settings kept in the app_setting table."""
    
    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        self.db_path = db_path
    
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is unset."""
        conn = get_connection(self.db_path)
        try:
            row = conn.execute(
                "SELECT value FROM app_setting WHERE key = ?", (key,)
            ).fetchone()
            return row[0] if row else None
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to read setting {key}: {e}") from e
        finally:
            conn.close()
    
    def set(self, key: str, value: Optional[str]) -> None:
        """Store a value. Passing None removes the key."""
        conn = get_connection(self.db_path)
        try:
            if value is None:
                conn.execute("DELETE FROM app_setting WHERE key = ?", (key,))
            else:
                conn.execute(
                    "INSERT OR REPLACE INTO app_setting (key, value) VALUES (?, ?)",
                    (key, value)
                )
            conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to write setting {key}: {e}") from e
        finally:
            conn.close()
