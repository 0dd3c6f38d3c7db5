"""
Repository pattern for data access.

Handles the floss_record table and schema creation.
"""

import sqlite3
import uuid
from datetime import datetime
from typing import Iterable, List

from .db import DEFAULT_DB_PATH, get_connection
from .models import FlossRecord


class PersistenceError(Exception):
    """Raised when the store cannot be read or written."""


def initialize_schema(db_path: str = DEFAULT_DB_PATH) -> None:
    """Create the floss log, settings and reminder tables if they don't exist.
    
    Args:
        db_path: Path to SQLite database file
        
    Raises:
        PersistenceError: If the schema cannot be created
    """
    conn = get_connection(db_path)
    try:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS floss_record (
                id TEXT PRIMARY KEY,
                timestamp TEXT NOT NULL
            )
        """)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS app_setting (
                key TEXT PRIMARY KEY,
                value TEXT
            )
        """)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS pending_reminder (
                identifier TEXT PRIMARY KEY,
                kind TEXT NOT NULL,
                fire_at TEXT NOT NULL,
                streak_days INTEGER
            )
        """)
        conn.commit()
    except sqlite3.Error as e:
        raise PersistenceError(f"Failed to initialize schema: {e}") from e
    finally:
        conn.close()


class FlossRecordRepository:
    """Repository for the floss log entries.
    
    Every call opens its own connection, so one instance can be shared
    by the persistence manager for the lifetime of the process.
    """
    
    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        """Initialize the repository with a database path.
        
        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
    
    def append(self, timestamp: datetime) -> FlossRecord:
        """Insert a new record for the given timestamp.
        
        Args:
            timestamp: Moment the user flossed
            
        Returns:
            The stored record with its assigned id
            
        Raises:
            PersistenceError: If the write fails
        """
        record = FlossRecord(id=uuid.uuid4().hex, timestamp=timestamp)
        conn = get_connection(self.db_path)
        try:
            conn.execute(
                "INSERT INTO floss_record (id, timestamp) VALUES (?, ?)",
                (record.id, record.timestamp.isoformat())
            )
            conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to append floss record: {e}") from e
        finally:
            conn.close()
        return record
    
    def fetch_all(self) -> List[FlossRecord]:
        """Fetch every record.
        
        Returns:
            List of records ordered by timestamp (newest first)
            
        Raises:
            PersistenceError: If the read fails or a row cannot be decoded
        """
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT id, timestamp FROM floss_record ORDER BY timestamp DESC"
            )
            return [
                FlossRecord(id=row[0], timestamp=datetime.fromisoformat(row[1]))
                for row in cursor.fetchall()
            ]
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to fetch floss records: {e}") from e
        except (ValueError, TypeError) as e:
            raise PersistenceError(f"Corrupt floss record row: {e}") from e
        finally:
            conn.close()
    
    def remove(self, record_id: str) -> None:
        """Delete a single record. Unknown ids are ignored."""
        self.remove_many([record_id])
    
    def remove_many(self, record_ids: Iterable[str]) -> None:
        """Delete several records atomically.
        
        Args:
            record_ids: Ids of the records to delete
            
        Raises:
            PersistenceError: If the write fails; no record is deleted then
        """
        ids = list(record_ids)
        if not ids:
            return
        
        conn = get_connection(self.db_path)
        try:
            conn.execute("BEGIN TRANSACTION")
            conn.executemany(
                "DELETE FROM floss_record WHERE id = ?",
                [(record_id,) for record_id in ids]
            )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise PersistenceError(f"Failed to remove floss records: {e}") from e
        finally:
            conn.close()
    
    def erase(self) -> None:
        """Delete every record."""
        conn = get_connection(self.db_path)
        try:
            conn.execute("DELETE FROM floss_record")
            conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to erase floss records: {e}") from e
        finally:
            conn.close()
