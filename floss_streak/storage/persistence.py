"""
Persistence manager for the floss log.

Combines the record repository with the settings store and keeps the
last floss date equal to the newest record in the log.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from .models import FlossRecord
from .repository import FlossRecordRepository, PersistenceError
from .settings import LAST_FLOSS_DATE_KEY, SettingsStore

logger = logging.getLogger(__name__)


class PersistenceManager:
    """Single mutator of the floss log and the last floss date.
    
    Build one instance at the entry point and inject it wherever the log
    is needed.
    """
    
    def __init__(self, records: FlossRecordRepository, settings: SettingsStore):
        """Initialize the manager.
        
        Args:
            records: Repository holding the floss records
            settings: Store holding the last floss date
        """
        self.records = records
        self.settings = settings
    
    def get_last_floss_date(self) -> Optional[datetime]:
        """Return the newest logged timestamp, or None if nothing is logged.
        
        Raises:
            PersistenceError: If the setting cannot be read or decoded
        """
        raw = self.settings.get(LAST_FLOSS_DATE_KEY)
        if not raw:
            return None
        try:
            return datetime.fromisoformat(raw)
        except ValueError as e:
            raise PersistenceError(f"Corrupt {LAST_FLOSS_DATE_KEY} setting: {e}") from e
    
    def _update_last_floss_date(self, timestamp: Optional[datetime]) -> None:
        self.settings.set(
            LAST_FLOSS_DATE_KEY,
            timestamp.isoformat() if timestamp else None
        )
    
    def get_floss_records(self) -> List[FlossRecord]:
        """Fetch every record, newest first.
        
        Raises:
            PersistenceError: If the store cannot be read
        """
        return self.records.fetch_all()
    
    def save_floss_date(self, timestamp: datetime) -> FlossRecord:
        """Append a record and raise the last floss date if needed.
        
        Args:
            timestamp: Moment the user flossed
            
        Returns:
            The stored record
            
        Raises:
            PersistenceError: If either write fails
        """
        record = self.records.append(timestamp)
        
        last_floss_date = self.get_last_floss_date()
        if last_floss_date is None or timestamp > last_floss_date:
            self._update_last_floss_date(timestamp)
        
        logger.debug("Saved floss record %s at %s", record.id, timestamp.isoformat())
        return record
    
    def delete_floss_record(self, record: FlossRecord) -> None:
        """Delete one record, recomputing the last floss date if it was the newest."""
        self.delete_floss_records([record])
    
    def delete_floss_records(self, records: Iterable[FlossRecord]) -> None:
        """Delete several records in one transaction.
        
        When the newest record is among them the last floss date is
        recomputed from the remaining records, or cleared if none remain.
        
        Raises:
            PersistenceError: If the store cannot be written
        """
        records = list(records)
        if not records:
            return
        
        last_floss_date = self.get_last_floss_date()
        self.records.remove_many(record.id for record in records)
        
        if last_floss_date is None or any(r.timestamp == last_floss_date for r in records):
            remaining = self.records.fetch_all()
            newest = max((r.timestamp for r in remaining), default=None)
            self._update_last_floss_date(newest)
        
        logger.debug("Deleted %d floss record(s)", len(records))
    
    def erase_data(self) -> None:
        """Erase every record and the last floss date."""
        self.records.erase()
        self._update_last_floss_date(None)
        logger.warning("All floss records erased")
