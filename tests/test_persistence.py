"""
Unit tests for the persistence manager.

Tests that the last floss date always matches the newest record.
"""

import os
import tempfile
from datetime import datetime

import pytest

from floss_streak.storage.persistence import PersistenceManager
from floss_streak.storage.repository import (
    FlossRecordRepository,
    PersistenceError,
    initialize_schema
)
from floss_streak.storage.settings import LAST_FLOSS_DATE_KEY, SettingsStore


class TestPersistenceManager:
    """Test record persistence and last floss date upkeep."""
    
    def setup_method(self):
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()
        self.db_path = os.path.join(self.temp_dir, "test.db")
        initialize_schema(self.db_path)
        self.manager = PersistenceManager(
            records=FlossRecordRepository(self.db_path),
            settings=SettingsStore(self.db_path)
        )
    
    def teardown_method(self):
        """Clean up test environment."""
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)
    
    def test_no_records_no_last_date(self):
        assert self.manager.get_last_floss_date() is None
        assert self.manager.get_floss_records() == []
    
    def test_first_save_sets_last_date(self):
        timestamp = datetime(2024, 3, 15, 9, 0)
        
        record = self.manager.save_floss_date(timestamp)
        
        assert record.timestamp == timestamp
        assert self.manager.get_last_floss_date() == timestamp
    
    def test_newer_save_raises_last_date(self):
        self.manager.save_floss_date(datetime(2024, 3, 14, 9, 0))
        self.manager.save_floss_date(datetime(2024, 3, 15, 9, 0))
        
        assert self.manager.get_last_floss_date() == datetime(2024, 3, 15, 9, 0)
    
    def test_backfill_keeps_last_date(self):
        self.manager.save_floss_date(datetime(2024, 3, 15, 9, 0))
        self.manager.save_floss_date(datetime(2024, 3, 10, 9, 0))
        
        assert self.manager.get_last_floss_date() == datetime(2024, 3, 15, 9, 0)
    
    def test_deleting_newest_recomputes_last_date(self):
        self.manager.save_floss_date(datetime(2024, 3, 13, 9, 0))
        self.manager.save_floss_date(datetime(2024, 3, 14, 9, 0))
        newest = self.manager.save_floss_date(datetime(2024, 3, 15, 9, 0))
        
        self.manager.delete_floss_record(newest)
        
        assert self.manager.get_last_floss_date() == datetime(2024, 3, 14, 9, 0)
    
    def test_deleting_older_keeps_last_date(self):
        older = self.manager.save_floss_date(datetime(2024, 3, 13, 9, 0))
        self.manager.save_floss_date(datetime(2024, 3, 15, 9, 0))
        
        self.manager.delete_floss_record(older)
        
        assert self.manager.get_last_floss_date() == datetime(2024, 3, 15, 9, 0)
    
    def test_deleting_last_record_clears_last_date(self):
        record = self.manager.save_floss_date(datetime(2024, 3, 15, 9, 0))
        
        self.manager.delete_floss_record(record)
        
        assert self.manager.get_last_floss_date() is None
        assert self.manager.get_floss_records() == []
    
    def test_deleting_newest_with_same_timestamp_twin(self):
        timestamp = datetime(2024, 3, 15, 9, 0)
        first = self.manager.save_floss_date(timestamp)
        self.manager.save_floss_date(timestamp)
        
        self.manager.delete_floss_record(first)
        
        assert self.manager.get_last_floss_date() == timestamp
    
    def test_delete_many_recomputes_once(self):
        self.manager.save_floss_date(datetime(2024, 3, 12, 9, 0))
        day_records = [
            self.manager.save_floss_date(datetime(2024, 3, 15, 8, 0)),
            self.manager.save_floss_date(datetime(2024, 3, 15, 21, 0)),
        ]
        
        self.manager.delete_floss_records(day_records)
        
        assert len(self.manager.get_floss_records()) == 1
        assert self.manager.get_last_floss_date() == datetime(2024, 3, 12, 9, 0)
    
    def test_delete_empty_list_is_noop(self):
        self.manager.save_floss_date(datetime(2024, 3, 15, 9, 0))
        
        self.manager.delete_floss_records([])
        
        assert self.manager.get_last_floss_date() == datetime(2024, 3, 15, 9, 0)
    
    def test_erase_data(self):
        self.manager.save_floss_date(datetime(2024, 3, 14, 9, 0))
        self.manager.save_floss_date(datetime(2024, 3, 15, 9, 0))
        
        self.manager.erase_data()
        
        assert self.manager.get_floss_records() == []
        assert self.manager.get_last_floss_date() is None
    
    def test_read_failure_propagates(self):
        manager = PersistenceManager(
            records=FlossRecordRepository(os.path.join(self.temp_dir, "missing.db")),
            settings=SettingsStore(self.db_path)
        )
        
        with pytest.raises(PersistenceError):
            manager.get_floss_records()
    
    def test_corrupt_last_date_raises_persistence_error(self):
        SettingsStore(self.db_path).set(LAST_FLOSS_DATE_KEY, "garbage")
        
        with pytest.raises(PersistenceError, match="Corrupt LAST_FLOSS_DATE setting"):
            self.manager.get_last_floss_date()
