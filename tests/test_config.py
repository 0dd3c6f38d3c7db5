"""
Unit tests for configuration loading and validation.

Tests defaults, strict key validation and value checks.
"""

import os
import tempfile

import pytest
import yaml

from floss_streak.config.loader import (
    AppConfig,
    FeedbackConfig,
    FeedbackOption,
    LoggingConfig,
    ReminderConfig,
    StorageConfig,
    load_app_config
)


class TestConfigLoading:
    """Test configuration loading and validation."""
    
    def setup_method(self):
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()
    
    def teardown_method(self):
        """Clean up test environment."""
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)
    
    def _write_config(self, config_data, filename: str = "config.yaml") -> str:
        """Write configuration data to temporary file."""
        config_path = os.path.join(self.temp_dir, filename)
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(config_data, f)
        return config_path
    
    def test_no_path_returns_defaults(self):
        config = load_app_config()
        
        assert config == AppConfig()
        assert config.storage.db_path == "floss_streak.db"
        assert config.reminders.daily_streak_hour == 21
        assert config.reminders.inactivity_offsets_days == (2, 4, 7)
        assert config.feedback.celebration == FeedbackOption.LONG
        assert config.feedback.deletion == FeedbackOption.SHORT
        assert config.logging.level == "warning"
    
    def test_valid_config_loads_correctly(self):
        config_data = {
            "storage": {"db_path": "/tmp/floss.db"},
            "reminders": {
                "daily_streak_hour": 20,
                "daily_streak_minute": 15,
                "inactivity_offsets_days": [1, 3]
            },
            "feedback": {"celebration": "MEDIUM", "deletion": "none"},
            "logging": {"level": "DEBUG"}
        }
        
        config = load_app_config(self._write_config(config_data))
        
        assert config.storage == StorageConfig(db_path="/tmp/floss.db")
        assert config.reminders == ReminderConfig(
            daily_streak_hour=20, daily_streak_minute=15, inactivity_offsets_days=(1, 3)
        )
        assert config.feedback == FeedbackConfig(
            celebration=FeedbackOption.MEDIUM, deletion=FeedbackOption.NONE
        )
        assert config.logging == LoggingConfig(level="debug")
    
    def test_partial_config_keeps_other_defaults(self):
        config = load_app_config(self._write_config({"reminders": {"daily_streak_hour": 7}}))
        
        assert config.reminders.daily_streak_hour == 7
        assert config.reminders.daily_streak_minute == 0
        assert config.storage == StorageConfig()
    
    def test_empty_file_returns_defaults(self):
        config_path = os.path.join(self.temp_dir, "empty.yaml")
        open(config_path, 'w').close()
        
        assert load_app_config(config_path) == AppConfig()
    
    def test_missing_file(self):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_app_config(os.path.join(self.temp_dir, "nope.yaml"))
    
    def test_invalid_yaml(self):
        config_path = os.path.join(self.temp_dir, "bad.yaml")
        with open(config_path, 'w', encoding='utf-8') as f:
            f.write("storage: [unclosed\n")
        
        with pytest.raises(yaml.YAMLError, match="Invalid YAML"):
            load_app_config(config_path)
    
    def test_non_mapping_config(self):
        with pytest.raises(ValueError, match="must be a dictionary"):
            load_app_config(self._write_config(["a", "b"]))
    
    def test_unknown_top_level_key(self):
        with pytest.raises(ValueError, match="Unknown configuration keys"):
            load_app_config(self._write_config({"reminder": {}}))
    
    def test_unknown_section_key(self):
        with pytest.raises(ValueError, match="Unknown keys in reminders"):
            load_app_config(self._write_config({"reminders": {"hour": 3}}))
    
    def test_section_must_be_mapping(self):
        with pytest.raises(ValueError, match="'feedback' must be a dictionary"):
            load_app_config(self._write_config({"feedback": "loud"}))
    
    @pytest.mark.parametrize("hour", [-1, 24])
    def test_hour_out_of_range(self, hour):
        with pytest.raises(ValueError, match="daily_streak_hour must be between 0 and 23"):
            load_app_config(self._write_config({"reminders": {"daily_streak_hour": hour}}))
    
    def test_minute_out_of_range(self):
        with pytest.raises(ValueError, match="daily_streak_minute must be between 0 and 59"):
            load_app_config(self._write_config({"reminders": {"daily_streak_minute": 60}}))
    
    def test_hour_must_be_integer(self):
        with pytest.raises(ValueError, match="must be an integer"):
            load_app_config(self._write_config({"reminders": {"daily_streak_hour": "21"}}))
    
    def test_offsets_must_be_list(self):
        with pytest.raises(ValueError, match="must be a list"):
            load_app_config(self._write_config({"reminders": {"inactivity_offsets_days": 3}}))
    
    @pytest.mark.parametrize("offsets,message", [
        ([], "cannot be empty"),
        ([0, 2], "must be > 0"),
        ([2, 2], "must be unique"),
        ([1.5], "must contain integers"),
    ])
    def test_invalid_offsets(self, offsets, message):
        with pytest.raises(ValueError, match=message):
            load_app_config(self._write_config({"reminders": {"inactivity_offsets_days": offsets}}))
    
    def test_invalid_feedback_option(self):
        with pytest.raises(ValueError, match="must be one of"):
            load_app_config(self._write_config({"feedback": {"celebration": "thunder"}}))
    
    def test_invalid_log_level(self):
        with pytest.raises(ValueError, match="level must be one of"):
            load_app_config(self._write_config({"logging": {"level": "verbose"}}))
    
    def test_empty_db_path(self):
        with pytest.raises(ValueError, match="db_path cannot be empty"):
            load_app_config(self._write_config({"storage": {"db_path": " "}}))
