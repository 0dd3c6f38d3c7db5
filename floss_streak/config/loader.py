"""
Configuration management and loading.

Handles storage, reminder, feedback and logging settings.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Tuple

import yaml

from floss_streak.storage.db import DEFAULT_DB_PATH


class FeedbackOption(Enum):
    """Feedback styles for log interactions."""
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"
    NONE = "none"


LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass(frozen=True)
class StorageConfig:
    """Where the floss log lives."""
    db_path: str = DEFAULT_DB_PATH
    
    def __post_init__(self):
        if not self.db_path or not self.db_path.strip():
            raise ValueError("db_path cannot be empty")


@dataclass(frozen=True)
class ReminderConfig:
    """When reminders fire."""
    daily_streak_hour: int = 21
    daily_streak_minute: int = 0
    inactivity_offsets_days: Tuple[int, ...] = (2, 4, 7)
    
    def __post_init__(self):
        """Validate reminder times and offsets."""
        if not 0 <= self.daily_streak_hour <= 23:
            raise ValueError("daily_streak_hour must be between 0 and 23")
        if not 0 <= self.daily_streak_minute <= 59:
            raise ValueError("daily_streak_minute must be between 0 and 59")
        if not self.inactivity_offsets_days:
            raise ValueError("inactivity_offsets_days cannot be empty")
        if any(offset <= 0 for offset in self.inactivity_offsets_days):
            raise ValueError("inactivity_offsets_days must be > 0")
        if len(set(self.inactivity_offsets_days)) != len(self.inactivity_offsets_days):
            raise ValueError("inactivity_offsets_days must be unique")


@dataclass(frozen=True)
class FeedbackConfig:
    """Preferred feedback per interaction."""
    celebration: FeedbackOption = FeedbackOption.LONG
    deletion: FeedbackOption = FeedbackOption.SHORT


@dataclass(frozen=True)
class LoggingConfig:
    """Log verbosity."""
    level: str = "warning"
    
    def __post_init__(self):
        if self.level not in LOG_LEVELS:
            raise ValueError(f"level must be one of: {list(LOG_LEVELS)}")


@dataclass(frozen=True)
class AppConfig:
    """Complete application configuration."""
    storage: StorageConfig = field(default_factory=StorageConfig)
    reminders: ReminderConfig = field(default_factory=ReminderConfig)
    feedback: FeedbackConfig = field(default_factory=FeedbackConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_app_config(path: Optional[str] = None) -> AppConfig:
    """Load and validate application configuration from a YAML file.
    
    Every section is optional and falls back to its defaults, but unknown
    keys are rejected so typos don't silently disable a setting.
    
    Args:
        path: Path to YAML configuration file, or None for defaults
        
    Returns:
        Validated AppConfig object
        
    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    if path is None:
        return AppConfig()
    
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    
    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")
    
    if raw_config is None:
        return AppConfig()
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration must be a dictionary")
    
    allowed_top_keys = {'storage', 'reminders', 'feedback', 'logging'}
    unknown_keys = set(raw_config.keys()) - allowed_top_keys
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")
    
    storage_data = _section(raw_config, 'storage', {'db_path'})
    reminders_data = _section(
        raw_config, 'reminders',
        {'daily_streak_hour', 'daily_streak_minute', 'inactivity_offsets_days'}
    )
    feedback_data = _section(raw_config, 'feedback', {'celebration', 'deletion'})
    logging_data = _section(raw_config, 'logging', {'level'})
    
    storage = StorageConfig(**_parse_storage(storage_data))
    reminders = ReminderConfig(**_parse_reminders(reminders_data))
    feedback = FeedbackConfig(**{
        key: _parse_feedback_option(value, f"feedback.{key}")
        for key, value in feedback_data.items()
    })
    
    logging_kwargs = {}
    if 'level' in logging_data:
        level = logging_data['level']
        if not isinstance(level, str):
            raise ValueError("'level' in logging must be a string")
        logging_kwargs['level'] = level.lower()
    
    return AppConfig(
        storage=storage,
        reminders=reminders,
        feedback=feedback,
        logging=LoggingConfig(**logging_kwargs)
    )


def _section(raw_config: Dict, name: str, allowed_keys: set) -> Dict:
    """Return a validated section, or an empty dict when absent."""
    data = raw_config.get(name)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"'{name}' must be a dictionary")
    
    unknown_keys = set(data.keys()) - allowed_keys
    if unknown_keys:
        raise ValueError(f"Unknown keys in {name}: {unknown_keys}")
    return data


def _parse_storage(data: Dict) -> Dict:
    if 'db_path' in data and not isinstance(data['db_path'], str):
        raise ValueError("'db_path' in storage must be a string")
    return dict(data)


def _parse_reminders(data: Dict) -> Dict:
    """Check types of reminder settings; ranges are checked by ReminderConfig."""
    parsed = {}
    for key in ('daily_streak_hour', 'daily_streak_minute'):
        if key in data:
            value = data[key]
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"'{key}' in reminders must be an integer")
            parsed[key] = value
    
    if 'inactivity_offsets_days' in data:
        offsets = data['inactivity_offsets_days']
        if not isinstance(offsets, list):
            raise ValueError("'inactivity_offsets_days' in reminders must be a list")
        for offset in offsets:
            if not isinstance(offset, int) or isinstance(offset, bool):
                raise ValueError("'inactivity_offsets_days' in reminders must contain integers")
        parsed['inactivity_offsets_days'] = tuple(offsets)
    
    return parsed


def _parse_feedback_option(value, path: str) -> FeedbackOption:
    if not isinstance(value, str):
        raise ValueError(f"'{path}' must be a string")
    try:
        return FeedbackOption(value.lower())
    except ValueError:
        valid_options = [option.value for option in FeedbackOption]
        raise ValueError(f"'{path}' must be one of: {valid_options}")
