"""
Data models for storage layer.

Defines the floss log entry persisted by the repository.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class FlossRecord:
    """A single flossing event.
    
    The id is assigned once on append and never changes.
    """
    id: str
    timestamp: datetime
    
    def __post_init__(self):
        """Validate the record identity."""
        if not self.id:
            raise ValueError("id is required and cannot be empty")
