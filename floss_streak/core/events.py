"""
Log change notifications.

Listeners subscribe to a channel and receive a typed event after each
committed log mutation.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Tuple

logger = logging.getLogger(__name__)


class LogChangeKind(Enum):
    """Kinds of committed log mutations."""
    ADDED = "added"
    REMOVED = "removed"
    DAY_CLEARED = "day_cleared"


@dataclass(frozen=True)
class LogChangeEvent:
    """A committed change to the floss log."""
    kind: LogChangeKind
    timestamp: datetime
    record_ids: Tuple[str, ...]


Listener = Callable[[LogChangeEvent], None]


class LogChangeChannel:
    """In-process channel for log change events."""
    
    def __init__(self):
        self._listeners: List[Listener] = []
    
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener.
        
        Args:
            listener: Callable receiving each published event
            
        Returns:
            A callable that removes the listener again
        """
        self._listeners.append(listener)
        
        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        
        return _unsubscribe
    
    def publish(self, event: LogChangeEvent) -> None:
        """Deliver an event to every listener in subscription order.
        
        A failing listener is logged and does not prevent delivery to the rest.
        """
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Log change listener failed for %s event", event.kind.value)
