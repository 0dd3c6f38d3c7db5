"""
Interaction feedback.

Terminal stand-in for device haptics: each preferred feedback style maps to
a styled console line, and the long style also rings the bell.
"""

import logging
from typing import Optional

from rich.console import Console

from ..config.loader import FeedbackConfig, FeedbackOption

logger = logging.getLogger(__name__)

# success, warning and error styles, as on the device
_STYLES = {
    FeedbackOption.SHORT: "green",
    FeedbackOption.MEDIUM: "yellow",
    FeedbackOption.LONG: "bold magenta",
}


class FeedbackManager:
    """Fire-and-forget feedback for adding and removing log entries."""
    
    def __init__(self, console: Optional[Console] = None, config: Optional[FeedbackConfig] = None):
        self.console = console or Console()
        self.config = config or FeedbackConfig()
    
    def celebrate(self) -> None:
        """Feedback for a newly logged floss."""
        self._emit(self.config.celebration, "✓ Flossed! Nice work.")
    
    def acknowledge_removal(self) -> None:
        """Feedback for removed log entries."""
        self._emit(self.config.deletion, "✗ Log removed.")
    
    def _emit(self, option: FeedbackOption, message: str) -> None:
        if option == FeedbackOption.NONE:
            return
        try:
            self.console.print(f"[{_STYLES[option]}]{message}[/]")
            if option == FeedbackOption.LONG:
                self.console.bell()
        except Exception:
            logger.exception("Failed to emit %s feedback", option.value)
