"""
Unit tests for interaction feedback.
"""

import io
from unittest.mock import Mock

from rich.console import Console

from floss_streak.config.loader import FeedbackConfig, FeedbackOption
from floss_streak.feedback.haptics import FeedbackManager


def make_console() -> Console:
    return Console(file=io.StringIO(), force_terminal=False, width=80)


class TestFeedbackManager:
    """Test feedback per configured option."""
    
    def test_celebrate_prints_message(self):
        console = make_console()
        manager = FeedbackManager(console=console)
        
        manager.celebrate()
        
        assert "Flossed!" in console.file.getvalue()
    
    def test_acknowledge_removal_prints_message(self):
        console = make_console()
        manager = FeedbackManager(console=console)
        
        manager.acknowledge_removal()
        
        assert "Log removed" in console.file.getvalue()
    
    def test_none_option_is_silent(self):
        console = Mock()
        manager = FeedbackManager(
            console=console,
            config=FeedbackConfig(celebration=FeedbackOption.NONE, deletion=FeedbackOption.NONE)
        )
        
        manager.celebrate()
        manager.acknowledge_removal()
        
        console.print.assert_not_called()
        console.bell.assert_not_called()
    
    def test_long_option_rings_bell(self):
        console = Mock()
        manager = FeedbackManager(console=console, config=FeedbackConfig(celebration=FeedbackOption.LONG))
        
        manager.celebrate()
        
        console.bell.assert_called_once_with()
    
    def test_short_option_does_not_ring_bell(self):
        console = Mock()
        manager = FeedbackManager(console=console, config=FeedbackConfig(deletion=FeedbackOption.SHORT))
        
        manager.acknowledge_removal()
        
        console.print.assert_called_once()
        console.bell.assert_not_called()
    
    def test_console_failure_is_not_raised(self, caplog):
        console = Mock()
        console.print.side_effect = OSError("terminal closed")
        manager = FeedbackManager(console=console)
        
        manager.celebrate()
        
        assert "Failed to emit long feedback" in caplog.text
