"""Logging configuration for the floss_streak logger tree."""

import logging

from .config.loader import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(config: LoggingConfig) -> logging.Logger:
    """Configure console logging for the application.
    
    Args:
        config: Logging section of the application config
        
    Returns:
        Configured package logger
    """
    root_logger = logging.getLogger("floss_streak")
    root_logger.setLevel(getattr(logging, config.level.upper()))
    
    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()
    
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(handler)
    
    return root_logger
