"""
Logger module for docstore.

Every module logs through the `logger` defined here, so an application can swap or tune it in one place.
Database failures are logged as a message followed by key=value context, e.g.:
    Mongo Error: Getting item failed. reason=timed out collection=users id=42
"""

import logging
from typing import Any

# Module-level logger
logger: logging.Logger = logging.getLogger('docstore')

def set_logger(custom_logger: logging.Logger) -> None:
    """Allow users to provide their own logger."""
    global logger
    logger = custom_logger

def get_logger() -> logging.Logger:
    """Returns the logger currently in use, including one installed with set_logger()."""
    return logger

def set_log_level(level: int) -> None:
    """Set the logging level for the module. 
    
    Args:
        level: logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, or logging.CRITICAL
    """
    logger.setLevel(level)

def format_fields(**fields: Any) -> str:
    """ Renders context fields as key=value pairs in the order given. None values are left out. """
    return " ".join(f"{key}={value}" for key, value in fields.items() if value is not None)

def log_error(message: str, **fields: Any) -> None:
    """ Logs a database failure with its context fields. """
    context = format_fields(**fields)
    logger.error(f"{message} {context}" if context else message)
