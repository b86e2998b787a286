"""Logging configuration for the QuickLink service."""

import json
import logging
import sys
from typing import Optional


LOGGER_NAME = "quicklink_app"


class JsonFormatter(logging.Formatter):
    """One JSON object per line; fields are escaped by json.dumps"""
    
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
) -> logging.Logger:
    """Setup logging configuration.
    
    Every module logs through ``logging.getLogger(__name__)``, so configuring
    the package logger here covers the whole application.
    
    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path
        json_format: Whether to use JSON format
        
    Returns:
        Configured logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    
    # Remove existing handlers so repeated app creation doesn't duplicate output
    logger.handlers.clear()
    
    if json_format:
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    
    return logger
