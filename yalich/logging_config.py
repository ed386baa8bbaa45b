"""Logging configuration for yalich."""

import logging
import os
import sys
from typing import Any, Dict

DEFAULT_LOG_LEVEL = os.getenv("YALICH_LOG_LEVEL", "INFO")


def _level_number(level: str) -> int:
    """Map a level name to its number; unknown names fall back to INFO."""
    number = logging.getLevelName(level.upper())
    return number if isinstance(number, int) else logging.INFO


def setup_logging(level: str = DEFAULT_LOG_LEVEL, structured: bool = False) -> logging.Logger:
    """
    Set up logging configuration.

    Log records go to stderr; stdout is reserved for the license table.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        structured: Whether to use structured JSON logging

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger("yalich")

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    logger.setLevel(_level_number(level))

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.NOTSET)

    if structured:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            "[%(asctime)s] %(levelname)s - %(name)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )

    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


def set_log_level(level: str) -> None:
    """Change the level of the package logger after setup."""
    logger.setLevel(_level_number(level))


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        import json
        from datetime import datetime

        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


# Global logger instance
logger = setup_logging()
