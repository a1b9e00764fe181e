"""
Theme Park Wait Times - Structured Logging
Provides JSON-formatted logging for log aggregation queries.
"""

import logging
import sys
from typing import Optional
from pythonjsonlogger import jsonlogger

from .config import LOG_LEVEL, config


def setup_logger(name: str = __name__) -> logging.Logger:
    """
    Configure structured JSON logger.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logger(__name__)
        >>> logger.info("Run completed", extra={
        ...     "parks_processed": 2,
        ...     "operating_count": 41
        ... })
    """
    logger = logging.getLogger(name)

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    level = getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    formatter = jsonlogger.JsonFormatter(
        '%(asctime)s %(name)s %(levelname)s %(message)s',
        datefmt='%Y-%m-%dT%H:%M:%S'
    )
    handler.setFormatter(formatter)

    logger.addHandler(handler)

    # Don't propagate to root logger
    logger.propagate = False

    return logger


# Global logger instance
logger = setup_logger('themepark_waits')


def log_run_start(resort_name: str, poll_minutes: int):
    """Log the start of an ingestion run."""
    logger.info("Ingestion run started", extra={
        "event_type": "run_start",
        "resort_name": resort_name,
        "poll_minutes": poll_minutes,
        "environment": config.environment
    })


def log_run_complete(duration_seconds: float, parks_processed: int,
                     operating_count: int, parks_failed: int):
    """Log a run that persisted wait times."""
    logger.info("Ingestion run completed", extra={
        "event_type": "run_complete",
        "duration_seconds": duration_seconds,
        "parks_processed": parks_processed,
        "operating_count": operating_count,
        "parks_failed": parks_failed
    })


def log_run_gated(operating_count: int, threshold: int):
    """Log a low-signal run where persistence was skipped."""
    logger.info("Skipping persistence, too few rides operating", extra={
        "event_type": "run_gated",
        "operating_count": operating_count,
        "threshold": threshold
    })


def log_run_skipped(reason: str):
    """Log a trigger that was dropped by the single-flight guard."""
    logger.info("Ingestion run skipped", extra={
        "event_type": "run_skipped",
        "reason": reason
    })


def log_run_error(error: Exception):
    """Log a run that failed outright."""
    logger.error("Ingestion run failed", extra={
        "event_type": "run_error",
        "error_type": type(error).__name__,
        "error_message": str(error)
    }, exc_info=True)


def log_park_error(error: Exception, park_name: Optional[str] = None, stage: str = 'persist'):
    """Log a per-park failure; the run continues with the next park."""
    logger.error("Failed to process park", extra={
        "event_type": "park_error",
        "stage": stage,
        "park_name": park_name,
        "error_type": type(error).__name__,
        "error_message": str(error)
    })


def log_interval_change(old_minutes: int, new_minutes: int, operating_count: int):
    """Log an adaptive polling interval change."""
    logger.info("Polling interval changed", extra={
        "event_type": "interval_change",
        "old_minutes": old_minutes,
        "new_minutes": new_minutes,
        "operating_count": operating_count
    })


def log_database_error(error: Exception, query_context: str = None):
    """Log database error with context."""
    logger.error("Database error", extra={
        "event_type": "database_error",
        "error_type": type(error).__name__,
        "error_message": str(error),
        "query_context": query_context
    }, exc_info=True)
