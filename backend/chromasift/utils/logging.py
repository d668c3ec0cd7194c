"""
chromasift Structured Logging
Request-scoped log lines on loguru; extra fields are bound onto the record.
"""
import sys
from typing import Dict, Any, Optional

from loguru import logger

from chromasift.config import config

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message} | {extra}"


class StructuredLogger:
    """Logger used by the palette request handlers."""

    def __init__(self, level: Optional[str] = None):
        self.level = level or config.LOG_LEVEL
        self._configure_logger()

    def _configure_logger(self):
        # Replace loguru's default stderr sink
        logger.remove()
        logger.add(sys.stdout, format=LOG_FORMAT, level=self.level, serialize=False)

    def _log(self, level: str, message: str, extra: Optional[Dict[str, Any]]):
        target = logger.bind(**extra) if extra else logger
        target.log(level, message)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log a request milestone with its context fields."""
        self._log("INFO", message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log a failed request with its context fields."""
        self._log("ERROR", message, extra)


_logger: Optional[StructuredLogger] = None


def get_logger() -> StructuredLogger:
    """Get or create the process-wide request logger."""
    global _logger
    if _logger is None:
        _logger = StructuredLogger()
    return _logger
