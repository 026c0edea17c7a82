"""
ToolKit Structured Logging
Stdout sink for loguru plus a thin wrapper that binds per-request fields.
"""
import sys
from typing import Any, Dict, Optional

from loguru import logger

from toolkit.config import config

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message} | {extra}"


class StructuredLogger:
    """Loguru front end for the API layer; ``extra`` fields land in the record."""

    def __init__(self, level: Optional[str] = None, serialize: Optional[bool] = None):
        self.level = level or config.LOG_LEVEL
        self.serialize = config.LOG_JSON if serialize is None else serialize
        self._configure_logger()

    def _configure_logger(self):
        logger.remove()
        logger.add(sys.stdout, format=LOG_FORMAT, level=self.level, serialize=self.serialize)

    def _log(self, level: str, message: str, extra: Optional[Dict[str, Any]]):
        bound = logger.bind(**extra) if extra else logger
        bound.opt(depth=2).log(level, message)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log("INFO", message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log("WARNING", message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log("ERROR", message, extra)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log("DEBUG", message, extra)


# Global logger instance
_logger: Optional[StructuredLogger] = None


def get_logger() -> StructuredLogger:
    """Get or create global logger instance."""
    global _logger
    if _logger is None:
        _logger = StructuredLogger()
    return _logger
