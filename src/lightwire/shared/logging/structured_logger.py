"""
Structured logger implementation.

This module provides a structured logging implementation that
formats log messages as one JSON object per line.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO

from .log_formatter import LogFormatter
from .logger_interface import LoggerInterface, LogLevel


class StructuredLogger(LoggerInterface):
    """
    Structured logger implementation.

    Records go through the standard ``logging`` module, so handlers and
    levels configured by the host application still apply.
    """

    def __init__(
        self,
        name: str,
        level: LogLevel = LogLevel.WARNING,
        output: Optional[TextIO] = None
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Initial log level
            output: Optional stream for a dedicated handler
        """
        self.name = name
        self._level = level
        self._context: Dict[str, Any] = {}

        self._logger = logging.getLogger(name)
        self._logger.setLevel(level.numeric)

        if output is not None and not any(
            getattr(handler, "stream", None) is output
            for handler in self._logger.handlers
        ):
            handler = logging.StreamHandler(output)
            handler.setFormatter(logging.Formatter('%(message)s'))
            self._logger.addHandler(handler)

    def _log(
        self,
        level: LogLevel,
        message: str,
        exc_info: Optional[BaseException] = None,
        **kwargs: Any
    ) -> None:
        if level.numeric < self._level.numeric:
            return

        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level.value,
            "logger": self.name,
            "message": message,
            "context": LogFormatter.format_context({**self._context, **kwargs})
        }

        if exc_info is not None:
            log_entry["exception"] = LogFormatter.format_error(exc_info)

        self._logger.log(level.numeric, json.dumps(log_entry))

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log a debug message."""
        self._log(LogLevel.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log an info message."""
        self._log(LogLevel.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a warning message."""
        self._log(LogLevel.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log an error message."""
        self._log(LogLevel.ERROR, message, **kwargs)

    def exception(self, message: str, exc_info: Optional[BaseException] = None, **kwargs: Any) -> None:
        """Log an exception."""
        self._log(LogLevel.ERROR, message, exc_info=exc_info, **kwargs)

    def set_level(self, level: LogLevel) -> None:
        """Set the logging level."""
        self._level = level
        self._logger.setLevel(level.numeric)

    def get_level(self) -> LogLevel:
        """Get the current logging level."""
        return self._level

    def add_context(self, **kwargs: Any) -> None:
        """Add context data."""
        self._context.update(kwargs)

    def get_context(self) -> Dict[str, Any]:
        """Get the current context data."""
        return self._context.copy()


def configure_logging(
    name: str = "lightwire",
    level: LogLevel = LogLevel.WARNING,
    output: Optional[TextIO] = None
) -> StructuredLogger:
    """
    Configure and return a StructuredLogger instance.

    Args:
        name: Logger name
        level: Logging level
        output: Optional stream for a dedicated handler, e.g. ``sys.stderr``

    Returns:
        StructuredLogger: Configured logger instance
    """
    return StructuredLogger(name=name, level=level, output=output)
