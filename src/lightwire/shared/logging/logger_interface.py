"""
Logger interface for the container.

This module defines the logging contract the container writes to, so a
caller can plug in their own logger when constructing a container.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional


class LogLevel(Enum):
    """Standard log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @property
    def numeric(self) -> int:
        """Numeric level understood by the standard logging module."""
        return logging.getLevelName(self.value)


class LoggerInterface(ABC):
    """
    Interface for logging implementations.

    Context passed as keyword arguments is attached to the record rather
    than interpolated into the message.
    """

    @abstractmethod
    def debug(self, message: str, **kwargs: Any) -> None:
        """Log a debug message."""
        pass

    @abstractmethod
    def info(self, message: str, **kwargs: Any) -> None:
        """Log an info message."""
        pass

    @abstractmethod
    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a warning message."""
        pass

    @abstractmethod
    def error(self, message: str, **kwargs: Any) -> None:
        """Log an error message."""
        pass

    @abstractmethod
    def exception(self, message: str, exc_info: Optional[BaseException] = None, **kwargs: Any) -> None:
        """
        Log an exception.

        Args:
            message: The message to log
            exc_info: Optional exception to log
            **kwargs: Additional context data
        """
        pass

    @abstractmethod
    def set_level(self, level: LogLevel) -> None:
        """Set the logging level."""
        pass

    @abstractmethod
    def get_level(self) -> LogLevel:
        """Get the current logging level."""
        pass

    @abstractmethod
    def add_context(self, **kwargs: Any) -> None:
        """
        Add context data to all subsequent log messages.

        Args:
            **kwargs: Context data to add
        """
        pass

    @abstractmethod
    def get_context(self) -> Dict[str, Any]:
        """
        Get the current context data.

        Returns:
            Dict[str, Any]: Current context data
        """
        pass
