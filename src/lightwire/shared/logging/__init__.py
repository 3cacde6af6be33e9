"""
Structured logging for lightwire.
"""

from .log_formatter import LogFormatter
from .logger_interface import LoggerInterface, LogLevel
from .structured_logger import StructuredLogger, configure_logging

__all__ = [
    'LogFormatter',
    'LoggerInterface',
    'LogLevel',
    'StructuredLogger',
    'configure_logging'
]
