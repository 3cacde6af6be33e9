"""
Log formatter for consistent message formatting.

This module provides helpers that turn types, exceptions and context
into JSON-friendly values for the structured logger.
"""

import traceback
from typing import Any, Dict, Optional


class LogFormatter:
    """Formatting helpers used by the structured logger and the container."""

    @staticmethod
    def format_type(type_: Any) -> str:
        """
        Format a class as its qualified name.

        Args:
            type_: Class (or any object) to format

        Returns:
            str: ``module.QualName`` for classes, ``repr`` otherwise
        """
        if isinstance(type_, type):
            return f"{type_.__module__}.{type_.__qualname__}"
        return repr(type_)

    @staticmethod
    def format_error(
        error: BaseException,
        include_traceback: bool = True
    ) -> Dict[str, Any]:
        """
        Format an error for logging.

        Args:
            error: The error to format
            include_traceback: Whether to include traceback

        Returns:
            Dict[str, Any]: Formatted error
        """
        formatted = {
            "type": error.__class__.__name__,
            "message": str(error)
        }

        if include_traceback:
            formatted["traceback"] = traceback.format_exception(
                type(error),
                error,
                error.__traceback__
            )

        return formatted

    @classmethod
    def format_context(
        cls,
        context: Dict[str, Any],
        exclude_keys: Optional[set] = None
    ) -> Dict[str, Any]:
        """
        Format context data for logging.

        Classes are rendered by name, other values are left untouched
        when JSON can encode them and stringified otherwise.

        Args:
            context: Context data to format
            exclude_keys: Optional set of keys to exclude

        Returns:
            Dict[str, Any]: Formatted context
        """
        exclude_keys = exclude_keys or set()
        formatted = {}
        for key, value in context.items():
            if key in exclude_keys:
                continue
            if isinstance(value, type):
                formatted[key] = cls.format_type(value)
            elif isinstance(value, (str, int, float, bool, type(None), dict)):
                formatted[key] = value
            elif isinstance(value, (list, tuple)):
                formatted[key] = [
                    cls.format_type(v) if isinstance(v, type) else str(v)
                    for v in value
                ]
            else:
                formatted[key] = str(value)
        return formatted
