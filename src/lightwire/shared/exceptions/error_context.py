"""
Error context management.

This module provides structured error records used when several failures
have to be collected and reported together, such as during shutdown.
"""

import traceback
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


@dataclass
class ErrorContext:
    """
    Structured error context information.

    Captures one failure together with the data needed to understand
    where it happened.
    """

    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    error_type: str = ""
    error_message: str = ""
    stack_trace: Optional[List[str]] = None
    context_data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[BaseException] = field(default=None, repr=False, compare=False)


class ErrorContextManager:
    """Helpers for creating error contexts."""

    @staticmethod
    def create_context(
        error: BaseException,
        include_stack_trace: bool = True,
        **context_data: Any
    ) -> ErrorContext:
        """
        Create error context from exception.

        Args:
            error: The exception to create context from
            include_stack_trace: Whether to include stack trace
            **context_data: Additional context data

        Returns:
            ErrorContext: Created error context
        """
        context = ErrorContext(
            error_type=error.__class__.__name__,
            error_message=str(error),
            context_data=context_data,
            error=error
        )

        if include_stack_trace:
            context.stack_trace = traceback.format_exception(
                type(error),
                error,
                error.__traceback__
            )

        return context
