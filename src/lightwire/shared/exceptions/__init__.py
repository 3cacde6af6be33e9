"""
Exceptions and error context for lightwire.
"""

from .container_errors import (
    AmbiguousBindingError,
    BeanNotFoundError,
    CircularDependencyError,
    ConstructionError,
    ContainerClosedError,
    ContainerError,
    NotInjectableError,
    TeardownError
)
from .error_context import ErrorContext, ErrorContextManager

__all__ = [
    'AmbiguousBindingError',
    'BeanNotFoundError',
    'CircularDependencyError',
    'ConstructionError',
    'ContainerClosedError',
    'ContainerError',
    'NotInjectableError',
    'TeardownError',
    'ErrorContext',
    'ErrorContextManager'
]
