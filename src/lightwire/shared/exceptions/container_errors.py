"""
Container exception hierarchy.

Every error raised by the container derives from ContainerError. None of
them are retried: they propagate to the caller at the point of failure.
"""

from typing import Iterable, List, Optional, Sequence

from .error_context import ErrorContext


def _type_name(type_: object) -> str:
    return getattr(type_, "__name__", repr(type_))


class ContainerError(Exception):
    """Base class for container failures, also used for configuration errors."""


class NotInjectableError(ContainerError):
    """Registration was attempted on a class without the injectable marker."""

    def __init__(self, type_: type):
        super().__init__(
            f"Class {type_.__module__}.{type_.__qualname__} must be decorated with @injectable"
        )
        self.type = type_


class BeanNotFoundError(ContainerError):
    """No registration matches the requested type or qualifier."""

    def __init__(self, requested_type: type, qualifier: Optional[str] = None):
        message = f"No bean found for type: {_type_name(requested_type)}"
        if qualifier is not None:
            message += f" with qualifier: {qualifier}"
        super().__init__(message)
        self.requested_type = requested_type
        self.qualifier = qualifier


class AmbiguousBindingError(ContainerError):
    """Two candidates compete for the same key with nothing to break the tie."""

    def __init__(self, requested_type: type, candidates: Iterable[type]):
        self.requested_type = requested_type
        self.candidates = list(candidates)
        names = ", ".join(_type_name(c) for c in self.candidates)
        super().__init__(
            f"Multiple primary beans found for type {_type_name(requested_type)}: [{names}]"
        )


class CircularDependencyError(ContainerError):
    """A type was requested again while still under construction."""

    def __init__(self, chain: Sequence[type]):
        self.chain = list(chain)
        super().__init__(
            "Circular dependency detected: "
            + " -> ".join(_type_name(t) for t in self.chain)
        )


class ConstructionError(ContainerError):
    """A constructor could not be selected or building an instance raised."""

    def __init__(self, message: str, implementation_type: Optional[type] = None):
        super().__init__(message)
        self.implementation_type = implementation_type


class ContainerClosedError(ContainerError):
    """An instance was requested after shutdown."""

    def __init__(self, message: str = "Container is shut down, cannot create new instances"):
        super().__init__(message)


class TeardownError(ContainerError):
    """One or more teardown hooks failed during shutdown."""

    def __init__(self, failures: List[ErrorContext]):
        self.failures = list(failures)
        first = self.failures[0]
        super().__init__(
            f"Errors occurred during shutdown. {len(self.failures)} @pre_destroy "
            f"method(s) failed, first: {first.error_type}: {first.error_message}"
        )
