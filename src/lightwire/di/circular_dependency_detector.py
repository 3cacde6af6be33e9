"""
Circular dependency detection.

A CircularDependencyDetector is created for each top-level request and passed
explicitly through every nested resolution (constructor, field and method
injection alike). Two unrelated requests, even on the same thread, never
share a detector, so their cycle tracking cannot interfere.
"""

from contextlib import contextmanager
from typing import Iterator, List

from ..shared.exceptions import CircularDependencyError


class CircularDependencyDetector:
    """
    Ordered set of implementation types currently under construction.

    A type appears at most once. Entering a type that is already present
    raises CircularDependencyError before anything else happens.
    """

    def __init__(self):
        """Initialize an empty resolution path."""
        self._path: List[type] = []
        self._members: set = set()

    def push(self, type_: type) -> None:
        """
        Push a type onto the resolution path.

        Args:
            type_: Implementation type about to be constructed

        Raises:
            CircularDependencyError: With the chain from the first
                occurrence of ``type_`` up to and including the repeat
        """
        if type_ in self._members:
            start = self._path.index(type_)
            raise CircularDependencyError(self._path[start:] + [type_])
        self._members.add(type_)
        self._path.append(type_)

    def pop(self, type_: type) -> None:
        """
        Pop a type from the resolution path.

        Args:
            type_: Type pushed by the matching ``push`` call
        """
        if self._path and self._path[-1] is type_:
            self._path.pop()
            self._members.discard(type_)

    @contextmanager
    def resolving(self, type_: type) -> Iterator[None]:
        """
        Track ``type_`` for the duration of the block.

        The entry is removed even when construction raises, so a failed
        resolution never leaves stale state behind.
        """
        self.push(type_)
        try:
            yield
        finally:
            self.pop(type_)

    def is_resolving(self, type_: type) -> bool:
        return type_ in self._members

    @property
    def depth(self) -> int:
        return len(self._path)

    @property
    def path(self) -> List[type]:
        return list(self._path)

    def describe_path(self) -> str:
        """Render the current path for debugging."""
        if not self._path:
            return "<empty>"
        return " -> ".join(t.__name__ for t in self._path)
