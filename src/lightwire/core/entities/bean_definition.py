"""
Bean definitions and scopes.

This module contains the immutable record describing how the container
builds an instance of a registered type.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Scope(Enum):
    """Instance reuse policy for a registered type."""
    SINGLETON = "singleton"  # One shared instance per container
    PROTOTYPE = "prototype"  # New instance per request


@dataclass(frozen=True, eq=False)
class BeanDefinition:
    """
    Describes how to make an instance of a registered type.

    Definitions are created once at registration and never mutated.
    Equality is identity: several registry keys may point at the same
    definition, and caches keyed on a definition must not merge two
    registrations that merely look alike.
    """
    implementation_type: type
    scope: Scope = Scope.PROTOTYPE
    qualifier: Optional[str] = None
    lazy: bool = False
    primary: bool = False

    @property
    def is_singleton(self) -> bool:
        return self.scope is Scope.SINGLETON

    @property
    def has_qualifier(self) -> bool:
        return bool(self.qualifier)

    def __repr__(self) -> str:
        parts = [
            f"type={self.implementation_type.__name__}",
            f"scope={self.scope.value}",
        ]
        if self.has_qualifier:
            parts.append(f"qualifier={self.qualifier!r}")
        if self.lazy:
            parts.append("lazy=True")
        if self.primary:
            parts.append("primary=True")
        return f"BeanDefinition({', '.join(parts)})"
