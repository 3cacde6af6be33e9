"""
Bean registry.

This module provides the registry that maps requested types, optionally
qualified, to bean definitions, including the interface fan-out and
primary/ambiguity rules applied at registration time.
"""

import threading
from typing import Dict, List, Optional, Set, Tuple

from ..core.entities import BeanDefinition, Scope, TypeDescriptor
from ..core.interfaces import TypeIntrospectorInterface
from ..shared.exceptions import AmbiguousBindingError, ContainerError

QualifiedKey = Tuple[type, str]


def definition_from(
    descriptor: TypeDescriptor,
    qualifier: Optional[str] = None
) -> BeanDefinition:
    """
    Build a bean definition from a type descriptor.

    Args:
        descriptor: Descriptor of the implementation type
        qualifier: Qualifier overriding the declared one

    Returns:
        BeanDefinition: New definition
    """
    return BeanDefinition(
        implementation_type=descriptor.type_,
        scope=descriptor.scope,
        qualifier=qualifier if qualifier is not None else descriptor.qualifier,
        lazy=descriptor.lazy,
        primary=descriptor.primary
    )


class BeanRegistry:
    """
    Registry of bean definitions.

    Holds the unqualified map (type to definition, including interface
    fan-out entries) and the qualified map ((type, qualifier) to
    definition). Several keys may share one definition object. All access
    goes through ``lock``, which callers may also hold to make a
    check-then-register sequence atomic.
    """

    def __init__(self, introspector: TypeIntrospectorInterface):
        """
        Initialize bean registry.

        Args:
            introspector: Used to enumerate implemented interfaces
        """
        self._introspector = introspector
        self._definitions: Dict[type, BeanDefinition] = {}
        self._named_definitions: Dict[QualifiedKey, BeanDefinition] = {}
        self.lock = threading.RLock()

    def register(self, definition: BeanDefinition) -> List[type]:
        """
        Register a definition under its own type and its interfaces.

        An interface key is claimed when free. A primary definition
        overrides a non-primary claim; a second primary for a different
        implementation raises. Otherwise the earlier claim is kept.
        Conflicts are detected before anything is stored.

        Args:
            definition: Definition to register

        Returns:
            List[type]: Interfaces now bound to ``definition``

        Raises:
            AmbiguousBindingError: If another primary already claims an interface
        """
        implementation = definition.implementation_type
        interfaces = self._introspector.interfaces_of(implementation)

        with self.lock:
            claimed = []
            for interface in interfaces:
                existing = self._definitions.get(interface)
                if existing is None or existing.implementation_type is implementation:
                    claimed.append(interface)
                elif definition.primary:
                    if existing.primary:
                        raise AmbiguousBindingError(
                            interface,
                            [existing.implementation_type, implementation]
                        )
                    claimed.append(interface)

            self._definitions[implementation] = definition
            for interface in claimed:
                self._definitions[interface] = definition

            if definition.has_qualifier:
                self._named_definitions[(implementation, definition.qualifier)] = definition
                for interface in interfaces:
                    self._named_definitions.setdefault((interface, definition.qualifier), definition)

            return claimed

    def bind(
        self,
        interface: type,
        definition: BeanDefinition,
        name: Optional[str] = None
    ) -> None:
        """
        Bind an interface to a definition explicitly, bypassing fan-out.

        Without ``name`` the interface and implementation keys both point
        at ``definition`` and a declared qualifier is honoured. With
        ``name`` only the qualified interface key and the implementation
        key are written.

        Args:
            interface: Requested type to bind
            definition: Definition of the implementation
            name: Optional qualifier for the binding

        Raises:
            ContainerError: If the implementation does not subclass ``interface``
        """
        implementation = definition.implementation_type
        if not issubclass(implementation, interface):
            raise ContainerError(
                f"{implementation.__qualname__} is not a subclass of {interface.__qualname__}"
            )

        with self.lock:
            self._definitions[implementation] = definition
            if name is not None:
                self._named_definitions[(interface, name)] = definition
                return
            self._definitions[interface] = definition
            if definition.has_qualifier:
                self._named_definitions[(interface, definition.qualifier)] = definition

    def put(self, type_: type, definition: BeanDefinition) -> None:
        """Store a definition under a single unqualified key."""
        with self.lock:
            self._definitions[type_] = definition

    def get(self, type_: type) -> Optional[BeanDefinition]:
        with self.lock:
            return self._definitions.get(type_)

    def get_named(self, type_: type, name: str) -> Optional[BeanDefinition]:
        with self.lock:
            return self._named_definitions.get((type_, name))

    def contains(self, type_: type) -> bool:
        with self.lock:
            return type_ in self._definitions

    def contains_named(self, type_: type, name: str) -> bool:
        with self.lock:
            return (type_, name) in self._named_definitions

    def scope_of(self, type_: type) -> Optional[Scope]:
        definition = self.get(type_)
        return definition.scope if definition is not None else None

    def entries(self) -> List[Tuple[type, BeanDefinition]]:
        """Snapshot of unqualified entries in registration order."""
        with self.lock:
            return list(self._definitions.items())

    def types(self) -> Set[type]:
        with self.lock:
            return set(self._definitions)

    def size(self) -> int:
        with self.lock:
            return len(self._definitions)

    def clear(self) -> None:
        with self.lock:
            self._definitions.clear()
            self._named_definitions.clear()
