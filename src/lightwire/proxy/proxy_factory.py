"""
Factory for lazy proxies.

Python has no runtime interface synthesis, so the factory generates one
subclass of ``(LazyProxy, *interfaces)`` per interface set, with a
forwarding method for every method and property the interfaces declare.
Generated classes are cached.
"""

import inspect
import threading
from abc import ABC
from typing import Any, Callable, Dict, Generic, Optional, Protocol, Sequence, Tuple

from ..core.interfaces import TypeIntrospectorInterface
from ..infrastructure.introspection import default_introspector
from ..shared.exceptions import ContainerError
from .lazy_proxy import LazyProxy

_SKIPPED_BASES = (object, ABC, Protocol, Generic, LazyProxy)

# Members the proxy implements itself or that Python manages per class.
_RESERVED = frozenset({
    "__init__", "__new__", "__init_subclass__", "__subclasshook__",
    "__class_getitem__", "__getattr__", "__getattribute__", "__setattr__",
    "__delattr__", "__eq__", "__ne__", "__hash__", "__repr__", "__str__",
    "__dir__", "__reduce__", "__reduce_ex__", "__getstate__", "__setstate__",
    "__sizeof__", "__format__", "__del__",
})


def _forwarding_method(name: str, original: Callable) -> Callable:
    def forward(self, *args: Any, **kwargs: Any) -> Any:
        return getattr(self._lightwire_get_target(), name)(*args, **kwargs)

    # Not functools.wraps: it would copy __isabstractmethod__ and keep the
    # proxy class abstract.
    forward.__name__ = original.__name__
    forward.__qualname__ = f"LazyProxy.{original.__name__}"
    forward.__doc__ = original.__doc__
    return forward


def _forwarding_property(name: str, original: property) -> property:
    def fget(self):
        return getattr(self._lightwire_get_target(), name)

    fset = None
    if original.fset is not None:
        def fset(self, value):
            setattr(self._lightwire_get_target(), name, value)

    return property(fget, fset, doc=original.__doc__)


def _forwarding_namespace(interfaces: Tuple[type, ...]) -> Dict[str, Any]:
    """Build forwarders for every method and property of ``interfaces``."""
    namespace: Dict[str, Any] = {}
    seen = set()
    for interface in interfaces:
        for klass in interface.__mro__:
            if klass in _SKIPPED_BASES:
                continue
            for name, value in vars(klass).items():
                if name in seen or name in _RESERVED:
                    continue
                seen.add(name)
                if isinstance(value, property):
                    namespace[name] = _forwarding_property(name, value)
                elif inspect.isfunction(value):
                    if name.startswith("__") and not name.endswith("__"):
                        continue
                    namespace[name] = _forwarding_method(name, value)
    return namespace


class ProxyFactory:
    """Creates lazy proxies and answers questions about them."""

    def __init__(self, introspector: Optional[TypeIntrospectorInterface] = None):
        """
        Initialize factory.

        Args:
            introspector: Decides what counts as an interface
        """
        self._introspector = introspector or default_introspector
        self._classes: Dict[Tuple[type, ...], type] = {}
        self._lock = threading.Lock()

    def create_lazy_proxy(
        self,
        interface_type: type,
        supplier: Callable[[], Any],
        lock: Optional[Any] = None
    ) -> Any:
        """
        Create a lazy proxy implementing one interface.

        Args:
            interface_type: Interface the proxy must satisfy
            supplier: Zero-argument callable producing the real object
            lock: Lock held while the supplier runs; a private one if omitted

        Returns:
            Any: Proxy instance; ``isinstance(proxy, interface_type)`` holds

        Raises:
            ContainerError: If ``interface_type`` is not an interface
        """
        if not self._introspector.is_interface(interface_type):
            raise ContainerError(
                "Lazy proxy can only be created for interfaces. "
                f"{getattr(interface_type, '__qualname__', interface_type)} is not an interface."
            )
        return self._proxy_class((interface_type,))(supplier, lock)

    def create_multi_interface_proxy(
        self,
        interfaces: Sequence[type],
        supplier: Callable[[], Any],
        lock: Optional[Any] = None
    ) -> Any:
        """
        Create a lazy proxy implementing several interfaces.

        Raises:
            ContainerError: If ``interfaces`` is empty or holds a non-interface
        """
        interfaces = tuple(interfaces)
        if not interfaces:
            raise ContainerError("At least one interface is required for lazy proxy.")
        for interface in interfaces:
            if not self._introspector.is_interface(interface):
                raise ContainerError(
                    "All types must be interfaces for lazy proxy. "
                    f"{getattr(interface, '__qualname__', interface)} is not an interface."
                )
        return self._proxy_class(interfaces)(supplier, lock)

    def _proxy_class(self, interfaces: Tuple[type, ...]) -> type:
        with self._lock:
            proxy_class = self._classes.get(interfaces)
            if proxy_class is None:
                proxy_class = self._generate(interfaces)
                self._classes[interfaces] = proxy_class
            return proxy_class

    @staticmethod
    def _generate(interfaces: Tuple[type, ...]) -> type:
        name = "Lazy" + "".join(i.__name__ for i in interfaces) + "Proxy"
        namespace = _forwarding_namespace(interfaces)
        namespace["__module__"] = __name__
        try:
            proxy_class = type(name, (LazyProxy, *interfaces), namespace)
        except TypeError as e:
            raise ContainerError(
                f"Cannot create lazy proxy for {[i.__qualname__ for i in interfaces]}: {e}"
            ) from e
        if inspect.isabstract(proxy_class):
            missing = ", ".join(sorted(proxy_class.__abstractmethods__))
            raise ContainerError(
                f"Cannot create lazy proxy for {name}: abstract members not forwardable: {missing}"
            )
        return proxy_class

    @staticmethod
    def is_lazy_proxy(obj: Any) -> bool:
        """Check whether ``obj`` is a lazy proxy."""
        return isinstance(obj, LazyProxy)

    @staticmethod
    def is_initialized(obj: Any) -> bool:
        """Check whether ``obj`` is a lazy proxy whose delegate exists."""
        return isinstance(obj, LazyProxy) and obj._lightwire_is_initialized()

    @staticmethod
    def get_target(obj: Any) -> Any:
        """
        Force initialization of a lazy proxy and return its delegate.

        Raises:
            ContainerError: If ``obj`` is not a lazy proxy
        """
        if not isinstance(obj, LazyProxy):
            raise ContainerError(f"{obj!r} is not a lazy proxy")
        return obj._lightwire_get_target()


default_proxy_factory = ProxyFactory()


def is_lazy_proxy(obj: Any) -> bool:
    """Check whether ``obj`` is a lazy proxy."""
    return ProxyFactory.is_lazy_proxy(obj)


def is_initialized(obj: Any) -> bool:
    """Check whether ``obj`` is a lazy proxy that has created its delegate."""
    return ProxyFactory.is_initialized(obj)
