"""
Lazy proxy base class.

A lazy proxy holds a zero-argument supplier and creates the real object
on first use. Concrete proxy classes are generated per interface by
ProxyFactory; they inherit from both LazyProxy and the interface, and
forward every interface method to the delegate.
"""

import threading
from typing import Any, Callable, Optional


class LazyProxy:
    """
    Deferred handle around a supplier.

    Identity, equality, hashing and string conversion act on the proxy
    itself and never trigger the supplier. The supplier runs at most once,
    even when several threads hit the proxy at the same time. If it raises,
    the proxy stays uninitialized and the next call tries again.

    A container passes its own re-entrant creation lock as ``lock``, so the
    proxy and the container never wait on each other in opposite orders.
    """

    def __init__(self, supplier: Callable[[], Any], lock: Optional[Any] = None):
        self._lightwire_supplier = supplier
        self._lightwire_target = None
        self._lightwire_initialized = False
        self._lightwire_lock = lock if lock is not None else threading.Lock()

    def _lightwire_get_target(self) -> Any:
        """Return the delegate, creating it on first call."""
        if not self._lightwire_initialized:
            with self._lightwire_lock:
                if not self._lightwire_initialized:
                    self._lightwire_target = self._lightwire_supplier()
                    self._lightwire_initialized = True
        return self._lightwire_target

    def _lightwire_is_initialized(self) -> bool:
        return self._lightwire_initialized

    def __getattr__(self, name: str) -> Any:
        # Only reached for attributes the interface does not declare.
        if name.startswith("_lightwire_"):
            raise AttributeError(name)
        return getattr(self._lightwire_get_target(), name)

    def __eq__(self, other: Any) -> bool:
        return self is other

    def __ne__(self, other: Any) -> bool:
        return self is not other

    def __hash__(self) -> int:
        return id(self)

    def __repr__(self) -> str:
        if not self._lightwire_initialized:
            return "LazyProxy[not initialized]"
        return f"LazyProxy[{self._lightwire_target!r}]"

    __str__ = __repr__
