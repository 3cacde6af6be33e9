"""
Lifetime manager for the container.

This module provides the lifetime manager that owns singleton instances,
the creation ledger used for ordered teardown, and the closed state of
the container.
"""

import threading
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from ..core.entities import BeanDefinition
from ..shared.exceptions import ContainerClosedError, ErrorContext, ErrorContextManager

QualifiedKey = Tuple[type, str]


class LifetimeManager:
    """
    Manager for singleton lifecycle.

    Singletons are cached per requested key (plain or qualified) and, one
    level down, per bean definition, so every key bound to the same
    definition yields the same object. Creation runs under one re-entrant
    lock, so a singleton is built at most once even under concurrent first
    access. Lazy proxies issued by the container hold the same lock while
    their delegate is created, so the two never wait on each other.
    """

    def __init__(self):
        """Initialize lifetime manager."""
        self._singletons: Dict[type, Any] = {}
        self._named_singletons: Dict[QualifiedKey, Any] = {}
        self._instances_by_definition: Dict[BeanDefinition, Any] = {}
        self._ledger: List[Any] = []
        self._ledger_ids: Set[int] = set()
        self._closed = False
        self._lock = threading.RLock()
        self._creation_lock = threading.RLock()

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def creation_lock(self) -> Any:
        """Re-entrant lock held while singletons and lazy delegates are created."""
        return self._creation_lock

    def ensure_open(self) -> None:
        """
        Raise if the container has been shut down.

        Raises:
            ContainerClosedError: After shutdown
        """
        if self._closed:
            raise ContainerClosedError()

    def get_singleton(
        self,
        key: type,
        factory: Callable[[], Any],
        qualifier: Optional[str] = None
    ) -> Any:
        """
        Get the cached value for a key or compute it once.

        The value is whatever ``factory`` returns: the real instance, or a
        lazy proxy standing in for it.

        Args:
            key: Requested type
            factory: Produces the value on a cache miss
            qualifier: Qualifier of the request, if any

        Returns:
            Any: Cached value
        """
        cache, cache_key = self._cache_for(key, qualifier)

        with self._lock:
            self.ensure_open()
            if cache_key in cache:
                return cache[cache_key]

        with self._creation_lock:
            with self._lock:
                self.ensure_open()
                if cache_key in cache:
                    return cache[cache_key]

            value = factory()

            with self._lock:
                self.ensure_open()
                return cache.setdefault(cache_key, value)

    def instance_for(self, definition: BeanDefinition, create: Callable[[], Any]) -> Any:
        """
        Get the real singleton for a definition, creating it at most once.

        Newly created instances are appended to the creation ledger here,
        and only here.

        Args:
            definition: Singleton definition
            create: Runs the full construction of the instance

        Returns:
            Any: The real instance
        """
        with self._creation_lock:
            with self._lock:
                self.ensure_open()
                if definition in self._instances_by_definition:
                    return self._instances_by_definition[definition]

            instance = create()

            with self._lock:
                self.ensure_open()
                self._instances_by_definition[definition] = instance
                self._record(instance)
            return instance

    def put_instance(self, key: type, definition: BeanDefinition, instance: Any) -> None:
        """
        Store a pre-built instance as the singleton for ``key``.

        Args:
            key: Type the instance is registered under
            definition: Its singleton definition
            instance: The instance

        Raises:
            ContainerClosedError: After shutdown
        """
        with self._lock:
            self.ensure_open()
            self._singletons[key] = instance
            self._instances_by_definition[definition] = instance
            self._record(instance)

    def created_instances(self) -> List[Any]:
        """Snapshot of the creation ledger, oldest first."""
        with self._lock:
            return list(self._ledger)

    def shutdown(self, find_hook: Callable[[Any], Optional[Callable[[], Any]]]) -> List[ErrorContext]:
        """
        Close and run teardown hooks in reverse creation order.

        Only the first call does anything. Every hook runs even when an
        earlier one fails.

        Args:
            find_hook: Returns the bound teardown hook of an instance, or None

        Returns:
            List[ErrorContext]: One entry per failed hook
        """
        with self._lock:
            if self._closed:
                return []
            self._closed = True
            instances = list(reversed(self._ledger))

        failures = []
        for instance in instances:
            try:
                hook = find_hook(instance)
                if hook is not None:
                    hook()
            except Exception as e:
                failures.append(ErrorContextManager.create_context(
                    e,
                    instance_type=type(instance).__qualname__
                ))

        self.clear()
        return failures

    def clear(self) -> None:
        """Drop every cached singleton and the ledger without running hooks."""
        with self._lock:
            self._singletons.clear()
            self._named_singletons.clear()
            self._instances_by_definition.clear()
            self._ledger.clear()
            self._ledger_ids.clear()

    def _record(self, instance: Any) -> None:
        if id(instance) not in self._ledger_ids:
            self._ledger_ids.add(id(instance))
            self._ledger.append(instance)

    def _cache_for(self, key: type, qualifier: Optional[str]):
        if qualifier is None:
            return self._singletons, key
        return self._named_singletons, (key, qualifier)
