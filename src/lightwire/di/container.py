"""
Dependency injection container.

This module provides the container that registers decorated classes,
builds fully wired instances on demand, and tears singletons down in
reverse creation order on shutdown.
"""

import inspect
from contextvars import ContextVar
from functools import partial
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Optional, Set, Type, TypeVar

from ..core.entities import BeanDefinition, InjectionPoint, Scope, TypeDescriptor
from ..core.interfaces import TypeIntrospectorInterface, TypeScannerInterface
from ..infrastructure.config import to_property_value
from ..infrastructure.introspection import default_introspector
from ..infrastructure.scanning import ModuleScanner
from ..proxy import ProxyFactory
from ..shared.exceptions import (
    BeanNotFoundError,
    ConstructionError,
    ContainerClosedError,
    ContainerError,
    NotInjectableError,
    TeardownError
)
from ..shared.logging import LoggerInterface, configure_logging
from .bean_registry import BeanRegistry, definition_from
from .circular_dependency_detector import CircularDependencyDetector
from .conditions import ConditionEvaluator
from .lifetime_manager import LifetimeManager

if TYPE_CHECKING:
    from .container_builder import ContainerBuilder

T = TypeVar('T')

_default_logger = configure_logging("lightwire.container")

# Detector of the construction in progress on the current thread, if any.
_active_detector: ContextVar[Optional[CircularDependencyDetector]] = ContextVar(
    "lightwire_active_detector", default=None
)


class Container:
    """
    Dependency injection container.

    Each container owns its registry, singleton caches and creation
    ledger, so independent containers can coexist in one process. All
    public methods are safe to call from several threads.

    Example:
        >>> container = Container.builder().scan("myapp.services").build()
        >>> service = container.get(UserService)
        >>> container.shutdown()
    """

    def __init__(
        self,
        introspector: Optional[TypeIntrospectorInterface] = None,
        scanner: Optional[TypeScannerInterface] = None,
        proxy_factory: Optional[ProxyFactory] = None,
        logger: Optional[LoggerInterface] = None,
        properties: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize container.

        Args:
            introspector: Produces type descriptors
            scanner: Discovers injectable classes in packages
            proxy_factory: Creates lazy proxies
            logger: Structured logger, defaults to the package logger
            properties: Initial property bag for conditional registration
        """
        self._introspector = introspector or default_introspector
        self._scanner = scanner or ModuleScanner()
        self._proxy_factory = proxy_factory or ProxyFactory(self._introspector)
        self._logger = logger or _default_logger
        self._registry = BeanRegistry(self._introspector)
        self._lifetime_manager = LifetimeManager()
        self._properties: Dict[str, str] = {
            key: to_property_value(value) for key, value in (properties or {}).items()
        }
        self._conditions = ConditionEvaluator(self._properties, self._registry.contains)

    @staticmethod
    def builder() -> "ContainerBuilder":
        """
        Create a builder for fluent configuration.

        Returns:
            ContainerBuilder: New builder
        """
        from .container_builder import ContainerBuilder
        return ContainerBuilder()

    # Registration

    def register(
        self,
        type_: type,
        implementation: Optional[type] = None,
        name: Optional[str] = None
    ) -> 'Container':
        """
        Register a class, or bind an interface to an implementation.

        ``register(Impl)`` stores Impl under its own type and fans out to
        every interface it implements. ``register(Interface, Impl)`` binds
        explicitly; ``name`` makes the binding qualified.

        Args:
            type_: Class to register, or the interface to bind
            implementation: Implementation class for an explicit binding
            name: Qualifier for an explicit binding

        Returns:
            Container: Self for method chaining

        Raises:
            NotInjectableError: If the implementation is not @injectable
            AmbiguousBindingError: If two primaries compete for an interface
        """
        if implementation is None and name is None:
            return self._register_type(type_)
        return self._register_binding(type_, implementation or type_, name)

    def _register_type(self, type_: type) -> 'Container':
        descriptor = self._describe_injectable(type_)
        with self._registry.lock:
            if not self._conditions_hold(descriptor):
                return self
            definition = definition_from(descriptor)
            claimed = self._registry.register(definition)

        self._logger.debug(
            "Registered bean",
            type=type_,
            scope=definition.scope.value,
            qualifier=definition.qualifier,
            interfaces=claimed
        )
        return self

    def _register_binding(
        self,
        interface: type,
        implementation: type,
        name: Optional[str]
    ) -> 'Container':
        descriptor = self._describe_injectable(implementation)
        with self._registry.lock:
            if not self._conditions_hold(descriptor):
                return self
            definition = definition_from(descriptor, qualifier=name)
            self._registry.bind(interface, definition, name)

        self._logger.debug(
            "Bound interface",
            interface=interface,
            implementation=implementation,
            qualifier=name
        )
        return self

    def register_instance(self, type_: Type[T], instance: T) -> 'Container':
        """
        Register a pre-built object as a singleton.

        No construction or injection is performed. The object takes part
        in shutdown like any other singleton.

        Args:
            type_: Type to register the instance under
            instance: The object

        Returns:
            Container: Self for method chaining

        Raises:
            ContainerClosedError: After shutdown; the instance could never
                be torn down
        """
        self._lifetime_manager.ensure_open()
        if not isinstance(instance, type_):
            raise ContainerError(
                f"Instance {instance!r} is not of type {type_.__qualname__}"
            )
        definition = BeanDefinition(type(instance), Scope.SINGLETON)
        with self._registry.lock:
            self._registry.put(type_, definition)
            self._lifetime_manager.put_instance(type_, definition, instance)

        self._logger.debug("Registered instance", type=type_)
        return self

    def scan(self, *package_names: str) -> 'Container':
        """
        Register every injectable class found in the given packages.

        Args:
            *package_names: Dotted package or module names

        Returns:
            Container: Self for method chaining
        """
        for package_name in package_names:
            discovered = self._scanner.scan(package_name)
            self._logger.debug(
                "Scanned package",
                package=package_name,
                discovered=len(discovered)
            )
            for type_ in discovered:
                self.register(type_)
        return self

    def _describe_injectable(self, type_: type) -> TypeDescriptor:
        if not inspect.isclass(type_):
            raise ContainerError(f"{type_!r} is not a class")
        descriptor = self._introspector.describe(type_)
        if not descriptor.injectable:
            raise NotInjectableError(type_)
        return descriptor

    def _conditions_hold(self, descriptor: TypeDescriptor) -> bool:
        failed = self._conditions.failed_condition(descriptor)
        if failed is not None:
            self._logger.debug(
                "Skipped conditional registration",
                type=descriptor.type_,
                condition=failed
            )
            return False
        return True

    # Retrieval

    def get(self, type_: Type[T], name: Optional[str] = None) -> T:
        """
        Get an instance of a type, fully wired.

        Args:
            type_: Requested type
            name: Optional qualifier; no fallback to the unqualified binding

        Returns:
            T: Instance, or a lazy proxy for lazy interface bindings

        Raises:
            BeanNotFoundError: If nothing is registered for the request
            CircularDependencyError: If the dependency graph has a cycle
            ConstructionError: If building the instance fails
            ContainerClosedError: After shutdown
        """
        return self._resolve(type_, name, CircularDependencyDetector())

    def get_optional(self, type_: Type[T]) -> Optional[T]:
        """
        Get an instance if the type is registered.

        Failures while building a registered type still propagate.

        Args:
            type_: Requested type

        Returns:
            Optional[T]: Instance, or None when nothing is registered
        """
        if not self._registry.contains(type_):
            return None
        return self.get(type_)

    def get_all(self, interface: Type[T]) -> List[T]:
        """
        Get one instance of every registered implementation of an interface.

        Candidates that fail to build are logged and skipped.

        Args:
            interface: Interface or base class

        Returns:
            List[T]: Instances in registration order
        """
        self._lifetime_manager.ensure_open()
        seen: Set[BeanDefinition] = set()
        instances = []
        for key, definition in self._registry.entries():
            if key is interface or definition in seen:
                continue
            if not issubclass(definition.implementation_type, interface):
                continue
            seen.add(definition)
            try:
                instances.append(
                    self._instance(key, None, definition, CircularDependencyDetector())
                )
            except ContainerClosedError:
                raise
            except ContainerError as e:
                self._logger.warning(
                    "Skipping implementation that failed to build",
                    interface=interface,
                    type=definition.implementation_type,
                    error=str(e)
                )
        return instances

    def _resolve(
        self,
        type_: type,
        name: Optional[str],
        detector: CircularDependencyDetector
    ) -> Any:
        self._lifetime_manager.ensure_open()
        if name is None:
            definition = self._registry.get(type_)
        else:
            definition = self._registry.get_named(type_, name)
        if definition is None:
            raise BeanNotFoundError(type_, name)
        return self._instance(type_, name, definition, detector)

    def _instance(
        self,
        key: type,
        name: Optional[str],
        definition: BeanDefinition,
        detector: CircularDependencyDetector
    ) -> Any:
        """
        Return the instance for a resolved definition.

        Singletons go through the cache first. A lazy definition requested
        through an interface yields a proxy; for singletons the proxy is
        what gets cached, and the real object is created once on first use.
        """
        deferred = definition.lazy and self._introspector.is_interface(key)

        if definition.is_singleton:
            if deferred:
                factory = partial(
                    self._proxy_factory.create_lazy_proxy,
                    key,
                    partial(self._singleton, definition, None),
                    self._lifetime_manager.creation_lock
                )
            else:
                factory = partial(self._singleton, definition, detector)
            return self._lifetime_manager.get_singleton(key, factory, name)

        if deferred:
            return self._proxy_factory.create_lazy_proxy(
                key,
                partial(self._create, definition, None),
                self._lifetime_manager.creation_lock
            )
        return self._create(definition, detector)

    def _singleton(
        self,
        definition: BeanDefinition,
        detector: Optional[CircularDependencyDetector]
    ) -> Any:
        return self._lifetime_manager.instance_for(
            definition,
            partial(self._create, definition, detector)
        )

    # Construction

    def _create(
        self,
        definition: BeanDefinition,
        detector: Optional[CircularDependencyDetector]
    ) -> Any:
        """
        Build an instance: constructor, fields, methods, post-init hook.

        ``detector`` is None when a lazy proxy materializes. If that happens
        while another construction is still running on this thread, the
        proxy continues its call chain; otherwise a new chain starts.
        """
        if detector is None:
            detector = self._current_detector()
        self._lifetime_manager.ensure_open()

        type_ = definition.implementation_type
        descriptor = self._introspector.describe(type_)

        token = _active_detector.set(detector)
        try:
            with detector.resolving(type_):
                instance = self._construct(descriptor, detector)
                self._inject_fields(instance, descriptor, detector)
                self._inject_methods(instance, descriptor, detector)
                if descriptor.post_construct is not None:
                    self._invoke(
                        type_,
                        f"invoke @post_construct method {descriptor.post_construct}",
                        getattr(instance, descriptor.post_construct)
                    )
        finally:
            _active_detector.reset(token)

        if definition.is_singleton:
            self._logger.debug("Created singleton", type=type_)
        return instance

    @staticmethod
    def _current_detector() -> CircularDependencyDetector:
        detector = _active_detector.get()
        return detector if detector is not None else CircularDependencyDetector()

    def _resolve_deferred(self, type_: type, name: Optional[str]) -> Any:
        return self._resolve(type_, name, self._current_detector())

    def _construct(self, descriptor: TypeDescriptor, detector: CircularDependencyDetector) -> Any:
        type_ = descriptor.type_
        if descriptor.constructor is None:
            raise ConstructionError(
                descriptor.constructor_error or f"No suitable constructor found for {type_.__qualname__}",
                type_
            )
        arguments = self._resolve_arguments(descriptor.constructor, detector)
        return self._invoke(type_, "create instance", type_, **arguments)

    def _inject_fields(
        self,
        instance: Any,
        descriptor: TypeDescriptor,
        detector: CircularDependencyDetector
    ) -> None:
        for field in descriptor.fields:
            if field.lazy and self._introspector.is_interface(field.declared_type):
                value = self._proxy_factory.create_lazy_proxy(
                    field.declared_type,
                    partial(self._resolve_deferred, field.declared_type, field.qualifier),
                    self._lifetime_manager.creation_lock
                )
            else:
                value = self._resolve(field.declared_type, field.qualifier, detector)
            self._invoke(
                descriptor.type_,
                f"set field {field.name}",
                setattr, instance, field.name, value
            )

    def _inject_methods(
        self,
        instance: Any,
        descriptor: TypeDescriptor,
        detector: CircularDependencyDetector
    ) -> None:
        for method in descriptor.methods:
            arguments = self._resolve_arguments(method.parameters, detector)
            self._invoke(
                descriptor.type_,
                f"invoke @inject method {method.name}",
                getattr(instance, method.name),
                **arguments
            )

    def _resolve_arguments(
        self,
        points: Iterable[InjectionPoint],
        detector: CircularDependencyDetector
    ) -> Dict[str, Any]:
        """Resolve parameters; defaulted ones without a binding keep their default."""
        arguments = {}
        for point in points:
            if point.has_default and not self.contains(point.declared_type, point.qualifier):
                continue
            arguments[point.parameter_name] = self._resolve(
                point.declared_type,
                point.qualifier,
                detector
            )
        return arguments

    @staticmethod
    def _invoke(type_: type, action: str, func: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Any:
        """Call user code, wrapping foreign exceptions in ConstructionError."""
        try:
            return func(*args, **kwargs)
        except ContainerError:
            raise
        except Exception as e:
            raise ConstructionError(
                f"Failed to {action} for {type_.__qualname__}: {e}",
                type_
            ) from e

    # Queries

    def contains(self, type_: type, name: Optional[str] = None) -> bool:
        """
        Check whether a type, or a qualified type, is registered.

        Args:
            type_: Type to check
            name: Optional qualifier

        Returns:
            bool: Whether a binding exists
        """
        if name is None:
            return self._registry.contains(type_)
        return self._registry.contains_named(type_, name)

    def get_scope(self, type_: type) -> Scope:
        """
        Get the scope of a registered type.

        Raises:
            BeanNotFoundError: If the type is not registered
        """
        scope = self._registry.scope_of(type_)
        if scope is None:
            raise BeanNotFoundError(type_)
        return scope

    def size(self) -> int:
        """Number of unqualified registrations, interface keys included."""
        return self._registry.size()

    def registered_types(self) -> Set[type]:
        """All unqualified keys."""
        return self._registry.types()

    # Properties

    def set_property(self, key: str, value: Any) -> 'Container':
        """
        Set a property used by conditional registration.

        Values are stored as strings; booleans become "true"/"false".

        Returns:
            Container: Self for method chaining
        """
        with self._registry.lock:
            self._properties[key] = to_property_value(value)
        return self

    def get_property(self, key: str, default: Optional[str] = None) -> Optional[str]:
        with self._registry.lock:
            return self._properties.get(key, default)

    def has_property(self, key: str) -> bool:
        with self._registry.lock:
            return key in self._properties

    def properties(self) -> Dict[str, str]:
        """Snapshot of the property bag."""
        with self._registry.lock:
            return dict(self._properties)

    # Lifecycle

    def shutdown(self) -> None:
        """
        Shut the container down.

        Runs @pre_destroy hooks in reverse creation order, then clears the
        singleton caches. Later calls do nothing. Every hook runs even if
        an earlier one fails.

        Raises:
            TeardownError: If any hook failed, after all hooks have run
        """
        if self._lifetime_manager.is_closed:
            return

        failures = self._lifetime_manager.shutdown(self._teardown_hook)
        for failure in failures:
            self._logger.exception(
                "@pre_destroy method failed",
                exc_info=failure.error,
                **failure.context_data
            )
        self._logger.info("Container shut down", failures=len(failures))

        if failures:
            raise TeardownError(failures) from failures[0].error

    def _teardown_hook(self, instance: Any) -> Optional[Callable[[], Any]]:
        hook = self._introspector.describe(type(instance)).pre_destroy
        if hook is None:
            return None
        return getattr(instance, hook)

    def is_shutdown(self) -> bool:
        return self._lifetime_manager.is_closed

    def clear_singletons(self) -> None:
        """Drop cached singletons without running teardown hooks."""
        self._lifetime_manager.clear()

    def clear(self) -> None:
        """Drop every registration and cached singleton without running teardown hooks."""
        with self._registry.lock:
            self._registry.clear()
            self._lifetime_manager.clear()

    def __enter__(self) -> 'Container':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.shutdown()

    def __repr__(self) -> str:
        return f"Container(size={self.size()}, shutdown={self.is_shutdown()})"
