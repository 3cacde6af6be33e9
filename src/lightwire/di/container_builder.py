"""
Fluent container builder.

Every configuration call is recorded as a step and replayed in issue
order by ``build()``. Order matters for conditional registration: a
property set before a conditional type is registered is visible to its
condition, one set after is not.
"""

from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional, Type, TypeVar, Union

from ..infrastructure.config import PropertyLoader
from ..shared.logging import LoggerInterface
from .container import Container

T = TypeVar('T')

BuildStep = Callable[[Container], None]


class ContainerBuilder:
    """
    Builder for configuring a container.

    Example:
        >>> container = (
        ...     Container.builder()
        ...     .property("cache.enabled", True)
        ...     .scan("myapp.services")
        ...     .bind(Repository).to(SqlRepository).named("primary")
        ...     .build()
        ... )
    """

    def __init__(self, logger: Optional[LoggerInterface] = None):
        """
        Initialize builder.

        Args:
            logger: Logger handed to the built container
        """
        self._steps: List[BuildStep] = []
        self._logger = logger

    def scan(self, *package_names: str) -> 'ContainerBuilder':
        """Scan packages for injectable classes."""
        self._steps.append(lambda container: container.scan(*package_names))
        return self

    def register(self, type_: type) -> 'ContainerBuilder':
        """Register a single injectable class."""
        self._steps.append(lambda container: container.register(type_))
        return self

    def bind(self, interface: type, implementation: Optional[type] = None) -> 'BindingBuilder':
        """
        Start an explicit binding.

        Args:
            interface: Interface to bind
            implementation: Implementation, or set later with ``to()``

        Returns:
            BindingBuilder: Builder for the binding
        """
        binding = BindingBuilder(self, interface, implementation)
        self._steps.append(binding._apply)
        return binding

    def instance(self, type_: Type[T], instance: T) -> 'ContainerBuilder':
        """Register a pre-built object as a singleton."""
        self._steps.append(lambda container: container.register_instance(type_, instance))
        return self

    def property(self, key: str, value: Any) -> 'ContainerBuilder':
        """Set a property for conditional registration."""
        self._steps.append(lambda container: container.set_property(key, value))
        return self

    def properties(self, properties: Mapping[str, Any]) -> 'ContainerBuilder':
        """Set several properties at once."""
        snapshot = dict(properties)

        def apply(container: Container) -> None:
            for key, value in snapshot.items():
                container.set_property(key, value)

        self._steps.append(apply)
        return self

    def properties_from(
        self,
        path: Union[str, Path],
        environment: Optional[str] = None
    ) -> 'ContainerBuilder':
        """
        Load properties from YAML.

        ``path`` may be a single file or a directory holding ``base.yaml``
        and ``<environment>.yaml``. Files are read when ``build()`` runs.

        Args:
            path: File or configuration directory
            environment: Environment name for directory loading

        Returns:
            ContainerBuilder: Self for method chaining
        """
        def apply(container: Container) -> None:
            source = Path(path)
            if source.is_dir():
                loaded = PropertyLoader(source, environment=environment).load()
            else:
                loaded = PropertyLoader().load_file(source)
            for key, value in loaded.items():
                container.set_property(key, value)

        self._steps.append(apply)
        return self

    def build(self) -> Container:
        """
        Create the container and replay every recorded step.

        Returns:
            Container: Configured container
        """
        container = Container(logger=self._logger)
        for step in self._steps:
            step(container)
        return container


class BindingBuilder:
    """
    Builder for a single explicit binding.

    Calls that do not configure the binding are forwarded to the parent
    builder. A binding left without an implementation is skipped when the
    container is built.
    """

    def __init__(
        self,
        parent: ContainerBuilder,
        interface: type,
        implementation: Optional[type] = None
    ):
        self._parent = parent
        self._interface = interface
        self._implementation = implementation
        self._name: Optional[str] = None

    def to(self, implementation: type) -> 'BindingBuilder':
        """Set the implementation class."""
        self._implementation = implementation
        return self

    def named(self, name: str) -> 'BindingBuilder':
        """Qualify the binding."""
        self._name = name
        return self

    def _apply(self, container: Container) -> None:
        if self._implementation is None:
            return
        container.register(self._interface, self._implementation, self._name)

    def bind(self, interface: type, implementation: Optional[type] = None) -> 'BindingBuilder':
        return self._parent.bind(interface, implementation)

    def register(self, type_: type) -> ContainerBuilder:
        return self._parent.register(type_)

    def scan(self, *package_names: str) -> ContainerBuilder:
        return self._parent.scan(*package_names)

    def instance(self, type_: Type[T], instance: T) -> ContainerBuilder:
        return self._parent.instance(type_, instance)

    def property(self, key: str, value: Any) -> ContainerBuilder:
        return self._parent.property(key, value)

    def properties(self, properties: Mapping[str, Any]) -> ContainerBuilder:
        return self._parent.properties(properties)

    def properties_from(
        self,
        path: Union[str, Path],
        environment: Optional[str] = None
    ) -> ContainerBuilder:
        return self._parent.properties_from(path, environment)

    def build(self) -> Container:
        return self._parent.build()
