"""
Type descriptors produced by introspection.

The container never inspects decorators or annotations directly. A type is
described once by the introspection layer and the resolution engine works
purely on the resulting descriptor.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Tuple

from .bean_definition import Scope


@dataclass(frozen=True)
class InjectionPoint:
    """
    A single constructor or method parameter the container must supply.

    Attributes:
        parameter_name: Name of the parameter in the signature
        declared_type: Type to resolve
        qualifier: Optional qualifier name narrowing the lookup
        default: Default value used when no binding exists
        has_default: Whether the signature declares a default
    """
    parameter_name: str
    declared_type: type
    qualifier: Optional[str] = None
    default: Any = None
    has_default: bool = False


@dataclass(frozen=True)
class FieldInjection:
    """A class attribute tagged for injection."""
    name: str
    declared_type: type
    qualifier: Optional[str] = None
    lazy: bool = False


@dataclass(frozen=True)
class MethodInjection:
    """A method tagged for injection together with its parameters."""
    name: str
    function: Callable[..., Any]
    parameters: Tuple[InjectionPoint, ...]


@dataclass(frozen=True)
class PropertyCondition:
    """
    Registration gate on an external property.

    A missing property matches only when ``match_if_missing`` is set. With
    no expected value, any value other than ``"false"`` matches.
    """
    key: str
    having_value: str = ""
    match_if_missing: bool = False


@dataclass(frozen=True)
class BeanCondition:
    """Registration gate on the presence or absence of other registrations."""
    types: Tuple[type, ...]
    present: bool = True


@dataclass(frozen=True)
class TypeDescriptor:
    """
    Static metadata about a registrable type.

    Attributes:
        type_: The described class
        injectable: Whether the class is container-managed
        scope: Declared scope, PROTOTYPE unless tagged otherwise
        qualifier: Declared qualifier name
        primary: Whether the class is the default among its interface peers
        lazy: Whether interface-typed requests get a deferred proxy
        constructor: Constructor parameters, or None if no constructor fits
        constructor_error: Why no constructor fits, when ``constructor`` is None
        fields: Injectable fields in resolution order
        methods: Injectable methods in resolution order
        post_construct: Name of the post-init hook
        pre_destroy: Name of the teardown hook
        property_conditions: Property gates, ANDed
        bean_conditions: Registration gates, ANDed
    """
    type_: type
    injectable: bool = False
    scope: Scope = Scope.PROTOTYPE
    qualifier: Optional[str] = None
    primary: bool = False
    lazy: bool = False
    constructor: Optional[Tuple[InjectionPoint, ...]] = None
    constructor_error: Optional[str] = None
    fields: Tuple[FieldInjection, ...] = ()
    methods: Tuple[MethodInjection, ...] = ()
    post_construct: Optional[str] = None
    pre_destroy: Optional[str] = None
    property_conditions: Tuple[PropertyCondition, ...] = ()
    bean_conditions: Tuple[BeanCondition, ...] = field(default_factory=tuple)

    @property
    def is_conditional(self) -> bool:
        return bool(self.property_conditions or self.bean_conditions)
