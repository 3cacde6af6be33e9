"""
Type introspection.

This module turns a decorated class into a TypeDescriptor: constructor
parameters, injectable fields and methods, lifecycle hooks, and the
class-level tags declared with the markers in ``markers.py``.
"""

import inspect
import threading
from abc import ABC, ABCMeta
from typing import (
    Annotated,
    Any,
    Callable,
    Generic,
    List,
    Optional,
    Protocol,
    Tuple,
    get_args,
    get_origin,
    get_type_hints
)
from weakref import WeakKeyDictionary

from ...core.entities import (
    FieldInjection,
    InjectionPoint,
    MethodInjection,
    Scope,
    TypeDescriptor
)
from ...core.interfaces import TypeIntrospectorInterface
from ...shared.exceptions import ContainerError
from .markers import (
    INJECT_ATTR,
    POST_CONSTRUCT_ATTR,
    PRE_DESTROY_ATTR,
    Inject,
    Lazy,
    Named,
    class_metadata
)

_NOT_INTERFACES = (ABC, Protocol, Generic, object)
_SKIPPED_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


def unwrap_annotation(annotation: Any) -> Tuple[Any, Optional[str], tuple]:
    """
    Split an annotation into its type, qualifier and extra metadata.

    ``Annotated[Cache, Named("redis")]`` and ``Annotated[Cache, "redis"]``
    both yield ``(Cache, "redis", ...)``.

    Args:
        annotation: Annotation from ``get_type_hints(include_extras=True)``

    Returns:
        Tuple[Any, Optional[str], tuple]: Base type, qualifier, metadata
    """
    if get_origin(annotation) is not Annotated:
        return annotation, None, ()

    base_type, *metadata = get_args(annotation)
    qualifier = next((m.value for m in metadata if isinstance(m, Named)), None)
    if qualifier is None:
        qualifier = next((m for m in metadata if isinstance(m, str)), None)
    return base_type, qualifier, tuple(metadata)


def _has_marker(metadata: tuple, marker: Any) -> bool:
    return any(m is marker for m in metadata)


class TypeIntrospector(TypeIntrospectorInterface):
    """
    Builds and caches type descriptors.

    Descriptors are computed once per class. Malformed hooks and
    parameterless ``@inject`` methods raise ContainerError from
    ``describe``, so they surface at registration.
    """

    def __init__(self):
        """Initialize introspector."""
        self._descriptors: "WeakKeyDictionary[type, TypeDescriptor]" = WeakKeyDictionary()
        self._lock = threading.Lock()

    def describe(self, type_: type) -> TypeDescriptor:
        """
        Describe a class, using the cached descriptor when available.

        Args:
            type_: Class to describe

        Returns:
            TypeDescriptor: Metadata about the class
        """
        with self._lock:
            descriptor = self._descriptors.get(type_)
        if descriptor is not None:
            return descriptor

        descriptor = self._build_descriptor(type_)
        with self._lock:
            return self._descriptors.setdefault(type_, descriptor)

    def is_interface(self, type_: Any) -> bool:
        if not inspect.isclass(type_) or type_ in _NOT_INTERFACES:
            return False
        if getattr(type_, "_is_protocol", False):
            return True
        return isinstance(type_, ABCMeta) and (
            inspect.isabstract(type_) or ABC in type_.__bases__
        )

    def interfaces_of(self, type_: type) -> List[type]:
        return [base for base in type_.__mro__[1:] if self.is_interface(base)]

    def _build_descriptor(self, cls: type) -> TypeDescriptor:
        metadata = class_metadata(cls)
        constructor, constructor_error = self._describe_constructor(cls)
        post_construct = self._find_hook(cls, POST_CONSTRUCT_ATTR, "@post_construct")

        return TypeDescriptor(
            type_=cls,
            injectable=metadata.get("injectable", False),
            scope=metadata.get("scope", Scope.PROTOTYPE),
            qualifier=metadata.get("qualifier"),
            primary=metadata.get("primary", False),
            lazy=metadata.get("lazy", False),
            constructor=constructor,
            constructor_error=constructor_error,
            fields=self._describe_fields(cls),
            methods=self._describe_methods(cls, post_construct),
            post_construct=post_construct,
            pre_destroy=self._find_hook(cls, PRE_DESTROY_ATTR, "@pre_destroy"),
            property_conditions=metadata.get("property_conditions", ()),
            bean_conditions=metadata.get("bean_conditions", ())
        )

    def _describe_constructor(
        self,
        cls: type
    ) -> Tuple[Optional[Tuple[InjectionPoint, ...]], Optional[str]]:
        """
        Describe the parameters of ``cls.__init__``.

        Returns:
            Tuple: Injection points and ``None``, or ``None`` and the reason
            no constructor is usable
        """
        init = cls.__init__
        if init is object.__init__:
            return (), None

        try:
            signature = inspect.signature(init)
            hints = get_type_hints(init, include_extras=True)
        except (NameError, TypeError, ValueError) as e:
            return None, f"Cannot read constructor of {cls.__qualname__}: {e}"

        points = []
        for parameter in list(signature.parameters.values())[1:]:
            if parameter.kind in _SKIPPED_KINDS:
                continue
            has_default = parameter.default is not inspect.Parameter.empty
            annotation = hints.get(parameter.name)

            if annotation is None:
                if has_default:
                    continue
                return None, (
                    f"Constructor parameter '{parameter.name}' of {cls.__qualname__} "
                    "has no type annotation and no default. Annotate it or give it a default."
                )
            if parameter.kind is inspect.Parameter.POSITIONAL_ONLY:
                return None, (
                    f"Constructor parameter '{parameter.name}' of {cls.__qualname__} "
                    "is positional-only"
                )

            declared_type, qualifier, _ = unwrap_annotation(annotation)
            points.append(InjectionPoint(
                parameter_name=parameter.name,
                declared_type=declared_type,
                qualifier=qualifier,
                default=parameter.default if has_default else None,
                has_default=has_default
            ))
        return tuple(points), None

    def _describe_fields(self, cls: type) -> Tuple[FieldInjection, ...]:
        """Collect ``Annotated[T, Inject]`` attributes, subclass first."""
        fields = []
        seen = set()
        for klass in cls.__mro__:
            if klass is object:
                continue
            own = inspect.get_annotations(klass)
            if not own:
                continue
            try:
                hints = get_type_hints(klass, include_extras=True)
            except (NameError, TypeError) as e:
                raise ContainerError(
                    f"Cannot resolve field annotations of {klass.__qualname__}: {e}"
                ) from e

            for name in own:
                if name in seen:
                    continue
                seen.add(name)
                declared_type, qualifier, metadata = unwrap_annotation(hints.get(name))
                if not _has_marker(metadata, Inject):
                    continue
                fields.append(FieldInjection(
                    name=name,
                    declared_type=declared_type,
                    qualifier=qualifier,
                    lazy=_has_marker(metadata, Lazy)
                ))
        return tuple(fields)

    def _describe_methods(
        self,
        cls: type,
        post_construct: Optional[str]
    ) -> Tuple[MethodInjection, ...]:
        """Collect ``@inject`` methods other than ``__init__`` and the post-init hook."""
        methods = []
        for name, function in self._own_functions(cls):
            if name == "__init__" or name == post_construct:
                continue
            if not getattr(function, INJECT_ATTR, False):
                continue
            parameters = self._method_parameters(cls, name, function)
            if not parameters:
                raise ContainerError(
                    f"@inject method must have at least one parameter: {cls.__qualname__}.{name}"
                )
            methods.append(MethodInjection(name, function, parameters))
        return tuple(methods)

    def _method_parameters(
        self,
        cls: type,
        name: str,
        function: Callable
    ) -> Tuple[InjectionPoint, ...]:
        try:
            signature = inspect.signature(function)
            hints = get_type_hints(function, include_extras=True)
        except (NameError, TypeError, ValueError) as e:
            raise ContainerError(
                f"Cannot read signature of {cls.__qualname__}.{name}: {e}"
            ) from e

        points = []
        for parameter in list(signature.parameters.values())[1:]:
            if parameter.kind in _SKIPPED_KINDS:
                continue
            annotation = hints.get(parameter.name)
            if annotation is None:
                raise ContainerError(
                    f"Parameter '{parameter.name}' of @inject method "
                    f"{cls.__qualname__}.{name} has no type annotation"
                )
            declared_type, qualifier, _ = unwrap_annotation(annotation)
            has_default = parameter.default is not inspect.Parameter.empty
            points.append(InjectionPoint(
                parameter_name=parameter.name,
                declared_type=declared_type,
                qualifier=qualifier,
                default=parameter.default if has_default else None,
                has_default=has_default
            ))
        return tuple(points)

    def _find_hook(self, cls: type, attr: str, label: str) -> Optional[str]:
        """Locate and validate a lifecycle hook, returning its name."""
        for name, function in self._own_functions(cls):
            if not getattr(function, attr, False):
                continue
            signature = inspect.signature(function)
            if len(signature.parameters) != 1:
                raise ContainerError(
                    f"{label} method must have no parameters: {cls.__qualname__}.{name}"
                )
            if signature.return_annotation not in (inspect.Signature.empty, None, "None"):
                raise ContainerError(
                    f"{label} method must return None: {cls.__qualname__}.{name}"
                )
            return name
        return None

    @staticmethod
    def _own_functions(cls: type):
        """
        Yield ``(name, function)`` for plain methods, subclass first.

        A name is reported once, from the most derived class defining it,
        so an undecorated override hides a decorated base method.
        """
        seen = set()
        for klass in cls.__mro__:
            if klass is object:
                continue
            for name, value in vars(klass).items():
                if name in seen:
                    continue
                seen.add(name)
                if inspect.isfunction(value):
                    yield name, value


default_introspector = TypeIntrospector()
