"""
Metadata markers for container-managed classes.

Class decorators record metadata on the decorated class itself (never
inherited by subclasses). Method decorators flag functions. Field and
parameter markers are used inside ``typing.Annotated``::

    @singleton
    @named("redis")
    class RedisCache(Cache):
        clock: Annotated[Clock, Inject]
        audit: Annotated[AuditLog, Inject, Lazy]

        def __init__(self, settings: Annotated[Settings, Named("cache")]):
            ...

        @pre_destroy
        def close(self):
            ...
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ...core.entities import BeanCondition, PropertyCondition, Scope

METADATA_ATTR = "__lightwire_metadata__"
INJECT_ATTR = "__lightwire_inject__"
POST_CONSTRUCT_ATTR = "__lightwire_post_construct__"
PRE_DESTROY_ATTR = "__lightwire_pre_destroy__"


class _Marker:
    """Singleton marker object placed in ``Annotated`` metadata."""

    def __init__(self, name: str):
        self._name = name

    def __repr__(self) -> str:
        return self._name


Inject = _Marker("Inject")
Lazy = _Marker("Lazy")


@dataclass(frozen=True)
class Named:
    """Qualifier marker for fields and parameters."""
    value: str


def class_metadata(cls: type) -> Dict[str, Any]:
    """
    Return the metadata declared directly on ``cls``.

    Args:
        cls: Class to read

    Returns:
        Dict[str, Any]: Declared metadata, empty when undecorated
    """
    return cls.__dict__.get(METADATA_ATTR, {})


def _own_metadata(cls: type) -> Dict[str, Any]:
    if METADATA_ATTR not in cls.__dict__:
        setattr(cls, METADATA_ATTR, {})
    return cls.__dict__[METADATA_ATTR]


def _class_decorator(**values: Any) -> Callable[[type], type]:
    def decorator(cls: type) -> type:
        if not isinstance(cls, type):
            raise TypeError(f"{cls!r} is not a class")
        _own_metadata(cls).update(values)
        return cls
    return decorator


def injectable(cls: Optional[type] = None):
    """Mark a class as container-managed. Usable with or without parentheses."""
    decorator = _class_decorator(injectable=True)
    return decorator if cls is None else decorator(cls)


def singleton(cls: Optional[type] = None):
    """Mark a class as container-managed with one shared instance."""
    decorator = _class_decorator(injectable=True, scope=Scope.SINGLETON)
    return decorator if cls is None else decorator(cls)


def named(name: str) -> Callable[[type], type]:
    """Give a class a qualifier name."""
    if not name:
        raise ValueError("Qualifier name must be a non-empty string")
    return _class_decorator(qualifier=name)


def primary(cls: Optional[type] = None):
    """Make a class the default among implementations of its interfaces."""
    decorator = _class_decorator(primary=True)
    return decorator if cls is None else decorator(cls)


def lazy(cls: Optional[type] = None):
    """Defer construction behind a proxy when requested through an interface."""
    decorator = _class_decorator(lazy=True)
    return decorator if cls is None else decorator(cls)


def _append_condition(key: str, condition: Any) -> Callable[[type], type]:
    def decorator(cls: type) -> type:
        metadata = _own_metadata(cls)
        metadata[key] = metadata.get(key, ()) + (condition,)
        return cls
    return decorator


def conditional_on_property(
    key: str,
    having_value: str = "",
    match_if_missing: bool = False
) -> Callable[[type], type]:
    """
    Register the class only when a property matches.

    Args:
        key: Property key
        having_value: Expected value; empty means "anything but false"
        match_if_missing: Whether a missing property matches
    """
    return _append_condition(
        "property_conditions",
        PropertyCondition(key, having_value, match_if_missing)
    )


def conditional_on_bean(*types: type) -> Callable[[type], type]:
    """Register the class only when all ``types`` are already registered."""
    return _append_condition("bean_conditions", BeanCondition(tuple(types), present=True))


def conditional_on_missing_bean(*types: type) -> Callable[[type], type]:
    """Register the class only when none of ``types`` is registered yet."""
    return _append_condition("bean_conditions", BeanCondition(tuple(types), present=False))


def inject(func: Callable) -> Callable:
    """Mark ``__init__`` as the injection constructor, or any other method for setter injection."""
    setattr(func, INJECT_ATTR, True)
    return func


def post_construct(func: Callable) -> Callable:
    """Mark a no-argument method to run after injection completes."""
    setattr(func, POST_CONSTRUCT_ATTR, True)
    return func


def pre_destroy(func: Callable) -> Callable:
    """Mark a no-argument method to run on shutdown."""
    setattr(func, PRE_DESTROY_ATTR, True)
    return func
