"""
lightwire - a small inversion-of-control container.

Classes are marked with decorators, registered explicitly or discovered
by package scanning, and built on demand with constructor, field and
method injection, singleton and prototype scopes, lazy proxies,
conditional registration and ordered teardown.
"""

from .core.entities import BeanDefinition, Scope
from .di import BindingBuilder, Container, ContainerBuilder
from .infrastructure.config import PropertyLoader
from .infrastructure.introspection import (
    Inject,
    Lazy,
    Named,
    conditional_on_bean,
    conditional_on_missing_bean,
    conditional_on_property,
    inject,
    injectable,
    lazy,
    named,
    post_construct,
    pre_destroy,
    primary,
    singleton
)
from .proxy import is_initialized, is_lazy_proxy
from .shared.exceptions import (
    AmbiguousBindingError,
    BeanNotFoundError,
    CircularDependencyError,
    ConstructionError,
    ContainerClosedError,
    ContainerError,
    NotInjectableError,
    TeardownError
)
from .shared.logging import LogLevel, configure_logging

__version__ = "1.0.0"

__all__ = [
    'BeanDefinition',
    'Scope',
    'BindingBuilder',
    'Container',
    'ContainerBuilder',
    'PropertyLoader',
    'Inject',
    'Lazy',
    'Named',
    'conditional_on_bean',
    'conditional_on_missing_bean',
    'conditional_on_property',
    'inject',
    'injectable',
    'lazy',
    'named',
    'post_construct',
    'pre_destroy',
    'primary',
    'singleton',
    'is_initialized',
    'is_lazy_proxy',
    'AmbiguousBindingError',
    'BeanNotFoundError',
    'CircularDependencyError',
    'ConstructionError',
    'ContainerClosedError',
    'ContainerError',
    'NotInjectableError',
    'TeardownError',
    'LogLevel',
    'configure_logging'
]
