"""
Dependency injection container and its collaborators.
"""

from .bean_registry import BeanRegistry, definition_from
from .circular_dependency_detector import CircularDependencyDetector
from .conditions import ConditionEvaluator, bean_condition_matches, property_matches
from .container import Container
from .container_builder import BindingBuilder, ContainerBuilder
from .lifetime_manager import LifetimeManager

__all__ = [
    'BeanRegistry',
    'BindingBuilder',
    'CircularDependencyDetector',
    'ConditionEvaluator',
    'Container',
    'ContainerBuilder',
    'LifetimeManager',
    'bean_condition_matches',
    'definition_from',
    'property_matches'
]
