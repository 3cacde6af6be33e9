"""
Core entities for the lightwire container.

This module provides access to the data types shared by the resolution
engine and its collaborators.
"""

from .bean_definition import BeanDefinition, Scope
from .type_descriptor import (
    BeanCondition,
    FieldInjection,
    InjectionPoint,
    MethodInjection,
    PropertyCondition,
    TypeDescriptor
)

__all__ = [
    'BeanDefinition',
    'Scope',
    'BeanCondition',
    'FieldInjection',
    'InjectionPoint',
    'MethodInjection',
    'PropertyCondition',
    'TypeDescriptor'
]
