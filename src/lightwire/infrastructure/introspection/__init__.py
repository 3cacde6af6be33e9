"""
Metadata markers and the introspector that reads them.
"""

from .markers import (
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
from .type_introspector import TypeIntrospector, default_introspector, unwrap_annotation

__all__ = [
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
    'TypeIntrospector',
    'default_introspector',
    'unwrap_annotation'
]
