"""
Property configuration loaded from YAML files and the environment.
"""

from .environment_overrides import ENV_PREFIX, EnvironmentOverrides, environment_variable_for
from .property_loader import PropertyLoader, to_property_value
from .property_validator import PropertyValidator

__all__ = [
    'ENV_PREFIX',
    'EnvironmentOverrides',
    'PropertyLoader',
    'PropertyValidator',
    'environment_variable_for',
    'to_property_value'
]
