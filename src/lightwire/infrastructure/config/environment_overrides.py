"""
Environment variable overrides for properties.

An environment variable ``LIGHTWIRE_<KEY>`` replaces the value of an
already-present property, where ``<KEY>`` is the property key upper-cased
with dots and dashes turned into underscores.
"""

import os
from typing import Dict, Mapping, Optional

ENV_PREFIX = "LIGHTWIRE_"


def environment_variable_for(key: str, prefix: str = ENV_PREFIX) -> str:
    """
    Get the environment variable name overriding a property.

    Args:
        key: Dotted property key
        prefix: Variable name prefix

    Returns:
        str: Variable name, e.g. ``LIGHTWIRE_DATABASE_URL`` for ``database.url``
    """
    return prefix + key.upper().replace(".", "_").replace("-", "_")


class EnvironmentOverrides:
    """
    Applies environment variable overrides to a property bag.

    Only keys already present are overridden; the environment never
    introduces new properties.
    """

    def __init__(
        self,
        environ: Optional[Mapping[str, str]] = None,
        prefix: str = ENV_PREFIX
    ):
        """
        Initialize overrides.

        Args:
            environ: Variable source, defaults to ``os.environ``
            prefix: Variable name prefix
        """
        self._environ = environ if environ is not None else os.environ
        self.prefix = prefix

    def apply(self, properties: Dict[str, str]) -> Dict[str, str]:
        """
        Override properties in place.

        Args:
            properties: Flat property bag

        Returns:
            Dict[str, str]: The same bag, for chaining
        """
        for key in list(properties):
            variable = environment_variable_for(key, self.prefix)
            if variable in self._environ:
                properties[key] = self._environ[variable]
        return properties
