"""
Property loader for YAML configuration.

This module provides a loader that reads a base file and an
environment-specific file, merges them, and flattens the result into the
string property bag used by conditional registration.
"""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from .environment_overrides import EnvironmentOverrides
from .property_validator import PropertyValidator

ENVIRONMENT_VARIABLE = "LIGHTWIRE_ENV"
DEFAULT_ENVIRONMENT = "development"


def to_property_value(value: Any) -> str:
    """
    Render a configuration value as a property string.

    Booleans become "true"/"false", None the empty string, and lists a
    comma-separated string.

    Args:
        value: Scalar or list value

    Returns:
        str: Property value
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ",".join(to_property_value(v) for v in value)
    return str(value)


class PropertyLoader:
    """
    Loader for property files.

    Looks for ``base.yaml`` and ``<environment>.yaml`` in a configuration
    directory; either may be absent.

    Example:
        >>> loader = PropertyLoader("config", environment="production")
        >>> loader.load()["cache.enabled"]
        'true'
    """

    def __init__(
        self,
        config_dir: Union[str, Path] = "config",
        environment: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None
    ):
        """
        Initialize the loader.

        Args:
            config_dir: Configuration directory path
            environment: Environment name, defaults to $LIGHTWIRE_ENV or development
            environ: Variable source for overrides, defaults to ``os.environ``
        """
        environ = environ if environ is not None else os.environ
        self.config_dir = Path(config_dir)
        self.environment = environment or environ.get(ENVIRONMENT_VARIABLE, DEFAULT_ENVIRONMENT)
        self.validator = PropertyValidator()
        self.overrides = EnvironmentOverrides(environ)

    def load(self) -> Dict[str, str]:
        """
        Load properties from the configuration directory.

        Returns:
            Dict[str, str]: Flat property bag

        Raises:
            ValueError: If configuration is invalid
        """
        base_config = self._load_optional("base.yaml")
        env_config = self._load_optional(f"{self.environment}.yaml")
        return self._to_properties(self._merge_configs(base_config, env_config))

    def load_file(self, path: Union[str, Path]) -> Dict[str, str]:
        """
        Load properties from a single YAML file.

        Args:
            path: File path

        Returns:
            Dict[str, str]: Flat property bag

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If configuration is invalid
        """
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")
        return self._to_properties(self._load_yaml(file_path))

    def _to_properties(self, config: Dict[str, Any]) -> Dict[str, str]:
        self.validator.validate_config(config)
        return self.overrides.apply(self._flatten(config))

    def _load_optional(self, filename: str) -> Dict[str, Any]:
        file_path = self.config_dir / filename
        if not file_path.exists():
            return {}
        return self._load_yaml(file_path)

    @staticmethod
    def _load_yaml(file_path: Path) -> Dict[str, Any]:
        """
        Load YAML configuration file.

        Args:
            file_path: File to read

        Returns:
            Dict[str, Any]: Loaded configuration, empty for an empty file

        Raises:
            ValueError: If the file is not valid YAML or not a mapping
        """
        try:
            with open(file_path, "r") as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {file_path}: {e}") from e
        if loaded is None:
            return {}
        if not isinstance(loaded, dict):
            raise ValueError(
                f"Configuration root in {file_path} must be a mapping, got {type(loaded).__name__}"
            )
        return loaded

    def _merge_configs(
        self,
        base: Dict[str, Any],
        override: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Merge two configurations.

        Args:
            base: Base configuration
            override: Override configuration

        Returns:
            Dict[str, Any]: Merged configuration
        """
        result = base.copy()

        for key, value in override.items():
            if (
                key in result and
                isinstance(result[key], dict) and
                isinstance(value, dict)
            ):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def _flatten(self, config: Dict[str, Any], prefix: str = "") -> Dict[str, str]:
        properties = {}
        for key, value in config.items():
            path = f"{prefix}.{key}" if prefix else key
            if isinstance(value, dict):
                properties.update(self._flatten(value, path))
            else:
                properties[path] = to_property_value(value)
        return properties
