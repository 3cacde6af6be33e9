"""
Property validator for loaded configuration.

This module provides a validator that checks a nested configuration
mapping can be flattened into a property bag.
"""

from typing import Any, Dict, List

_SCALARS = (str, int, float, bool)


class PropertyValidator:
    """
    Validator for configuration trees.

    Keys must be strings; leaves must be scalars, None, or lists of
    scalars. All problems are collected before raising.
    """

    def __init__(self):
        """Initialize the validator."""
        self.errors: List[str] = []

    def validate_config(self, config: Dict[str, Any]) -> None:
        """
        Validate configuration.

        Args:
            config: Configuration to validate

        Raises:
            ValueError: If configuration is invalid
        """
        self.errors = []

        if not isinstance(config, dict):
            self.errors.append(
                f"Configuration root must be a mapping, got {type(config).__name__}"
            )
        else:
            self._validate_mapping(config, "")

        if self.errors:
            raise ValueError("\n".join(self.errors))

    def _validate_mapping(self, config: Dict[Any, Any], prefix: str) -> None:
        for key, value in config.items():
            if not isinstance(key, str) or not key:
                self.errors.append(
                    f"Configuration key {key!r} under '{prefix or '<root>'}' must be a non-empty string"
                )
                continue

            path = f"{prefix}.{key}" if prefix else key
            if isinstance(value, dict):
                self._validate_mapping(value, path)
            elif isinstance(value, list):
                self._validate_list(value, path)
            elif value is not None and not isinstance(value, _SCALARS):
                self.errors.append(
                    f"Property '{path}' has unsupported type {type(value).__name__}"
                )

    def _validate_list(self, values: List[Any], path: str) -> None:
        for index, value in enumerate(values):
            if not isinstance(value, _SCALARS):
                self.errors.append(
                    f"Property '{path}[{index}]' must be a scalar, got {type(value).__name__}"
                )
