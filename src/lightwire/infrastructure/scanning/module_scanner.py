"""
Package scanner.

This module provides a scanner that imports a package and all of its
submodules and collects the classes marked as injectable.
"""

import importlib
import inspect
import pkgutil
from types import ModuleType
from typing import List

from ...core.interfaces import TypeScannerInterface
from ...shared.exceptions import ContainerError
from ..introspection.markers import class_metadata


class ModuleScanner(TypeScannerInterface):
    """
    Scanner backed by ``pkgutil.walk_packages``.

    Only classes defined in a scanned module are collected, so a class
    imported from elsewhere is not picked up twice. Results are sorted by
    module and qualified name.
    """

    def scan(self, package_name: str) -> List[type]:
        """
        Discover injectable classes in a package.

        Args:
            package_name: Dotted name of the package or module

        Returns:
            List[type]: Discovered classes

        Raises:
            ContainerError: If the package or one of its modules fails to import
        """
        package = self._import(package_name)

        discovered = list(self._scan_module(package))
        package_path = getattr(package, "__path__", None)
        if package_path:
            for module_info in pkgutil.walk_packages(
                path=package_path,
                prefix=package.__name__ + ".",
                onerror=self._raise_import_error
            ):
                module = self._import(module_info.name)
                discovered.extend(self._scan_module(module))

        unique = {id(cls): cls for cls in discovered}
        return sorted(unique.values(), key=lambda cls: (cls.__module__, cls.__qualname__))

    @staticmethod
    def _import(module_name: str) -> ModuleType:
        try:
            return importlib.import_module(module_name)
        except Exception as e:
            raise ContainerError(f"Failed to import {module_name} while scanning: {e}") from e

    @staticmethod
    def _raise_import_error(module_name: str) -> None:
        raise ContainerError(f"Failed to import {module_name} while scanning")

    @staticmethod
    def _scan_module(module: ModuleType) -> List[type]:
        return [
            member
            for _, member in inspect.getmembers(module, inspect.isclass)
            if member.__module__ == module.__name__
            and class_metadata(member).get("injectable", False)
        ]
