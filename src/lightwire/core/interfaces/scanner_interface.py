"""
Scanner interface definitions.

This module defines the contract for discovering candidate types.
"""

from abc import ABC, abstractmethod
from typing import List


class TypeScannerInterface(ABC):
    """Interface for discovering injectable types."""

    @abstractmethod
    def scan(self, package_name: str) -> List[type]:
        """
        Discover injectable classes in a package.

        Args:
            package_name: Dotted name of the package or module

        Returns:
            List[type]: Discovered classes in a stable order
        """
        pass
