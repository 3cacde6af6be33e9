"""
Introspection interface definitions.

This module defines the contract between the resolution engine and the
component that turns a class into a TypeDescriptor.
"""

from abc import ABC, abstractmethod

from ..entities import TypeDescriptor


class TypeIntrospectorInterface(ABC):
    """Interface for producing type descriptors."""

    @abstractmethod
    def describe(self, type_: type) -> TypeDescriptor:
        """
        Describe a type.

        Args:
            type_: The class to describe

        Returns:
            TypeDescriptor: Metadata about the class

        Raises:
            ContainerError: If a hook or injectable method is malformed
        """
        pass

    @abstractmethod
    def is_interface(self, type_: type) -> bool:
        """
        Check whether a type is an interface.

        Args:
            type_: The type to check

        Returns:
            bool: True for abstract base classes
        """
        pass

    @abstractmethod
    def interfaces_of(self, type_: type) -> list:
        """
        List the interfaces a class implements.

        Args:
            type_: The class to inspect

        Returns:
            list: Interfaces from the whole superclass chain, in MRO order
        """
        pass
