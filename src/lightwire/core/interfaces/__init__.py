"""
Core interfaces module for lightwire.

This module provides access to the collaborator contracts the resolution
engine depends on.
"""

from .introspector_interface import TypeIntrospectorInterface
from .scanner_interface import TypeScannerInterface

__all__ = [
    'TypeIntrospectorInterface',
    'TypeScannerInterface'
]
