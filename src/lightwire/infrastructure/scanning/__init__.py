"""
Discovery of injectable classes in packages.
"""

from .module_scanner import ModuleScanner

__all__ = ['ModuleScanner']
