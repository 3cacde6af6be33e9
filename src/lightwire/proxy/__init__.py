"""
Deferred instantiation through lazy proxies.
"""

from .lazy_proxy import LazyProxy
from .proxy_factory import ProxyFactory, default_proxy_factory, is_initialized, is_lazy_proxy

__all__ = [
    'LazyProxy',
    'ProxyFactory',
    'default_proxy_factory',
    'is_initialized',
    'is_lazy_proxy'
]
