"""Adapters — bindings for external commands and the managed files.

Public re-exports for convenient access.
"""

from dotkit.adapters.base import Adapter, ExecutionContext
from dotkit.adapters.mock import MockAdapter
from dotkit.adapters.registry import AdapterRegistry, default_registry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "ExecutionContext",
    "MockAdapter",
    "default_registry",
]
