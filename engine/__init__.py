"""Pure chart plugin engine for chartworks.

This package holds the plugin registry, configuration and data validation,
discovery, the factory, and the per-library rendering adapters. It operates on
in-memory inputs only and must not import Django.
"""

from .factory import FactoryService
from .registry import PluginRegistry, build_registry

__all__ = ["FactoryService", "PluginRegistry", "build_registry"]
