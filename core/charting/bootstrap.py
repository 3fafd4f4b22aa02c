"""Process-wide chart engine bootstrap.

`CoreConfig.ready` calls `bootstrap()` once so registration errors abort
startup. Views and management commands read the engine through
`get_engine()`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from engine.cache import DiscoveryCache
from engine.descriptors import PluginDescriptor
from engine.discovery import DiscoveryService
from engine.factory import FactoryService
from engine.registry import PluginRegistry, build_registry
from engine.settings import EngineSettings

from .catalog import BUILTIN_DESCRIPTORS
from .catalog_loader import load_catalog_files

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ChartEngine:
    """Registry plus the services built on top of it."""

    settings: EngineSettings
    registry: PluginRegistry
    discovery: DiscoveryService
    factory: FactoryService


_ENGINE: ChartEngine | None = None


def build_engine(
    options: Mapping[str, Any] | None = None,
    *,
    descriptors: Iterable[PluginDescriptor] | None = None,
) -> ChartEngine:
    """Build a ChartEngine from `CHART_ENGINE`-style options.

    Args:
        options: Engine options dict (upper-case keys).
        descriptors: Descriptors to register; defaults to the built-in
            catalog followed by any configured catalog files.

    Returns:
        A fully built ChartEngine.
    """

    settings = EngineSettings.from_mapping(options)
    if descriptors is None:
        descriptors = (*BUILTIN_DESCRIPTORS, *load_catalog_files(settings.catalog_files))
    registry = build_registry(descriptors)
    return ChartEngine(
        settings=settings,
        registry=registry,
        discovery=DiscoveryService(
            registry,
            cache=DiscoveryCache(max_entries=settings.discovery_cache_max_entries),
        ),
        factory=FactoryService(registry, settings=settings),
    )


def bootstrap() -> ChartEngine:
    """Build the process engine from Django settings and install it."""

    from django.conf import settings

    global _ENGINE
    _ENGINE = build_engine(getattr(settings, "CHART_ENGINE", None))
    stats = _ENGINE.registry.registration_stats()
    logger.info("Chart engine ready: %s", stats.as_json())
    return _ENGINE


def get_engine() -> ChartEngine:
    """Return the process engine, bootstrapping it on first use."""

    if _ENGINE is None:
        return bootstrap()
    return _ENGINE
