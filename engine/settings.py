"""Engine configuration.

The engine never reads Django settings. The hosting app builds an
`EngineSettings` from its `CHART_ENGINE` dict and passes it in.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final

DEFAULT_CACHE_MAX_ENTRIES: Final[int] = 128
DEFAULT_WIDTH: Final[int] = 800
DEFAULT_HEIGHT: Final[int] = 400


@dataclass(frozen=True, slots=True)
class EngineSettings:
    """Runtime options for the chart engine.

    Args:
        discovery_cache_max_entries: Upper bound on memoized discovery results.
        default_theme: Name of the theme applied when a render call passes none.
        default_width: Width used when a render call passes no dimensions.
        default_height: Height used when a render call passes no dimensions.
        suppress_legend_toggle: Whether legend clicks are reported instead of
            toggling series visibility natively.
        catalog_files: Extra YAML catalog files registered at bootstrap.
    """

    discovery_cache_max_entries: int = DEFAULT_CACHE_MAX_ENTRIES
    default_theme: str = "light"
    default_width: int = DEFAULT_WIDTH
    default_height: int = DEFAULT_HEIGHT
    suppress_legend_toggle: bool = False
    catalog_files: tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None) -> EngineSettings:
        """Build settings from a `CHART_ENGINE`-style dict (upper-case keys)."""

        options = options or {}
        defaults = cls()
        return cls(
            discovery_cache_max_entries=int(
                options.get("DISCOVERY_CACHE_MAX_ENTRIES", defaults.discovery_cache_max_entries)
            ),
            default_theme=str(options.get("DEFAULT_THEME", defaults.default_theme)),
            default_width=int(options.get("DEFAULT_WIDTH", defaults.default_width)),
            default_height=int(options.get("DEFAULT_HEIGHT", defaults.default_height)),
            suppress_legend_toggle=bool(
                options.get("SUPPRESS_LEGEND_TOGGLE", defaults.suppress_legend_toggle)
            ),
            catalog_files=tuple(str(path) for path in options.get("CATALOG_FILES", ())),
        )
