"""Renderable chart instances and their presentation context.

A RenderableChart is produced by the factory for one render call: validated
config, bound data, dimensions and theme. Exactly one adapter owns its native
resources between mount and unmount, tracked through `adapter_handle`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Final

from .categories import InteractionKind, LibraryFamily
from .data_checker import Column

if TYPE_CHECKING:
    from .adapters.base import AdapterHandle


@dataclass(frozen=True, slots=True)
class Margin:
    """Outer spacing around the plot area, in pixels."""

    top: int = 40
    right: int = 40
    bottom: int = 60
    left: int = 60


@dataclass(frozen=True, slots=True)
class Dimensions:
    """Drawing surface size supplied by the host."""

    width: int
    height: int
    margin: Margin = Margin()

    @property
    def inner_width(self) -> int:
        """Width of the plot area after margins (never negative)."""

        return max(0, self.width - self.margin.left - self.margin.right)

    @property
    def inner_height(self) -> int:
        """Height of the plot area after margins (never negative)."""

        return max(0, self.height - self.margin.top - self.margin.bottom)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> Dimensions:
        """Build dimensions from `{width, height, margin?}`."""

        margin = payload.get("margin") or {}
        if not isinstance(margin, Mapping):
            raise ValueError("margin must be a mapping of side to pixels.")
        default = Margin()
        return cls(
            width=int(payload["width"]),
            height=int(payload["height"]),
            margin=Margin(
                top=int(margin.get("top", default.top)),
                right=int(margin.get("right", default.right)),
                bottom=int(margin.get("bottom", default.bottom)),
                left=int(margin.get("left", default.left)),
            ),
        )

    def as_json(self) -> dict[str, Any]:
        """Return a JSON-serializable representation."""

        return {
            "width": self.width,
            "height": self.height,
            "margin": {
                "top": self.margin.top,
                "right": self.margin.right,
                "bottom": self.margin.bottom,
                "left": self.margin.left,
            },
        }


@dataclass(frozen=True, slots=True)
class Theme:
    """Colors and fonts applied to a rendered chart."""

    name: str
    palette: tuple[str, ...] = ()
    background_color: str = "transparent"
    text_color: str = "#333333"
    axis_color: str = "#666666"
    grid_color: str = "#e0e0e0"
    font_family: str = "Inter, system-ui, sans-serif"
    font_size: int = 12


THEMES: Final[dict[str, Theme]] = {
    "light": Theme(name="light"),
    "dark": Theme(
        name="dark",
        background_color="#111827",
        text_color="#e5e7eb",
        axis_color="#9ca3af",
        grid_color="#374151",
    ),
}


def resolve_theme(theme: Theme | Mapping[str, Any] | str | None, *, default: str = "light") -> Theme:
    """Return a Theme for a name, a partial mapping, or None.

    Mappings override fields of the named base theme (`name`, default
    `default`). Unknown names fall back to the light theme.

    Raises:
        ValueError: When `theme` is not a Theme, mapping, string or None.
    """

    if isinstance(theme, Theme):
        return theme
    base = THEMES.get(default, THEMES["light"])
    if theme is None:
        return base
    if isinstance(theme, str):
        return THEMES.get(theme, base)
    if not isinstance(theme, Mapping):
        raise ValueError(f"theme must be a name or a mapping, not {type(theme).__name__}.")

    base = THEMES.get(str(theme.get("name", default)), base)
    overrides: dict[str, Any] = {}
    for key in ("background_color", "text_color", "axis_color", "grid_color", "font_family"):
        if isinstance(theme.get(key), str):
            overrides[key] = theme[key]
    if isinstance(theme.get("font_size"), int):
        overrides["font_size"] = theme["font_size"]
    palette = theme.get("palette")
    if isinstance(palette, (list, tuple)):
        overrides["palette"] = tuple(str(color) for color in palette)
    return replace(base, **overrides)


@dataclass(slots=True)
class RenderableChart:
    """A validated, data-bound chart ready to be mounted by an adapter.

    Args:
        chart_id: Identifier for this render (stamped on interaction events).
        plugin_id: Descriptor id the chart was created from.
        library: Rendering library family.
        params: Plugin-specific rendering parameters.
        capabilities: Interaction kinds the chart emits.
        config: Validated, fully defaulted config.
        data: Bound rows.
        columns: Dataset columns.
        dimensions: Drawing surface size.
        theme: Resolved theme.
        adapter_handle: Live adapter handle while mounted, otherwise None.
    """

    chart_id: str
    plugin_id: str
    library: LibraryFamily
    params: Mapping[str, Any]
    capabilities: frozenset[InteractionKind]
    config: Mapping[str, Any]
    data: tuple[Mapping[str, Any], ...]
    columns: tuple[Column, ...]
    dimensions: Dimensions
    theme: Theme
    adapter_handle: AdapterHandle | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        self.params = MappingProxyType(dict(self.params))
        self.config = MappingProxyType(dict(self.config))

    @property
    def is_mounted(self) -> bool:
        """Whether an adapter currently owns native resources for this chart."""

        return self.adapter_handle is not None and not self.adapter_handle.released

    def column_names(self) -> tuple[str, ...]:
        """Return bound column names in order."""

        return tuple(column.name for column in self.columns)

    def values(self, name: str | None) -> list[Any]:
        """Return one column's values across rows; empty when `name` is None."""

        if not name:
            return []
        return [row.get(name) for row in self.data]

    def option(self, key: str, default: Any = None) -> Any:
        """Return a config value, falling back to a params value, then `default`."""

        if self.config.get(key) is not None:
            return self.config[key]
        return self.params.get(key, default)

    def bound_column(self, param_key: str) -> str | None:
        """Return the column named by the config key stored under `params[param_key]`."""

        config_key = self.params.get(param_key)
        if not config_key:
            return None
        value = self.config.get(config_key)
        return value if isinstance(value, str) and value else None
