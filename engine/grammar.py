"""Library-agnostic chart grammar shared by every rendering adapter.

Config carries series, axes, legend and colors in one neutral vocabulary; each
adapter reads the parsed specs below and emits its own native structure:

    {
        "series": [{"type": "line", "field": "amount", "smooth": true}],
        "axes": {"x": {"field": "month", "type": "category", "labelRotation": 45}},
        "legend": {"show": true, "position": "bottom-left"},
        "colors": ["#3b82f6", "#ef4444"],
    }

Plugins name their category and value bindings in `params` (`category_key`,
`value_key`), so a config like `{"xField": "month", "yField": "amount"}` needs
no explicit series list.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final, Literal

from .categories import LibraryFamily, ValueType
from .chart import RenderableChart

SeriesType = Literal["line", "bar", "scatter", "area", "pie"]
AxisType = Literal["category", "value", "time", "log"]
Horizontal = Literal["left", "center", "right"]
Vertical = Literal["top", "middle", "bottom"]

SERIES_TYPES: Final[frozenset[str]] = frozenset({"line", "bar", "scatter", "area", "pie"})
AXIS_TYPES: Final[frozenset[str]] = frozenset({"category", "value", "time", "log"})

LIBRARY_DEFAULT_PALETTES: Final[dict[LibraryFamily, tuple[str, ...]]] = {
    LibraryFamily.echarts: ("#3b82f6", "#ef4444", "#10b981", "#f59e0b", "#8b5cf6"),
    LibraryFamily.chartjs: (
        "rgba(54, 162, 235, 0.6)",
        "rgba(255, 99, 132, 0.6)",
        "rgba(75, 192, 192, 0.6)",
        "rgba(255, 206, 86, 0.6)",
        "rgba(153, 102, 255, 0.6)",
        "rgba(255, 159, 64, 0.6)",
    ),
    LibraryFamily.plotly: (
        "#1f77b4",
        "#ff7f0e",
        "#2ca02c",
        "#d62728",
        "#9467bd",
        "#8c564b",
        "#e377c2",
        "#7f7f7f",
        "#bcbd22",
        "#17becf",
    ),
    LibraryFamily.d3js: (
        "#4e79a7",
        "#f28e2c",
        "#e15759",
        "#76b7b2",
        "#59a14f",
        "#edc949",
        "#af7aa1",
        "#ff9da7",
        "#9c755f",
        "#bab0ab",
    ),
}


@dataclass(frozen=True, slots=True)
class SeriesSpec:
    """One plotted series in neutral form."""

    type: SeriesType
    field: str | None
    name: str
    color: str | None = None
    smooth: bool = False
    stack: str | None = None
    line_width: float | None = None
    opacity: float | None = None
    show_symbol: bool = True


@dataclass(frozen=True, slots=True)
class AxisSpec:
    """One cartesian axis in neutral form."""

    field: str | None
    type: AxisType = "category"
    grid: bool = True
    label_rotation: int = 0
    title: str | None = None


@dataclass(frozen=True, slots=True)
class LegendAnchor:
    """Resolved legend placement, independent per axis."""

    horizontal: Horizontal
    vertical: Vertical

    @property
    def x(self) -> float:
        """Horizontal anchor as a paper fraction (0 left, 1 right)."""

        return {"left": 0.0, "center": 0.5, "right": 1.0}[self.horizontal]

    @property
    def y(self) -> float:
        """Vertical anchor as a paper fraction (0 bottom, 1 top)."""

        return {"bottom": 0.0, "middle": 0.5, "top": 1.0}[self.vertical]


@dataclass(frozen=True, slots=True)
class LegendSpec:
    """Legend visibility, placement and orientation."""

    show: bool
    anchor: LegendAnchor
    orientation: Literal["horizontal", "vertical"] = "horizontal"


def resolve_legend_position(position: str | None) -> LegendAnchor:
    """Resolve a free-form legend position into independent anchors.

    The horizontal anchor comes from a `left`/`right` substring (else center);
    the vertical anchor from a `top`/`bottom` substring (else middle). Order in
    the string does not matter: "bottom-left" and "left-bottom" agree.

    Args:
        position: Position string such as "top", "bottom-left" or "rightTop".

    Returns:
        LegendAnchor for the position.
    """

    text = (position or "").lower()
    horizontal: Horizontal = "left" if "left" in text else "right" if "right" in text else "center"
    vertical: Vertical = "top" if "top" in text else "bottom" if "bottom" in text else "middle"
    return LegendAnchor(horizontal=horizontal, vertical=vertical)


def legend_spec(config: Mapping[str, Any]) -> LegendSpec:
    """Parse `config["legend"]` (a bool, a position string, or a mapping)."""

    raw = config.get("legend")
    if isinstance(raw, bool):
        return LegendSpec(show=raw, anchor=resolve_legend_position("top"))
    if isinstance(raw, str):
        return LegendSpec(show=True, anchor=resolve_legend_position(raw))
    raw = raw if isinstance(raw, Mapping) else {}
    orientation = raw.get("orientation")
    return LegendSpec(
        show=bool(raw.get("show", True)),
        anchor=resolve_legend_position(raw.get("position") or "top"),
        orientation="vertical" if orientation == "vertical" else "horizontal",
    )


def series_color(chart: RenderableChart, index: int, explicit: str | None = None) -> str:
    """Pick a series color.

    Precedence: explicit series color, then the config palette, then the theme
    palette, then the library default palette; palettes cycle by index.
    """

    if explicit:
        return explicit
    palette = chart.config.get("colors")
    if isinstance(palette, Sequence) and not isinstance(palette, str) and palette:
        return str(palette[index % len(palette)])
    if chart.theme.palette:
        return chart.theme.palette[index % len(chart.theme.palette)]
    defaults = LIBRARY_DEFAULT_PALETTES[chart.library]
    return defaults[index % len(defaults)]


def palette(chart: RenderableChart, count: int) -> list[str]:
    """Return `count` colors following `series_color` precedence."""

    return [series_color(chart, index) for index in range(count)]


def default_series_type(chart: RenderableChart) -> SeriesType:
    """Return the plugin's chart type when it is a grammar series type."""

    chart_type = chart.params.get("chart_type")
    return chart_type if chart_type in SERIES_TYPES else "bar"


def _style_value(entry: Mapping[str, Any], config: Mapping[str, Any], key: str, default: Any) -> Any:
    if key in entry:
        return entry[key]
    return config.get(key, default)


def _number_or_none(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def series_specs(chart: RenderableChart) -> tuple[SeriesSpec, ...]:
    """Parse the chart's series.

    Uses `config["series"]` when present. Otherwise derives one series from the
    plugin's value binding, or one per remaining numeric column when the plugin
    declares none. Top-level style keys act as defaults for every series.
    """

    config = chart.config
    fallback_type = default_series_type(chart)
    raw = config.get("series")
    entries: list[Mapping[str, Any]]
    if isinstance(raw, Sequence) and not isinstance(raw, str) and raw:
        entries = [entry for entry in raw if isinstance(entry, Mapping)]
    else:
        value_column = chart.bound_column("value_key")
        if value_column:
            entries = [{"field": value_column}]
        else:
            category = chart.bound_column("category_key")
            entries = [
                {"field": column.name}
                for column in chart.columns
                if column.type == ValueType.number and column.name != category
            ]

    specs: list[SeriesSpec] = []
    for entry in entries:
        series_type = entry.get("type", fallback_type)
        if series_type not in SERIES_TYPES:
            series_type = fallback_type
        field = entry.get("field") or entry.get("yField")
        stack = _style_value(entry, config, "stack", None)
        specs.append(
            SeriesSpec(
                type=series_type,
                field=field if isinstance(field, str) else None,
                name=str(entry.get("name") or field or f"Series {len(specs) + 1}"),
                color=entry.get("color") if isinstance(entry.get("color"), str) else None,
                smooth=bool(_style_value(entry, config, "smooth", False)),
                stack=str(stack) if stack not in (None, False, "") else None,
                line_width=_number_or_none(_style_value(entry, config, "lineWidth", None)),
                opacity=_number_or_none(_style_value(entry, config, "opacity", None)),
                show_symbol=bool(_style_value(entry, config, "showSymbol", True)),
            )
        )
    return tuple(specs)


def _default_axis_type(chart: RenderableChart, field: str | None, axis: str) -> AxisType:
    if axis == "y":
        return "value"
    for column in chart.columns:
        if column.name == field:
            if column.type == ValueType.date:
                return "time"
            if column.type == ValueType.number:
                return "value"
    return "category"


def axis_spec(chart: RenderableChart, axis: Literal["x", "y"]) -> AxisSpec:
    """Parse `config["axes"][axis]`, defaulting the field from plugin bindings."""

    axes = chart.config.get("axes")
    raw = axes.get(axis) if isinstance(axes, Mapping) else None
    raw = raw if isinstance(raw, Mapping) else {}

    binding = "category_key" if axis == "x" else "value_key"
    field = raw.get("field") or chart.bound_column(binding)
    field = field if isinstance(field, str) else None
    axis_type = raw.get("type")
    if axis_type not in AXIS_TYPES:
        axis_type = _default_axis_type(chart, field, axis)
    rotation = raw.get("labelRotation", 0)
    title = raw.get("title")
    return AxisSpec(
        field=field,
        type=axis_type,
        grid=bool(raw.get("grid", True)),
        label_rotation=int(rotation) if _number_or_none(rotation) is not None else 0,
        title=str(title) if title else None,
    )


def chart_title(chart: RenderableChart) -> str | None:
    """Return the configured title text, if any."""

    title = chart.config.get("title")
    if isinstance(title, Mapping):
        title = title.get("text")
    return str(title) if title else None


def to_number(value: Any) -> float | None:
    """Coerce a cell to a float; None for blanks and non-numeric values."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return None
