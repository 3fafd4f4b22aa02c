"""Chart.js adapter: builds `new Chart(ctx, config)` configuration objects."""

from __future__ import annotations

import re
from typing import Any, ClassVar

from ..categories import InteractionKind, LibraryFamily
from ..chart import RenderableChart
from ..grammar import (
    AxisSpec,
    LegendSpec,
    SeriesSpec,
    axis_spec,
    chart_title,
    legend_spec,
    palette,
    series_color,
    series_specs,
    to_number,
)
from .base import ChartAdapter

_SCALE_TYPES = {"category": "category", "value": "linear", "time": "time", "log": "logarithmic"}
_ALIGN = {"left": "start", "center": "center", "right": "end"}
_RGBA = re.compile(r"^rgba\((\s*\d+\s*,\s*\d+\s*,\s*\d+\s*),\s*[\d.]+\s*\)$")


def border_color(color: str) -> str:
    """Return an opaque border color for a translucent rgba fill."""

    match = _RGBA.match(color)
    if match is None:
        return color
    return f"rgba({match.group(1)}, 1)"


def legend_options(legend: LegendSpec, *, suppress_toggle: bool) -> dict[str, Any]:
    """Map a resolved legend anchor onto Chart.js `position` and `align`."""

    anchor = legend.anchor
    if anchor.vertical in ("top", "bottom"):
        position, align = anchor.vertical, _ALIGN[anchor.horizontal]
    elif anchor.horizontal in ("left", "right"):
        position, align = anchor.horizontal, "center"
    else:
        position, align = "top", "center"
    options: dict[str, Any] = {"display": legend.show, "position": position, "align": align}
    if suppress_toggle:
        # Chart.js only toggles datasets when a legend onClick handler is set.
        options["onClick"] = None
    return options


class ChartJSAdapter(ChartAdapter):
    """Translate charts into Chart.js configuration objects."""

    library: ClassVar[LibraryFamily] = LibraryFamily.chartjs
    error_prefix: ClassVar[str] = "CHARTJS"

    def build_spec(self, chart: RenderableChart, *, suppress_legend_toggle: bool = False) -> dict[str, Any]:
        chart_type = chart.params.get("chart_type", "bar")
        if chart_type in ("pie", "doughnut", "polarArea"):
            native_type, data, scales = self._arc(chart, chart_type)
        elif chart_type == "radar":
            native_type, data, scales = self._radar(chart)
        elif chart_type == "bubble":
            native_type, data, scales = self._bubble(chart)
        else:
            native_type, data, scales = self._cartesian(chart)

        plugins: dict[str, Any] = {
            "legend": legend_options(legend_spec(chart.config), suppress_toggle=suppress_legend_toggle),
            "tooltip": {"enabled": True},
        }
        title = chart_title(chart)
        if title:
            plugins["title"] = {"display": True, "text": title, "color": chart.theme.text_color}
        zoom_kinds = chart.capabilities & {InteractionKind.zoom, InteractionKind.pan}
        if zoom_kinds and scales and chart_type not in ("radar",):
            plugins["zoom"] = {
                "zoom": {
                    "wheel": {"enabled": InteractionKind.zoom in zoom_kinds},
                    "pinch": {"enabled": InteractionKind.zoom in zoom_kinds},
                    "mode": "xy",
                },
                "pan": {"enabled": InteractionKind.pan in zoom_kinds, "mode": "xy"},
            }

        options: dict[str, Any] = {
            "responsive": False,
            "maintainAspectRatio": False,
            "animation": bool(chart.config.get("animation", True)),
            "color": chart.theme.text_color,
            "font": {"family": chart.theme.font_family, "size": chart.theme.font_size},
            "layout": {
                "padding": {
                    "top": chart.dimensions.margin.top,
                    "right": chart.dimensions.margin.right,
                    "bottom": chart.dimensions.margin.bottom,
                    "left": chart.dimensions.margin.left,
                }
            },
            "plugins": plugins,
        }
        if scales:
            options["scales"] = scales
        if chart_type == "doughnut":
            options["cutout"] = chart.option("cutout", "50%")
        return {"type": native_type, "data": data, "options": options}

    def _scale(self, chart: RenderableChart, axis: AxisSpec, *, stacked: bool) -> dict[str, Any]:
        scale: dict[str, Any] = {
            "type": _SCALE_TYPES[axis.type],
            "grid": {"display": axis.grid, "color": chart.theme.grid_color},
            "ticks": {
                "color": chart.theme.text_color,
                "maxRotation": axis.label_rotation,
                "minRotation": axis.label_rotation,
            },
        }
        if axis.title:
            scale["title"] = {"display": True, "text": axis.title}
        if stacked:
            scale["stacked"] = True
        return scale

    def _dataset(self, chart: RenderableChart, index: int, spec: SeriesSpec, data: list[Any]) -> dict[str, Any]:
        color = series_color(chart, index, spec.color)
        dataset: dict[str, Any] = {
            "label": spec.name,
            "data": data,
            "backgroundColor": color,
            "borderColor": border_color(color),
            "borderWidth": spec.line_width if spec.line_width is not None else 1,
        }
        if spec.type in ("line", "area", "scatter"):
            dataset["type"] = "scatter" if spec.type == "scatter" else "line"
            dataset["tension"] = 0.4 if spec.smooth else 0
            dataset["pointRadius"] = 3 if spec.show_symbol or spec.type == "scatter" else 0
            dataset["fill"] = spec.type == "area"
        else:
            dataset["type"] = "bar"
        if spec.stack:
            dataset["stack"] = spec.stack
        if spec.opacity is not None:
            dataset["opacity"] = spec.opacity
        return dataset

    def _cartesian(self, chart: RenderableChart) -> tuple[str, dict[str, Any], dict[str, Any]]:
        x_axis = axis_spec(chart, "x")
        y_axis = axis_spec(chart, "y")
        specs = series_specs(chart)
        x_values = chart.values(x_axis.field)
        labelled = x_axis.type == "category"
        datasets = []
        for index, spec in enumerate(specs):
            ys = [to_number(value) for value in chart.values(spec.field)]
            data = ys if labelled else [{"x": x, "y": y} for x, y in zip(x_values, ys)]
            datasets.append(self._dataset(chart, index, spec, data))
        stacked = any(spec.stack for spec in specs)
        native_type = chart.params.get("chart_type", "bar")
        if native_type not in ("bar", "line", "scatter"):
            native_type = "line" if native_type == "area" else "bar"
        data: dict[str, Any] = {"datasets": datasets}
        if labelled:
            data["labels"] = x_values
        scales = {
            "x": self._scale(chart, x_axis, stacked=stacked),
            "y": self._scale(chart, y_axis, stacked=stacked),
        }
        return native_type, data, scales

    def _arc(self, chart: RenderableChart, chart_type: str) -> tuple[str, dict[str, Any], dict[str, Any]]:
        labels = chart.values(chart.bound_column("category_key"))
        values = [to_number(value) for value in chart.values(chart.bound_column("value_key"))]
        colors = palette(chart, len(labels))
        dataset = {
            "label": chart_title(chart) or chart.plugin_id,
            "data": values,
            "backgroundColor": colors,
            "borderColor": [border_color(color) for color in colors],
            "borderWidth": 1,
        }
        scales: dict[str, Any] = {}
        if chart_type == "polarArea":
            scales = {"r": {"grid": {"color": chart.theme.grid_color}, "ticks": {"color": chart.theme.text_color}}}
        return chart_type, {"labels": labels, "datasets": [dataset]}, scales

    def _radar(self, chart: RenderableChart) -> tuple[str, dict[str, Any], dict[str, Any]]:
        labels = chart.values(chart.bound_column("category_key"))
        datasets = []
        for index, spec in enumerate(series_specs(chart)):
            color = series_color(chart, index, spec.color)
            datasets.append(
                {
                    "label": spec.name,
                    "data": [to_number(value) for value in chart.values(spec.field)],
                    "backgroundColor": color,
                    "borderColor": border_color(color),
                    "pointRadius": 3 if spec.show_symbol else 0,
                    "fill": True,
                }
            )
        scales = {
            "r": {
                "beginAtZero": bool(chart.option("beginAtZero", True)),
                "grid": {"color": chart.theme.grid_color},
                "angleLines": {"color": chart.theme.grid_color},
            }
        }
        return "radar", {"labels": labels, "datasets": datasets}, scales

    def _bubble(self, chart: RenderableChart) -> tuple[str, dict[str, Any], dict[str, Any]]:
        x_column = chart.bound_column("x_key")
        y_column = chart.bound_column("y_key")
        size_column = chart.bound_column("size_key")
        max_radius = to_number(chart.option("maxRadius", 20)) or 20
        sizes = [to_number(value) or 0 for value in chart.values(size_column)]
        peak = max(sizes, default=0) or 1
        points = [
            {"x": to_number(row.get(x_column)), "y": to_number(row.get(y_column)), "r": size / peak * max_radius}
            for row, size in zip(chart.data, sizes)
        ]
        color = series_color(chart, 0)
        dataset = {
            "label": chart_title(chart) or size_column or chart.plugin_id,
            "data": points,
            "backgroundColor": color,
            "borderColor": border_color(color),
        }
        scales = {
            "x": self._scale(chart, AxisSpec(field=x_column, type="value"), stacked=False),
            "y": self._scale(chart, AxisSpec(field=y_column, type="value"), stacked=False),
        }
        return "bubble", {"datasets": [dataset]}, scales
