"""D3 adapter.

D3 has no declarative chart format, so this adapter emits a scene description
that the host bridge draws with d3 scales, shapes and forces: resolved scale
domains and ranges, positioned marks, and simulation parameters for force
layouts.
"""

from __future__ import annotations

from typing import Any, ClassVar, Final

from ..categories import InteractionKind, LibraryFamily
from ..chart import RenderableChart
from ..grammar import axis_spec, chart_title, legend_spec, palette, series_color, series_specs, to_number
from .base import ChartAdapter

DOMAIN_PADDING: Final[float] = 0.1

_SCALE_TYPES = {"category": "band", "value": "linear", "time": "time", "log": "log"}
_MARKS = {"bar": "rect", "line": "line", "area": "area", "scatter": "circle", "pie": "arc"}


def scale_domain(values: list[Any], scale_type: str) -> list[Any]:
    """Compute a d3 scale domain for column values.

    Band scales keep distinct values in first-seen order. Linear scales pad
    both ends by 10% of the span (never below zero for non-negative data);
    log scales pad multiplicatively over positive values. Time scales span
    the earliest to latest value.
    """

    present = [value for value in values if value is not None]
    if scale_type == "band":
        return list(dict.fromkeys(present))
    if scale_type == "time":
        if not present:
            return []
        return [min(present, key=str), max(present, key=str)]

    numbers = [number for number in (to_number(value) for value in present) if number is not None]
    if scale_type == "log":
        positives = [number for number in numbers if number > 0]
        if not positives:
            return [1.0, 10.0]
        return [min(positives) / (1 + DOMAIN_PADDING), max(positives) * (1 + DOMAIN_PADDING)]

    if not numbers:
        return [0.0, 1.0]
    low, high = min(numbers), max(numbers)
    span = high - low
    pad = span * DOMAIN_PADDING if span else (abs(high) * DOMAIN_PADDING or 1.0)
    lower = low - pad
    if low >= 0:
        lower = max(0.0, lower)
    return [lower, high + pad]


class D3Adapter(ChartAdapter):
    """Translate charts into D3 scene descriptions."""

    library: ClassVar[LibraryFamily] = LibraryFamily.d3js
    error_prefix: ClassVar[str] = "D3"

    def build_spec(self, chart: RenderableChart, *, suppress_legend_toggle: bool = False) -> dict[str, Any]:
        dimensions = chart.dimensions
        legend = legend_spec(chart.config)
        scene: dict[str, Any] = {
            "width": dimensions.width,
            "height": dimensions.height,
            "margin": dimensions.as_json()["margin"],
            "innerWidth": dimensions.inner_width,
            "innerHeight": dimensions.inner_height,
            "title": chart_title(chart),
            "theme": {
                "background": chart.theme.background_color,
                "text": chart.theme.text_color,
                "axis": chart.theme.axis_color,
                "grid": chart.theme.grid_color,
                "fontFamily": chart.theme.font_family,
                "fontSize": chart.theme.font_size,
            },
            "legend": {
                "show": legend.show,
                "horizontal": legend.anchor.horizontal,
                "vertical": legend.anchor.vertical,
                "orientation": legend.orientation,
                "toggle": not suppress_legend_toggle,
            },
            "zoom": {
                "enabled": bool(chart.capabilities & {InteractionKind.zoom, InteractionKind.pan}),
                "wheel": InteractionKind.zoom in chart.capabilities,
                "drag": InteractionKind.pan in chart.capabilities,
                "scaleExtent": [1, chart.option("maxZoom", 10)],
            },
            "brush": {"enabled": InteractionKind.selection in chart.capabilities},
        }
        chart_type = chart.params.get("chart_type", "bar")
        if chart_type == "force":
            scene.update(self._force(chart))
        elif chart_type == "pie":
            scene.update(self._pie(chart))
        else:
            scene.update(self._marks(chart))
        return scene

    def _marks(self, chart: RenderableChart) -> dict[str, Any]:
        dimensions = chart.dimensions
        x_axis = axis_spec(chart, "x")
        y_axis = axis_spec(chart, "y")
        specs = series_specs(chart)
        xs = chart.values(x_axis.field)
        all_ys: list[Any] = []
        marks = []
        for index, spec in enumerate(specs):
            ys = [to_number(value) for value in chart.values(spec.field)]
            all_ys.extend(ys)
            marks.append(
                {
                    "type": _MARKS[spec.type],
                    "series": spec.name,
                    "seriesId": str(index),
                    "color": series_color(chart, index, spec.color),
                    "curve": "curveMonotoneX" if spec.smooth else "curveLinear",
                    "strokeWidth": spec.line_width if spec.line_width is not None else 2,
                    "opacity": spec.opacity if spec.opacity is not None else 1,
                    "points": [
                        {"x": x, "y": y, "index": position}
                        for position, (x, y) in enumerate(zip(xs, ys))
                    ],
                }
            )
        x_scale = _SCALE_TYPES[x_axis.type]
        y_scale = _SCALE_TYPES[y_axis.type] if y_axis.type != "category" else "linear"
        return {
            "kind": "marks",
            "scales": {
                "x": {
                    "type": x_scale,
                    "domain": scale_domain(xs, x_scale),
                    "range": [0, dimensions.inner_width],
                    "padding": 0.1 if x_scale == "band" else 0,
                    "title": x_axis.title,
                    "grid": x_axis.grid,
                    "labelRotation": x_axis.label_rotation,
                },
                "y": {
                    "type": y_scale,
                    "domain": scale_domain(all_ys, y_scale),
                    "range": [dimensions.inner_height, 0],
                    "title": y_axis.title,
                    "grid": y_axis.grid,
                },
            },
            "marks": marks,
        }

    def _pie(self, chart: RenderableChart) -> dict[str, Any]:
        labels = chart.values(chart.bound_column("category_key"))
        values = [to_number(value) for value in chart.values(chart.bound_column("value_key"))]
        colors = palette(chart, len(labels))
        radius = min(chart.dimensions.inner_width, chart.dimensions.inner_height) / 2
        return {
            "kind": "pie",
            "outerRadius": radius,
            "innerRadius": radius * float(chart.option("innerRatio", 0)),
            "arcs": [
                {"label": label, "value": value, "color": color, "index": index}
                for index, (label, value, color) in enumerate(zip(labels, values, colors))
            ],
        }

    def _force(self, chart: RenderableChart) -> dict[str, Any]:
        node_column = chart.bound_column("node_key")
        source_column = chart.bound_column("source_key")
        target_column = chart.bound_column("target_key")
        group_column = chart.bound_column("group_key")
        weight_column = chart.bound_column("value_key")

        nodes: dict[Any, dict[str, Any]] = {}
        links: list[dict[str, Any]] = []

        def add_node(node_id: Any, group: Any = None) -> None:
            if node_id is None:
                return
            if node_id not in nodes:
                nodes[node_id] = {"id": node_id, "group": group}
            elif group is not None and nodes[node_id]["group"] is None:
                nodes[node_id]["group"] = group

        for row in chart.data:
            group = row.get(group_column) if group_column else None
            if node_column:
                add_node(row.get(node_column), group)
            source, target = row.get(source_column), row.get(target_column)
            if source is None or target is None:
                continue
            add_node(source)
            add_node(target)
            link: dict[str, Any] = {"source": source, "target": target}
            if weight_column:
                link["value"] = to_number(row.get(weight_column))
            links.append(link)

        groups = list(dict.fromkeys(node["group"] for node in nodes.values()))
        colors = dict(zip(groups, palette(chart, len(groups))))
        for node in nodes.values():
            node["color"] = colors[node["group"]]
        return {
            "kind": "force",
            "nodes": list(nodes.values()),
            "links": links,
            "forces": {
                "charge": chart.option("forceStrength", -300),
                "linkDistance": chart.option("linkDistance", 50),
                "center": [chart.dimensions.inner_width / 2, chart.dimensions.inner_height / 2],
                "collideRadius": chart.option("nodeRadius", 8),
            },
        }
