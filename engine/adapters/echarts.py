"""ECharts adapter: builds `setOption` payloads."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, ClassVar

from ..categories import InteractionKind, LibraryFamily
from ..chart import RenderableChart
from ..grammar import (
    AxisSpec,
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

_AXIS_TYPES = {"category": "category", "value": "value", "time": "time", "log": "log"}


def _unique(values: Sequence[Any]) -> list[Any]:
    seen: list[Any] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


def _tree_nodes(
    rows: Sequence[Mapping[str, Any]],
    *,
    name_field: str,
    value_field: str | None,
    children_field: str | None,
) -> list[dict[str, Any]]:
    nodes: list[dict[str, Any]] = []
    for row in rows:
        node: dict[str, Any] = {"name": row.get(name_field)}
        if value_field is not None and to_number(row.get(value_field)) is not None:
            node["value"] = to_number(row.get(value_field))
        children = row.get(children_field) if children_field else None
        if isinstance(children, Sequence) and not isinstance(children, str) and children:
            node["children"] = _tree_nodes(
                [child for child in children if isinstance(child, Mapping)],
                name_field=name_field,
                value_field=value_field,
                children_field=children_field,
            )
        nodes.append(node)
    return nodes


class EChartsAdapter(ChartAdapter):
    """Translate charts into ECharts option objects."""

    library: ClassVar[LibraryFamily] = LibraryFamily.echarts
    error_prefix: ClassVar[str] = "ECHARTS"

    def build_spec(self, chart: RenderableChart, *, suppress_legend_toggle: bool = False) -> dict[str, Any]:
        chart_type = chart.params.get("chart_type", "bar")
        builder = {
            "pie": self._pie,
            "sankey": self._sankey,
            "candlestick": self._candlestick,
            "sunburst": self._hierarchy,
            "treemap": self._hierarchy,
            "radar": self._radar,
            "gauge": self._gauge,
            "heatmap": self._heatmap,
        }.get(chart_type, self._cartesian)

        option = self._base_option(chart, suppress_legend_toggle=suppress_legend_toggle)
        option.update(builder(chart))
        return option

    def _base_option(self, chart: RenderableChart, *, suppress_legend_toggle: bool) -> dict[str, Any]:
        theme = chart.theme
        legend = legend_spec(chart.config)
        option: dict[str, Any] = {
            "backgroundColor": theme.background_color,
            "textStyle": {
                "fontFamily": theme.font_family,
                "fontSize": theme.font_size,
                "color": theme.text_color,
            },
            "tooltip": {"trigger": "item"},
            "legend": {
                "show": legend.show,
                "orient": legend.orientation,
                "left": legend.anchor.horizontal,
                "top": legend.anchor.vertical,
                "textStyle": {"color": theme.text_color},
            },
            "animation": bool(chart.config.get("animation", True)),
        }
        if suppress_legend_toggle:
            option["legend"]["selectedMode"] = False
        title = chart_title(chart)
        if title:
            option["title"] = {"text": title, "left": "center", "textStyle": {"color": theme.text_color}}
        if InteractionKind.selection in chart.capabilities:
            option["brush"] = {"toolbox": ["rect", "lineX", "clear"], "xAxisIndex": "all"}
            option["toolbox"] = {"feature": {"brush": {"type": ["rect", "lineX", "clear"]}}}
        return option

    def _axis(self, chart: RenderableChart, axis: AxisSpec, data: list[Any] | None) -> dict[str, Any]:
        theme = chart.theme
        native: dict[str, Any] = {
            "type": _AXIS_TYPES[axis.type],
            "axisLabel": {"rotate": axis.label_rotation, "color": theme.text_color},
            "axisLine": {"lineStyle": {"color": theme.axis_color}},
            "splitLine": {"show": axis.grid, "lineStyle": {"color": theme.grid_color}},
        }
        if axis.title:
            native.update({"name": axis.title, "nameLocation": "middle", "nameGap": 30})
        if data is not None:
            native["data"] = data
        return native

    def _series(self, chart: RenderableChart, index: int, spec: SeriesSpec, x_field: str | None, x_is_category: bool) -> dict[str, Any]:
        ys = [to_number(value) for value in chart.values(spec.field)]
        data: list[Any] = ys if x_is_category else [list(pair) for pair in zip(chart.values(x_field), ys)]
        native: dict[str, Any] = {
            "name": spec.name,
            "type": "line" if spec.type == "area" else spec.type,
            "data": data,
            "itemStyle": {"color": series_color(chart, index, spec.color)},
        }
        if spec.opacity is not None:
            native["itemStyle"]["opacity"] = spec.opacity
        if spec.stack:
            native["stack"] = spec.stack
        if spec.type in ("line", "area"):
            native["smooth"] = spec.smooth
            native["showSymbol"] = spec.show_symbol
            if spec.line_width is not None:
                native["lineStyle"] = {"width": spec.line_width}
        if spec.type == "area":
            native["areaStyle"] = {"opacity": spec.opacity if spec.opacity is not None else 0.4}
        return native

    def _cartesian(self, chart: RenderableChart) -> dict[str, Any]:
        x_axis = axis_spec(chart, "x")
        y_axis = axis_spec(chart, "y")
        x_is_category = x_axis.type == "category"
        categories = chart.values(x_axis.field) if x_is_category else None
        series = [
            self._series(chart, index, spec, x_axis.field, x_is_category)
            for index, spec in enumerate(series_specs(chart))
        ]
        option: dict[str, Any] = {
            "tooltip": {"trigger": "axis"},
            "grid": {
                "left": chart.dimensions.margin.left,
                "right": chart.dimensions.margin.right,
                "top": chart.dimensions.margin.top,
                "bottom": chart.dimensions.margin.bottom,
                "containLabel": True,
            },
            "xAxis": self._axis(chart, x_axis, categories),
            "yAxis": self._axis(chart, y_axis, None),
            "series": series,
        }
        if chart.capabilities & {InteractionKind.zoom, InteractionKind.pan}:
            option["dataZoom"] = [
                {
                    "type": "inside",
                    "zoomOnMouseWheel": InteractionKind.zoom in chart.capabilities,
                    "moveOnMouseMove": InteractionKind.pan in chart.capabilities,
                }
            ]
        return option

    def _pie(self, chart: RenderableChart) -> dict[str, Any]:
        labels = chart.values(chart.bound_column("category_key"))
        values = [to_number(value) for value in chart.values(chart.bound_column("value_key"))]
        inner = chart.option("innerRadius", "0%")
        outer = chart.option("outerRadius", "70%")
        return {
            "color": palette(chart, len(labels)),
            "series": [
                {
                    "type": "pie",
                    "radius": [inner, outer],
                    "data": [{"name": name, "value": value} for name, value in zip(labels, values)],
                    "label": {"show": bool(chart.config.get("showLabels", True))},
                }
            ],
        }

    def _sankey(self, chart: RenderableChart) -> dict[str, Any]:
        sources = chart.values(chart.bound_column("source_key"))
        targets = chart.values(chart.bound_column("target_key"))
        values = [to_number(value) for value in chart.values(chart.bound_column("value_key"))]
        names = _unique([*sources, *targets])
        return {
            "color": palette(chart, len(names)),
            "series": [
                {
                    "type": "sankey",
                    "data": [{"name": name} for name in names],
                    "links": [
                        {"source": source, "target": target, "value": value}
                        for source, target, value in zip(sources, targets, values)
                    ],
                    "nodeAlign": chart.option("nodeAlign", "justify"),
                    "emphasis": {"focus": "adjacency"},
                    "lineStyle": {"color": "gradient", "curveness": 0.5},
                }
            ],
        }

    def _candlestick(self, chart: RenderableChart) -> dict[str, Any]:
        dates = chart.values(chart.bound_column("date_key"))
        columns = [chart.bound_column(key) for key in ("open_key", "close_key", "low_key", "high_key")]
        # ECharts candlestick order is [open, close, low, high].
        ohlc = [
            [to_number(row.get(column)) if column else None for column in columns]
            for row in chart.data
        ]
        up_color = chart.option("upColor", "#00da3c")
        down_color = chart.option("downColor", "#ec0000")
        x_axis = axis_spec(chart, "x")
        option: dict[str, Any] = {
            "tooltip": {"trigger": "axis", "axisPointer": {"type": "cross"}},
            "grid": [{"left": "10%", "right": "8%", "height": "50%"}],
            "xAxis": [self._axis(chart, AxisSpec(field=x_axis.field, label_rotation=x_axis.label_rotation), dates)],
            "yAxis": [{"scale": True, "splitLine": {"show": True, "lineStyle": {"color": chart.theme.grid_color}}}],
            "series": [
                {
                    "name": chart.option("seriesName", "OHLC"),
                    "type": "candlestick",
                    "data": ohlc,
                    "itemStyle": {
                        "color": up_color,
                        "color0": down_color,
                        "borderColor": up_color,
                        "borderColor0": down_color,
                    },
                }
            ],
        }
        volume_column = chart.bound_column("volume_key")
        if volume_column:
            option["grid"].append({"left": "10%", "right": "8%", "top": "63%", "height": "16%"})
            option["xAxis"].append({"type": "category", "gridIndex": 1, "data": dates, "axisLabel": {"show": False}})
            option["yAxis"].append({"scale": True, "gridIndex": 1, "splitNumber": 2})
            option["series"].append(
                {
                    "name": "Volume",
                    "type": "bar",
                    "xAxisIndex": 1,
                    "yAxisIndex": 1,
                    "data": [to_number(value) for value in chart.values(volume_column)],
                }
            )
        if chart.capabilities & {InteractionKind.zoom, InteractionKind.pan}:
            option["dataZoom"] = [{"type": "inside", "xAxisIndex": list(range(len(option["xAxis"])))}]
        return option

    def _hierarchy(self, chart: RenderableChart) -> dict[str, Any]:
        chart_type = chart.params["chart_type"]
        name_field = chart.bound_column("name_key") or chart.bound_column("category_key")
        nodes = _tree_nodes(
            chart.data,
            name_field=name_field or "name",
            value_field=chart.bound_column("value_key"),
            children_field=chart.bound_column("children_key"),
        )
        series: dict[str, Any] = {"type": chart_type, "data": nodes}
        if chart_type == "sunburst":
            series.update(
                {
                    "radius": [0, "90%"],
                    "startAngle": chart.option("startAngle", 90),
                    "sort": chart.option("sort", "desc"),
                    "label": {"rotate": "radial"},
                }
            )
        else:
            series.update({"roam": InteractionKind.zoom in chart.capabilities, "leafDepth": chart.option("leafDepth")})
        return {"color": palette(chart, max(1, len(nodes))), "series": [series]}

    def _radar(self, chart: RenderableChart) -> dict[str, Any]:
        indicators = chart.values(chart.bound_column("category_key"))
        specs = series_specs(chart)
        data = []
        peak = 0.0
        for index, spec in enumerate(specs):
            values = [to_number(value) for value in chart.values(spec.field)]
            peak = max([peak, *(value for value in values if value is not None)])
            data.append(
                {
                    "name": spec.name,
                    "value": values,
                    "itemStyle": {"color": series_color(chart, index, spec.color)},
                    "areaStyle": {"opacity": spec.opacity} if spec.opacity is not None else None,
                }
            )
        ceiling = chart.option("max") or (peak * 1.1 if peak else 1)
        return {
            "radar": {
                "shape": chart.option("shape", "polygon"),
                "indicator": [{"name": str(name), "max": ceiling} for name in indicators],
            },
            "series": [{"type": "radar", "data": data}],
        }

    def _gauge(self, chart: RenderableChart) -> dict[str, Any]:
        values = chart.values(chart.bound_column("value_key"))
        value = to_number(values[0]) if values else None
        return {
            "tooltip": {"formatter": "{a} <br/>{b} : {c}"},
            "series": [
                {
                    "type": "gauge",
                    "name": chart_title(chart) or chart.plugin_id,
                    "min": chart.option("min", 0),
                    "max": chart.option("max", 100),
                    "progress": {"show": True},
                    "detail": {"valueAnimation": True, "formatter": "{value}"},
                    "itemStyle": {"color": series_color(chart, 0)},
                    "data": [{"value": value, "name": chart.option("label", "")}],
                }
            ],
        }

    def _heatmap(self, chart: RenderableChart) -> dict[str, Any]:
        x_values = chart.values(chart.bound_column("category_key"))
        y_values = chart.values(chart.bound_column("series_key"))
        cells = [to_number(value) for value in chart.values(chart.bound_column("value_key"))]
        xs = _unique(x_values)
        ys = _unique(y_values)
        numbers = [value for value in cells if value is not None]
        return {
            "tooltip": {"position": "top"},
            "xAxis": {"type": "category", "data": xs, "splitArea": {"show": True}},
            "yAxis": {"type": "category", "data": ys, "splitArea": {"show": True}},
            "visualMap": {
                "min": min(numbers) if numbers else 0,
                "max": max(numbers) if numbers else 1,
                "calculable": True,
                "orient": "horizontal",
                "left": "center",
                "bottom": "2%",
            },
            "series": [
                {
                    "type": "heatmap",
                    "data": [[xs.index(x), ys.index(y), value] for x, y, value in zip(x_values, y_values, cells)],
                    "label": {"show": bool(chart.config.get("showLabels", False))},
                }
            ],
        }
