"""Plotly adapter: builds `Plotly.newPlot` figures (`data`, `layout`, `config`)."""

from __future__ import annotations

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

_AXIS_TYPES = {"time": "date", "log": "log", "category": "category", "value": "linear"}
_X_ANCHOR = {"left": "left", "center": "center", "right": "right"}
_Y_ANCHOR = {"top": "top", "middle": "middle", "bottom": "bottom"}


def _sorted_unique(values: list[Any]) -> list[Any]:
    unique = {value for value in values if value is not None}
    try:
        return sorted(unique)
    except TypeError:
        return sorted(unique, key=str)


def grid_matrix(xs: list[Any], ys: list[Any], zs: list[float | None]) -> tuple[list[Any], list[Any], list[list[float | None]]]:
    """Pivot long-form (x, y, z) rows into Plotly's z[y][x] grid."""

    x_axis = _sorted_unique(xs)
    y_axis = _sorted_unique(ys)
    x_index = {value: i for i, value in enumerate(x_axis)}
    y_index = {value: i for i, value in enumerate(y_axis)}
    matrix: list[list[float | None]] = [[None] * len(x_axis) for _ in y_axis]
    for x, y, z in zip(xs, ys, zs):
        if x in x_index and y in y_index:
            matrix[y_index[y]][x_index[x]] = z
    return x_axis, y_axis, matrix


class PlotlyAdapter(ChartAdapter):
    """Translate charts into Plotly figure dictionaries."""

    library: ClassVar[LibraryFamily] = LibraryFamily.plotly
    error_prefix: ClassVar[str] = "PLOTLY"

    def drag_mode(self, spec: dict[str, Any]) -> str | None:
        dragmode = spec.get("layout", {}).get("dragmode")
        return dragmode if isinstance(dragmode, str) else None

    def build_spec(self, chart: RenderableChart, *, suppress_legend_toggle: bool = False) -> dict[str, Any]:
        chart_type = chart.params.get("chart_type", "bar")
        builder = {
            "pie": self._pie,
            "violin": self._violin,
            "surface": self._surface,
            "contour": self._surface,
            "mesh3d": self._mesh3d,
            "funnel": self._funnel,
            "waterfall": self._waterfall,
        }.get(chart_type, self._cartesian)
        traces, layout_extra = builder(chart)

        layout = self._layout(chart, suppress_legend_toggle=suppress_legend_toggle)
        layout.update(layout_extra)
        return {
            "data": traces,
            "layout": layout,
            "config": {
                "responsive": False,
                "displaylogo": False,
                "scrollZoom": InteractionKind.zoom in chart.capabilities,
            },
        }

    def _layout(self, chart: RenderableChart, *, suppress_legend_toggle: bool) -> dict[str, Any]:
        theme = chart.theme
        legend = legend_spec(chart.config)
        anchor = legend.anchor
        capabilities = chart.capabilities
        if InteractionKind.zoom in capabilities:
            dragmode: str | bool = "zoom"
        elif InteractionKind.pan in capabilities:
            dragmode = "pan"
        elif InteractionKind.selection in capabilities:
            dragmode = "select"
        else:
            dragmode = False
        native_legend: dict[str, Any] = {
            "x": anchor.x,
            "y": anchor.y,
            "xanchor": _X_ANCHOR[anchor.horizontal],
            "yanchor": _Y_ANCHOR[anchor.vertical],
            "orientation": "v" if legend.orientation == "vertical" else "h",
        }
        if suppress_legend_toggle:
            native_legend["itemclick"] = False
            native_legend["itemdoubleclick"] = False
        layout: dict[str, Any] = {
            "width": chart.dimensions.width,
            "height": chart.dimensions.height,
            "margin": {
                "l": chart.dimensions.margin.left,
                "r": chart.dimensions.margin.right,
                "t": chart.dimensions.margin.top,
                "b": chart.dimensions.margin.bottom,
            },
            "showlegend": legend.show,
            "legend": native_legend,
            "paper_bgcolor": theme.background_color,
            "plot_bgcolor": theme.background_color,
            "font": {"family": theme.font_family, "size": theme.font_size, "color": theme.text_color},
            "colorway": palette(chart, 10),
            "dragmode": dragmode,
        }
        title = chart_title(chart)
        if title:
            layout["title"] = {"text": title}
        return layout

    def _axis(self, chart: RenderableChart, axis: AxisSpec) -> dict[str, Any]:
        native: dict[str, Any] = {
            "type": _AXIS_TYPES[axis.type],
            "showgrid": axis.grid,
            "gridcolor": chart.theme.grid_color,
            "linecolor": chart.theme.axis_color,
            "tickangle": -axis.label_rotation if axis.label_rotation else "auto",
        }
        if axis.title:
            native["title"] = {"text": axis.title}
        return native

    def _trace(self, chart: RenderableChart, index: int, spec: SeriesSpec, xs: list[Any]) -> dict[str, Any]:
        color = series_color(chart, index, spec.color)
        ys = [to_number(value) for value in chart.values(spec.field)]
        trace: dict[str, Any] = {"name": spec.name, "x": xs, "y": ys}
        if spec.type == "bar":
            trace.update({"type": "bar", "marker": {"color": color}})
        else:
            mode = "markers" if spec.type == "scatter" else "lines+markers" if spec.show_symbol else "lines"
            trace.update(
                {
                    "type": "scatter",
                    "mode": mode,
                    "marker": {"color": color},
                    "line": {"color": color, "shape": "spline" if spec.smooth else "linear"},
                }
            )
            if spec.line_width is not None:
                trace["line"]["width"] = spec.line_width
            if spec.type == "area":
                if spec.stack:
                    trace["stackgroup"] = spec.stack
                else:
                    trace["fill"] = "tozeroy"
        if spec.opacity is not None:
            trace["opacity"] = spec.opacity
        return trace

    def _cartesian(self, chart: RenderableChart) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        x_axis = axis_spec(chart, "x")
        y_axis = axis_spec(chart, "y")
        xs = chart.values(x_axis.field)
        specs = series_specs(chart)
        traces = [self._trace(chart, index, spec, xs) for index, spec in enumerate(specs)]
        layout: dict[str, Any] = {"xaxis": self._axis(chart, x_axis), "yaxis": self._axis(chart, y_axis)}
        if any(spec.type == "bar" and spec.stack for spec in specs):
            layout["barmode"] = "stack"
        return traces, layout

    def _pie(self, chart: RenderableChart) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        labels = chart.values(chart.bound_column("category_key"))
        values = [to_number(value) for value in chart.values(chart.bound_column("value_key"))]
        trace = {
            "type": "pie",
            "labels": labels,
            "values": values,
            "hole": chart.option("hole", 0),
            "marker": {"colors": palette(chart, len(labels))},
        }
        return [trace], {}

    def _violin(self, chart: RenderableChart) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        value_column = chart.bound_column("value_key")
        group_column = chart.bound_column("category_key")
        values = [to_number(value) for value in chart.values(value_column)]
        groups = chart.values(group_column) if group_column else []
        traces: list[dict[str, Any]] = []
        names = list(dict.fromkeys(groups)) if groups else [value_column or "values"]
        for index, name in enumerate(names):
            ys = [value for value, group in zip(values, groups) if group == name] if groups else values
            traces.append(
                {
                    "type": "violin",
                    "name": str(name),
                    "y": ys,
                    "box": {"visible": bool(chart.option("showBox", True))},
                    "meanline": {"visible": bool(chart.option("showMeanLine", True))},
                    "points": chart.option("points", "outliers"),
                    "line": {"color": series_color(chart, index)},
                }
            )
        return traces, {"yaxis": self._axis(chart, AxisSpec(field=value_column, type="value"))}

    def _surface(self, chart: RenderableChart) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        chart_type = chart.params["chart_type"]
        xs = chart.values(chart.bound_column("x_key"))
        ys = chart.values(chart.bound_column("y_key"))
        zs = [to_number(value) for value in chart.values(chart.bound_column("z_key"))]
        x_axis, y_axis, matrix = grid_matrix(xs, ys, zs)
        trace = {
            "type": chart_type,
            "x": x_axis,
            "y": y_axis,
            "z": matrix,
            "colorscale": chart.option("colorscale", "Viridis"),
            "showscale": bool(chart.option("showScale", True)),
        }
        if chart_type == "contour":
            trace["contours"] = {"coloring": chart.option("coloring", "fill"), "showlabels": True}
            return [trace], {}
        scene = {
            f"{axis}axis": {"title": {"text": chart.bound_column(f"{axis}_key")}}
            for axis in ("x", "y", "z")
        }
        return [trace], {"scene": scene}

    def _mesh3d(self, chart: RenderableChart) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        trace = {
            "type": "mesh3d",
            "x": [to_number(value) for value in chart.values(chart.bound_column("x_key"))],
            "y": [to_number(value) for value in chart.values(chart.bound_column("y_key"))],
            "z": [to_number(value) for value in chart.values(chart.bound_column("z_key"))],
            "opacity": chart.option("opacity", 0.8),
            "color": series_color(chart, 0),
            "alphahull": chart.option("alphahull", 0),
        }
        return [trace], {}

    def _funnel(self, chart: RenderableChart) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        stages = chart.values(chart.bound_column("category_key"))
        values = [to_number(value) for value in chart.values(chart.bound_column("value_key"))]
        trace = {
            "type": "funnel",
            "y": stages,
            "x": values,
            "textinfo": chart.option("textinfo", "value+percent initial"),
            "marker": {"color": palette(chart, len(stages))},
        }
        return [trace], {"funnelmode": "stack"}

    def _waterfall(self, chart: RenderableChart) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        x_axis = axis_spec(chart, "x")
        steps = chart.values(x_axis.field)
        values = [to_number(value) for value in chart.values(chart.bound_column("value_key"))]
        measure_column = chart.bound_column("measure_key")
        measures = chart.values(measure_column) if measure_column else ["relative"] * len(values)
        trace = {
            "type": "waterfall",
            "x": steps,
            "y": values,
            "measure": [measure if measure in ("relative", "total", "absolute") else "relative" for measure in measures],
            "connector": {"line": {"color": chart.theme.axis_color}},
            "increasing": {"marker": {"color": chart.option("increasingColor", "#2ca02c")}},
            "decreasing": {"marker": {"color": chart.option("decreasingColor", "#d62728")}},
            "totals": {"marker": {"color": chart.option("totalColor", "#1f77b4")}},
        }
        return [trace], {"xaxis": self._axis(chart, x_axis), "waterfallgap": 0.3}
